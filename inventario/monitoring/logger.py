"""
日志配置 - 文本或结构化(JSON)格式
"""
import json
import logging
import logging.handlers
import sys
import traceback
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from config.settings import AppSettings, get_settings

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# 由 setup_logging 安装的处理器标记
_HANDLER_FLAG = '_inventario_handler'


@dataclass
class LogEntry:
    """结构化日志条目"""
    timestamp: str
    level: str
    logger: str
    message: str
    module: Optional[str] = None
    function: Optional[str] = None
    line_number: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)
    error: Optional[Dict[str, Any]] = None
    stack_trace: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {key: value for key, value in asdict(self).items() if value not in (None, {})}


class StructuredFormatter(logging.Formatter):
    """结构化日志格式化器"""

    def __init__(self, include_stack_trace: bool = True):
        super().__init__()
        self.include_stack_trace = include_stack_trace

    def format(self, record: logging.LogRecord) -> str:
        """格式化日志记录"""
        log_entry = LogEntry(
            timestamp=datetime.fromtimestamp(record.created).isoformat(),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
            module=record.module,
            function=record.funcName,
            line_number=record.lineno,
            details=getattr(record, 'details', {}) or {},
            error=self._extract_error_info(record),
            stack_trace=(
                ''.join(traceback.format_exception(*record.exc_info))
                if record.exc_info and self.include_stack_trace else None
            )
        )

        return json.dumps(log_entry.to_dict(), ensure_ascii=False, default=str)

    def _extract_error_info(self, record: logging.LogRecord) -> Optional[Dict[str, Any]]:
        """提取错误信息"""
        if not record.exc_info:
            return None

        exc_type, exc_value, _ = record.exc_info
        return {
            'type': exc_type.__name__ if exc_type else None,
            'message': str(exc_value) if exc_value else None,
            'module': getattr(exc_type, '__module__', None) if exc_type else None
        }


def setup_logging(
    level: str = None,
    log_file: Optional[str] = None,
    json_format: bool = None,
    settings: AppSettings = None
) -> logging.Logger:
    """
    配置根日志记录器

    重复调用会替换之前安装的处理器，不影响其他处理器。
    """
    settings = settings or get_settings()
    level = (level or settings.log_level).upper()
    log_file = log_file if log_file is not None else settings.log_file
    json_format = settings.log_json if json_format is None else json_format

    if json_format:
        formatter: logging.Formatter = StructuredFormatter(include_stack_trace=settings.debug)
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    reset_logging()
    root = logging.getLogger()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    setattr(console_handler, _HANDLER_FLAG, True)
    root.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_FLAG, True)
        root.addHandler(file_handler)

    root.setLevel(getattr(logging, level, logging.INFO))
    return root


def reset_logging():
    """移除 setup_logging 安装的处理器"""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            root.removeHandler(handler)
            handler.close()
