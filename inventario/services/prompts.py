"""
用户交互接口
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class FileFilter:
    """文件类型过滤器"""
    name: str
    extensions: Tuple[str, ...]

    def matches(self, path: str) -> bool:
        """判断路径扩展名是否匹配"""
        lowered = path.lower()
        return any(lowered.endswith(f".{ext.lower()}") for ext in self.extensions)


DATABASE_FILE_FILTER = FileFilter(name="SQLite 数据库", extensions=("db",))


class Prompter(ABC):
    """用户交互提示器"""

    @abstractmethod
    def prompt_save_path(self, suggested_path: str, file_filter: FileFilter) -> Optional[str]:
        """询问保存路径，取消时返回 None"""

    @abstractmethod
    def prompt_open_file(self, file_filter: FileFilter) -> Optional[str]:
        """询问要打开的单个文件，取消时返回 None"""


class PresetPrompter(Prompter):
    """预设路径提示器（非交互）"""

    def __init__(self, save_path: Optional[str] = None, open_path: Optional[str] = None):
        self.save_path = save_path
        self.open_path = open_path

    def prompt_save_path(self, suggested_path: str, file_filter: FileFilter) -> Optional[str]:
        return self.save_path

    def prompt_open_file(self, file_filter: FileFilter) -> Optional[str]:
        return self.open_path
