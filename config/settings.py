"""
应用配置模块
"""
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class ImageRepairMode(str, Enum):
    """图片路径修复模式"""
    KEEP = "keep"    # 未匹配的引用保持不变
    CLEAR = "clear"  # 未匹配的引用置空


class AppSettings(BaseSettings):
    """应用配置类"""

    # 应用基础配置
    debug: bool = Field(default=False)

    # 日志配置
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
    log_json: bool = Field(default=False)

    # 存储配置
    app_data_dir: Path = Field(default=Path("~/.inventario"))
    database_filename: str = Field(default="inventario.db")
    images_dirname: str = Field(default="inventory_images")
    backups_dirname: str = Field(default="backups")

    # 导入导出配置
    export_images_dirname: str = Field(default="imagenes_inventario")
    export_default_dir: Path = Field(default=Path("~/Downloads"))
    backup_before_import: bool = Field(default=True)
    image_repair_mode: ImageRepairMode = Field(default=ImageRepairMode.CLEAR)

    @validator('app_data_dir', 'export_default_dir', always=True)
    def expand_user(cls, v):
        return Path(v).expanduser()

    @validator('log_level')
    def validate_log_level(cls, v):
        level = str(v).upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'无效的日志级别: {v}')
        return level

    @property
    def database_path(self) -> Path:
        """数据库文件路径"""
        return self.app_data_dir / self.database_filename

    @property
    def images_dir(self) -> Path:
        """托管图片目录"""
        return self.app_data_dir / self.images_dirname

    @property
    def backups_dir(self) -> Path:
        """导入前安全备份目录"""
        return self.app_data_dir / self.backups_dirname

    def ensure_directories(self):
        """确保数据目录存在"""
        self.app_data_dir.mkdir(parents=True, exist_ok=True)
        self.images_dir.mkdir(parents=True, exist_ok=True)

    class Config:
        env_prefix = "INVENTARIO_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# 全局配置实例
app_settings = AppSettings()


def get_settings() -> AppSettings:
    """获取应用配置实例"""
    return app_settings
