"""
数据库配置模块
"""
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from .settings import AppSettings, get_settings


class DatabaseSettings(BaseSettings):
    """数据库配置类"""

    # 连接选项
    echo: bool = Field(default=False)
    busy_timeout: int = Field(default=30)  # 秒

    # 覆盖数据库文件路径（默认取应用数据目录）
    path: Optional[Path] = Field(default=None)

    def resolve_path(self, settings: AppSettings = None) -> Path:
        """解析数据库文件路径"""
        if self.path is not None:
            return Path(self.path).expanduser()
        return (settings or get_settings()).database_path

    def database_url(self, settings: AppSettings = None) -> str:
        """生成数据库连接URL"""
        return f"sqlite:///{self.resolve_path(settings)}"

    class Config:
        env_prefix = "INVENTARIO_DB_"
        env_file = ".env"
        env_file_encoding = "utf-8"


# 全局配置实例
db_settings = DatabaseSettings()
