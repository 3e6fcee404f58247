"""
配置模块
"""
from .settings import AppSettings, ImageRepairMode, app_settings, get_settings
from .database import DatabaseSettings, db_settings

__all__ = [
    "AppSettings",
    "ImageRepairMode",
    "app_settings",
    "get_settings",
    "DatabaseSettings",
    "db_settings",
]
