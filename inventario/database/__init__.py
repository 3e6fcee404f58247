"""
数据库模块
"""
from .connection import DatabaseManager

__all__ = [
    "DatabaseManager",
]
