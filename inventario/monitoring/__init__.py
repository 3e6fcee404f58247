"""
日志模块
"""
from .logger import LogEntry, StructuredFormatter, reset_logging, setup_logging

__all__ = [
    "LogEntry",
    "StructuredFormatter",
    "reset_logging",
    "setup_logging",
]
