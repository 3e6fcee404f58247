"""
inventario 库存管理与备份恢复
"""
__version__ = "1.0.0"
__author__ = "inventario Team"

from .database import DatabaseManager
from .exceptions import (
    BackupIOError,
    Cancelled,
    InventarioError,
    NotFoundError,
    StorageBackendError,
    UnknownCommandError,
    ValidationError,
)
from .models import Base, InventoryItem
from .services import (
    BackupRestoreManager,
    ExportResult,
    ImportResult,
    ItemRepository,
    StorageBackend,
)
from .storage import ImageStorage, LocalFileSystem

__all__ = [
    # 核心模块
    "DatabaseManager",

    # 数据模型
    "Base",
    "InventoryItem",

    # 服务
    "ItemRepository",
    "StorageBackend",
    "BackupRestoreManager",
    "ExportResult",
    "ImportResult",

    # 存储
    "ImageStorage",
    "LocalFileSystem",

    # 异常
    "InventarioError",
    "Cancelled",
    "BackupIOError",
    "StorageBackendError",
    "UnknownCommandError",
    "NotFoundError",
    "ValidationError",
]
