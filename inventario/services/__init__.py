"""
服务模块
"""
from .base_repository import BaseRepository
from .item_repository import ItemRepository
from .storage_backend import StorageBackend
from .prompts import DATABASE_FILE_FILTER, FileFilter, PresetPrompter, Prompter
from .backup_restore import (
    AssetCopyFailure,
    BackupRestoreManager,
    ExportResult,
    ImportResult,
    ProgressEvent,
)

__all__ = [
    "BaseRepository",
    "ItemRepository",
    "StorageBackend",
    "DATABASE_FILE_FILTER",
    "FileFilter",
    "PresetPrompter",
    "Prompter",
    "AssetCopyFailure",
    "BackupRestoreManager",
    "ExportResult",
    "ImportResult",
    "ProgressEvent",
]
