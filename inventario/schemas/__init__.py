"""
数据模式模块
"""
from .item import (
    InventoryItemCreate,
    InventoryItemUpdate,
    InventoryItemResponse,
)

__all__ = [
    "InventoryItemCreate",
    "InventoryItemUpdate",
    "InventoryItemResponse",
]
