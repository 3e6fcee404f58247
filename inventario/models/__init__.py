"""
数据模型模块
"""
from .base import Base, BaseModel
from .item import InventoryItem

# 导出所有模型
__all__ = [
    'Base',
    'BaseModel',
    'InventoryItem',
]
