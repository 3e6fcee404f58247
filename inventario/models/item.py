"""
库存物品数据模型
"""
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String, Text

from .base import Base


def _local_now() -> datetime:
    return datetime.now().replace(microsecond=0)


class InventoryItem(Base):
    """库存物品模型"""

    __tablename__ = "inventory"

    name = Column(
        String(255),
        nullable=False,
        comment="物品名称"
    )
    image_path = Column(
        Text,
        nullable=True,
        comment="图片文件路径"
    )
    cantidad_necesaria = Column(
        Integer,
        nullable=False,
        default=0,
        server_default='0',
        comment="需求数量"
    )
    cantidad_disponible = Column(
        Integer,
        nullable=False,
        default=0,
        server_default='0',
        comment="可用数量"
    )
    created_at = Column(
        DateTime,
        nullable=False,
        default=_local_now,
        comment="创建时间（本地时间）"
    )

    __table_args__ = (
        CheckConstraint('cantidad_necesaria >= 0', name='ck_inventory_necesaria_non_negative'),
        CheckConstraint('cantidad_disponible >= 0', name='ck_inventory_disponible_non_negative'),
        Index('idx_inventory_created_at', 'created_at'),
    )

    def __repr__(self) -> str:
        return f"<InventoryItem(id={self.id}, name='{self.name}')>"
