"""
库存物品数据访问层
"""
import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from sqlalchemy import select

from config.settings import ImageRepairMode
from inventario.models.item import InventoryItem
from inventario.storage.filesystem import image_basename
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ItemRepository(BaseRepository[InventoryItem]):
    """库存物品仓储类"""

    def __init__(self, session):
        super().__init__(session, InventoryItem)

    def list_items(self) -> List[InventoryItem]:
        """获取所有物品（按创建时间倒序）"""
        return self.get_all(order_by='created_at', descending=True)

    def get_items_with_images(self) -> List[InventoryItem]:
        """获取有图片引用的物品"""
        try:
            stmt = select(InventoryItem).where(
                InventoryItem.image_path.isnot(None),
                InventoryItem.image_path != '',
            ).order_by(InventoryItem.id.asc())
            result = self.session.execute(stmt)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"获取有图片的物品失败: {e}")
            raise

    def add_item(
        self,
        name: str,
        cantidad_necesaria: int = 0,
        cantidad_disponible: int = 0,
        image_path: Optional[str] = None
    ) -> InventoryItem:
        """新增物品"""
        return self.create(
            name=name,
            image_path=image_path,
            cantidad_necesaria=cantidad_necesaria,
            cantidad_disponible=cantidad_disponible
        )

    def update_item(
        self,
        item_id: int,
        name: str,
        cantidad_necesaria: int,
        cantidad_disponible: int,
        image_path: Optional[str] = None
    ) -> Optional[InventoryItem]:
        """更新物品；未提供新图片时保留原图片引用"""
        update_data = {
            'name': name,
            'cantidad_necesaria': cantidad_necesaria,
            'cantidad_disponible': cantidad_disponible,
        }
        if image_path is not None:
            update_data['image_path'] = image_path
        return self.update(item_id, **update_data)

    def repair_image_paths(
        self,
        images_dir: Union[str, Path],
        mode: ImageRepairMode = ImageRepairMode.CLEAR
    ) -> int:
        """
        将图片引用重写到托管图片目录

        按文件名匹配：托管目录中存在同名文件时，引用改写为该文件的绝对路径。
        未匹配的引用在 KEEP 模式下保持不变，在 CLEAR 模式下置空。

        Returns:
            实际被修改的记录数
        """
        images_dir = os.path.abspath(os.fspath(images_dir))
        updated = 0

        try:
            for item in self.get_items_with_images():
                filename = image_basename(item.image_path)
                new_path = os.path.join(images_dir, filename) if filename else None

                if new_path and os.path.isfile(new_path):
                    if item.image_path != new_path:
                        logger.debug(f"修复图片路径: {item.image_path} -> {new_path}")
                        item.image_path = new_path
                        updated += 1
                elif mode == ImageRepairMode.CLEAR:
                    logger.debug(f"清除失效图片引用: {item.image_path}")
                    item.image_path = None
                    updated += 1

            self.session.flush()
        except Exception as e:
            logger.error(f"修复图片路径失败: {e}")
            self.session.rollback()
            raise

        logger.info(f"图片路径修复完成: 更新 {updated} 条记录 (模式: {mode.value})")
        return updated
