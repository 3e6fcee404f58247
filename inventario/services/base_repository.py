"""
基础数据访问层
"""
import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from inventario.models.base import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseModel)


class BaseRepository(Generic[T]):
    """基础仓储类"""

    def __init__(self, session: Session, model_class: Type[T]):
        self.session = session
        self.model_class = model_class

    def create(self, **kwargs) -> T:
        """创建新记录"""
        try:
            instance = self.model_class(**kwargs)
            self.session.add(instance)
            self.session.flush()
            self.session.refresh(instance)
            logger.debug(f"创建记录成功: {self.model_class.__name__}(id={instance.id})")
            return instance
        except Exception as e:
            logger.error(f"创建记录失败: {e}")
            self.session.rollback()
            raise

    def get_by_id(self, record_id: int) -> Optional[T]:
        """根据ID获取记录"""
        try:
            return self.session.get(self.model_class, record_id)
        except Exception as e:
            logger.error(f"根据ID获取记录失败: {e}")
            raise

    def get_all(self, order_by: str = None, descending: bool = True) -> List[T]:
        """获取所有记录"""
        try:
            stmt = select(self.model_class)

            if order_by:
                order_field = getattr(self.model_class, order_by)
                stmt = stmt.order_by(order_field.desc() if descending else order_field.asc())
                # 同一时间创建的记录按ID稳定排序
                stmt = stmt.order_by(
                    self.model_class.id.desc() if descending else self.model_class.id.asc()
                )

            result = self.session.execute(stmt)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"获取所有记录失败: {e}")
            raise

    def update(self, record_id: int, **kwargs) -> Optional[T]:
        """更新记录"""
        try:
            instance = self.get_by_id(record_id)
            if instance is None:
                return None

            instance.update_from_dict(kwargs)
            self.session.flush()
            self.session.refresh(instance)
            logger.debug(f"更新记录成功: {self.model_class.__name__}(id={record_id})")
            return instance
        except Exception as e:
            logger.error(f"更新记录失败: {e}")
            self.session.rollback()
            raise

    def delete(self, record_id: int) -> bool:
        """删除记录"""
        try:
            stmt = delete(self.model_class).where(self.model_class.id == record_id)
            result = self.session.execute(stmt)
            success = result.rowcount > 0

            if success:
                logger.debug(f"删除记录成功: {self.model_class.__name__}(id={record_id})")

            return success
        except Exception as e:
            logger.error(f"删除记录失败: {e}")
            self.session.rollback()
            raise

    def count(self, filters: Dict[str, Any] = None) -> int:
        """统计记录数量"""
        try:
            stmt = select(func.count(self.model_class.id))

            if filters:
                for field, value in filters.items():
                    field_obj = getattr(self.model_class, field)
                    if value is None:
                        stmt = stmt.where(field_obj.is_(None))
                    else:
                        stmt = stmt.where(field_obj == value)

            result = self.session.execute(stmt)
            return result.scalar()
        except Exception as e:
            logger.error(f"统计记录数量失败: {e}")
            raise
