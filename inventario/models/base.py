"""
数据库模型基类
"""
from typing import Any, Dict

from sqlalchemy import Column, Integer
from sqlalchemy.orm import declarative_base


class BaseModel:
    """数据库模型基类"""

    # 主键
    id = Column(Integer, primary_key=True, autoincrement=True)

    def update_from_dict(self, data: Dict[str, Any], exclude_fields: list = None):
        """从字典更新模型"""
        exclude_fields = exclude_fields or ['id', 'created_at']
        for key, value in data.items():
            if key not in exclude_fields and hasattr(self, key):
                setattr(self, key, value)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


# 创建基础模型类
Base = declarative_base(cls=BaseModel)
