"""
库存物品数据模式
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, validator


class InventoryItemCreate(BaseModel):
    """创建物品模式"""
    name: str = Field(..., min_length=1, max_length=255, description="物品名称")
    cantidad_necesaria: int = Field(default=0, ge=0, description="需求数量")
    cantidad_disponible: int = Field(default=0, ge=0, description="可用数量")
    image_base64: Optional[str] = Field(None, description="base64 图片数据，可带 data URL 前缀")

    @validator('name')
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('物品名称不能为空')
        return v


class InventoryItemUpdate(InventoryItemCreate):
    """更新物品模式"""
    id: int = Field(..., ge=1, description="物品ID")


class InventoryItemResponse(BaseModel):
    """库存物品响应模式"""
    id: int
    name: str
    image_path: Optional[str] = None
    cantidad_necesaria: int = 0
    cantidad_disponible: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
