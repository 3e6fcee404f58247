"""
存储后端 - 基于命令名和参数的请求/响应边界
"""
import inspect
import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from config.settings import AppSettings, ImageRepairMode, get_settings
from inventario.database.connection import DatabaseManager
from inventario.exceptions import (
    InventarioError,
    NotFoundError,
    StorageBackendError,
    UnknownCommandError,
    ValidationError,
)
from inventario.schemas.item import (
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
)
from inventario.storage.image_storage import ImageStorage
from .item_repository import ItemRepository

logger = logging.getLogger(__name__)


class StorageBackend:
    """存储后端"""

    def __init__(
        self,
        settings: AppSettings = None,
        db_manager: DatabaseManager = None,
        image_storage: ImageStorage = None
    ):
        self.settings = settings or get_settings()
        self.db_manager = db_manager or DatabaseManager(self.settings)
        self.image_storage = image_storage or ImageStorage(self.settings.images_dir)

        self._handlers: Dict[str, Callable[..., Any]] = {
            'get_all_items': self._get_all_items,
            'add_item': self._add_item,
            'update_item': self._update_item,
            'delete_item': self._delete_item,
            'get_db_path': self._get_db_path,
            'fix_image_paths': self._fix_image_paths,
        }

    @property
    def commands(self) -> List[str]:
        """支持的命令列表"""
        return sorted(self._handlers)

    def initialize(self):
        """初始化数据目录和表结构"""
        self.settings.ensure_directories()
        self.db_manager.create_tables()
        logger.info(f"存储后端初始化完成: {self.db_manager.database_path}")

    def invoke(self, command: str, args: Optional[Dict[str, Any]] = None) -> Any:
        """
        执行命令

        Args:
            command: 命令名
            args: 参数字典

        Returns:
            命令对应的类型化结果

        Raises:
            UnknownCommandError: 未知命令
            ValidationError: 参数无效
            NotFoundError: 记录不存在
            StorageBackendError: 其他存储错误
        """
        handler = self._handlers.get(command)
        if handler is None:
            raise UnknownCommandError(command)

        args = dict(args or {})
        logger.debug(f"执行命令: {command} 参数: {sorted(args)}")

        # 只把参数绑定失败视为参数无效，处理器内部的 TypeError 照常抛出
        try:
            inspect.signature(handler).bind(**args)
        except TypeError as e:
            raise ValidationError(f"参数无效: {command} - {e}") from e

        try:
            return handler(**args)
        except InventarioError:
            raise
        except PydanticValidationError as e:
            raise ValidationError(f"参数无效: {command}", details={"errors": e.errors()}) from e
        except SQLAlchemyError as e:
            logger.error(f"命令执行失败: {command} - {e}")
            raise StorageBackendError(
                f"数据库操作失败: {command}",
                details={"command": command, "error": str(e)}
            ) from e

    # 便捷方法

    def list_items(self) -> List[InventoryItemResponse]:
        """获取所有物品"""
        return self.invoke('get_all_items')

    def get_database_path(self) -> str:
        """获取当前数据库文件路径"""
        return self.invoke('get_db_path')

    def repair_image_paths(self, mode: ImageRepairMode = None) -> int:
        """修复图片路径"""
        args = {'mode': mode} if mode is not None else None
        return self.invoke('fix_image_paths', args)

    # 命令处理器

    def _ensure_schema(self):
        self.db_manager.create_tables()

    def _get_all_items(self) -> List[InventoryItemResponse]:
        self._ensure_schema()
        with self.db_manager.session_scope() as session:
            items = ItemRepository(session).list_items()
            return [InventoryItemResponse.from_orm(item) for item in items]

    def _add_item(self, **kwargs) -> InventoryItemResponse:
        data = InventoryItemCreate(**kwargs)
        self._ensure_schema()

        image_path = None
        if data.image_base64:
            image_path = self.image_storage.save_base64_image(data.image_base64)

        try:
            with self.db_manager.session_scope() as session:
                item = ItemRepository(session).add_item(
                    name=data.name,
                    cantidad_necesaria=data.cantidad_necesaria,
                    cantidad_disponible=data.cantidad_disponible,
                    image_path=image_path
                )
                response = InventoryItemResponse.from_orm(item)
        except SQLAlchemyError:
            self.image_storage.delete_image(image_path)
            raise

        logger.info(f"新增物品: {response.name} (id={response.id})")
        return response

    def _update_item(self, **kwargs) -> InventoryItemResponse:
        data = InventoryItemUpdate(**kwargs)
        self._ensure_schema()

        with self.db_manager.session_scope() as session:
            repository = ItemRepository(session)
            existing = repository.get_by_id(data.id)
            if existing is None:
                raise NotFoundError("物品", data.id)
            old_image_path = existing.image_path

            new_image_path = None
            if data.image_base64:
                new_image_path = self.image_storage.save_base64_image(data.image_base64)

            item = repository.update_item(
                data.id,
                name=data.name,
                cantidad_necesaria=data.cantidad_necesaria,
                cantidad_disponible=data.cantidad_disponible,
                image_path=new_image_path
            )
            response = InventoryItemResponse.from_orm(item)

        if new_image_path and old_image_path and old_image_path != new_image_path:
            self.image_storage.delete_image(old_image_path)

        logger.info(f"更新物品: {response.name} (id={response.id})")
        return response

    def _delete_item(self, id: int) -> None:
        self._ensure_schema()
        with self.db_manager.session_scope() as session:
            repository = ItemRepository(session)
            item = repository.get_by_id(id)
            if item is None:
                raise NotFoundError("物品", id)
            image_path = item.image_path
            repository.delete(id)

        self.image_storage.delete_image(image_path)
        logger.info(f"删除物品: id={id}")

    def _get_db_path(self) -> str:
        return str(self.db_manager.database_path)

    def _fix_image_paths(self, mode: Any = None) -> int:
        try:
            repair_mode = ImageRepairMode(mode) if mode is not None else self.settings.image_repair_mode
        except ValueError as e:
            raise ValidationError(f"无效的修复模式: {mode}") from e

        self._ensure_schema()
        with self.db_manager.session_scope() as session:
            return ItemRepository(session).repair_image_paths(
                self.image_storage.base_path,
                mode=repair_mode
            )
