"""
存储后端测试用例
"""
import base64
import io
import os
from pathlib import Path

import pytest
from PIL import Image
from sqlalchemy.exc import OperationalError

from inventario.exceptions import (
    NotFoundError,
    StorageBackendError,
    UnknownCommandError,
    ValidationError,
)
from inventario.services.item_repository import ItemRepository
from tests.conftest import make_png_bytes


def _raise_operational_error(*args, **kwargs):
    raise OperationalError("INSERT", {}, Exception("disk I/O error"))


class TestStorageBackend:
    """存储后端测试类"""

    def test_commands(self, backend):
        """测试支持的命令"""
        assert backend.commands == [
            'add_item', 'delete_item', 'fix_image_paths',
            'get_all_items', 'get_db_path', 'update_item',
        ]

    def test_unknown_command(self, backend):
        """测试未知命令"""
        with pytest.raises(UnknownCommandError) as exc_info:
            backend.invoke('drop_everything')

        assert exc_info.value.code == "UNKNOWN_COMMAND"
        assert exc_info.value.details == {"command": "drop_everything"}

    def test_get_db_path(self, backend, settings):
        """测试获取数据库路径"""
        assert backend.invoke('get_db_path') == str(settings.database_path)
        assert os.path.isfile(backend.get_database_path())

    def test_add_item_without_image(self, backend):
        """测试新增无图片物品"""
        item = backend.invoke('add_item', {
            'name': '  扳手  ',
            'cantidad_necesaria': 4,
            'cantidad_disponible': 1,
        })

        assert item.id >= 1
        assert item.name == '扳手'
        assert item.image_path is None
        assert item.created_at is not None

    def test_add_item_with_image(self, backend, settings, png_bytes, png_base64):
        """测试新增带图片物品"""
        item = backend.invoke('add_item', {'name': '螺丝', 'image_base64': png_base64})

        image = Path(item.image_path)
        assert image.is_absolute()
        assert image.parent == settings.images_dir.resolve()
        assert image.name.startswith("img_")
        assert image.suffix == ".png"
        assert image.read_bytes() == png_bytes

    def test_add_item_with_data_url(self, backend, png_base64):
        """测试 data URL 前缀的图片数据"""
        item = backend.invoke('add_item', {
            'name': '螺母',
            'image_base64': f"data:image/png;base64,{png_base64}",
        })

        assert os.path.isfile(item.image_path)

    def test_add_item_with_jpeg(self, backend):
        """测试 JPEG 图片使用 jpg 扩展名"""
        buffer = io.BytesIO()
        Image.new('RGB', (4, 4), 'blue').save(buffer, format='JPEG')
        data = base64.b64encode(buffer.getvalue()).decode('ascii')

        item = backend.invoke('add_item', {'name': '照片', 'image_base64': data})

        assert item.image_path.endswith(".jpg")

    @pytest.mark.parametrize("payload", [
        "not base64!!",
        base64.b64encode(b"just some text").decode('ascii'),
    ])
    def test_invalid_image_rejected(self, backend, settings, payload):
        """测试无效图片数据"""
        with pytest.raises(ValidationError):
            backend.invoke('add_item', {'name': '坏图片', 'image_base64': payload})

        assert backend.list_items() == []
        assert list(settings.images_dir.iterdir()) == []

    @pytest.mark.parametrize("args", [
        {'name': '   '},
        {'name': ''},
        {'name': '负数', 'cantidad_necesaria': -1},
        {'name': '负数', 'cantidad_disponible': -5},
        {'cantidad_necesaria': 1},
    ])
    def test_invalid_item_rejected(self, backend, args):
        """测试无效物品参数"""
        with pytest.raises(ValidationError) as exc_info:
            backend.invoke('add_item', args)

        assert exc_info.value.code == "VALIDATION_ERROR"
        assert backend.list_items() == []

    def test_unexpected_argument_rejected(self, backend):
        """测试多余参数"""
        with pytest.raises(ValidationError):
            backend.invoke('delete_item', {'item_id': 1})
        with pytest.raises(ValidationError):
            backend.invoke('get_db_path', {'verbose': True})

    def test_internal_type_error_not_reported_as_validation(self, backend, monkeypatch):
        """测试处理器内部的 TypeError 不被当作参数错误"""
        def broken(self):
            raise TypeError("internal failure")

        monkeypatch.setattr(ItemRepository, "list_items", broken)

        with pytest.raises(TypeError, match="internal failure"):
            backend.invoke('get_all_items')

    def test_list_items_newest_first(self, backend):
        """测试物品按创建时间倒序"""
        for name in ("a", "b", "c"):
            backend.invoke('add_item', {'name': name})

        assert [item.name for item in backend.invoke('get_all_items')] == ["c", "b", "a"]

    def test_update_item_keeps_image(self, backend, png_base64):
        """测试更新物品时未提供图片则保留原图片"""
        item = backend.invoke('add_item', {'name': '螺丝', 'image_base64': png_base64})

        updated = backend.invoke('update_item', {
            'id': item.id,
            'name': '长螺丝',
            'cantidad_necesaria': 8,
            'cantidad_disponible': 2,
        })

        assert updated.name == '长螺丝'
        assert updated.cantidad_necesaria == 8
        assert updated.cantidad_disponible == 2
        assert updated.image_path == item.image_path
        assert updated.created_at == item.created_at
        assert os.path.isfile(item.image_path)

    def test_update_item_replaces_image(self, backend, png_base64):
        """测试更新图片时删除旧图片"""
        item = backend.invoke('add_item', {'name': '螺丝', 'image_base64': png_base64})
        new_image = base64.b64encode(make_png_bytes('green')).decode('ascii')

        updated = backend.invoke('update_item', {
            'id': item.id,
            'name': '螺丝',
            'image_base64': new_image,
        })

        assert updated.image_path != item.image_path
        assert os.path.isfile(updated.image_path)
        assert not os.path.exists(item.image_path)

    def test_update_missing_item(self, backend):
        """测试更新不存在的物品"""
        with pytest.raises(NotFoundError) as exc_info:
            backend.invoke('update_item', {'id': 99, 'name': '不存在'})

        assert exc_info.value.code == "NOT_FOUND"

    def test_delete_item_removes_image(self, backend, png_base64):
        """测试删除物品同时删除图片"""
        item = backend.invoke('add_item', {'name': '螺丝', 'image_base64': png_base64})

        assert backend.invoke('delete_item', {'id': item.id}) is None
        assert backend.list_items() == []
        assert not os.path.exists(item.image_path)

    def test_delete_item_with_missing_image_file(self, backend, png_base64):
        """测试图片文件已不存在时仍可删除物品"""
        item = backend.invoke('add_item', {'name': '螺丝', 'image_base64': png_base64})
        os.remove(item.image_path)

        backend.invoke('delete_item', {'id': item.id})

        assert backend.list_items() == []

    def test_delete_missing_item(self, backend):
        """测试删除不存在的物品"""
        with pytest.raises(NotFoundError):
            backend.invoke('delete_item', {'id': 42})

    def test_fix_image_paths_mode(self, backend):
        """测试修复模式参数"""
        assert backend.invoke('fix_image_paths') == 0
        assert backend.invoke('fix_image_paths', {'mode': 'clear'}) == 0

        with pytest.raises(ValidationError):
            backend.invoke('fix_image_paths', {'mode': 'everything'})

    def test_database_error_wrapped(self, backend, monkeypatch):
        """测试数据库异常转换为存储后端错误"""
        monkeypatch.setattr(ItemRepository, "list_items", _raise_operational_error)

        with pytest.raises(StorageBackendError) as exc_info:
            backend.invoke('get_all_items')

        assert exc_info.value.code == "STORAGE_BACKEND_ERROR"
        assert exc_info.value.details["command"] == "get_all_items"

    def test_failed_insert_removes_saved_image(self, backend, settings, png_base64, monkeypatch):
        """测试写入数据库失败时删除已保存的图片"""
        monkeypatch.setattr(ItemRepository, "add_item", _raise_operational_error)

        with pytest.raises(StorageBackendError):
            backend.invoke('add_item', {'name': '螺丝', 'image_base64': png_base64})

        assert list(settings.images_dir.iterdir()) == []


if __name__ == '__main__':
    pytest.main([__file__])
