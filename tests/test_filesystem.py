"""
文件系统与图片存储测试用例
"""
import pytest

from inventario.exceptions import ValidationError
from inventario.storage.filesystem import DirEntry, LocalFileSystem, image_basename
from inventario.storage.image_storage import ImageStorage


class TestImageBasename:
    """图片文件名解析测试类"""

    @pytest.mark.parametrize("path, expected", [
        ("/home/ana/inventory_images/img_1.png", "img_1.png"),
        ("C:\\Users\\ana\\inventory_images\\img_2.jpg", "img_2.jpg"),
        ("relative/img_3.gif", "img_3.gif"),
        ("img_4.png", "img_4.png"),
        ("", ""),
        (None, ""),
    ])
    def test_image_basename(self, path, expected):
        assert image_basename(path) == expected


class TestLocalFileSystem:
    """本地文件系统测试类"""

    def test_list_directory(self, tmp_path):
        """测试列出直接条目"""
        (tmp_path / "b.png").write_bytes(b"b")
        (tmp_path / "a.png").write_bytes(b"a")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "nested.png").write_bytes(b"n")

        entries = LocalFileSystem().list_directory(tmp_path)

        assert entries == [
            DirEntry("a.png", True),
            DirEntry("b.png", True),
            DirEntry("sub", False),
        ]

    def test_create_directory_is_idempotent(self, tmp_path):
        """测试重复创建目录"""
        filesystem = LocalFileSystem()
        target = tmp_path / "x" / "y"

        filesystem.create_directory(target)
        filesystem.create_directory(target)

        assert filesystem.is_directory(target)

    def test_copy_file_overwrites(self, tmp_path):
        """测试复制覆盖已有文件"""
        source = tmp_path / "src.db"
        target = tmp_path / "dst.db"
        source.write_bytes(b"new")
        target.write_bytes(b"old contents")

        LocalFileSystem().copy_file(source, target)

        assert target.read_bytes() == b"new"

    def test_copy_missing_source(self, tmp_path):
        """测试复制不存在的文件"""
        with pytest.raises(OSError):
            LocalFileSystem().copy_file(tmp_path / "missing.db", tmp_path / "dst.db")


class TestImageStorage:
    """图片存储测试类"""

    def test_stats(self, tmp_path, png_base64):
        """测试存储统计"""
        storage = ImageStorage(tmp_path / "images")
        assert storage.get_storage_stats()["count"] == 0

        storage.save_base64_image(png_base64)
        storage.save_base64_image(png_base64)

        stats = storage.get_storage_stats()
        assert stats["count"] == 2
        assert stats["size_bytes"] > 0
        assert len({path.name for path in storage.list_images()}) == 2

    def test_delete_image(self, tmp_path, png_base64):
        """测试删除图片"""
        storage = ImageStorage(tmp_path / "images")
        path = storage.save_base64_image(png_base64)

        assert storage.delete_image(path) is True
        assert storage.delete_image(path) is False
        assert storage.delete_image(None) is False

    def test_decode_invalid(self, tmp_path):
        """测试无效 base64"""
        with pytest.raises(ValidationError):
            ImageStorage(tmp_path).decode_base64("@@@")
