"""
托管图片存储
"""
import base64
import binascii
import io
import logging
import os
import time
from pathlib import Path
from typing import List, Optional, Union

from PIL import Image, UnidentifiedImageError

from inventario.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Pillow 格式名 -> 文件扩展名
FORMAT_EXTENSIONS = {
    'PNG': 'png',
    'JPEG': 'jpg',
    'GIF': 'gif',
    'WEBP': 'webp',
    'BMP': 'bmp',
}


class ImageStorage:
    """托管图片存储管理器"""

    def __init__(self, base_path: Union[str, Path]):
        self.base_path = Path(base_path)

    def ensure_directory(self):
        """确保存储目录存在"""
        self.base_path.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        """获取托管目录中指定文件名的路径"""
        return self.base_path / filename

    def decode_base64(self, data: str) -> bytes:
        """解码 base64 图片数据（兼容 data URL 前缀）"""
        if "base64," in data:
            data = data.split("base64,", 1)[1]
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError("图片数据不是有效的 base64 编码", details={"error": str(e)}) from e

    def _detect_format(self, image_data: bytes) -> str:
        """验证图片完整性并返回格式"""
        try:
            with Image.open(io.BytesIO(image_data)) as image:
                image_format = image.format
                image.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise ValidationError("图片数据无效", details={"error": str(e)}) from e
        return image_format or 'PNG'

    def _new_image_path(self, extension: str) -> Path:
        """生成不重复的图片文件路径: img_<毫秒时间戳>.<ext>"""
        millis = int(time.time() * 1000)
        path = self.path_for(f"img_{millis}.{extension}")
        while path.exists():
            millis += 1
            path = self.path_for(f"img_{millis}.{extension}")
        return path

    def save_base64_image(self, data: str) -> str:
        """保存 base64 图片，返回绝对路径"""
        image_data = self.decode_base64(data)
        image_format = self._detect_format(image_data)
        extension = FORMAT_EXTENSIONS.get(image_format.upper(), 'png')

        self.ensure_directory()
        image_path = self._new_image_path(extension)
        image_path.write_bytes(image_data)

        logger.info(f"图片保存成功: {image_path}")
        return str(image_path.resolve())

    def delete_image(self, image_path: Optional[str]) -> bool:
        """删除图片文件，失败时仅记录警告"""
        if not image_path:
            return False

        try:
            os.remove(image_path)
            logger.info(f"图片删除成功: {image_path}")
            return True
        except FileNotFoundError:
            logger.warning(f"图片文件不存在: {image_path}")
            return False
        except OSError as e:
            logger.warning(f"删除图片失败: {image_path}, 错误: {e}")
            return False

    def list_images(self) -> List[Path]:
        """列出托管目录中的图片文件"""
        if not self.base_path.is_dir():
            return []
        return sorted(p for p in self.base_path.iterdir() if p.is_file())

    def get_storage_stats(self) -> dict:
        """获取存储统计信息"""
        files = self.list_images()
        size = sum(p.stat().st_size for p in files)
        return {
            "path": str(self.base_path),
            "count": len(files),
            "size_bytes": size,
            "size_mb": round(size / (1024 * 1024), 2),
        }
