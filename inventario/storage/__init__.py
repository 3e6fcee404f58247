"""
存储模块
"""
from .filesystem import DirEntry, LocalFileSystem, image_basename
from .image_storage import ImageStorage

__all__ = [
    "DirEntry",
    "LocalFileSystem",
    "image_basename",
    "ImageStorage",
]
