"""
文件系统基础操作
"""
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import PureWindowsPath
from typing import List, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


@dataclass(frozen=True)
class DirEntry:
    """目录条目"""
    name: str
    is_file: bool


class LocalFileSystem:
    """本地文件系统"""

    def copy_file(self, src: PathLike, dst: PathLike):
        """逐字节复制文件（目标已存在则覆盖）"""
        shutil.copyfile(src, dst)
        logger.debug(f"文件已复制: {src} -> {dst}")

    def create_directory(self, path: PathLike):
        """递归创建目录，已存在时不报错"""
        os.makedirs(path, exist_ok=True)

    def exists(self, path: PathLike) -> bool:
        """检查路径是否存在"""
        return os.path.exists(path)

    def is_directory(self, path: PathLike) -> bool:
        """检查路径是否为目录"""
        return os.path.isdir(path)

    def list_directory(self, path: PathLike) -> List[DirEntry]:
        """列出目录的直接条目"""
        with os.scandir(path) as entries:
            return sorted(
                (DirEntry(name=entry.name, is_file=entry.is_file()) for entry in entries),
                key=lambda entry: entry.name
            )


def image_basename(image_path: str) -> str:
    """
    获取图片引用的文件名

    引用可能来自其他平台，'/' 与 '\\' 均视为路径分隔符。
    """
    if not image_path:
        return ""
    return PureWindowsPath(image_path).name
