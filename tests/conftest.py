"""
测试公共夹具
"""
import base64
import io
import os
from typing import Optional

import pytest
from PIL import Image

from config.database import DatabaseSettings
from config.settings import AppSettings
from inventario.database.connection import DatabaseManager
from inventario.monitoring.logger import reset_logging
from inventario.services.prompts import FileFilter, Prompter
from inventario.services.storage_backend import StorageBackend


class RecordingPrompter(Prompter):
    """记录调用参数的提示器"""

    def __init__(self, save_path: Optional[str] = None, open_path: Optional[str] = None):
        self.save_path = save_path
        self.open_path = open_path
        self.save_calls = []
        self.open_calls = []

    def prompt_save_path(self, suggested_path: str, file_filter: FileFilter) -> Optional[str]:
        self.save_calls.append((suggested_path, file_filter))
        return self.save_path

    def prompt_open_file(self, file_filter: FileFilter) -> Optional[str]:
        self.open_calls.append(file_filter)
        return self.open_path


def make_settings(app_data_dir, **overrides) -> AppSettings:
    """构建测试配置"""
    values = {
        'app_data_dir': app_data_dir,
        'export_default_dir': os.path.join(os.fspath(app_data_dir), 'downloads'),
        'log_level': 'DEBUG',
    }
    values.update(overrides)
    return AppSettings(**values)


def make_backend(settings: AppSettings) -> StorageBackend:
    """构建并初始化存储后端"""
    db_manager = DatabaseManager(settings, DatabaseSettings(path=None))
    backend = StorageBackend(settings, db_manager=db_manager)
    backend.initialize()
    return backend


def make_png_bytes(color: str = 'red', size: int = 4) -> bytes:
    """生成 PNG 图片数据"""
    buffer = io.BytesIO()
    Image.new('RGB', (size, size), color).save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def settings(tmp_path):
    """临时应用数据目录配置"""
    return make_settings(tmp_path / "appdata")


@pytest.fixture
def backend(settings):
    """已初始化的存储后端"""
    backend = make_backend(settings)
    yield backend
    backend.db_manager.dispose()


@pytest.fixture
def png_bytes():
    return make_png_bytes()


@pytest.fixture
def png_base64(png_bytes):
    return base64.b64encode(png_bytes).decode('ascii')


@pytest.fixture(autouse=True)
def clean_logging():
    """移除测试中安装的日志处理器"""
    yield
    reset_logging()
