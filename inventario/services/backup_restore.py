"""
数据导出和导入机制

导出: 数据库文件 + 同级 imagenes_inventario 图片目录
导入: 覆盖当前数据库，恢复图片到托管目录，并修复图片路径引用
"""
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from config.settings import AppSettings, get_settings
from inventario.exceptions import BackupIOError, Cancelled
from inventario.storage.filesystem import LocalFileSystem, image_basename
from .prompts import DATABASE_FILE_FILTER, Prompter

logger = logging.getLogger(__name__)


@dataclass
class ProgressEvent:
    """进度事件"""
    operation: str
    stage: str
    message: str
    current: int = 0
    total: int = 0


@dataclass
class AssetCopyFailure:
    """单个图片复制失败记录"""
    source: str
    target: str
    error: str


@dataclass
class ExportResult:
    """导出结果"""
    database_path: str
    images_path: Optional[str] = None  # None 表示没有写出图片目录
    images_copied: int = 0
    images_failed: List[AssetCopyFailure] = field(default_factory=list)

    @property
    def has_images(self) -> bool:
        return self.images_path is not None


@dataclass
class ImportResult:
    """导入结果"""
    success: bool
    images_imported: int
    message: str
    paths_updated: int = 0
    safety_backup_path: Optional[str] = None
    images_failed: List[AssetCopyFailure] = field(default_factory=list)


ProgressCallback = Callable[[ProgressEvent], None]


class BackupRestoreManager:
    """导出导入管理器"""

    EXPORT = "export"
    IMPORT = "import"

    def __init__(
        self,
        backend,
        prompter: Prompter,
        settings: AppSettings = None,
        filesystem: LocalFileSystem = None
    ):
        self.backend = backend
        self.prompter = prompter
        self.settings = settings or get_settings()
        self.filesystem = filesystem or LocalFileSystem()
        self._progress_callbacks: List[ProgressCallback] = []

    def add_progress_callback(self, callback: ProgressCallback):
        """注册进度回调"""
        self._progress_callbacks.append(callback)

    def _emit(self, operation: str, stage: str, message: str, current: int = 0, total: int = 0):
        event = ProgressEvent(operation, stage, message, current, total)
        logger.debug(f"[{operation}:{stage}] {message}")
        for callback in self._progress_callbacks:
            try:
                callback(event)
            except Exception as e:
                logger.warning(f"进度回调执行失败: {e}")

    def suggested_export_name(self) -> str:
        """建议的导出文件名（含当前日期）"""
        return f"inventario_backup_{datetime.now().strftime('%Y-%m-%d')}.db"

    def export_database(self) -> ExportResult:
        """
        导出数据库和图片

        只有数据库文件复制失败会使整个导出失败；图片目录创建失败或
        单张图片复制失败只记录警告。

        Raises:
            Cancelled: 用户取消选择保存路径
            BackupIOError: 数据库文件无法写入
        """
        suggested_path = os.path.join(self.settings.export_default_dir, self.suggested_export_name())
        self._emit(self.EXPORT, "prompt", "选择导出位置")
        export_path = self.prompter.prompt_save_path(suggested_path, DATABASE_FILE_FILTER)
        if not export_path:
            logger.info("导出已取消")
            raise Cancelled("导出")
        export_path = os.path.abspath(os.fspath(export_path))

        db_path = self.backend.get_database_path()
        logger.info(f"开始导出数据库: {db_path} -> {export_path}")

        self._emit(self.EXPORT, "copy_database", f"复制数据库文件到 {export_path}")
        try:
            self.filesystem.copy_file(db_path, export_path)
        except OSError as e:
            logger.error(f"复制数据库文件失败: {e}")
            raise BackupIOError(f"复制数据库文件失败: {e}", path=export_path) from e

        images_folder = os.path.join(os.path.dirname(export_path), self.settings.export_images_dirname)

        self._emit(self.EXPORT, "collect_images", "读取物品图片引用")
        items_with_images = [item for item in self.backend.list_items() if item.image_path]
        if not items_with_images:
            logger.info(f"导出完成（无图片）: {export_path}")
            self._emit(self.EXPORT, "done", "导出完成（无图片）")
            return ExportResult(database_path=export_path)

        total = len(items_with_images)

        # 数据库已导出，图片目录无法创建时只跳过图片
        try:
            self.filesystem.create_directory(images_folder)
        except OSError as e:
            logger.warning(f"创建图片目录失败，跳过图片导出: {e}")
            skipped = [
                AssetCopyFailure(
                    item.image_path,
                    os.path.join(images_folder, image_basename(item.image_path)),
                    f"创建图片目录失败: {e}"
                )
                for item in items_with_images
            ]
            self._emit(self.EXPORT, "done", "导出完成（图片目录创建失败）", 0, total)
            return ExportResult(database_path=export_path, images_failed=skipped)

        copied = 0
        failures: List[AssetCopyFailure] = []

        for index, item in enumerate(items_with_images, 1):
            filename = image_basename(item.image_path)
            target = os.path.join(images_folder, filename)
            self._emit(self.EXPORT, "copy_image", f"复制图片: {filename}", index, total)

            if not filename:
                logger.warning(f"无效的图片路径: {item.image_path!r}")
                failures.append(AssetCopyFailure(item.image_path, target, "无效的图片路径"))
                continue

            try:
                self.filesystem.copy_file(item.image_path, target)
                copied += 1
            except OSError as e:
                logger.warning(f"无法复制图片: {item.image_path}, 错误: {e}")
                failures.append(AssetCopyFailure(item.image_path, target, str(e)))

        logger.info(
            f"导出完成: {export_path} (图片 {copied}/{total}, 失败 {len(failures)})"
        )
        self._emit(self.EXPORT, "done", f"导出完成，复制 {copied} 张图片", copied, total)
        return ExportResult(
            database_path=export_path,
            images_path=images_folder,
            images_copied=copied,
            images_failed=failures
        )

    def import_database(self, backup_current: Optional[bool] = None) -> ImportResult:
        """
        导入数据库和图片

        覆盖当前数据库（完全替换，不合并）。默认先把当前数据库复制到
        备份目录，作为导入前的安全备份。

        Args:
            backup_current: 是否创建导入前安全备份，None 时使用配置

        Raises:
            Cancelled: 用户取消选择文件
            BackupIOError: 安全备份或数据库文件覆盖失败
        """
        self._emit(self.IMPORT, "prompt", "选择要导入的数据库文件")
        selected = self.prompter.prompt_open_file(DATABASE_FILE_FILTER)
        if not selected:
            logger.info("导入已取消")
            raise Cancelled("导入")
        selected = os.path.abspath(os.fspath(selected))

        current_db = self.backend.get_database_path()
        logger.info(f"开始导入数据库: {selected} -> {current_db}")

        if backup_current is None:
            backup_current = self.settings.backup_before_import

        safety_backup_path = None
        if backup_current and self.filesystem.exists(current_db):
            safety_backup_path = self._create_safety_backup(current_db)

        self._emit(self.IMPORT, "copy_database", "覆盖当前数据库")
        try:
            self.filesystem.create_directory(os.path.dirname(current_db))
            self.filesystem.copy_file(selected, current_db)
        except OSError as e:
            logger.error(f"覆盖数据库文件失败: {e}")
            raise BackupIOError(f"覆盖数据库文件失败: {e}", path=current_db) from e

        images_folder = os.path.join(os.path.dirname(selected), self.settings.export_images_dirname)
        images_imported, failures = self._restore_images(images_folder)

        # 无论是否导入了图片都要修复路径
        self._emit(self.IMPORT, "repair_paths", "修复图片路径")
        paths_updated = self.backend.repair_image_paths()

        if images_imported > 0:
            message = f"数据库导入成功，包含 {images_imported} 张图片，已更新 {paths_updated} 条图片路径"
        else:
            message = f"数据库导入成功（无图片），已更新 {paths_updated} 条图片路径"

        logger.info(message)
        self._emit(self.IMPORT, "done", message, images_imported, images_imported + len(failures))
        return ImportResult(
            success=True,
            images_imported=images_imported,
            message=message,
            paths_updated=paths_updated,
            safety_backup_path=safety_backup_path,
            images_failed=failures
        )

    def _create_safety_backup(self, current_db: str) -> str:
        """导入前备份当前数据库（安全措施）"""
        backups_dir = str(self.settings.backups_dir)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = os.path.join(backups_dir, f"pre_import_{timestamp}.db")
        counter = 1
        while self.filesystem.exists(backup_path):
            backup_path = os.path.join(backups_dir, f"pre_import_{timestamp}_{counter}.db")
            counter += 1

        self._emit(self.IMPORT, "safety_backup", f"备份当前数据库到 {backup_path}")
        try:
            self.filesystem.create_directory(backups_dir)
            self.filesystem.copy_file(current_db, backup_path)
        except OSError as e:
            logger.error(f"创建导入前备份失败: {e}")
            raise BackupIOError(f"创建导入前备份失败: {e}", path=backup_path) from e

        logger.info(f"已备份当前数据库: {backup_path}")
        return backup_path

    def _restore_images(self, images_folder: str) -> Tuple[int, List[AssetCopyFailure]]:
        """把快照图片目录中的文件复制到托管图片目录"""
        if not self.filesystem.is_directory(images_folder):
            logger.info(f"未找到图片目录，跳过图片导入: {images_folder}")
            return 0, []

        target_dir = str(self.settings.images_dir)
        self._emit(self.IMPORT, "restore_images", f"导入图片: {images_folder} -> {target_dir}")

        try:
            self.filesystem.create_directory(target_dir)
            entries = self.filesystem.list_directory(images_folder)
        except OSError as e:
            logger.warning(f"导入图片失败: {e}")
            return 0, [AssetCopyFailure(images_folder, target_dir, str(e))]

        files = [entry for entry in entries if entry.is_file]
        imported = 0
        failures: List[AssetCopyFailure] = []

        for index, entry in enumerate(files, 1):
            source = os.path.join(images_folder, entry.name)
            target = os.path.join(target_dir, entry.name)
            self._emit(self.IMPORT, "copy_image", f"复制图片: {entry.name}", index, len(files))
            try:
                self.filesystem.copy_file(source, target)
                imported += 1
            except OSError as e:
                logger.warning(f"无法复制图片: {entry.name}, 错误: {e}")
                failures.append(AssetCopyFailure(source, target, str(e)))

        logger.info(f"图片导入完成: {imported}/{len(files)}")
        return imported, failures
