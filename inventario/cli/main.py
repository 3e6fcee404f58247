"""
主CLI入口
"""
import logging
import os
import sys
from typing import Optional

import click
from click import echo

from config.settings import AppSettings, ImageRepairMode
from inventario import __version__
from inventario.exceptions import Cancelled, InventarioError, NotFoundError
from inventario.monitoring.logger import setup_logging
from inventario.services.backup_restore import BackupRestoreManager, ProgressEvent
from inventario.services.prompts import PresetPrompter
from inventario.services.storage_backend import StorageBackend
from .prompts import ClickPrompter
from .utils import (
    format_key_values,
    print_error,
    print_header,
    print_info,
    print_success,
    print_table,
    print_warning,
    read_image_as_base64,
)

logger = logging.getLogger(__name__)


class CLIContext:
    """命令上下文"""

    def __init__(self, settings: AppSettings, verbose: bool = False, quiet: bool = False):
        self.settings = settings
        self.verbose = verbose
        self.quiet = quiet
        self._backend: Optional[StorageBackend] = None

    @property
    def backend(self) -> StorageBackend:
        if self._backend is None:
            self._backend = StorageBackend(self.settings)
            self._backend.initialize()
        return self._backend

    def backup_manager(self, prompter) -> BackupRestoreManager:
        manager = BackupRestoreManager(self.backend, prompter, settings=self.settings)
        if self.verbose:
            manager.add_progress_callback(_echo_progress)
        return manager


def _echo_progress(event: ProgressEvent):
    if event.total:
        echo(f"[{event.current}/{event.total}] {event.message}")
    else:
        echo(f"→ {event.message}")


def _run(action):
    """执行命令并统一处理错误：取消为提示，其他错误退出码 1"""
    try:
        return action()
    except Cancelled as e:
        print_warning(e.message)
        return None
    except InventarioError as e:
        logger.debug(f"命令失败: {e.code} {e.details}")
        print_error(e.message)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='详细输出')
@click.option('--quiet', '-q', is_flag=True, help='静默模式')
@click.pass_context
def cli(ctx, verbose, quiet):
    """inventario CLI工具 - 库存管理与备份恢复"""
    settings = AppSettings()
    if verbose:
        level = 'DEBUG'
    elif quiet:
        level = 'ERROR'
    else:
        level = None
    setup_logging(level=level, settings=settings)
    ctx.obj = CLIContext(settings, verbose=verbose, quiet=quiet)


@cli.command()
@click.pass_obj
def init(obj: CLIContext):
    """初始化数据目录和数据库"""
    _run(lambda: obj.backend)
    print_success(f"初始化完成: {obj.settings.database_path}")


@cli.command()
@click.pass_obj
def status(obj: CLIContext):
    """显示系统状态"""
    def action():
        backend = obj.backend
        items = backend.list_items()
        stats = backend.image_storage.get_storage_stats()
        print_header("inventario 系统状态")
        echo(format_key_values({
            "数据库": backend.get_database_path(),
            "物品数量": len(items),
            "有图片的物品": sum(1 for item in items if item.image_path),
            "图片目录": stats["path"],
            "图片文件": f"{stats['count']} ({stats['size_mb']} MB)",
            "路径修复模式": obj.settings.image_repair_mode.value,
            "导入前备份": "开启" if obj.settings.backup_before_import else "关闭",
        }))

    _run(action)


@cli.command('list')
@click.pass_obj
def list_items(obj: CLIContext):
    """列出所有物品"""
    def action():
        items = obj.backend.list_items()
        if not items:
            print_info("暂无物品")
            return
        print_table(
            "库存物品",
            ["ID", "名称", "需求", "可用", "图片", "创建时间"],
            [
                [item.id, item.name, item.cantidad_necesaria, item.cantidad_disponible,
                 item.image_path, item.created_at]
                for item in items
            ]
        )

    _run(action)


@cli.command()
@click.argument('name')
@click.option('--necesaria', '-n', default=0, type=click.IntRange(min=0), help='需求数量')
@click.option('--disponible', '-d', default=0, type=click.IntRange(min=0), help='可用数量')
@click.option('--image', '-i', type=click.Path(exists=True, dir_okay=False), help='图片文件')
@click.pass_obj
def add(obj: CLIContext, name, necesaria, disponible, image):
    """新增物品"""
    def action():
        item = obj.backend.invoke('add_item', {
            'name': name,
            'cantidad_necesaria': necesaria,
            'cantidad_disponible': disponible,
            'image_base64': read_image_as_base64(image),
        })
        print_success(f"已新增物品: {item.name} (id={item.id})")

    _run(action)


@cli.command()
@click.argument('item_id', type=int)
@click.option('--name', help='物品名称')
@click.option('--necesaria', '-n', type=click.IntRange(min=0), help='需求数量')
@click.option('--disponible', '-d', type=click.IntRange(min=0), help='可用数量')
@click.option('--image', '-i', type=click.Path(exists=True, dir_okay=False), help='新图片文件')
@click.pass_obj
def update(obj: CLIContext, item_id, name, necesaria, disponible, image):
    """更新物品（未提供的字段保持不变）"""
    def action():
        current = next((item for item in obj.backend.list_items() if item.id == item_id), None)
        if current is None:
            raise NotFoundError("物品", item_id)
        item = obj.backend.invoke('update_item', {
            'id': item_id,
            'name': name if name is not None else current.name,
            'cantidad_necesaria': necesaria if necesaria is not None else current.cantidad_necesaria,
            'cantidad_disponible': disponible if disponible is not None else current.cantidad_disponible,
            'image_base64': read_image_as_base64(image),
        })
        print_success(f"已更新物品: {item.name} (id={item.id})")

    _run(action)


@cli.command()
@click.argument('item_id', type=int)
@click.option('--yes', '-y', is_flag=True, help='跳过确认')
@click.pass_obj
def delete(obj: CLIContext, item_id, yes):
    """删除物品及其图片"""
    if not yes and not click.confirm(f"确定要删除物品 {item_id} 吗？"):
        print_warning("已取消删除操作")
        return

    def action():
        obj.backend.invoke('delete_item', {'id': item_id})
        print_success(f"已删除物品: {item_id}")

    _run(action)


@cli.command('export')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='导出文件路径（不指定则交互询问）')
@click.pass_obj
def export_command(obj: CLIContext, output):
    """导出数据库和图片"""
    prompter = PresetPrompter(save_path=output) if output else ClickPrompter()

    def action():
        result = obj.backup_manager(prompter).export_database()
        print_success(f"数据库已导出: {result.database_path}")
        if result.has_images:
            print_info(f"图片目录: {result.images_path} (复制 {result.images_copied} 张)")
        else:
            print_info("图片目录: 无图片")
        for failure in result.images_failed:
            print_warning(f"图片未导出: {failure.source} ({failure.error})")

    _run(action)


@cli.command('import')
@click.option('--input', '-i', 'input_path', type=click.Path(exists=True, dir_okay=False),
              help='要导入的数据库文件（不指定则交互询问）')
@click.option('--safety-backup/--no-safety-backup', default=None,
              help='导入前备份当前数据库（默认取配置）')
@click.option('--yes', '-y', is_flag=True, help='跳过覆盖确认')
@click.pass_obj
def import_command(obj: CLIContext, input_path, safety_backup, yes):
    """导入数据库和图片（覆盖当前数据）"""
    if not yes and not click.confirm("导入将覆盖当前数据库，是否继续？", default=False):
        print_warning("导入已取消")
        return

    prompter = PresetPrompter(open_path=input_path) if input_path else ClickPrompter()

    def action():
        result = obj.backup_manager(prompter).import_database(backup_current=safety_backup)
        print_success(result.message)
        if result.safety_backup_path:
            print_info(f"导入前备份: {result.safety_backup_path}")
        for failure in result.images_failed:
            print_warning(f"图片未导入: {os.path.basename(failure.source)} ({failure.error})")

    _run(action)


@cli.command('repair-paths')
@click.option('--mode', type=click.Choice([mode.value for mode in ImageRepairMode]),
              default=None, help='未匹配引用的处理方式（默认取配置）')
@click.pass_obj
def repair_paths(obj: CLIContext, mode):
    """修复图片路径引用"""
    def action():
        updated = obj.backend.repair_image_paths(ImageRepairMode(mode) if mode else None)
        print_success(f"已更新 {updated} 条图片路径")

    _run(action)


def main():
    """CLI主入口"""
    cli()


if __name__ == '__main__':
    main()
