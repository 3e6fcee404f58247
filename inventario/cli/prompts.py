"""
命令行交互提示器
"""
import os
from typing import Optional

import click

from inventario.services.prompts import FileFilter, Prompter
from .utils import print_error


class ClickPrompter(Prompter):
    """基于 click 的交互式提示器，空输入或 Ctrl+C 视为取消"""

    def prompt_save_path(self, suggested_path: str, file_filter: FileFilter) -> Optional[str]:
        click.echo(f"建议路径: {suggested_path}")
        try:
            path = click.prompt(
                f"导出到 ({file_filter.name})，输入 . 使用建议路径，留空取消",
                default="",
                show_default=False
            ).strip()
        except click.Abort:
            return None

        if path == ".":
            path = suggested_path

        if not path:
            return None
        path = os.path.expanduser(path)
        if not file_filter.matches(path):
            path = f"{path}.{file_filter.extensions[0]}"

        if os.path.exists(path) and not click.confirm(f"{path} 已存在，是否覆盖?", default=False):
            return None
        return path

    def prompt_open_file(self, file_filter: FileFilter) -> Optional[str]:
        while True:
            try:
                path = click.prompt(
                    f"选择要导入的文件 ({file_filter.name})，留空取消",
                    default="",
                    show_default=False
                ).strip()
            except click.Abort:
                return None

            if not path:
                return None
            path = os.path.expanduser(path)
            if not os.path.isfile(path):
                print_error(f"文件不存在: {path}")
                continue
            if not file_filter.matches(path):
                print_error(f"文件类型不匹配，需要: {', '.join(file_filter.extensions)}")
                continue
            return path
