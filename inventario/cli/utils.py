# CLI Utilities
# CLI 工具函数

import base64
from pathlib import Path
from typing import Any, Dict, List, Optional

from click import echo, secho
from rich.console import Console
from rich.table import Table

console = Console()


def print_success(message: str):
    """打印成功消息"""
    secho(f"✓ {message}", fg='green', bold=True)


def print_error(message: str):
    """打印错误消息"""
    secho(f"✗ {message}", fg='red', bold=True, err=True)


def print_warning(message: str):
    """打印警告消息"""
    secho(f"⚠ {message}", fg='yellow', bold=True)


def print_info(message: str):
    """打印信息消息"""
    secho(f"ℹ {message}", fg='blue')


def print_header(message: str):
    """打印标题"""
    echo()
    secho("=" * 50, fg='blue')
    secho(f"  {message}", fg='blue', bold=True)
    secho("=" * 50, fg='blue')


def print_table(title: str, columns: List[str], rows: List[List[Any]]):
    """打印表格"""
    table = Table(title=title)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*["" if value is None else str(value) for value in row])
    console.print(table)


def format_key_values(data: Dict[str, Any], indent: int = 0) -> str:
    """格式化键值对"""
    prefix = "  " * indent
    return "\n".join(f"{prefix}{key}: {value}" for key, value in data.items())


def read_image_as_base64(image_file: Optional[str]) -> Optional[str]:
    """读取图片文件为 base64 字符串"""
    if not image_file:
        return None
    return base64.b64encode(Path(image_file).read_bytes()).decode('ascii')
