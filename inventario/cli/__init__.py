# CLI Module
# CLI 模块初始化

from .prompts import ClickPrompter
from .utils import (
    print_success,
    print_error,
    print_warning,
    print_info,
    print_header,
    print_table
)

__all__ = [
    'ClickPrompter',
    'print_success',
    'print_error',
    'print_warning',
    'print_info',
    'print_header',
    'print_table'
]
