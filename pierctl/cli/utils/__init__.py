"""CLI utility functions"""

from .output import (
    console,
    err_console,
    print_error,
    print_line,
    format_lifecycle_result,
    format_status,
    format_json,
)

__all__ = [
    'console',
    'err_console',
    'print_error',
    'print_line',
    'format_lifecycle_result',
    'format_status',
    'format_json',
]
