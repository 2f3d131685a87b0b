"""CLI decorators"""

from .instance import instance_options, addressing_options, handle_errors

__all__ = [
    'instance_options',
    'addressing_options',
    'handle_errors',
]
