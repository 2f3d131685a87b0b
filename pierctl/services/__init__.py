"""Service layer for pierctl"""

from .config_service import ConfigService
from .relay_commands import RelayCommandBuilder, RelayRequest

__all__ = [
    'ConfigService',
    'RelayCommandBuilder',
    'RelayRequest',
]
