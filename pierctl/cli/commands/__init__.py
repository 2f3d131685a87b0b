# pierctl/cli/commands/__init__.py
"""CLI commands"""

from . import configure
from . import start
from . import register
from . import rule
from . import stop
from . import clean
from . import status

__all__ = [
    "configure",
    "start",
    "register",
    "rule",
    "stop",
    "clean",
    "status",
]
