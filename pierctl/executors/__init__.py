# pierctl/executors/__init__.py
"""Deployment executors for pierctl"""

from .base import DeploymentExecutor
from .binary import BinaryExecutor
from .container import ContainerExecutor
from .factory import ExecutorFactory

__all__ = [
    'DeploymentExecutor',
    'BinaryExecutor',
    'ContainerExecutor',
    'ExecutorFactory',
]
