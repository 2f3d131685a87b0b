"""Repository root resolution for pierctl"""

import os
from pathlib import Path
from typing import Optional, Union

from ..constants import DEFAULT_REPO_DIR, ENV_REPO_ROOT


class PathResolver:
    """Resolves the repository root"""

    def __init__(self, repo_root: Optional[Union[str, Path]] = None):
        """Initialize path resolver

        Args:
            repo_root: Explicit root; falls back to $PIERCTL_REPO, then ~/.pierctl
        """
        self.repo_root = self.find_repo_root(repo_root)

    @staticmethod
    def find_repo_root(repo_root: Optional[Union[str, Path]] = None) -> Path:
        """Pick the repository root

        Args:
            repo_root: Explicit root

        Returns:
            Absolute repository root
        """
        if repo_root:
            return Path(os.path.expandvars(str(repo_root))).expanduser().resolve()

        env_root = os.environ.get(ENV_REPO_ROOT)
        if env_root:
            return Path(env_root).expanduser().resolve()

        return (Path.home() / DEFAULT_REPO_DIR).resolve()
