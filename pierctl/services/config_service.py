"""Tool configuration service"""

import logging
import os
from pathlib import Path
import yaml

from ..api.exceptions import ConfigError
from ..constants import TOOL_CONFIG_FILE
from ..models.config import ToolConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Loads ``<repo>/pierctl.yaml``"""

    def __init__(self, repo_root: Path):
        """Initialize config service

        Args:
            repo_root: Repository root directory
        """
        self.repo_root = Path(repo_root)
        self.config_path = self.repo_root / TOOL_CONFIG_FILE

    def load_config(self) -> ToolConfig:
        """Load configuration from file, defaults when the file is absent

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If the file cannot be parsed or holds invalid values
        """
        if not self.config_path.exists():
            logger.debug(f"No {TOOL_CONFIG_FILE} in {self.repo_root}, using defaults")
            return ToolConfig()

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise ConfigError(f"Cannot read {self.config_path}: {e}") from e

        # Simple environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        try:
            return ToolConfig.from_dict(data or {})
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration in {self.config_path}: {e}") from e
