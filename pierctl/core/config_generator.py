"""Pier configuration rendering"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..constants import PIER_CONFIG_REPO, PIER_MODIFY_CONFIG, PLUGINS_DIR
from ..models.instance import AppchainEndpoint, PierInstance
from ..utils.file_utils import copy_file, ensure_dir
from ..utils.template_utils import (
    is_text_template,
    list_template_files,
    render_template_file,
)

logger = logging.getLogger(__name__)


def default_config_path(repo_root: Path, schema_version: str) -> Path:
    """``<repo>/pier_config/<schemaVersion>/pier_modify_config.toml``"""
    return Path(repo_root) / PIER_CONFIG_REPO / schema_version / PIER_MODIFY_CONFIG


class ConfigGenerator:
    """Renders pier configuration templates into an instance directory

    Templates use ``${name}`` placeholders; see ``build_variables`` for the
    names available.
    """

    def build_variables(self,
                        instance: PierInstance,
                        endpoint: AppchainEndpoint,
                        binary_path: Optional[Path] = None,
                        plugin_path: Optional[Path] = None,
                        crypto_path: Optional[str] = None,
                        schema_version: str = "") -> Dict[str, Any]:
        """Template variables for one instance"""
        variables = {
            'chain_type': instance.chain_type.value,
            'mode': instance.mode.value,
            'pier_version': instance.version,
            'schema_version': schema_version,
            'repo_root': instance.repo_root,
            'pier_repo': instance.instance_repo,
            'appchain_ip': endpoint.ip,
            'appchain_addr': endpoint.address,
            'appchain_ports': ",".join(endpoint.ports),
            'plugin_name': plugin_path.name if plugin_path else "",
            'plugin_path': plugin_path or "",
            'binary_path': binary_path or "",
            'crypto_path': crypto_path or "",
        }
        for index, port in enumerate(endpoint.ports):
            variables[f'appchain_port_{index}'] = port
        return variables

    def generate(self,
                 instance: PierInstance,
                 config_path: Path,
                 variables: Dict[str, Any],
                 plugin_path: Optional[Path] = None) -> List[Path]:
        """
        Write rendered configuration into the instance directory

        Writes ``pier.toml`` from ``config_path``, renders or copies the
        ``<chainType>/`` directory sitting next to it when present, and copies
        the plugin into ``plugins/``.

        Args:
            instance: Pier instance
            config_path: Main template file
            variables: Template variables
            plugin_path: Plugin to install, optional

        Returns:
            Written file paths

        Raises:
            FileNotFoundError: If the main template does not exist
        """
        ensure_dir(instance.instance_repo)
        written = [render_template_file(config_path, instance.rendered_config, variables)]

        chain_templates = config_path.parent / instance.chain_type.value
        if chain_templates.is_dir():
            target_dir = instance.instance_repo / instance.chain_type.value
            for template in list_template_files(chain_templates):
                target = target_dir / template.relative_to(chain_templates)
                if is_text_template(template):
                    written.append(render_template_file(template, target, variables))
                else:
                    written.append(copy_file(template, target))

        if plugin_path is not None:
            written.append(copy_file(plugin_path, instance.instance_repo / PLUGINS_DIR / plugin_path.name))

        logger.info(f"Generated {len(written)} configuration file(s) in {instance.instance_repo}")
        return written
