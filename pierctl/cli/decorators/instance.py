"""Instance selection decorators for CLI commands"""

import sys
from functools import wraps
from typing import Callable, Optional

import click

from ..utils.output import print_error
from ...api.exceptions import PierToolError
from ...constants import DEFAULT_PIER_VERSION


def handle_errors(func: Callable) -> Callable:
    """Turn tool errors into an stderr message and exit code 1

    Args:
        func: Command function to decorate

    Returns:
        Decorated function
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PierToolError as e:
            print_error(str(e))
            sys.exit(1)
        except OSError as e:
            print_error(f"{e.strerror or e}: {e.filename}" if e.filename else str(e))
            sys.exit(1)
        except KeyboardInterrupt:
            # click would turn this into "Aborted!" with exit code 1
            print_error("Operation cancelled by user")
            sys.exit(130)

    return wrapper


def instance_options(func: Optional[Callable] = None, version_default: Optional[str] = DEFAULT_PIER_VERSION):
    """Add the options selecting a pier instance

    The wrapped command receives a ready ``instance`` keyword argument built
    by the context's orchestrator instead of the raw option values.

    Usable as ``@instance_options`` or ``@instance_options(version_default=None)``;
    without a version default the command falls back to the recorded one.

    Args:
        func: Command function to decorate
        version_default: Default of ``--version``

    Returns:
        Decorated function
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, appchain, mode, version, pier_repo, config_path, cid, **kwargs):
            ctx = click.get_current_context()
            instance = ctx.obj.orchestrator.instance(
                chain_type=appchain,
                mode=mode,
                version=version or "",
                pier_repo=pier_repo,
                config_path=config_path,
                container_id=cid,
            )
            return func(*args, instance=instance, **kwargs)

        version_help = 'Pier version' if version_default else 'Pier version (default: the recorded one)'
        options = [
            click.option('--appchain', required=True,
                         help='Appchain type: ethereum (alias ether) or fabric'),
            click.option('--mode', default='binary', show_default=True,
                         help='Deployment mode: binary or container (alias docker)'),
            click.option('--version', 'version', default=version_default,
                         show_default=bool(version_default), help=version_help),
            click.option('--pier-repo', type=click.Path(),
                         help='Pier instance directory (default: <repo>/pier/.pier_<appchain>)'),
            click.option('--config-path', type=click.Path(),
                         help='Pier config template (default: <repo>/pier_config/<schema>/pier_modify_config.toml)'),
            click.option('--cid', help='Container ID (container mode)'),
        ]
        for option in reversed(options):
            wrapper = option(wrapper)
        return wrapper

    # Handle both @instance_options and @instance_options(...)
    if func is not None:
        return decorator(func)
    return decorator


def addressing_options(func: Callable) -> Callable:
    """Add the appchain addressing options used by configure and start"""
    options = [
        click.option('--ip', help='Appchain IP'),
        click.option('--address', help='Appchain address, e.g. ws://host:port for ethereum'),
        click.option('--ports', help='Comma separated appchain ports'),
        click.option('--crypto-path', type=click.Path(),
                     help='Fabric crypto-config path'),
    ]
    for option in reversed(options):
        func = option(func)
    return func
