# pierctl/cli/main.py
"""Main CLI entry point for pierctl"""

import os
import sys
import logging
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ..__version__ import __version__
from ..constants import APP_NAME, LOG_FORMAT, ENV_LOG_LEVEL
from ..api.orchestrator import LifecycleOrchestrator
from .utils.output import print_line

# Import all commands
from .commands import (
    configure,
    start,
    register,
    rule,
    stop,
    clean,
    status,
)

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Environment override, e.g. PIERCTL_LOG_LEVEL=info
    env_level = os.environ.get(ENV_LOG_LEVEL)
    if env_level:
        named = logging.getLevelName(env_level.upper())
        if isinstance(named, int):
            level = named

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ],
        force=True,
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy orchestrator initialization

    The orchestrator reads the tool config from the repository, so it is only
    built when a command actually needs it.
    """

    def __init__(self, repo_root: Optional[str] = None, quiet: bool = False):
        """Initialize CLI context"""
        self.repo_root = repo_root
        self.quiet = quiet
        self.verbose: bool = False
        self.debug: bool = False
        self._orchestrator: Optional[LifecycleOrchestrator] = None

    @property
    def orchestrator(self) -> LifecycleOrchestrator:
        """Get the lifecycle orchestrator (lazy loading)"""
        if self._orchestrator is None:
            self._orchestrator = LifecycleOrchestrator(
                repo_root=self.repo_root,
                output=None if self.quiet else print_line,
            )
            if self.debug:
                console.print(f"[dim]Repository root: {self._orchestrator.repo_root}[/dim]")
        return self._orchestrator


@click.group(name=APP_NAME)
@click.option('--repo', type=click.Path(),
              help='Repository root (default: $PIERCTL_REPO or ~/.pierctl)')
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.version_option(__version__, prog_name=APP_NAME)
@click.pass_context
def cli(ctx, repo, verbose, debug, quiet):
    """pierctl - Manage pier relay nodes for appchains

    Provisions pier binaries and appchain plugins, writes pier
    configuration and drives the pier through its lifecycle:

        configure -> start -> register -> deploy-rule -> stop -> clean

    Each command checks only its own preconditions, so commands can be
    repeated or run out of order.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context(repo_root=repo, quiet=quiet)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug


# Register commands
cli.add_command(configure.configure)
cli.add_command(start.start)
cli.add_command(register.register)
cli.add_command(rule.deploy_rule)
cli.add_command(stop.stop)
cli.add_command(clean.clean)
cli.add_command(status.status)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Auto-help for incomplete commands
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    err_console = Console(stderr=True)
    try:
        # Handle help for incomplete commands
        if len(sys.argv) == 2 and sys.argv[1] not in [
            '-h', '--help', '-v', '--verbose', '-d', '--debug', '-q', '--quiet', '--version'
        ]:
            # If only command name provided, show its help
            sys.argv.append('--help')

        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        err_console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            err_console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
