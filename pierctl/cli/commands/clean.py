"""Clean command implementation"""

import click
from rich.prompt import Confirm

from ..decorators import handle_errors, instance_options
from ..utils.output import console, format_lifecycle_result


@click.command()
@click.option('-y', '--yes', is_flag=True, help='Skip confirmation prompt')
@click.pass_context
@handle_errors
@instance_options
def clean(ctx, instance, yes):
    """Stop a local pier and remove its pier repo

    Downloaded binaries and plugins in the repository are kept.
    """
    if not yes and instance.instance_repo.exists():
        if not Confirm.ask(f"[cyan]Remove {instance.instance_repo}?[/cyan]"):
            console.print("[yellow]Clean cancelled[/yellow]")
            return

    result = ctx.obj.orchestrator.clean(instance)
    format_lifecycle_result(result)
