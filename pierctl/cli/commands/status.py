"""Status command implementation"""

import click

from ..decorators import handle_errors, instance_options
from ..utils.output import format_json, format_status


@click.command()
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
@click.pass_context
@handle_errors
@instance_options(version_default=None)
def status(ctx, instance, as_json):
    """Show the recorded lifecycle state of a pier"""
    result = ctx.obj.orchestrator.status(instance)
    if as_json:
        format_json(result.to_dict())
    else:
        format_status(result)
