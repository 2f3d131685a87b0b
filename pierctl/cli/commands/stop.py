"""Stop command implementation"""

import click

from ..decorators import handle_errors, instance_options
from ..utils.output import format_lifecycle_result


@click.command()
@click.pass_context
@handle_errors
@instance_options
def stop(ctx, instance):
    """Stop a running pier

    Stopping a pier that is not running is not an error.
    """
    result = ctx.obj.orchestrator.stop(instance)
    format_lifecycle_result(result)
