"""Register command implementation"""

import click

from ..decorators import handle_errors, instance_options
from ..utils.output import format_lifecycle_result


@click.command()
@click.option('--method', help='DID method name for pier v1.8.0 and later (default: appchain)')
@click.pass_context
@handle_errors
@instance_options
def register(ctx, instance, method):
    """Register the appchain with the relay hub

    Examples:

        pierctl register --appchain ethereum --version v1.6.1

        pierctl register --appchain fabric --mode container --cid 3f2a9c
    """
    result = ctx.obj.orchestrator.register(instance, method=method)
    format_lifecycle_result(result)
