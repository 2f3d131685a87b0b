"""Start command implementation"""

import click

from ..decorators import addressing_options, handle_errors, instance_options
from ..utils.output import console, format_lifecycle_result


@click.command()
@addressing_options
@click.pass_context
@handle_errors
@instance_options
def start(ctx, instance, ip, address, ports, crypto_path):
    """Start a pier

    In binary mode the pier runs in the foreground and its output is shown
    until it exits; stop it with Ctrl-C or 'pierctl stop' from another shell.
    The configuration is rendered first when the pier repo has none.

    In container mode the container is managed outside pierctl and nothing
    is started.

    Examples:

        pierctl start --appchain ethereum

        pierctl start --appchain fabric --mode container --cid 3f2a9c
    """
    if instance.is_binary:
        console.print(f"[cyan]Starting {instance.chain_type.value} pier...[/cyan]")
    result = ctx.obj.orchestrator.start(
        instance, ip=ip, address=address, ports=ports, crypto_path=crypto_path
    )
    format_lifecycle_result(result)
