"""Configure command implementation"""

import click

from ..decorators import addressing_options, handle_errors, instance_options
from ..utils.output import console, format_lifecycle_result


@click.command()
@addressing_options
@click.pass_context
@handle_errors
@instance_options
def configure(ctx, instance, ip, address, ports, crypto_path):
    """Provision pier artifacts and write the pier configuration

    Downloads the pier binary and the appchain plugin when they are not in
    the repository yet, then renders the config template into the pier repo.

    Examples:

        # Ethereum appchain on a remote node
        pierctl configure --appchain ethereum --address ws://10.0.0.5:8546

        # Fabric appchain with default ports
        pierctl configure --appchain fabric --ip 10.0.0.7 --crypto-path ./crypto-config
    """
    console.print(f"[cyan]Configuring {instance.chain_type.value} pier...[/cyan]")
    result = ctx.obj.orchestrator.configure(
        instance, ip=ip, address=address, ports=ports, crypto_path=crypto_path
    )
    format_lifecycle_result(result)
