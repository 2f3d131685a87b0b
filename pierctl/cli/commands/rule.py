"""Rule deployment command implementation"""

import click

from ..decorators import handle_errors, instance_options
from ..utils.output import format_lifecycle_result


@click.command(name='deploy-rule')
@click.option('--rule-repo', type=click.Path(),
              help='Validation rule file (default: <pier-repo>/<appchain>/validating.wasm)')
@click.option('--method', help='DID method name for pier v1.8.0 and later (default: appchain)')
@click.pass_context
@handle_errors
@instance_options
def deploy_rule(ctx, instance, rule_repo, method):
    """Deploy a validation rule for the appchain

    Examples:

        pierctl deploy-rule --appchain ethereum

        pierctl deploy-rule --appchain fabric --rule-repo ./rules/validating.wasm
    """
    result = ctx.obj.orchestrator.deploy_rule(instance, rule_path=rule_repo, method=method)
    format_lifecycle_result(result)
