"""Command lines for the pier's own registration and rule procedures"""

from dataclasses import dataclass
from typing import List, Optional

from ..constants import DEFAULT_METHOD
from ..core.version_resolver import supports_method_registration


@dataclass
class RelayRequest:
    """Parameters handed to the relay node"""

    repo_root: str
    instance_repo: str
    chain_type: str
    mode: str
    method: str
    version: str
    container_id: Optional[str] = None


class RelayCommandBuilder:
    """Builds pier sub-command arguments for a release line

    Releases before v1.8.0 register appchains directly; later releases
    register through a DID method.
    """

    def register(self, request: RelayRequest, pier_repo: str) -> List[str]:
        """Arguments registering the appchain with the hub

        Args:
            request: Relay request
            pier_repo: Pier repository as seen by the process running it

        Returns:
            Arguments following the pier executable
        """
        args = ["--repo", pier_repo, "appchain"]
        if supports_method_registration(request.version):
            args += ["method", "register", "--method", request.method or DEFAULT_METHOD]
        else:
            args += ["register"]
        args += [
            "--name", request.chain_type,
            "--type", request.chain_type,
            "--desc", f"{request.chain_type} appchain",
            "--version", request.version,
        ]
        return args

    def deploy_rule(self, request: RelayRequest, pier_repo: str, rule_path: str) -> List[str]:
        """Arguments uploading a validation rule

        Args:
            request: Relay request
            pier_repo: Pier repository as seen by the process running it
            rule_path: Rule file as seen by the process running it

        Returns:
            Arguments following the pier executable
        """
        args = ["--repo", pier_repo, "rule", "deploy", "--path", rule_path]
        if supports_method_registration(request.version):
            args += ["--method", request.method or DEFAULT_METHOD]
        return args
