"""Exception definitions for pierctl"""

from typing import Optional, Sequence

from ..constants import ErrorCode


class PierToolError(Exception):
    """Base exception for pierctl"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class UnsupportedVersionError(PierToolError):
    """Requested pier version is not in the supported set"""

    def __init__(self, version: str, supported: Sequence[str] = ()):
        listed = ", ".join(supported) if supported else "none"
        message = f"Unsupported pier version: {version} (supported: {listed})"
        super().__init__(message, ErrorCode.UNSUPPORTED_VERSION)
        self.version = version
        self.supported = tuple(supported)


class ReleaseManifestError(PierToolError):
    """Release manifest missing or malformed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.RELEASE_MANIFEST_INVALID)


class FetchError(PierToolError):
    """Artifact download, extraction or post-processing failure"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, ErrorCode.FETCH_FAILED)
        self.cause = cause


class ArtifactBusyError(FetchError):
    """Artifact is being acquired by another process"""

    def __init__(self, path: str):
        super().__init__(
            f"Artifact {path} is being downloaded by another process, retry shortly"
        )
        self.error_code = ErrorCode.ARTIFACT_BUSY
        self.path = path


class UnsupportedPlatformError(FetchError):
    """No artifact is published for this operating system"""

    def __init__(self, system: str):
        super().__init__(f"Unsupported operating system for pier artifacts: {system}")
        self.error_code = ErrorCode.UNSUPPORTED_PLATFORM
        self.system = system


class ValidationError(PierToolError):
    """Invalid user input"""

    def __init__(self, message: str, error_code: str = ErrorCode.VALIDATION_FAILED):
        super().__init__(message, error_code)


class PortCountError(ValidationError):
    """Wrong number of appchain ports for the chain type"""

    def __init__(self, chain_type: str, expected: int, ports: Sequence[str]):
        super().__init__(
            f"The specified number of appchain ports is incorrect: {chain_type} needs "
            f"{expected} port(s), got {len(ports)} ({','.join(ports)})",
            ErrorCode.PORT_COUNT
        )
        self.expected = expected
        self.ports = list(ports)


class DuplicatePortError(ValidationError):
    """Repeated value in the appchain port list"""

    def __init__(self, port: str, ports: Sequence[str]):
        super().__init__(
            f"The port cannot be repeated: {port} (ports: {','.join(ports)})",
            ErrorCode.DUPLICATE_PORT
        )
        self.port = port
        self.ports = list(ports)


class InconsistentAddressError(ValidationError):
    """Appchain address contradicts the given ports or IP"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INCONSISTENT_ADDRESS)


class MissingCredentialPathError(ValidationError):
    """Fabric appchains need a crypto-config path"""

    def __init__(self, chain_type: str = "fabric"):
        super().__init__(
            f"Starting a {chain_type} pier needs a crypto-config path (--crypto-path)",
            ErrorCode.MISSING_CREDENTIAL_PATH
        )


class UnsupportedChainTypeError(ValidationError):
    """Unknown appchain type"""

    def __init__(self, chain_type: str):
        super().__init__(
            f"Unsupported appchain type: {chain_type!r} (expected ethereum or fabric)",
            ErrorCode.UNSUPPORTED_CHAIN_TYPE
        )
        self.chain_type = chain_type


class UnsupportedDeploymentModeError(ValidationError):
    """Unknown deployment mode"""

    def __init__(self, mode: str):
        super().__init__(
            f"Unsupported deployment mode: {mode!r} (expected binary or container)",
            ErrorCode.UNSUPPORTED_DEPLOYMENT_MODE
        )
        self.mode = mode


class MissingArtifactError(PierToolError):
    """Pier working directory has not been provisioned"""

    def __init__(self, path: str):
        super().__init__(
            f"The pier startup path ({path}) does not have a startup binary, "
            f"run `pierctl configure` first",
            ErrorCode.MISSING_ARTIFACT
        )
        self.path = path


class MissingContainerIDError(PierToolError):
    """Container mode needs a container ID"""

    def __init__(self):
        super().__init__(
            "Container mode needs a container ID (--cid)",
            ErrorCode.MISSING_CONTAINER_ID
        )


class RuleNotFoundError(PierToolError):
    """Validation rule file does not exist"""

    def __init__(self, path: str):
        super().__init__(f"Rule file not found: {path}", ErrorCode.RULE_NOT_FOUND)
        self.path = path


class ConfigError(PierToolError):
    """Tool configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class InstanceBusyError(PierToolError):
    """Another invocation holds the instance lock"""

    def __init__(self, path: str):
        super().__init__(
            f"Pier instance is locked by another pierctl process: {path}",
            ErrorCode.INSTANCE_BUSY
        )
        self.path = path


class PierAlreadyRunningError(PierToolError):
    """A pier process recorded for the instance is still alive"""

    def __init__(self, pid: int, pid_file: str):
        super().__init__(
            f"Pier is already running with pid {pid} ({pid_file}), run `pierctl stop` first",
            ErrorCode.PIER_RUNNING
        )
        self.path = pid_file
        self.pid = pid


class CommandFailedError(PierToolError):
    """External command exited with a non-zero status"""

    def __init__(self, args: Sequence[str], returncode: int, output: str = ""):
        message = f"Command failed with exit code {returncode}: {' '.join(args)}"
        if output:
            message = f"{message}\n{output.strip()}"
        super().__init__(message, ErrorCode.COMMAND_FAILED)
        self.args_list = list(args)
        self.returncode = returncode
        self.output = output
