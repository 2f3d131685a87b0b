"""Global constants for pierctl"""

from enum import Enum

APP_NAME = "pierctl"
LOG_FORMAT = "%(message)s"

# Repository layout
DEFAULT_REPO_DIR = ".pierctl"
RELEASE_MANIFEST_FILE = "release.json"
TOOL_CONFIG_FILE = "pierctl.yaml"
BIN_DIR = "bin"
PIER_DIR = "pier"
PIER_CONFIG_REPO = "pier_config"
PIER_MODIFY_CONFIG = "pier_modify_config.toml"
PIER_CONFIG_FILE = "pier.toml"
PLUGINS_DIR = "plugins"
RULE_FILE = "validating.wasm"

# Per-instance files
INSTANCE_STATE_FILE = ".pier-state.json"
INSTANCE_PID_FILE = "pier.pid"
COMPLETION_MARKER_PATTERN = ".{name}.complete"

# Artifact naming
PIER_BINARY_NAME = "pier"
PIER_PLUGIN_PATTERN = "{chain_type}-client"
ARTIFACT_DIR_PATTERN = "pier_{os}_{version}"
INSTANCE_DIR_PATTERN = ".pier_{chain_type}"
LIBWASMER_RPATH = "@rpath/libwasmer.dylib"
LIBWASMER_DYLIB = "libwasmer.dylib"

# Download URL templates, positional {0} is the pier version
PIER_URLS = {
    "linux": "https://github.com/meshplus/pier/releases/download/{0}/pier_linux-amd64_{0}.tar.gz",
    "darwin": "https://github.com/meshplus/pier/releases/download/{0}/pier_darwin_x86_64_{0}.tar.gz",
}
PLUGIN_URLS = {
    "linux": {
        "fabric": "https://github.com/meshplus/pier-client-fabric/releases/download/{0}/fabric-client-{0}-Linux",
        "ethereum": "https://github.com/meshplus/pier-client-ethereum/releases/download/{0}/eth-client-{0}-Linux",
    },
    "darwin": {
        "fabric": "https://github.com/meshplus/pier-client-fabric/releases/download/{0}/fabric-client-{0}-Darwin",
        "ethereum": "https://github.com/meshplus/pier-client-ethereum/releases/download/{0}/eth-client-{0}-Darwin",
    },
}
LINUX_SYSTEM = "linux"

# Pier release -> configuration template set
PIER_CONFIG_MAP = {
    "v1.6.1": "v1.6.1",
    "v1.7.0": "v1.6.1",
    "v1.8.0": "v1.8.0",
    "v1.9.0": "v1.8.0",
}
DEFAULT_PIER_VERSION = "v1.6.1"
METHOD_REGISTRATION_SINCE = "v1.8.0"
DEFAULT_METHOD = "appchain"

# Appchain addressing
FABRIC_DEFAULT_PORTS = (
    "7050", "7051", "7053",
    "8051", "8053",
    "9051", "9053",
    "10051", "10053",
)
FABRIC_PORT_COUNT = 9
FABRIC_EVENT_PORT_INDEXES = (2, 4, 6, 8)
FABRIC_DEFAULT_IP = "127.0.0.1"
ETHER_DEFAULT_PORT = "8546"
ETHER_PORT_COUNT = 1
ETHER_DEFAULT_IP = "0.0.0.0"
ETHER_ANY_PORT = "0000"
WILDCARD_IP = "0.0.0.0"

# Execution defaults
DEFAULT_HTTP_TIMEOUT = 60.0  # seconds
DEFAULT_STOP_TIMEOUT = 30.0  # seconds
STOP_POLL_INTERVAL = 0.2  # seconds
DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1MB
DEFAULT_CONTAINER_RUNTIME = "docker"
DEFAULT_CONTAINER_REPO = "/root/.pier"

# Environment variables
ENV_REPO_ROOT = "PIERCTL_REPO"
ENV_LOG_LEVEL = "PIERCTL_LOG_LEVEL"


class ChainType(Enum):
    """Appchain families a pier can bridge"""
    ETHEREUM = "ethereum"
    FABRIC = "fabric"

    @classmethod
    def parse(cls, value) -> "ChainType":
        """Parse a chain type name, accepting the short ``ether`` alias"""
        if isinstance(value, cls):
            return value
        name = str(value or "").strip().lower()
        if name == "ether":
            name = cls.ETHEREUM.value
        return cls(name)


class DeploymentMode(Enum):
    """How a pier instance is run"""
    BINARY = "binary"
    CONTAINER = "container"

    @classmethod
    def parse(cls, value) -> "DeploymentMode":
        """Parse a deployment mode name, accepting ``docker`` for containers"""
        if isinstance(value, cls):
            return value
        name = str(value or "").strip().lower()
        if name == "docker":
            name = cls.CONTAINER.value
        return cls(name)


class LifecycleState(Enum):
    """Persisted lifecycle state of a pier instance"""
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    STARTED = "started"
    REGISTERED = "registered"
    RULE_DEPLOYED = "rule_deployed"
    STOPPED = "stopped"


# Error codes
class ErrorCode:
    UNSUPPORTED_VERSION = "PT001"
    FETCH_FAILED = "PT002"
    VALIDATION_FAILED = "PT003"
    DUPLICATE_PORT = "PT004"
    INCONSISTENT_ADDRESS = "PT005"
    MISSING_CREDENTIAL_PATH = "PT006"
    UNSUPPORTED_CHAIN_TYPE = "PT007"
    MISSING_ARTIFACT = "PT008"
    MISSING_CONTAINER_ID = "PT009"
    RULE_NOT_FOUND = "PT010"
    RELEASE_MANIFEST_INVALID = "PT011"
    CONFIG_FORMAT_ERROR = "PT012"
    INSTANCE_BUSY = "PT013"
    ARTIFACT_BUSY = "PT014"
    COMMAND_FAILED = "PT015"
    UNSUPPORTED_PLATFORM = "PT016"
    PORT_COUNT = "PT017"
    UNSUPPORTED_DEPLOYMENT_MODE = "PT018"
    PIER_RUNNING = "PT019"


# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_ARROW = "→"
