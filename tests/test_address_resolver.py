"""Tests for appchain address resolution"""

import pytest

from pierctl.api.exceptions import (
    DuplicatePortError,
    InconsistentAddressError,
    MissingCredentialPathError,
    PortCountError,
    UnsupportedChainTypeError,
    ValidationError,
)
from pierctl.constants import FABRIC_DEFAULT_PORTS
from pierctl.core.address_resolver import AppchainAddressResolver, split_ports

CRYPTO = "/opt/crypto-config"
FABRIC_PORTS = "7050,7051,7053,8051,8053,9051,9053,10051,10053"


@pytest.fixture
def resolver():
    return AppchainAddressResolver()


class TestEther:

    def test_all_defaults(self, resolver):
        endpoint = resolver.resolve("ethereum")
        assert endpoint.ip == "0.0.0.0"
        assert endpoint.address == "ws://0.0.0.0:8546"
        assert endpoint.ports == ["8546"]

    def test_ether_alias(self, resolver):
        assert resolver.resolve("ether").address == "ws://0.0.0.0:8546"

    def test_ip_only(self, resolver):
        endpoint = resolver.resolve("ethereum", ip="10.0.0.5")
        assert endpoint.address == "ws://10.0.0.5:8546"
        assert endpoint.ports == ["8546"]

    def test_ip_and_port(self, resolver):
        endpoint = resolver.resolve("ethereum", ip="10.0.0.5", ports="9000")
        assert endpoint.address == "ws://10.0.0.5:9000"
        assert endpoint.ports == ["9000"]

    def test_address_without_ports_uses_sentinel(self, resolver):
        endpoint = resolver.resolve("ethereum", address="ws://10.0.0.5:9000")
        assert endpoint.ports == ["0000"]
        assert endpoint.ip == "0.0.0.0"

    def test_sentinel_bypasses_port_check(self, resolver):
        endpoint = resolver.resolve("ethereum", address="ws://anything:1234", ports=["0000"])
        assert endpoint.address == "ws://anything:1234"
        assert endpoint.ports == ["0000"]

    def test_address_and_matching_port(self, resolver):
        endpoint = resolver.resolve("ethereum", address="ws://10.0.0.5:9000", ports="9000")
        assert endpoint.ports == ["9000"]

    def test_address_port_mismatch(self, resolver):
        with pytest.raises(InconsistentAddressError):
            resolver.resolve("ethereum", address="ws://10.0.0.5:9000", ports="8546")

    def test_address_ip_mismatch(self, resolver):
        with pytest.raises(InconsistentAddressError):
            resolver.resolve("ethereum", ip="10.0.0.6", address="ws://10.0.0.5:9000")

    def test_wildcard_ip_accepts_any_address(self, resolver):
        endpoint = resolver.resolve("ethereum", ip="0.0.0.0", address="ws://10.0.0.5:9000")
        assert endpoint.ip == "0.0.0.0"

    def test_too_many_ports(self, resolver):
        with pytest.raises(PortCountError):
            resolver.resolve("ethereum", ports="8546,8547")

    def test_duplicate_ports(self, resolver):
        with pytest.raises(DuplicatePortError):
            resolver.resolve("ethereum", ports="8546,8546")


class TestFabric:

    def test_all_defaults(self, resolver):
        endpoint = resolver.resolve("fabric", crypto_path=CRYPTO)
        assert endpoint.ports == list(FABRIC_DEFAULT_PORTS)
        assert endpoint.ip == "127.0.0.1"
        assert endpoint.address == f"127.0.0.1:{FABRIC_DEFAULT_PORTS[2]}"

    def test_ip_only(self, resolver):
        endpoint = resolver.resolve("fabric", ip="10.0.0.7", crypto_path=CRYPTO)
        assert endpoint.address == "10.0.0.7:7053"

    def test_custom_ports_derive_address(self, resolver):
        ports = "1,2,3,4,5,6,7,8,9"
        endpoint = resolver.resolve("fabric", ip="10.0.0.7", ports=ports, crypto_path=CRYPTO)
        assert endpoint.address == "10.0.0.7:3"
        assert endpoint.ports == ports.split(",")

    @pytest.mark.parametrize("ports", ["7050", "7050,7051", FABRIC_PORTS + ",11051"])
    def test_port_count(self, resolver, ports):
        with pytest.raises(PortCountError):
            resolver.resolve("fabric", ports=ports, crypto_path=CRYPTO)

    def test_port_count_checked_before_anything_else(self, resolver):
        # Duplicates, inconsistent address and no crypto path are all present
        with pytest.raises(PortCountError):
            resolver.resolve("fabric", ip="1.1.1.1", address="2.2.2.2:1", ports="7050,7050")

    @pytest.mark.parametrize("ports", [
        "7050,7050,7053,8051,8053,9051,9053,10051,10053",
        "7050,7051,7053,8051,8053,9051,9053,10051,7050",
        "7050,7051,7053,8051,8053,8053,9053,10051,10053",
    ])
    def test_duplicate_ports_any_position(self, resolver, ports):
        with pytest.raises(DuplicatePortError):
            resolver.resolve("fabric", ports=ports, crypto_path=CRYPTO)

    @pytest.mark.parametrize("address", ["10.0.0.7:7053", "10.0.0.7:8053", "10.0.0.7:10053"])
    def test_address_on_event_port(self, resolver, address):
        endpoint = resolver.resolve("fabric", address=address, ports=FABRIC_PORTS, crypto_path=CRYPTO)
        assert endpoint.address == address
        assert endpoint.ip == "10.0.0.7"

    def test_address_on_non_event_port(self, resolver):
        with pytest.raises(InconsistentAddressError, match="eventUrlSubstitutionExp"):
            resolver.resolve("fabric", address="10.0.0.7:7051", ports=FABRIC_PORTS, crypto_path=CRYPTO)

    def test_address_without_ports(self, resolver):
        with pytest.raises(InconsistentAddressError):
            resolver.resolve("fabric", address="10.0.0.7:7053", crypto_path=CRYPTO)

    def test_address_ip_mismatch(self, resolver):
        with pytest.raises(InconsistentAddressError):
            resolver.resolve("fabric", ip="10.0.0.8", address="10.0.0.7:7053",
                             ports=FABRIC_PORTS, crypto_path=CRYPTO)

    def test_missing_crypto_path(self, resolver):
        with pytest.raises(MissingCredentialPathError):
            resolver.resolve("fabric")


def test_unknown_chain_type(resolver):
    with pytest.raises(UnsupportedChainTypeError):
        resolver.resolve("bitcoin")


def test_errors_share_validation_base(resolver):
    with pytest.raises(ValidationError):
        resolver.resolve("ethereum", ports="1,1")


@pytest.mark.parametrize("value,expected", [
    (None, None),
    ("", None),
    ("  ", None),
    ("1, 2,3", ["1", "2", "3"]),
    (["8546"], ["8546"]),
    ([], None),
])
def test_split_ports(value, expected):
    assert split_ports(value) == expected
