"""Appchain endpoint derivation and validation"""

from typing import List, Optional, Sequence, Union

from ..api.exceptions import (
    DuplicatePortError,
    InconsistentAddressError,
    MissingCredentialPathError,
    PortCountError,
)
from ..constants import (
    ChainType,
    FABRIC_DEFAULT_PORTS,
    FABRIC_PORT_COUNT,
    FABRIC_EVENT_PORT_INDEXES,
    FABRIC_DEFAULT_IP,
    ETHER_DEFAULT_PORT,
    ETHER_PORT_COUNT,
    ETHER_DEFAULT_IP,
    ETHER_ANY_PORT,
    WILDCARD_IP,
)
from ..models.instance import AppchainEndpoint, parse_chain_type


def split_ports(value: Union[str, Sequence[str], None]) -> Optional[List[str]]:
    """Turn a ``7050,7051`` style option into a port list

    Returns:
        List of stripped port strings, or None when nothing was given
    """
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        return [p.strip() for p in value.split(",")]
    ports = [str(p).strip() for p in value]
    return ports or None


def check_duplicate_ports(ports: Sequence[str]) -> None:
    """Raise DuplicatePortError on the first repeated port"""
    seen = set()
    for port in ports:
        if port in seen:
            raise DuplicatePortError(port, ports)
        seen.add(port)


class AppchainAddressResolver:
    """Produces a complete ``{ip, address, ports}`` triple for an appchain

    Every combination of given/omitted ip, address and ports either yields a
    fully populated endpoint or raises a ValidationError subclass.
    """

    def resolve(self,
                chain_type: Union[str, ChainType],
                ip: Optional[str] = None,
                address: Optional[str] = None,
                ports: Union[str, Sequence[str], None] = None,
                crypto_path: Optional[str] = None) -> AppchainEndpoint:
        """Resolve appchain addressing

        Args:
            chain_type: Appchain type
            ip: Appchain IP, optional
            address: Appchain address, optional
            ports: Port list or comma separated string, optional
            crypto_path: Fabric crypto-config path

        Returns:
            AppchainEndpoint

        Raises:
            UnsupportedChainTypeError: Unknown chain type
            PortCountError: Wrong number of ports
            DuplicatePortError: Repeated port
            InconsistentAddressError: Address contradicts ports or ip
            MissingCredentialPathError: Fabric without crypto path
        """
        chain = parse_chain_type(chain_type)
        ip = (ip or "").strip() or None
        address = (address or "").strip() or None
        port_list = split_ports(ports)

        if chain is ChainType.FABRIC:
            return self._resolve_fabric(ip, address, port_list, crypto_path)
        return self._resolve_ether(ip, address, port_list)

    def _resolve_fabric(self,
                        ip: Optional[str],
                        address: Optional[str],
                        ports: Optional[List[str]],
                        crypto_path: Optional[str]) -> AppchainEndpoint:
        ports_given = ports is not None
        if ports_given:
            if len(ports) != FABRIC_PORT_COUNT:
                raise PortCountError(ChainType.FABRIC.value, FABRIC_PORT_COUNT, ports)
            check_duplicate_ports(ports)
        else:
            ports = list(FABRIC_DEFAULT_PORTS)

        if address is None:
            ip = ip or FABRIC_DEFAULT_IP
            address = f"{ip}:{ports[2]}"
        else:
            if not ports_given:
                raise InconsistentAddressError(
                    f"Appchain address {address} was given without ports, "
                    f"please specify all {FABRIC_PORT_COUNT} ports for the fabric chain"
                )
            event_ports = [ports[i] for i in FABRIC_EVENT_PORT_INDEXES]
            if not any(port in address for port in event_ports):
                raise InconsistentAddressError(
                    f"Appchain address ({address}) and ports ({','.join(ports)}) are inconsistent: "
                    f"the address must use the eventUrlSubstitutionExp port of a fabric node, "
                    f"one of {','.join(event_ports)}. Ports are ordered as the orderer port "
                    f"followed by each peer's urlSubstitutionExp and eventUrlSubstitutionExp ports"
                )

            if ip is not None:
                if ip not in address:
                    raise InconsistentAddressError(
                        f"Appchain address ({address}) and IP ({ip}) are inconsistent"
                    )
            else:
                ip = address.split(":")[0]

        if not crypto_path or not str(crypto_path).strip():
            raise MissingCredentialPathError(ChainType.FABRIC.value)

        return AppchainEndpoint(ip=ip, address=address, ports=ports)

    def _resolve_ether(self,
                       ip: Optional[str],
                       address: Optional[str],
                       ports: Optional[List[str]]) -> AppchainEndpoint:
        if ports is not None:
            check_duplicate_ports(ports)
            if len(ports) != ETHER_PORT_COUNT:
                raise PortCountError(ChainType.ETHEREUM.value, ETHER_PORT_COUNT, ports)

        any_port = ports is None or ports == [ETHER_ANY_PORT]

        if address is None:
            ip = ip or ETHER_DEFAULT_IP
            port = ETHER_DEFAULT_PORT if any_port else ports[0]
            return AppchainEndpoint(ip=ip, address=f"ws://{ip}:{port}", ports=[port])

        if any_port:
            ports = [ETHER_ANY_PORT]
        elif ports[0] not in address:
            raise InconsistentAddressError(
                f"Appchain address ({address}) and ports ({','.join(ports)}) are inconsistent"
            )

        if ip is None:
            ip = WILDCARD_IP
        elif ip != WILDCARD_IP and ip not in address:
            raise InconsistentAddressError(
                f"Appchain address ({address}) and IP ({ip}) are inconsistent"
            )

        return AppchainEndpoint(ip=ip, address=address, ports=ports)
