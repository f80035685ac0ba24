"""
Canonicalization of string-encoded enumerations.

Callers may spell enum values loosely ("accept", "ALLOW", "1"). Each helper
maps such a token to its wire code and its canonical display string, or
raises InvalidEnumError naming the field and the accepted spellings.
"""

from typing import NamedTuple

from .errors import InvalidEnumError
from .proto.schema import FirewallAction, IpVersion, NatInfoType, Protocol, TrafficDirection, VniType
from .types import LBPort


class Canonical(NamedTuple):
    code: int
    name: str


# token (lower case) -> (wire code, canonical name)
FIREWALL_ACTIONS = {
    "accept": Canonical(FirewallAction.ACCEPT, "Accept"),
    "allow": Canonical(FirewallAction.ACCEPT, "Accept"),
    "1": Canonical(FirewallAction.ACCEPT, "Accept"),
    "drop": Canonical(FirewallAction.DROP, "Drop"),
    "deny": Canonical(FirewallAction.DROP, "Drop"),
    "0": Canonical(FirewallAction.DROP, "Drop"),
}

TRAFFIC_DIRECTIONS = {
    "ingress": Canonical(TrafficDirection.INGRESS, "Ingress"),
    "0": Canonical(TrafficDirection.INGRESS, "Ingress"),
    "egress": Canonical(TrafficDirection.EGRESS, "Egress"),
    "1": Canonical(TrafficDirection.EGRESS, "Egress"),
}

IP_VERSIONS = {
    "ipv4": Canonical(IpVersion.IPV4, "IPv4"),
    "0": Canonical(IpVersion.IPV4, "IPv4"),
    "ipv6": Canonical(IpVersion.IPV6, "IPv6"),
    "1": Canonical(IpVersion.IPV6, "IPv6"),
}

NAT_INFO_TYPES = {
    "any": Canonical(NatInfoType.NAT_INFO_ANY, "Any"),
    "0": Canonical(NatInfoType.NAT_INFO_ANY, "Any"),
    "": Canonical(NatInfoType.NAT_INFO_ANY, "Any"),
    "local": Canonical(NatInfoType.NAT_INFO_LOCAL, "Local"),
    "1": Canonical(NatInfoType.NAT_INFO_LOCAL, "Local"),
    "neigh": Canonical(NatInfoType.NAT_INFO_NEIGHBOR, "Neighbor"),
    "neighbor": Canonical(NatInfoType.NAT_INFO_NEIGHBOR, "Neighbor"),
    "2": Canonical(NatInfoType.NAT_INFO_NEIGHBOR, "Neighbor"),
}

LB_PROTOCOLS = {
    "icmp": Canonical(Protocol.ICMP, "ICMP"),
    "tcp": Canonical(Protocol.TCP, "TCP"),
    "udp": Canonical(Protocol.UDP, "UDP"),
    "sctp": Canonical(Protocol.SCTP, "SCTP"),
    "icmpv6": Canonical(Protocol.ICMPV6, "ICMPv6"),
}

# Reverse lookups for decoding wire codes
FIREWALL_ACTION_NAMES = {FirewallAction.DROP: "Drop", FirewallAction.ACCEPT: "Accept"}
TRAFFIC_DIRECTION_NAMES = {TrafficDirection.INGRESS: "Ingress", TrafficDirection.EGRESS: "Egress"}
IP_VERSION_NAMES = {IpVersion.IPV4: "IPv4", IpVersion.IPV6: "IPv6"}


def _lookup(table: dict, field: str, value) -> Canonical:
    token = str(value if value is not None else "").lower()
    try:
        return table[token]
    except KeyError:
        allowed = [token for token in table if token]
        raise InvalidEnumError(field, value, allowed) from None


def firewall_action(value) -> Canonical:
    return _lookup(FIREWALL_ACTIONS, "firewall action", value)


def traffic_direction(value) -> Canonical:
    return _lookup(TRAFFIC_DIRECTIONS, "traffic direction", value)


def ip_version(value) -> Canonical:
    return _lookup(IP_VERSIONS, "ip version", value)


def nat_info_type(value) -> Canonical:
    """Resolve a NAT query type; empty string and None mean Any."""
    return _lookup(NAT_INFO_TYPES, "nat info type", value)


def lb_protocol(value) -> Canonical:
    return _lookup(LB_PROTOCOLS, "protocol", value)


def vni_type(value) -> VniType:
    """Resolve a VNI type code (0 = IPv4, 1 = IPv6, 2 = both)."""
    try:
        return VniType(int(value))
    except (TypeError, ValueError):
        raise InvalidEnumError("vni type", value, [str(int(t)) for t in VniType]) from None


def parse_lb_port(value: str) -> LBPort:
    """
    Parse a "<protocol>/<port>" string into an LBPort.

    Examples:
        >>> parse_lb_port("tcp/80")
        LBPort(protocol=6, port=80)
        >>> parse_lb_port("ICMPv6/0")
        LBPort(protocol=58, port=0)
    """
    protocol_name, sep, port_text = value.partition("/")
    protocol = lb_protocol(protocol_name)
    if not sep:
        raise ValueError(f"error parsing port number: missing '/' in {value!r}")
    try:
        port = int(port_text)
    except ValueError as e:
        raise ValueError(f"error parsing port number: {e}") from e
    return LBPort(protocol=protocol.code, port=port)
