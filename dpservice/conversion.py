"""
Conversion between dpservice wire messages and domain objects.

All functions are pure. Decoding rules:

- An empty address on the wire means "not set" and decodes to None.
- A non-empty address that does not parse raises ParseError naming the
  field. Nothing is silently coerced to None.
- Statuses are copied verbatim, whatever their code.
- Repeated fields keep their wire order.
"""

import ipaddress
from typing import Optional, Union

from . import canonicalize
from .errors import InvalidEnumError, ParseError
from .proto import dpdk_pb2
from .proto.schema import InterfaceType, IpVersion
from .types import (
    PXE,
    FirewallRule,
    FirewallRuleMeta,
    FirewallRuleSpec,
    IcmpFilter,
    Interface,
    InterfaceMeta,
    InterfaceSpec,
    LBPort,
    LoadBalancer,
    LoadBalancerMeta,
    LoadBalancerSpec,
    LoadBalancerTarget,
    LoadBalancerTargetMeta,
    LoadBalancerTargetSpec,
    Nat,
    NatMeta,
    NatSpec,
    NeighborNat,
    Prefix,
    PrefixMeta,
    PrefixSpec,
    ProtocolFilter,
    Route,
    RouteMeta,
    RouteNextHop,
    RouteSpec,
    Status,
    TcpFilter,
    UdpFilter,
    VirtualFunction,
    VirtualIP,
    VirtualIPMeta,
    VirtualIPSpec,
)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


# ============================================================================
# Addresses and prefixes
# ============================================================================

def decode_text(raw: Union[bytes, str, None], field: str) -> str:
    """Decode a UTF-8 identifier; undecodable bytes raise ParseError."""
    if raw is None:
        return ""
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(field, raw, str(e)) from e
    return raw


def decode_address(raw: Union[bytes, str, None], field: str) -> Optional[IPAddress]:
    """
    Decode a string-encoded address.

    Returns None for an empty value; raises ParseError for anything else that
    is not an IPv4 or IPv6 address.
    """
    text = decode_text(raw, field)
    if not text:
        return None
    try:
        return ipaddress.ip_address(text)
    except ValueError as e:
        raise ParseError(field, text, str(e)) from e


def decode_prefix(raw_address: Union[bytes, str, None], length: int, field: str) -> Optional[IPNetwork]:
    """
    Combine an address and a bit length into a network.

    Returns None when the address is empty. A length outside the address
    family's range is a ParseError. Host bits are masked off.
    """
    address = decode_address(raw_address, field)
    if address is None:
        return None
    try:
        return ipaddress.ip_network(f"{address}/{length}", strict=False)
    except ValueError as e:
        raise ParseError(field, f"{address}/{length}", str(e)) from e


def encode_address(address: Optional[IPAddress]) -> bytes:
    if address is None:
        return b""
    return str(address).encode()


def ip_version_of(address: Optional[Union[IPAddress, IPNetwork]]) -> IpVersion:
    if address is not None and address.version == 6:
        return IpVersion.IPV6
    return IpVersion.IPV4


def address_to_proto(address: Optional[IPAddress]) -> dpdk_pb2.IpAddress:
    return dpdk_pb2.IpAddress(ipver=ip_version_of(address), address=encode_address(address))


def address_from_proto(message: dpdk_pb2.IpAddress, field: str) -> Optional[IPAddress]:
    return decode_address(message.address, field)


def prefix_to_proto(prefix: Optional[IPNetwork], ipver: Optional[int] = None) -> dpdk_pb2.Prefix:
    """Encode a network; ``ipver`` overrides the version derived from the address."""
    if prefix is None:
        return dpdk_pb2.Prefix(ip=address_to_proto(None), length=0)
    ip = address_to_proto(prefix.network_address)
    if ipver is not None:
        ip.ipver = ipver
    return dpdk_pb2.Prefix(ip=ip, length=prefix.prefixlen)


def prefix_from_proto_message(message: dpdk_pb2.Prefix, field: str) -> Optional[IPNetwork]:
    return decode_prefix(message.ip.address, message.length, field)


# ============================================================================
# Status
# ============================================================================

def status_from_proto(message: dpdk_pb2.Status) -> Status:
    return Status(code=message.code, message=message.message)


# ============================================================================
# Interface
# ============================================================================

def virtual_function_from_proto(message: dpdk_pb2.VirtualFunction) -> VirtualFunction:
    return VirtualFunction(
        name=message.name,
        domain=message.domain,
        bus=message.bus,
        slot=message.slot,
        function=message.function,
    )


def interface_from_proto(message: dpdk_pb2.Interface) -> Interface:
    ips = []
    for field, raw in (("primary ipv4", message.primary_ipv4), ("primary ipv6", message.primary_ipv6)):
        ip = decode_address(raw, field)
        if ip is not None:
            ips.append(ip)

    spec = InterfaceSpec(
        vni=message.vni,
        device=message.pci_name,
        ips=ips,
        underlay_route=decode_address(message.underlay_route, "underlay route"),
    )
    if message.HasField("vf"):
        spec.virtual_function = virtual_function_from_proto(message.vf)

    return Interface(
        metadata=InterfaceMeta(id=decode_text(message.id, "interface id")),
        spec=spec,
    )


def _ip_config(address: Optional[IPAddress], pxe: Optional[PXE]) -> Optional[dpdk_pb2.IpConfig]:
    if address is None:
        return None
    config = dpdk_pb2.IpConfig(ipver=ip_version_of(address), primary_address=encode_address(address))
    if pxe is not None and pxe.server and pxe.file_name:
        config.pxe_config.CopyFrom(
            dpdk_pb2.PxeConfig(next_server=pxe.server, boot_filename=pxe.file_name)
        )
    return config


def interface_to_create_request(iface: Interface) -> dpdk_pb2.CreateInterfaceRequest:
    """
    Build a CreateInterface request.

    The first IPv4 and IPv6 address of ``spec.ips`` become the primary
    addresses. PXE settings are sent only when both server and file name are
    set.
    """
    request = dpdk_pb2.CreateInterfaceRequest(
        interface_type=InterfaceType.VIRTUAL_INTERFACE,
        interface_id=iface.metadata.id.encode(),
        vni=iface.spec.vni,
        device_name=iface.spec.device,
    )
    ipv4_config = _ip_config(iface.spec.ipv4, iface.spec.pxe)
    if ipv4_config is not None:
        request.ipv4_config.CopyFrom(ipv4_config)
    ipv6_config = _ip_config(iface.spec.ipv6, iface.spec.pxe)
    if ipv6_config is not None:
        request.ipv6_config.CopyFrom(ipv6_config)
    return request


# ============================================================================
# Prefix / VirtualIP
# ============================================================================

def prefix_from_proto(interface_id: str, message: dpdk_pb2.Prefix, model: type = Prefix) -> Prefix:
    """Decode a listed prefix; ``model`` is Prefix or LoadBalancerPrefix."""
    return model(
        metadata=PrefixMeta(interface_id=interface_id),
        spec=PrefixSpec(
            prefix=prefix_from_proto_message(message, "prefix"),
            underlay_route=decode_address(message.underlay_route, "underlay route"),
        ),
    )


def virtual_ip_from_proto(interface_id: str, response: dpdk_pb2.GetVipResponse) -> VirtualIP:
    return VirtualIP(
        metadata=VirtualIPMeta(interface_id=interface_id),
        spec=VirtualIPSpec(
            ip=address_from_proto(response.vip_ip, "virtual ip"),
            underlay_route=decode_address(response.underlay_route, "underlay route"),
        ),
        status=status_from_proto(response.status),
    )


# ============================================================================
# Route
# ============================================================================

def route_to_proto(prefix: Optional[IPNetwork], next_hop: Optional[RouteNextHop]) -> dpdk_pb2.Route:
    route = dpdk_pb2.Route(weight=100, prefix=prefix_to_proto(prefix))
    if next_hop is not None:
        route.ipver = ip_version_of(next_hop.ip)
        route.nexthop_vni = next_hop.vni
        route.nexthop_address.CopyFrom(address_to_proto(next_hop.ip))
    else:
        route.ipver = ip_version_of(prefix)
    return route


def route_from_proto(vni: int, message: dpdk_pb2.Route) -> Route:
    return Route(
        metadata=RouteMeta(vni=vni),
        spec=RouteSpec(
            prefix=prefix_from_proto_message(message.prefix, "route prefix"),
            next_hop=RouteNextHop(
                vni=message.nexthop_vni,
                ip=address_from_proto(message.nexthop_address, "next hop address"),
            ),
        ),
    )


# ============================================================================
# LoadBalancer
# ============================================================================

def lb_ports_to_proto(ports: list[LBPort]) -> list[dpdk_pb2.LbPort]:
    return [dpdk_pb2.LbPort(port=port.port, protocol=port.protocol) for port in ports]


def lb_ports_from_proto(ports) -> list[LBPort]:
    return [LBPort(protocol=port.protocol, port=port.port) for port in ports]


def load_balancer_to_create_request(lb: LoadBalancer) -> dpdk_pb2.CreateLoadBalancerRequest:
    return dpdk_pb2.CreateLoadBalancerRequest(
        loadbalancer_id=lb.metadata.id.encode(),
        vni=lb.spec.vni,
        loadbalanced_ip=address_to_proto(lb.spec.lb_vip_ip),
        loadbalanced_ports=lb_ports_to_proto(lb.spec.lb_ports),
    )


def load_balancer_from_proto(lb_id: str, response: dpdk_pb2.GetLoadBalancerResponse) -> LoadBalancer:
    return LoadBalancer(
        metadata=LoadBalancerMeta(id=lb_id),
        spec=LoadBalancerSpec(
            vni=response.vni,
            lb_vip_ip=address_from_proto(response.loadbalanced_ip, "lb ip"),
            lb_ports=lb_ports_from_proto(response.loadbalanced_ports),
            underlay_route=decode_address(response.underlay_route, "underlay route"),
        ),
        status=status_from_proto(response.status),
    )


def load_balancer_target_from_proto(lb_id: str, message: dpdk_pb2.IpAddress) -> LoadBalancerTarget:
    return LoadBalancerTarget(
        metadata=LoadBalancerTargetMeta(load_balancer_id=lb_id),
        spec=LoadBalancerTargetSpec(target_ip=address_from_proto(message, "target ip")),
    )


# ============================================================================
# NAT
# ============================================================================

def nat_from_proto(interface_id: str, response: dpdk_pb2.GetNatResponse) -> Nat:
    return Nat(
        metadata=NatMeta(interface_id=interface_id),
        spec=NatSpec(
            nat_ip=address_from_proto(response.nat_ip, "nat ip"),
            min_port=response.min_port,
            max_port=response.max_port,
            underlay_route=decode_address(response.underlay_route, "underlay route"),
            vni=response.vni,
        ),
        status=status_from_proto(response.status),
    )


def neighbor_nat_to_create_request(nnat: NeighborNat) -> dpdk_pb2.CreateNeighborNatRequest:
    return dpdk_pb2.CreateNeighborNatRequest(
        nat_ip=address_to_proto(nnat.metadata.nat_ip),
        vni=nnat.spec.vni,
        min_port=nnat.spec.min_port,
        max_port=nnat.spec.max_port,
        underlay_route=encode_address(nnat.spec.underlay_route),
    )


def nat_info_entry_to_nat(entry: dpdk_pb2.NatInfoEntry, vip: Optional[IPAddress]) -> Nat:
    """
    Decode one NAT-info entry.

    Local and neighbor entries share one wire shape. An entry carrying an
    underlay route is a local entry and gets the route and the queried VIP;
    an entry without one is a neighbor entry and gets neither.
    """
    spec = NatSpec(min_port=entry.min_port, max_port=entry.max_port)
    underlay_route = decode_address(entry.underlay_route, "underlay route")
    if underlay_route is not None:
        spec.underlay_route = underlay_route
        spec.nat_ip = vip
    return Nat(spec=spec)


# ============================================================================
# FirewallRule
# ============================================================================

def protocol_filter_to_proto(pf: Optional[ProtocolFilter]) -> Optional[dpdk_pb2.ProtocolFilter]:
    if pf is None:
        return None
    if pf.icmp is not None:
        return dpdk_pb2.ProtocolFilter(
            icmp=dpdk_pb2.IcmpFilter(icmp_type=pf.icmp.icmp_type, icmp_code=pf.icmp.icmp_code)
        )
    if pf.tcp is not None:
        return dpdk_pb2.ProtocolFilter(tcp=dpdk_pb2.TcpFilter(**pf.tcp.model_dump()))
    if pf.udp is not None:
        return dpdk_pb2.ProtocolFilter(udp=dpdk_pb2.UdpFilter(**pf.udp.model_dump()))
    return dpdk_pb2.ProtocolFilter()


def protocol_filter_from_proto(message: dpdk_pb2.ProtocolFilter) -> ProtocolFilter:
    which = message.WhichOneof("filter")
    if which == "icmp":
        return ProtocolFilter(
            icmp=IcmpFilter(icmp_type=message.icmp.icmp_type, icmp_code=message.icmp.icmp_code)
        )
    if which == "tcp":
        tcp = message.tcp
        return ProtocolFilter(tcp=TcpFilter(
            src_port_lower=tcp.src_port_lower,
            src_port_upper=tcp.src_port_upper,
            dst_port_lower=tcp.dst_port_lower,
            dst_port_upper=tcp.dst_port_upper,
        ))
    if which == "udp":
        udp = message.udp
        return ProtocolFilter(udp=UdpFilter(
            src_port_lower=udp.src_port_lower,
            src_port_upper=udp.src_port_upper,
            dst_port_lower=udp.dst_port_lower,
            dst_port_upper=udp.dst_port_upper,
        ))
    return ProtocolFilter()


def canonicalize_firewall_rule(rule: FirewallRule) -> tuple[int, int, int]:
    """
    Canonicalize direction, action and IP version of ``rule`` in place.

    Returns the wire codes (direction, action, ipver). Raises
    InvalidEnumError before touching the rule if any token is unknown.
    """
    action = canonicalize.firewall_action(rule.spec.firewall_action)
    direction = canonicalize.traffic_direction(rule.spec.traffic_direction)
    ipver = canonicalize.ip_version(rule.spec.ip_version)

    rule.spec.firewall_action = action.name
    rule.spec.traffic_direction = direction.name
    rule.spec.ip_version = ipver.name
    return direction.code, action.code, ipver.code


def firewall_rule_to_proto(rule: FirewallRule) -> dpdk_pb2.FirewallRule:
    """Canonicalize ``rule`` (in place) and encode it."""
    direction, action, ipver = canonicalize_firewall_rule(rule)
    message = dpdk_pb2.FirewallRule(
        id=rule.spec.rule_id.encode(),
        direction=direction,
        action=action,
        priority=rule.spec.priority,
        ipver=ipver,
        source_prefix=prefix_to_proto(rule.spec.source_prefix, ipver),
        destination_prefix=prefix_to_proto(rule.spec.destination_prefix, ipver),
    )
    protocol_filter = protocol_filter_to_proto(rule.spec.protocol_filter)
    if protocol_filter is not None:
        message.protocol_filter.CopyFrom(protocol_filter)
    return message


def _enum_name(names: dict, code: int, field: str) -> str:
    try:
        return names[code]
    except KeyError:
        raise InvalidEnumError(field, code, [str(int(c)) for c in names]) from None


def firewall_rule_from_proto(interface_id: str, message: dpdk_pb2.FirewallRule) -> FirewallRule:
    spec = FirewallRuleSpec(
        rule_id=decode_text(message.id, "rule id"),
        traffic_direction=_enum_name(canonicalize.TRAFFIC_DIRECTION_NAMES, message.direction, "traffic direction"),
        firewall_action=_enum_name(canonicalize.FIREWALL_ACTION_NAMES, message.action, "firewall action"),
        priority=message.priority,
        ip_version=_enum_name(canonicalize.IP_VERSION_NAMES, message.ipver, "ip version"),
        source_prefix=prefix_from_proto_message(message.source_prefix, "source prefix"),
        destination_prefix=prefix_from_proto_message(message.destination_prefix, "destination prefix"),
    )
    if message.HasField("protocol_filter"):
        spec.protocol_filter = protocol_filter_from_proto(message.protocol_filter)

    return FirewallRule(
        metadata=FirewallRuleMeta(interface_id=interface_id),
        spec=spec,
    )
