"""
Domain model for the dpservice client.

Every resource has the same shape:

    {"kind": ..., "metadata": {...}, "spec": {...}, "status": {"code": 0, "message": ""}}

- kind: a ``Kind`` constant naming the resource type
- metadata: natural identity (interface ID, load balancer ID, VNI, ...)
- spec: configuration, partly computed by dpservice (underlay routes, VFs)
- status: the embedded status of the last response (code 0 = success)

Addresses are ``ipaddress`` objects and prefixes are ``ipaddress`` networks;
``None`` stands for an address that is not set. The same models are used to
build requests and to expose results. JSON output uses the camelCase keys of
the dpservice tooling (``model_dump(by_alias=True)``).
"""

from enum import Enum
from ipaddress import IPv4Address, IPv6Address
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, IPvAnyAddress, IPvAnyNetwork
from pydantic.alias_generators import to_camel

Uint32 = Annotated[int, Field(ge=0, le=0xFFFFFFFF)]


class Kind(str, Enum):
    """Resource type tags. The values appear verbatim in serialized output."""

    INTERFACE = "Interface"
    INTERFACE_LIST = "InterfaceList"
    LOAD_BALANCER = "LoadBalancer"
    LOAD_BALANCER_TARGET = "LoadBalancerTarget"
    LOAD_BALANCER_TARGET_LIST = "LoadBalancerTargetList"
    LOAD_BALANCER_PREFIX = "LoadBalancerPrefix"
    LOAD_BALANCER_PREFIX_LIST = "LoadBalancerPrefixList"
    PREFIX = "Prefix"
    PREFIX_LIST = "PrefixList"
    VIRTUAL_IP = "VirtualIP"
    ROUTE = "Route"
    ROUTE_LIST = "RouteList"
    NAT = "Nat"
    NAT_LIST = "NatList"
    NEIGHBOR_NAT = "NeighborNat"
    FIREWALL_RULE = "FirewallRule"
    FIREWALL_RULE_LIST = "FirewallRuleList"
    INITIALIZED = "Initialized"
    VNI = "Vni"
    VERSION = "Version"


class DPServiceModel(BaseModel):
    """Base model: camelCase aliases, construction by field name allowed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Status(DPServiceModel):
    """
    Embedded status of a dpservice response.

    Code 0 means success; any other code is a domain-level failure such as
    ``errors.ALREADY_EXISTS`` or ``errors.NOT_FOUND``.
    """
    code: int = 0
    message: str = ""

    def __str__(self) -> str:
        if self.code == 0:
            return self.message
        return f"Code: {self.code}, Message: {self.message}"


# ============================================================================
# Interface
# ============================================================================

class InterfaceMeta(DPServiceModel):
    id: str = ""


class VirtualFunction(DPServiceModel):
    """PCI virtual function dpservice attached to an interface."""
    name: str = Field(default="", alias="vfName")
    domain: Uint32 = Field(default=0, alias="vfDomain")
    bus: Uint32 = Field(default=0, alias="vfBus")
    slot: Uint32 = Field(default=0, alias="vfSlot")
    function: Uint32 = Field(default=0, alias="vfFunction")

    def __str__(self) -> str:
        return (
            f"Name: {self.name}, Domain: {self.domain}, Bus: {self.bus}, "
            f"Slot: {self.slot}, Function: {self.function}"
        )


class PXE(DPServiceModel):
    server: str = ""
    file_name: str = ""


class InterfaceSpec(DPServiceModel):
    """
    Interface configuration.

    ``ips`` holds at most one primary address per family. ``underlay_route``
    and ``virtual_function`` are assigned by dpservice on create.

    Example:
        {"vni": 200, "device": "net_tap5", "ips": ["10.200.1.4", "2000:200:1::4"]}
    """
    vni: Uint32 = 0
    device: str = ""
    ips: list[IPvAnyAddress] = Field(default_factory=list)
    underlay_route: Optional[IPvAnyAddress] = None
    virtual_function: Optional[VirtualFunction] = None
    pxe: Optional[PXE] = None

    @property
    def ipv4(self) -> Optional[IPv4Address]:
        """First IPv4 address in ``ips``, if any."""
        return next((ip for ip in self.ips if ip.version == 4), None)

    @property
    def ipv6(self) -> Optional[IPv6Address]:
        """First IPv6 address in ``ips``, if any."""
        return next((ip for ip in self.ips if ip.version == 6), None)


class Interface(DPServiceModel):
    kind: Kind = Kind.INTERFACE
    metadata: InterfaceMeta = Field(default_factory=InterfaceMeta)
    spec: InterfaceSpec = Field(default_factory=InterfaceSpec)
    status: Status = Field(default_factory=Status)

    @property
    def name(self) -> str:
        return self.metadata.id


class InterfaceList(DPServiceModel):
    kind: Kind = Kind.INTERFACE_LIST
    status: Status = Field(default_factory=Status)
    items: list[Interface] = Field(default_factory=list)


# ============================================================================
# Route
# ============================================================================

class RouteMeta(DPServiceModel):
    vni: Uint32 = 0


class RouteNextHop(DPServiceModel):
    vni: Uint32 = 0
    ip: Optional[IPvAnyAddress] = None


class RouteSpec(DPServiceModel):
    prefix: Optional[IPvAnyNetwork] = None
    next_hop: Optional[RouteNextHop] = None


class Route(DPServiceModel):
    kind: Kind = Kind.ROUTE
    metadata: RouteMeta = Field(default_factory=RouteMeta)
    spec: RouteSpec = Field(default_factory=RouteSpec)
    status: Status = Field(default_factory=Status)

    @property
    def name(self) -> str:
        next_hop_vni = self.spec.next_hop.vni if self.spec.next_hop else 0
        return f"{self.spec.prefix}-{next_hop_vni}"


class RouteList(DPServiceModel):
    kind: Kind = Kind.ROUTE_LIST
    metadata: RouteMeta = Field(default_factory=RouteMeta)
    status: Status = Field(default_factory=Status)
    items: list[Route] = Field(default_factory=list)


# ============================================================================
# Prefix / LoadBalancerPrefix
# ============================================================================

class PrefixMeta(DPServiceModel):
    interface_id: str = Field(default="", alias="interfaceID")


class PrefixSpec(DPServiceModel):
    prefix: Optional[IPvAnyNetwork] = None
    underlay_route: Optional[IPvAnyAddress] = None


class Prefix(DPServiceModel):
    """An alias prefix routed to an interface."""
    kind: Kind = Kind.PREFIX
    metadata: PrefixMeta = Field(default_factory=PrefixMeta)
    spec: PrefixSpec = Field(default_factory=PrefixSpec)
    status: Status = Field(default_factory=Status)

    @property
    def name(self) -> str:
        return str(self.spec.prefix)


class LoadBalancerPrefix(Prefix):
    """A prefix announced for load balancing towards an interface."""
    kind: Kind = Kind.LOAD_BALANCER_PREFIX


class PrefixList(DPServiceModel):
    """List of prefixes; kind is ``LoadBalancerPrefixList`` for LB prefixes."""
    kind: Kind = Kind.PREFIX_LIST
    metadata: PrefixMeta = Field(default_factory=PrefixMeta)
    status: Status = Field(default_factory=Status)
    items: list[Prefix] = Field(default_factory=list)


# ============================================================================
# VirtualIP
# ============================================================================

class VirtualIPMeta(DPServiceModel):
    interface_id: str = Field(default="", alias="interfaceID")


class VirtualIPSpec(DPServiceModel):
    ip: Optional[IPvAnyAddress] = None
    underlay_route: Optional[IPvAnyAddress] = None


class VirtualIP(DPServiceModel):
    kind: Kind = Kind.VIRTUAL_IP
    metadata: VirtualIPMeta = Field(default_factory=VirtualIPMeta)
    spec: VirtualIPSpec = Field(default_factory=VirtualIPSpec)
    status: Status = Field(default_factory=Status)

    @property
    def name(self) -> str:
        return f"on interface: {self.metadata.interface_id}"


# ============================================================================
# LoadBalancer / LoadBalancerTarget
# ============================================================================

class LoadBalancerMeta(DPServiceModel):
    id: str = ""


class LBPort(DPServiceModel):
    """A load-balanced port; ``protocol`` is an IANA protocol number (6 = TCP)."""
    protocol: Uint32 = 0
    port: Uint32 = 0


class LoadBalancerSpec(DPServiceModel):
    vni: Uint32 = 0
    lb_vip_ip: Optional[IPvAnyAddress] = Field(default=None, alias="lbVipIP")
    lb_ports: list[LBPort] = Field(default_factory=list, alias="lbports")
    underlay_route: Optional[IPvAnyAddress] = None


class LoadBalancer(DPServiceModel):
    kind: Kind = Kind.LOAD_BALANCER
    metadata: LoadBalancerMeta = Field(default_factory=LoadBalancerMeta)
    spec: LoadBalancerSpec = Field(default_factory=LoadBalancerSpec)
    status: Status = Field(default_factory=Status)

    @property
    def name(self) -> str:
        return self.metadata.id


class LoadBalancerTargetMeta(DPServiceModel):
    load_balancer_id: str = Field(default="", alias="loadbalancerId")


class LoadBalancerTargetSpec(DPServiceModel):
    target_ip: Optional[IPvAnyAddress] = Field(default=None, alias="targetIP")


class LoadBalancerTarget(DPServiceModel):
    kind: Kind = Kind.LOAD_BALANCER_TARGET
    metadata: LoadBalancerTargetMeta = Field(default_factory=LoadBalancerTargetMeta)
    spec: LoadBalancerTargetSpec = Field(default_factory=LoadBalancerTargetSpec)
    status: Status = Field(default_factory=Status)

    @property
    def name(self) -> str:
        return f"on loadbalancer: {self.metadata.load_balancer_id}"


class LoadBalancerTargetListMeta(DPServiceModel):
    load_balancer_id: str = Field(default="", alias="loadbalancerID")


class LoadBalancerTargetList(DPServiceModel):
    kind: Kind = Kind.LOAD_BALANCER_TARGET_LIST
    metadata: LoadBalancerTargetListMeta = Field(default_factory=LoadBalancerTargetListMeta)
    status: Status = Field(default_factory=Status)
    items: list[LoadBalancerTarget] = Field(default_factory=list)


# ============================================================================
# NAT / NeighborNat
# ============================================================================

class NatMeta(DPServiceModel):
    interface_id: str = Field(default="", alias="interfaceID")


class NatSpec(DPServiceModel):
    nat_ip: Optional[IPvAnyAddress] = Field(default=None, alias="natVIPIP")
    min_port: Uint32 = 0
    max_port: Uint32 = 0
    underlay_route: Optional[IPvAnyAddress] = None
    vni: Uint32 = 0


class Nat(DPServiceModel):
    """
    Source NAT of an interface behind ``nat_ip`` within a port range.

    In NAT-info listings, local entries carry ``nat_ip`` and
    ``underlay_route``; neighbor entries carry neither.
    """
    kind: Kind = Kind.NAT
    metadata: NatMeta = Field(default_factory=NatMeta)
    spec: NatSpec = Field(default_factory=NatSpec)
    status: Status = Field(default_factory=Status)

    @property
    def name(self) -> str:
        return self.metadata.interface_id

    def __str__(self) -> str:
        return f"{self.spec.nat_ip} <{self.spec.min_port}, {self.spec.max_port}>"


class NatListMeta(DPServiceModel):
    nat_ip: Optional[IPvAnyAddress] = None
    nat_type: str = ""


class NatList(DPServiceModel):
    kind: Kind = Kind.NAT_LIST
    metadata: NatListMeta = Field(default_factory=NatListMeta)
    status: Status = Field(default_factory=Status)
    items: list[Nat] = Field(default_factory=list)


class NeighborNatMeta(DPServiceModel):
    nat_ip: Optional[IPvAnyAddress] = Field(default=None, alias="natVIPIP")


class NeighborNatSpec(DPServiceModel):
    vni: Uint32 = 0
    min_port: Uint32 = 0
    max_port: Uint32 = 0
    underlay_route: Optional[IPvAnyAddress] = None


class NeighborNat(DPServiceModel):
    """A NAT port range owned by a peer node, reached over ``underlay_route``."""
    kind: Kind = Kind.NEIGHBOR_NAT
    metadata: NeighborNatMeta = Field(default_factory=NeighborNatMeta)
    spec: NeighborNatSpec = Field(default_factory=NeighborNatSpec)
    status: Status = Field(default_factory=Status)

    @property
    def name(self) -> str:
        return str(self.metadata.nat_ip)


# ============================================================================
# FirewallRule
# ============================================================================

class IcmpFilter(DPServiceModel):
    icmp_type: int = 0
    icmp_code: int = 0


class PortRangeFilter(DPServiceModel):
    src_port_lower: int = 0
    src_port_upper: int = 0
    dst_port_lower: int = 0
    dst_port_upper: int = 0


class TcpFilter(PortRangeFilter):
    pass


class UdpFilter(PortRangeFilter):
    pass


class ProtocolFilter(DPServiceModel):
    """Layer-4 match of a firewall rule; at most one member is set."""
    icmp: Optional[IcmpFilter] = None
    tcp: Optional[TcpFilter] = None
    udp: Optional[UdpFilter] = None


class FirewallRuleMeta(DPServiceModel):
    interface_id: str = Field(default="", alias="interfaceID")


class FirewallRuleSpec(DPServiceModel):
    """
    Firewall rule configuration.

    The enumerated fields accept human spellings on input ("accept", "ALLOW",
    "1") and hold the canonical form after a successful call:

    - traffic_direction: "Ingress" | "Egress"
    - firewall_action: "Accept" | "Drop"
    - ip_version: "IPv4" | "IPv6"
    """
    rule_id: str = Field(default="", alias="ruleID")
    traffic_direction: str = ""
    firewall_action: str = ""
    priority: Uint32 = 0
    ip_version: str = ""
    source_prefix: Optional[IPvAnyNetwork] = None
    destination_prefix: Optional[IPvAnyNetwork] = None
    protocol_filter: Optional[ProtocolFilter] = None


class FirewallRule(DPServiceModel):
    kind: Kind = Kind.FIREWALL_RULE
    metadata: FirewallRuleMeta = Field(default_factory=FirewallRuleMeta)
    spec: FirewallRuleSpec = Field(default_factory=FirewallRuleSpec)
    status: Status = Field(default_factory=Status)

    @property
    def name(self) -> str:
        return f"{self.metadata.interface_id}/{self.spec.rule_id}"


class FirewallRuleList(DPServiceModel):
    kind: Kind = Kind.FIREWALL_RULE_LIST
    metadata: FirewallRuleMeta = Field(default_factory=FirewallRuleMeta)
    status: Status = Field(default_factory=Status)
    items: list[FirewallRule] = Field(default_factory=list)


# ============================================================================
# Initialized / Vni / Version
# ============================================================================

class InitializedSpec(DPServiceModel):
    uuid: str = ""


class Initialized(DPServiceModel):
    """Initialization marker; ``spec.uuid`` identifies the dpservice run."""
    kind: Kind = Kind.INITIALIZED
    spec: InitializedSpec = Field(default_factory=InitializedSpec)
    status: Status = Field(default_factory=Status)

    @property
    def name(self) -> str:
        return "initialized"


class VniMeta(DPServiceModel):
    vni: Uint32 = 0
    vni_type: int = Field(default=0, ge=0, le=2)


class VniSpec(DPServiceModel):
    in_use: bool = False


class Vni(DPServiceModel):
    kind: Kind = Kind.VNI
    metadata: VniMeta = Field(default_factory=VniMeta)
    spec: VniSpec = Field(default_factory=VniSpec)
    status: Status = Field(default_factory=Status)

    @property
    def name(self) -> str:
        return str(self.metadata.vni)


class VersionMeta(DPServiceModel):
    client_protocol: str = Field(default="", alias="clientProto")
    client_name: str = ""
    client_version: str = Field(default="", alias="clientVer")


class VersionSpec(DPServiceModel):
    service_protocol: str = Field(default="", alias="svcProto")
    service_version: str = Field(default="", alias="svcVer")


class Version(DPServiceModel):
    """Client/service version exchange; no negotiation happens."""
    kind: Kind = Kind.VERSION
    metadata: VersionMeta = Field(default_factory=VersionMeta)
    spec: VersionSpec = Field(default_factory=VersionSpec)
    status: Status = Field(default_factory=Status)

    @property
    def name(self) -> str:
        return f"{self.metadata.client_name}-{self.metadata.client_protocol}"
