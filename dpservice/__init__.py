"""
dpservice - Python client library for the dpservice dataplane.

Manage interfaces, prefixes, virtual IPs, load balancers, routes, NAT and
firewall rules of a running dpservice over gRPC.

Example usage:
    from dpservice import DPServiceClient, Interface, InterfaceMeta, InterfaceSpec

    with DPServiceClient("localhost:1337") as client:
        client.initialize()
        iface = client.create_interface(Interface(
            metadata=InterfaceMeta(id="vm4"),
            spec=InterfaceSpec(vni=200, device="net_tap5", ips=["10.200.1.4"]),
        ))
        print(f"Underlay route: {iface.spec.underlay_route}")
"""

__version__ = "0.1.0"

# Client
from .client import DPServiceClient

# Configuration
from .config import Config, config

# Errors
from .errors import (
    DPServiceError,
    TransportError,
    ServerError,
    ConversionError,
    ParseError,
    InvalidEnumError,
    ResponseMismatchError,
    is_status_error_code,
    ignore_status_error_code,
)

# Enum canonicalization
from .canonicalize import parse_lb_port

# Type definitions
from .types import (
    Kind,
    Status,
    Interface,
    InterfaceMeta,
    InterfaceSpec,
    InterfaceList,
    VirtualFunction,
    PXE,
    Route,
    RouteMeta,
    RouteSpec,
    RouteNextHop,
    RouteList,
    Prefix,
    PrefixMeta,
    PrefixSpec,
    PrefixList,
    LoadBalancerPrefix,
    VirtualIP,
    VirtualIPMeta,
    VirtualIPSpec,
    LoadBalancer,
    LoadBalancerMeta,
    LoadBalancerSpec,
    LBPort,
    LoadBalancerTarget,
    LoadBalancerTargetMeta,
    LoadBalancerTargetSpec,
    LoadBalancerTargetList,
    Nat,
    NatMeta,
    NatSpec,
    NatList,
    NeighborNat,
    NeighborNatMeta,
    NeighborNatSpec,
    FirewallRule,
    FirewallRuleMeta,
    FirewallRuleSpec,
    FirewallRuleList,
    ProtocolFilter,
    IcmpFilter,
    TcpFilter,
    UdpFilter,
    Initialized,
    Vni,
    VniMeta,
    Version,
    VersionMeta,
    VersionSpec,
)

__all__ = [
    # Version
    "__version__",
    # Client
    "DPServiceClient",
    "Config",
    "config",
    # Errors
    "DPServiceError",
    "TransportError",
    "ServerError",
    "ConversionError",
    "ParseError",
    "InvalidEnumError",
    "ResponseMismatchError",
    "is_status_error_code",
    "ignore_status_error_code",
    "parse_lb_port",
    # Types
    "Kind",
    "Status",
    "Interface",
    "InterfaceMeta",
    "InterfaceSpec",
    "InterfaceList",
    "VirtualFunction",
    "PXE",
    "Route",
    "RouteMeta",
    "RouteSpec",
    "RouteNextHop",
    "RouteList",
    "Prefix",
    "PrefixMeta",
    "PrefixSpec",
    "PrefixList",
    "LoadBalancerPrefix",
    "VirtualIP",
    "VirtualIPMeta",
    "VirtualIPSpec",
    "LoadBalancer",
    "LoadBalancerMeta",
    "LoadBalancerSpec",
    "LBPort",
    "LoadBalancerTarget",
    "LoadBalancerTargetMeta",
    "LoadBalancerTargetSpec",
    "LoadBalancerTargetList",
    "Nat",
    "NatMeta",
    "NatSpec",
    "NatList",
    "NeighborNat",
    "NeighborNatMeta",
    "NeighborNatSpec",
    "FirewallRule",
    "FirewallRuleMeta",
    "FirewallRuleSpec",
    "FirewallRuleList",
    "ProtocolFilter",
    "IcmpFilter",
    "TcpFilter",
    "UdpFilter",
    "Initialized",
    "Vni",
    "VniMeta",
    "Version",
    "VersionMeta",
    "VersionSpec",
]
