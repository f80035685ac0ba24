"""
Declarative description of the dpservice gRPC wire schema.

The tables below are this package's own schema for the
``dpdkonmetal.DPDKonmetal`` service. Message and method names follow the
daemon's API, but field numbers are not taken from its ``dpdk.proto``, so
wire compatibility with a real dpservice build is not established. They are
turned into real protobuf descriptors by :mod:`dpservice.proto.dpdk_pb2`
and into a client stub by :mod:`dpservice.proto.dpdk_pb2_grpc`.

Field numbers are assigned by position (first field is 1). A field type is
either a scalar name, an enum or message name from this module, optionally
prefixed with ``repeated``. A third tuple element names the oneof group the
field belongs to.
"""

from enum import IntEnum

PACKAGE = "dpdkonmetal"
SERVICE = "DPDKonmetal"
FILE_NAME = "dpservice/proto/dpdk.proto"


# ============================================================================
# Enums
# ============================================================================

class IpVersion(IntEnum):
    IPV4 = 0
    IPV6 = 1


class Protocol(IntEnum):
    PROTOCOL_UNDEFINED = 0
    ICMP = 1
    TCP = 6
    UDP = 17
    ICMPV6 = 58
    SCTP = 132


class TrafficDirection(IntEnum):
    INGRESS = 0
    EGRESS = 1


class FirewallAction(IntEnum):
    DROP = 0
    ACCEPT = 1


class NatInfoType(IntEnum):
    NAT_INFO_ANY = 0
    NAT_INFO_LOCAL = 1
    NAT_INFO_NEIGHBOR = 2


class VniType(IntEnum):
    VNI_IPV4 = 0
    VNI_IPV6 = 1
    VNI_BOTH = 2


class InterfaceType(IntEnum):
    VIRTUAL_INTERFACE = 0


ENUMS = (IpVersion, Protocol, TrafficDirection, FirewallAction, NatInfoType, VniType, InterfaceType)


# ============================================================================
# Messages
# ============================================================================

_PORT_RANGE = [
    ("src_port_lower", "int32"),
    ("src_port_upper", "int32"),
    ("dst_port_lower", "int32"),
    ("dst_port_upper", "int32"),
]

MESSAGES = {
    # Shared types
    "Status": [("code", "int32"), ("message", "string")],
    "IpAddress": [("ipver", "IpVersion"), ("address", "bytes")],
    "Prefix": [("ip", "IpAddress"), ("length", "uint32"), ("underlay_route", "bytes")],
    "PxeConfig": [("next_server", "string"), ("boot_filename", "string")],
    "IpConfig": [("ipver", "IpVersion"), ("primary_address", "bytes"), ("pxe_config", "PxeConfig")],
    "VirtualFunction": [
        ("name", "string"),
        ("domain", "uint32"),
        ("bus", "uint32"),
        ("slot", "uint32"),
        ("function", "uint32"),
    ],
    "Interface": [
        ("id", "bytes"),
        ("vni", "uint32"),
        ("primary_ipv4", "bytes"),
        ("primary_ipv6", "bytes"),
        ("underlay_route", "bytes"),
        ("vf", "VirtualFunction"),
        ("pci_name", "string"),
    ],
    "Route": [
        ("ipver", "IpVersion"),
        ("prefix", "Prefix"),
        ("nexthop_vni", "uint32"),
        ("nexthop_address", "IpAddress"),
        ("weight", "uint32"),
    ],
    "LbPort": [("port", "uint32"), ("protocol", "Protocol")],
    "IcmpFilter": [("icmp_type", "int32"), ("icmp_code", "int32")],
    "TcpFilter": list(_PORT_RANGE),
    "UdpFilter": list(_PORT_RANGE),
    "ProtocolFilter": [
        ("icmp", "IcmpFilter", "filter"),
        ("tcp", "TcpFilter", "filter"),
        ("udp", "UdpFilter", "filter"),
    ],
    "FirewallRule": [
        ("id", "bytes"),
        ("direction", "TrafficDirection"),
        ("action", "FirewallAction"),
        ("priority", "uint32"),
        ("ipver", "IpVersion"),
        ("source_prefix", "Prefix"),
        ("destination_prefix", "Prefix"),
        ("protocol_filter", "ProtocolFilter"),
    ],
    "NatInfoEntry": [
        ("address", "IpAddress"),
        ("min_port", "uint32"),
        ("max_port", "uint32"),
        ("underlay_route", "bytes"),
    ],

    # Initialization and version
    "InitializeRequest": [],
    "InitializeResponse": [("status", "Status"), ("uuid", "string")],
    "CheckInitializedRequest": [],
    "CheckInitializedResponse": [("status", "Status"), ("uuid", "string")],
    "GetVersionRequest": [
        ("client_protocol", "string"),
        ("client_name", "string"),
        ("client_version", "string"),
    ],
    "GetVersionResponse": [
        ("status", "Status"),
        ("service_protocol", "string"),
        ("service_version", "string"),
    ],

    # Interfaces
    "CreateInterfaceRequest": [
        ("interface_type", "InterfaceType"),
        ("interface_id", "bytes"),
        ("vni", "uint32"),
        ("ipv4_config", "IpConfig"),
        ("ipv6_config", "IpConfig"),
        ("device_name", "string"),
    ],
    "CreateInterfaceResponse": [
        ("status", "Status"),
        ("underlay_route", "bytes"),
        ("vf", "VirtualFunction"),
    ],
    "GetInterfaceRequest": [("interface_id", "bytes")],
    "GetInterfaceResponse": [("status", "Status"), ("interface", "Interface")],
    "ListInterfacesRequest": [],
    "ListInterfacesResponse": [("status", "Status"), ("interfaces", "repeated Interface")],
    "DeleteInterfaceRequest": [("interface_id", "bytes")],
    "DeleteInterfaceResponse": [("status", "Status")],

    # Prefixes
    "CreatePrefixRequest": [("interface_id", "bytes"), ("prefix", "Prefix")],
    "CreatePrefixResponse": [("status", "Status"), ("underlay_route", "bytes")],
    "ListPrefixesRequest": [("interface_id", "bytes")],
    "ListPrefixesResponse": [("status", "Status"), ("prefixes", "repeated Prefix")],
    "DeletePrefixRequest": [("interface_id", "bytes"), ("prefix", "Prefix")],
    "DeletePrefixResponse": [("status", "Status")],

    # Load balancer prefixes
    "CreateLoadBalancerPrefixRequest": [("interface_id", "bytes"), ("prefix", "Prefix")],
    "CreateLoadBalancerPrefixResponse": [("status", "Status"), ("underlay_route", "bytes")],
    "ListLoadBalancerPrefixesRequest": [("interface_id", "bytes")],
    "ListLoadBalancerPrefixesResponse": [("status", "Status"), ("prefixes", "repeated Prefix")],
    "DeleteLoadBalancerPrefixRequest": [("interface_id", "bytes"), ("prefix", "Prefix")],
    "DeleteLoadBalancerPrefixResponse": [("status", "Status")],

    # Virtual IPs
    "CreateVipRequest": [("interface_id", "bytes"), ("vip_ip", "IpAddress")],
    "CreateVipResponse": [("status", "Status"), ("underlay_route", "bytes")],
    "GetVipRequest": [("interface_id", "bytes")],
    "GetVipResponse": [("status", "Status"), ("vip_ip", "IpAddress"), ("underlay_route", "bytes")],
    "DeleteVipRequest": [("interface_id", "bytes")],
    "DeleteVipResponse": [("status", "Status")],

    # Load balancers
    "CreateLoadBalancerRequest": [
        ("loadbalancer_id", "bytes"),
        ("vni", "uint32"),
        ("loadbalanced_ip", "IpAddress"),
        ("loadbalanced_ports", "repeated LbPort"),
    ],
    "CreateLoadBalancerResponse": [("status", "Status"), ("underlay_route", "bytes")],
    "GetLoadBalancerRequest": [("loadbalancer_id", "bytes")],
    "GetLoadBalancerResponse": [
        ("status", "Status"),
        ("vni", "uint32"),
        ("loadbalanced_ip", "IpAddress"),
        ("loadbalanced_ports", "repeated LbPort"),
        ("underlay_route", "bytes"),
    ],
    "DeleteLoadBalancerRequest": [("loadbalancer_id", "bytes")],
    "DeleteLoadBalancerResponse": [("status", "Status")],

    # Load balancer targets
    "CreateLoadBalancerTargetRequest": [("loadbalancer_id", "bytes"), ("target_ip", "IpAddress")],
    "CreateLoadBalancerTargetResponse": [("status", "Status")],
    "ListLoadBalancerTargetsRequest": [("loadbalancer_id", "bytes")],
    "ListLoadBalancerTargetsResponse": [("status", "Status"), ("target_ips", "repeated IpAddress")],
    "DeleteLoadBalancerTargetRequest": [("loadbalancer_id", "bytes"), ("target_ip", "IpAddress")],
    "DeleteLoadBalancerTargetResponse": [("status", "Status")],

    # Routes
    "CreateRouteRequest": [("vni", "uint32"), ("route", "Route")],
    "CreateRouteResponse": [("status", "Status")],
    "ListRoutesRequest": [("vni", "uint32")],
    "ListRoutesResponse": [("status", "Status"), ("routes", "repeated Route")],
    "DeleteRouteRequest": [("vni", "uint32"), ("route", "Route")],
    "DeleteRouteResponse": [("status", "Status")],

    # NAT
    "CreateNatRequest": [
        ("interface_id", "bytes"),
        ("nat_ip", "IpAddress"),
        ("min_port", "uint32"),
        ("max_port", "uint32"),
    ],
    "CreateNatResponse": [("status", "Status"), ("underlay_route", "bytes")],
    "GetNatRequest": [("interface_id", "bytes")],
    "GetNatResponse": [
        ("status", "Status"),
        ("nat_ip", "IpAddress"),
        ("min_port", "uint32"),
        ("max_port", "uint32"),
        ("underlay_route", "bytes"),
        ("vni", "uint32"),
    ],
    "DeleteNatRequest": [("interface_id", "bytes")],
    "DeleteNatResponse": [("status", "Status")],

    # Neighbor NAT and NAT info
    "CreateNeighborNatRequest": [
        ("nat_ip", "IpAddress"),
        ("vni", "uint32"),
        ("min_port", "uint32"),
        ("max_port", "uint32"),
        ("underlay_route", "bytes"),
    ],
    "CreateNeighborNatResponse": [("status", "Status")],
    "DeleteNeighborNatRequest": [
        ("nat_ip", "IpAddress"),
        ("vni", "uint32"),
        ("min_port", "uint32"),
        ("max_port", "uint32"),
    ],
    "DeleteNeighborNatResponse": [("status", "Status")],
    "GetNatInfoRequest": [("nat_ip", "IpAddress"), ("nat_info_type", "NatInfoType")],
    "GetNatInfoResponse": [
        ("status", "Status"),
        ("nat_ip", "IpAddress"),
        ("nat_info_type", "NatInfoType"),
        ("nat_info_entries", "repeated NatInfoEntry"),
    ],

    # Firewall rules
    "CreateFirewallRuleRequest": [("interface_id", "bytes"), ("rule", "FirewallRule")],
    "CreateFirewallRuleResponse": [("status", "Status"), ("rule_id", "bytes")],
    "GetFirewallRuleRequest": [("interface_id", "bytes"), ("rule_id", "bytes")],
    "GetFirewallRuleResponse": [("status", "Status"), ("rule", "FirewallRule")],
    "ListFirewallRulesRequest": [("interface_id", "bytes")],
    "ListFirewallRulesResponse": [("status", "Status"), ("rules", "repeated FirewallRule")],
    "DeleteFirewallRuleRequest": [("interface_id", "bytes"), ("rule_id", "bytes")],
    "DeleteFirewallRuleResponse": [("status", "Status")],

    # VNI
    "CheckVniInUseRequest": [("vni", "uint32"), ("type", "VniType")],
    "CheckVniInUseResponse": [("status", "Status"), ("in_use", "bool")],
    "ResetVniRequest": [("vni", "uint32"), ("type", "VniType")],
    "ResetVniResponse": [("status", "Status")],
}


# ============================================================================
# Service
# ============================================================================

# Every method takes ``<Method>Request`` and returns ``<Method>Response``.
METHODS = (
    "Initialize",
    "CheckInitialized",
    "GetVersion",
    "CreateInterface",
    "GetInterface",
    "ListInterfaces",
    "DeleteInterface",
    "CreatePrefix",
    "ListPrefixes",
    "DeletePrefix",
    "CreateLoadBalancerPrefix",
    "ListLoadBalancerPrefixes",
    "DeleteLoadBalancerPrefix",
    "CreateVip",
    "GetVip",
    "DeleteVip",
    "CreateLoadBalancer",
    "GetLoadBalancer",
    "DeleteLoadBalancer",
    "CreateLoadBalancerTarget",
    "ListLoadBalancerTargets",
    "DeleteLoadBalancerTarget",
    "CreateRoute",
    "ListRoutes",
    "DeleteRoute",
    "CreateNat",
    "GetNat",
    "DeleteNat",
    "CreateNeighborNat",
    "DeleteNeighborNat",
    "GetNatInfo",
    "CreateFirewallRule",
    "GetFirewallRule",
    "ListFirewallRules",
    "DeleteFirewallRule",
    "CheckVniInUse",
    "ResetVni",
)
