"""
Tests for wire <-> domain conversion.

Covers address/prefix decoding rules, interface and route encoding, NAT-info
entry inference and firewall rule encoding/decoding.
"""

import ipaddress

import pytest

from dpservice import (
    PXE,
    FirewallRule,
    FirewallRuleMeta,
    FirewallRuleSpec,
    IcmpFilter,
    Interface,
    InterfaceMeta,
    InterfaceSpec,
    InvalidEnumError,
    LoadBalancerPrefix,
    ParseError,
    ProtocolFilter,
    RouteNextHop,
    TcpFilter,
)
from dpservice import conversion
from dpservice.proto import FirewallAction, InterfaceType, IpVersion, TrafficDirection, dpdk_pb2


# ============================================================================
# Addresses and prefixes
# ============================================================================

class TestAddresses:

    def test_empty_address_is_none(self):
        assert conversion.decode_address(b"", "underlay route") is None
        assert conversion.decode_address("", "underlay route") is None

    def test_decode_ipv4_and_ipv6(self):
        assert conversion.decode_address(b"10.200.1.4", "ip") == ipaddress.ip_address("10.200.1.4")
        assert conversion.decode_address(b"2000:200:1::4", "ip") == ipaddress.ip_address("2000:200:1::4")

    def test_decode_text_is_strict(self):
        assert conversion.decode_text(b"vm4", "interface id") == "vm4"

        with pytest.raises(ParseError) as exc_info:
            conversion.decode_text(b"vm\xff4", "interface id")

        assert exc_info.value.field == "interface id"

    def test_invalid_address_names_field(self):
        with pytest.raises(ParseError) as exc_info:
            conversion.decode_address(b"10.200.1", "underlay route")

        assert exc_info.value.field == "underlay route"
        assert exc_info.value.value == "10.200.1"

    def test_decode_prefix_masks_host_bits(self):
        assert conversion.decode_prefix(b"10.1.2.3", 24, "prefix") == ipaddress.ip_network("10.1.2.0/24")

    def test_decode_prefix_empty(self):
        assert conversion.decode_prefix(b"", 24, "prefix") is None

    def test_decode_prefix_bad_length(self):
        with pytest.raises(ParseError) as exc_info:
            conversion.decode_prefix(b"10.1.2.0", 33, "prefix")

        assert exc_info.value.field == "prefix"

    def test_address_to_proto_sets_version(self):
        message = conversion.address_to_proto(ipaddress.ip_address("fc00::1"))

        assert message.ipver == IpVersion.IPV6
        assert message.address == b"fc00::1"

    def test_address_to_proto_none(self):
        message = conversion.address_to_proto(None)

        assert message.ipver == IpVersion.IPV4
        assert message.address == b""

    def test_prefix_round_trip(self):
        network = ipaddress.ip_network("2001:db8::/64")

        message = conversion.prefix_to_proto(network)

        assert message.ip.ipver == IpVersion.IPV6
        assert conversion.prefix_from_proto_message(message, "prefix") == network

    def test_listed_prefix_model(self):
        message = dpdk_pb2.Prefix(
            ip=dpdk_pb2.IpAddress(address=b"10.1.0.0"), length=16, underlay_route=b"fc00::9"
        )

        prefix = conversion.prefix_from_proto("vm4", message, LoadBalancerPrefix)

        assert isinstance(prefix, LoadBalancerPrefix)
        assert prefix.metadata.interface_id == "vm4"
        assert prefix.spec.underlay_route == ipaddress.ip_address("fc00::9")


# ============================================================================
# Interface
# ============================================================================

class TestInterfaceConversion:

    def test_create_request_ipv4_only(self):
        iface = Interface(
            metadata=InterfaceMeta(id="vm4"),
            spec=InterfaceSpec(vni=200, device="net_tap5", ips=["10.200.1.4"]),
        )

        request = conversion.interface_to_create_request(iface)

        assert request.interface_type == InterfaceType.VIRTUAL_INTERFACE
        assert request.ipv4_config.primary_address == b"10.200.1.4"
        assert not request.HasField("ipv6_config")
        assert not request.ipv4_config.HasField("pxe_config")

    @pytest.mark.parametrize("pxe", [
        PXE(server="10.0.0.1"),
        PXE(file_name="boot.ipxe"),
    ])
    def test_partial_pxe_is_not_sent(self, pxe):
        iface = Interface(
            metadata=InterfaceMeta(id="vm4"),
            spec=InterfaceSpec(vni=200, device="net_tap5", ips=["10.200.1.4"], pxe=pxe),
        )

        request = conversion.interface_to_create_request(iface)

        assert not request.ipv4_config.HasField("pxe_config")

    def test_interface_from_proto(self):
        message = dpdk_pb2.Interface(
            id=b"vm4",
            vni=200,
            primary_ipv4=b"10.200.1.4",
            primary_ipv6=b"",
            underlay_route=b"fc00:1::1",
            pci_name="net_tap5",
            vf=dpdk_pb2.VirtualFunction(name="net_tap5", slot=2),
        )

        iface = conversion.interface_from_proto(message)

        assert iface.name == "vm4"
        assert iface.spec.ips == [ipaddress.ip_address("10.200.1.4")]
        assert iface.spec.ipv6 is None
        assert iface.spec.device == "net_tap5"
        assert iface.spec.virtual_function.slot == 2

    def test_interface_from_proto_without_vf(self):
        iface = conversion.interface_from_proto(dpdk_pb2.Interface(id=b"vm5"))

        assert iface.spec.virtual_function is None
        assert iface.spec.underlay_route is None

    def test_interface_from_proto_invalid_utf8_id(self):
        with pytest.raises(ParseError) as exc_info:
            conversion.interface_from_proto(dpdk_pb2.Interface(id=b"vm\xff4"))

        assert exc_info.value.field == "interface id"
        assert exc_info.value.value == b"vm\xff4"


# ============================================================================
# Route / NAT
# ============================================================================

class TestRouteAndNat:

    def test_route_without_next_hop_uses_prefix_version(self):
        route = conversion.route_to_proto(ipaddress.ip_network("2001:db8::/64"), None)

        assert route.weight == 100
        assert route.ipver == IpVersion.IPV6
        assert not route.HasField("nexthop_address")

    def test_route_from_proto(self):
        message = conversion.route_to_proto(
            ipaddress.ip_network("10.100.3.0/24"),
            RouteNextHop(vni=0, ip="fc00:2::64:0:1"),
        )

        route = conversion.route_from_proto(100, message)

        assert route.metadata.vni == 100
        assert route.spec.prefix == ipaddress.ip_network("10.100.3.0/24")
        assert route.spec.next_hop.ip == ipaddress.ip_address("fc00:2::64:0:1")

    def test_nat_info_local_entry(self):
        entry = dpdk_pb2.NatInfoEntry(min_port=100, max_port=200, underlay_route=b"fc00::1")

        nat = conversion.nat_info_entry_to_nat(entry, ipaddress.ip_address("10.20.30.40"))

        assert nat.spec.nat_ip == ipaddress.ip_address("10.20.30.40")
        assert nat.spec.underlay_route == ipaddress.ip_address("fc00::1")
        assert str(nat) == "10.20.30.40 <100, 200>"

    def test_nat_info_neighbor_entry(self):
        entry = dpdk_pb2.NatInfoEntry(min_port=100, max_port=200)

        nat = conversion.nat_info_entry_to_nat(entry, ipaddress.ip_address("10.20.30.40"))

        assert nat.spec.nat_ip is None
        assert nat.spec.underlay_route is None
        assert (nat.spec.min_port, nat.spec.max_port) == (100, 200)


# ============================================================================
# Firewall rules
# ============================================================================

class TestFirewallConversion:

    @pytest.fixture
    def rule(self):
        return FirewallRule(
            metadata=FirewallRuleMeta(interface_id="vm4"),
            spec=FirewallRuleSpec(
                rule_id="fr1",
                traffic_direction="EGRESS",
                firewall_action="deny",
                priority=10,
                ip_version="0",
                source_prefix="10.0.0.0/8",
                destination_prefix="0.0.0.0/0",
                protocol_filter=ProtocolFilter(tcp=TcpFilter(dst_port_lower=443, dst_port_upper=443)),
            ),
        )

    def test_to_proto_canonicalizes_in_place(self, rule):
        message = conversion.firewall_rule_to_proto(rule)

        assert message.id == b"fr1"
        assert message.direction == TrafficDirection.EGRESS
        assert message.action == FirewallAction.DROP
        assert message.source_prefix.ip.address == b"10.0.0.0"
        assert message.source_prefix.length == 8
        assert message.protocol_filter.WhichOneof("filter") == "tcp"
        assert message.protocol_filter.tcp.dst_port_lower == 443
        assert rule.spec.traffic_direction == "Egress"
        assert rule.spec.firewall_action == "Drop"
        assert rule.spec.ip_version == "IPv4"

    def test_invalid_token_leaves_rule_untouched(self, rule):
        rule.spec.ip_version = "ipv5"

        with pytest.raises(InvalidEnumError):
            conversion.firewall_rule_to_proto(rule)

        assert rule.spec.firewall_action == "deny"

    def test_from_proto(self, rule):
        message = conversion.firewall_rule_to_proto(rule)

        decoded = conversion.firewall_rule_from_proto("vm4", message)

        assert decoded.name == "vm4/fr1"
        assert decoded.spec.traffic_direction == "Egress"
        assert decoded.spec.firewall_action == "Drop"
        assert decoded.spec.priority == 10
        assert decoded.spec.destination_prefix == ipaddress.ip_network("0.0.0.0/0")
        assert decoded.spec.protocol_filter.tcp.dst_port_upper == 443
        assert decoded.spec.protocol_filter.udp is None

    def test_from_proto_icmp_filter(self):
        message = dpdk_pb2.FirewallRule(
            id=b"fr2",
            protocol_filter=dpdk_pb2.ProtocolFilter(icmp=dpdk_pb2.IcmpFilter(icmp_type=8, icmp_code=-1)),
        )

        decoded = conversion.firewall_rule_from_proto("vm4", message)

        assert decoded.spec.protocol_filter.icmp == IcmpFilter(icmp_type=8, icmp_code=-1)
        assert decoded.spec.source_prefix is None

    def test_from_proto_unknown_action_code(self):
        message = dpdk_pb2.FirewallRule(id=b"fr3", action=7)

        with pytest.raises(InvalidEnumError) as exc_info:
            conversion.firewall_rule_from_proto("vm4", message)

        assert exc_info.value.field == "firewall action"

    def test_from_proto_invalid_utf8_rule_id(self):
        with pytest.raises(ParseError) as exc_info:
            conversion.firewall_rule_from_proto("vm4", dpdk_pb2.FirewallRule(id=b"fr\xfe"))

        assert exc_info.value.field == "rule id"
        assert exc_info.value.value == b"fr\xfe"
