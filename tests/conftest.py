"""
Shared fixtures: an in-process fake dpservice and clients bound to it.

The fake keeps interfaces, routes, firewall rules and NAT-info entries in
memory and answers with the same embedded status codes dpservice uses
(ALREADY_EXISTS on duplicate create, NOT_FOUND on unknown identity). Any
method it does not override answers UNIMPLEMENTED at the gRPC level.
"""

import uuid
from concurrent import futures
from unittest.mock import MagicMock, Mock

import grpc
import pytest

from dpservice import DPServiceClient, errors
from dpservice.proto import DPDKonmetalServicer, add_DPDKonmetalServicer_to_server, dpdk_pb2

UNDERLAY_ROUTE = b"fc00:1::8000:0:1"


def _status(code: int = 0, message: str = "") -> dpdk_pb2.Status:
    return dpdk_pb2.Status(code=code, message=message)


class FakeRpcError(grpc.RpcError):
    """grpc.RpcError carrying a status code, as raised by a failed call."""

    def __init__(self, code: grpc.StatusCode, details: str = ""):
        super().__init__(details)
        self._code = code
        self._details = details

    def code(self):
        return self._code

    def details(self):
        return self._details


class FakeDPService(DPDKonmetalServicer):
    """Minimal stateful dpservice."""

    def __init__(self):
        self.uuid = str(uuid.uuid4())
        self.interfaces: dict[bytes, dpdk_pb2.Interface] = {}
        self.routes: dict[int, list[dpdk_pb2.Route]] = {}
        self.firewall_rules: dict[bytes, dict[bytes, dpdk_pb2.FirewallRule]] = {}
        # nat_info_type -> entries returned for any VIP
        self.nat_info: dict[int, list[dpdk_pb2.NatInfoEntry]] = {}
        self.calls: list[str] = []

    def Initialize(self, request, context):
        self.calls.append("Initialize")
        return dpdk_pb2.InitializeResponse(status=_status(), uuid=self.uuid)

    def CheckInitialized(self, request, context):
        self.calls.append("CheckInitialized")
        return dpdk_pb2.CheckInitializedResponse(status=_status(), uuid=self.uuid)

    def GetVersion(self, request, context):
        self.calls.append("GetVersion")
        return dpdk_pb2.GetVersionResponse(
            status=_status(),
            service_protocol=request.client_protocol,
            service_version="fake-1.0",
        )

    # ------------------------------------------------------------------
    # Interfaces
    # ------------------------------------------------------------------

    def CreateInterface(self, request, context):
        self.calls.append("CreateInterface")
        if request.interface_id in self.interfaces:
            return dpdk_pb2.CreateInterfaceResponse(
                status=_status(errors.ALREADY_EXISTS, "Already exists")
            )
        vf = dpdk_pb2.VirtualFunction(name=request.device_name, domain=0, bus=3, slot=0, function=1)
        self.interfaces[request.interface_id] = dpdk_pb2.Interface(
            id=request.interface_id,
            vni=request.vni,
            primary_ipv4=request.ipv4_config.primary_address,
            primary_ipv6=request.ipv6_config.primary_address,
            underlay_route=UNDERLAY_ROUTE,
            vf=vf,
            pci_name=request.device_name,
        )
        return dpdk_pb2.CreateInterfaceResponse(status=_status(), underlay_route=UNDERLAY_ROUTE, vf=vf)

    def GetInterface(self, request, context):
        self.calls.append("GetInterface")
        iface = self.interfaces.get(request.interface_id)
        if iface is None:
            return dpdk_pb2.GetInterfaceResponse(status=_status(errors.NOT_FOUND, "Not found"))
        return dpdk_pb2.GetInterfaceResponse(status=_status(), interface=iface)

    def ListInterfaces(self, request, context):
        self.calls.append("ListInterfaces")
        return dpdk_pb2.ListInterfacesResponse(status=_status(), interfaces=list(self.interfaces.values()))

    def DeleteInterface(self, request, context):
        self.calls.append("DeleteInterface")
        if self.interfaces.pop(request.interface_id, None) is None:
            return dpdk_pb2.DeleteInterfaceResponse(status=_status(errors.NOT_FOUND, "Not found"))
        self.firewall_rules.pop(request.interface_id, None)
        return dpdk_pb2.DeleteInterfaceResponse(status=_status())

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    def CreateRoute(self, request, context):
        self.calls.append("CreateRoute")
        routes = self.routes.setdefault(request.vni, [])
        for route in routes:
            if route.prefix.ip.address == request.route.prefix.ip.address \
                    and route.prefix.length == request.route.prefix.length:
                return dpdk_pb2.CreateRouteResponse(status=_status(errors.ROUTE_EXISTS, "Route exists"))
        routes.append(request.route)
        return dpdk_pb2.CreateRouteResponse(status=_status())

    def ListRoutes(self, request, context):
        self.calls.append("ListRoutes")
        return dpdk_pb2.ListRoutesResponse(status=_status(), routes=self.routes.get(request.vni, []))

    # ------------------------------------------------------------------
    # Firewall
    # ------------------------------------------------------------------

    def CreateFirewallRule(self, request, context):
        self.calls.append("CreateFirewallRule")
        if request.interface_id not in self.interfaces:
            return dpdk_pb2.CreateFirewallRuleResponse(status=_status(errors.NO_VM, "No such interface"))
        rules = self.firewall_rules.setdefault(request.interface_id, {})
        if request.rule.id in rules:
            return dpdk_pb2.CreateFirewallRuleResponse(status=_status(errors.ALREADY_EXISTS, "Already exists"))
        rules[request.rule.id] = request.rule
        return dpdk_pb2.CreateFirewallRuleResponse(status=_status(), rule_id=request.rule.id)

    def GetFirewallRule(self, request, context):
        self.calls.append("GetFirewallRule")
        rule = self.firewall_rules.get(request.interface_id, {}).get(request.rule_id)
        if rule is None:
            return dpdk_pb2.GetFirewallRuleResponse(status=_status(errors.NOT_FOUND, "Not found"))
        return dpdk_pb2.GetFirewallRuleResponse(status=_status(), rule=rule)

    def ListFirewallRules(self, request, context):
        self.calls.append("ListFirewallRules")
        rules = self.firewall_rules.get(request.interface_id, {})
        return dpdk_pb2.ListFirewallRulesResponse(status=_status(), rules=list(rules.values()))

    # ------------------------------------------------------------------
    # NAT info / VNI
    # ------------------------------------------------------------------

    def GetNatInfo(self, request, context):
        self.calls.append(f"GetNatInfo:{request.nat_info_type}")
        return dpdk_pb2.GetNatInfoResponse(
            status=_status(),
            nat_ip=request.nat_ip,
            nat_info_type=request.nat_info_type,
            nat_info_entries=self.nat_info.get(request.nat_info_type, []),
        )

    def CheckVniInUse(self, request, context):
        self.calls.append("CheckVniInUse")
        in_use = any(iface.vni == request.vni for iface in self.interfaces.values())
        return dpdk_pb2.CheckVniInUseResponse(status=_status(), in_use=in_use)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def fake_dpservice():
    """Start a FakeDPService on a free local port; yields (servicer, address)."""
    servicer = FakeDPService()
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=4))
    add_DPDKonmetalServicer_to_server(servicer, server)
    port = server.add_insecure_port("localhost:0")
    server.start()
    yield servicer, f"localhost:{port}"
    server.stop(None)


@pytest.fixture
def client(fake_dpservice):
    """DPServiceClient connected to the fake dpservice."""
    _, address = fake_dpservice
    client = DPServiceClient(url=address, timeout=5.0, insecure=True)
    yield client
    client.close()


@pytest.fixture
def mock_client():
    """DPServiceClient whose stub is a Mock; no channel is opened."""
    client = DPServiceClient(channel=MagicMock())
    client.stub = Mock()
    return client


@pytest.fixture
def rpc_error():
    """Factory for grpc.RpcError instances carrying a status code."""
    return FakeRpcError
