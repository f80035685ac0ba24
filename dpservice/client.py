"""
dpservice gRPC client.

Provides a typed interface to the dpservice dataplane: one method per
domain verb, each issuing a single RPC (two for an "any" NAT-info query).

Every method either returns the converted domain object or raises:

- TransportError: the RPC did not complete; ``err.obj`` holds kind and
  identity only.
- ServerError: dpservice answered with a non-zero status; ``err.code`` is
  the cause and ``err.obj.status`` carries the same status.
- ConversionError: a request or response value could not be translated.
"""

import ipaddress
import logging
from typing import Optional, Union

import grpc

from . import canonicalize
from .config import config
from .conversion import (
    IPAddress,
    IPNetwork,
    address_to_proto,
    decode_address,
    decode_text,
    firewall_rule_from_proto,
    firewall_rule_to_proto,
    interface_from_proto,
    interface_to_create_request,
    load_balancer_from_proto,
    load_balancer_target_from_proto,
    load_balancer_to_create_request,
    nat_from_proto,
    nat_info_entry_to_nat,
    neighbor_nat_to_create_request,
    prefix_from_proto,
    prefix_to_proto,
    route_from_proto,
    route_to_proto,
    status_from_proto,
    virtual_function_from_proto,
    virtual_ip_from_proto,
)
from .errors import ResponseMismatchError, ServerError, TransportError
from .proto import DPDKonmetalStub, dpdk_pb2
from .proto.schema import NatInfoType
from .types import (
    FirewallRule,
    FirewallRuleList,
    FirewallRuleMeta,
    FirewallRuleSpec,
    Initialized,
    Interface,
    InterfaceList,
    InterfaceMeta,
    InterfaceSpec,
    Kind,
    LoadBalancer,
    LoadBalancerMeta,
    LoadBalancerPrefix,
    LoadBalancerTarget,
    LoadBalancerTargetList,
    LoadBalancerTargetListMeta,
    LoadBalancerTargetMeta,
    LoadBalancerTargetSpec,
    Nat,
    NatList,
    NatListMeta,
    NatMeta,
    NeighborNat,
    Prefix,
    PrefixList,
    PrefixMeta,
    PrefixSpec,
    Route,
    RouteList,
    RouteMeta,
    RouteNextHop,
    RouteSpec,
    Version,
    VersionMeta,
    VersionSpec,
    VirtualIP,
    VirtualIPMeta,
    VirtualIPSpec,
    Vni,
    VniMeta,
)

logger = logging.getLogger(__name__)

AddressLike = Union[str, IPAddress]
NetworkLike = Union[str, IPNetwork]


class DPServiceClient:
    """
    gRPC client for dpservice.

    Holds a ``DPDKonmetalStub`` over one channel and translates between the
    domain model and wire messages. Holds no other state; every call is a
    fresh view of dpservice.

    Usage:
        with DPServiceClient("localhost:1337") as client:
            iface = client.create_interface(Interface(
                metadata=InterfaceMeta(id="vm4"),
                spec=InterfaceSpec(vni=200, device="net_tap5", ips=["10.200.1.4"]),
            ))
            print(iface.spec.underlay_route)

    Configuration:
        - url: dpservice gRPC address (default: DPSERVICE_ADDRESS or "localhost:1337")
        - timeout: per-call deadline in seconds (default: DPSERVICE_TIMEOUT, None = no deadline)
        - insecure: plaintext channel (default: DPSERVICE_INSECURE, true)
        - channel: an existing grpc.Channel to use instead of dialing ``url``
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        insecure: Optional[bool] = None,
        channel: Optional[grpc.Channel] = None,
    ):
        self.url = url or config.ADDRESS
        self.timeout = timeout if timeout is not None else config.TIMEOUT

        if channel is not None:
            self.channel = channel
        elif config.INSECURE if insecure is None else insecure:
            self.channel = grpc.insecure_channel(self.url)
        else:
            credentials = grpc.ssl_channel_credentials()
            self.channel = grpc.secure_channel(self.url, credentials)

        self.stub = DPDKonmetalStub(self.channel)
        logger.info(f"DPServiceClient initialized: dpservice={self.url}")

    # ------------------------------------------------------------------
    # Call plumbing
    # ------------------------------------------------------------------

    def _call(self, method: str, request, obj, timeout: Optional[float]):
        """Issue one RPC; a transport failure becomes TransportError carrying ``obj``."""
        deadline = timeout if timeout is not None else self.timeout
        logger.debug("dpservice %s (timeout=%s)", method, deadline)
        try:
            return getattr(self.stub, method)(request, timeout=deadline)
        except grpc.RpcError as e:
            status_code = e.code()
            raise TransportError(
                f"{method} failed [{status_code}]: {e.details()}",
                status_code,
                obj=obj,
                rpc_error=e,
            ) from e

    @staticmethod
    def _raise_for_status(status: dpdk_pb2.Status, obj) -> None:
        """Copy ``status`` onto ``obj``; raise ServerError when its code is non-zero."""
        obj.status = status_from_proto(status)
        if status.code != 0:
            raise ServerError(status.code, status.message, obj)

    # ------------------------------------------------------------------
    # Initialization / version
    # ------------------------------------------------------------------

    def initialize(self, timeout: Optional[float] = None) -> Initialized:
        obj = Initialized()
        res = self._call("Initialize", dpdk_pb2.InitializeRequest(), obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.spec.uuid = res.uuid
        return obj

    def check_initialized(self, timeout: Optional[float] = None) -> Initialized:
        """Return the UUID of the running dpservice if it has been initialized."""
        obj = Initialized()
        res = self._call("CheckInitialized", dpdk_pb2.CheckInitializedRequest(), obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.spec.uuid = res.uuid
        return obj

    def get_version(self, version: Optional[Version] = None, timeout: Optional[float] = None) -> Version:
        """
        Exchange client and service versions.

        Args:
            version: client identity to announce (default: from Config)

        Returns:
            Version with the client metadata echoed and the service
            protocol/version in ``spec``
        """
        if version is None:
            version = Version(metadata=VersionMeta(
                client_protocol=config.CLIENT_PROTOCOL,
                client_name=config.CLIENT_NAME,
                client_version=config.VERSION,
            ))
        obj = Version(metadata=version.metadata.model_copy())
        request = dpdk_pb2.GetVersionRequest(
            client_protocol=version.metadata.client_protocol,
            client_name=version.metadata.client_name,
            client_version=version.metadata.client_version,
        )
        res = self._call("GetVersion", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.spec = VersionSpec(
            service_protocol=res.service_protocol,
            service_version=res.service_version,
        )
        return obj

    # ------------------------------------------------------------------
    # Interfaces
    # ------------------------------------------------------------------

    def create_interface(self, iface: Interface, timeout: Optional[float] = None) -> Interface:
        """
        Create a virtual interface.

        Returns the requested spec plus the underlay route and virtual
        function assigned by dpservice.
        """
        request = interface_to_create_request(iface)
        obj = Interface(metadata=iface.metadata.model_copy())
        res = self._call("CreateInterface", request, obj, timeout)
        self._raise_for_status(res.status, obj)

        obj.spec = InterfaceSpec(
            vni=iface.spec.vni,
            device=iface.spec.device,
            ips=list(iface.spec.ips),
            underlay_route=decode_address(res.underlay_route, "underlay route"),
            pxe=iface.spec.pxe.model_copy() if iface.spec.pxe else None,
        )
        if res.HasField("vf"):
            obj.spec.virtual_function = virtual_function_from_proto(res.vf)
        return obj

    def get_interface(self, interface_id: str, timeout: Optional[float] = None) -> Interface:
        obj = Interface(metadata=InterfaceMeta(id=interface_id))
        request = dpdk_pb2.GetInterfaceRequest(interface_id=interface_id.encode())
        res = self._call("GetInterface", request, obj, timeout)
        self._raise_for_status(res.status, obj)

        iface = interface_from_proto(res.interface)
        iface.status = obj.status
        return iface

    def list_interfaces(self, timeout: Optional[float] = None) -> InterfaceList:
        obj = InterfaceList()
        res = self._call("ListInterfaces", dpdk_pb2.ListInterfacesRequest(), obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.items = [interface_from_proto(iface) for iface in res.interfaces]
        return obj

    def delete_interface(self, interface_id: str, timeout: Optional[float] = None) -> Interface:
        obj = Interface(metadata=InterfaceMeta(id=interface_id))
        request = dpdk_pb2.DeleteInterfaceRequest(interface_id=interface_id.encode())
        res = self._call("DeleteInterface", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        return obj

    # ------------------------------------------------------------------
    # Prefixes and load balancer prefixes
    # ------------------------------------------------------------------

    def _create_prefix(self, method: str, prefix: Prefix, model: type, timeout: Optional[float]):
        request = getattr(dpdk_pb2, f"{method}Request")(
            interface_id=prefix.metadata.interface_id.encode(),
            prefix=prefix_to_proto(prefix.spec.prefix),
        )
        obj = model(
            metadata=prefix.metadata.model_copy(),
            spec=PrefixSpec(prefix=prefix.spec.prefix),
        )
        res = self._call(method, request, obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.spec.underlay_route = decode_address(res.underlay_route, "underlay route")
        return obj

    def _list_prefixes(self, method: str, interface_id: str, model: type, kind: Kind, timeout: Optional[float]):
        obj = PrefixList(kind=kind, metadata=PrefixMeta(interface_id=interface_id))
        request = getattr(dpdk_pb2, f"{method}Request")(interface_id=interface_id.encode())
        res = self._call(method, request, obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.items = [prefix_from_proto(interface_id, prefix, model) for prefix in res.prefixes]
        return obj

    def _delete_prefix(self, method: str, interface_id: str, prefix: NetworkLike, model: type, timeout: Optional[float]):
        network = ipaddress.ip_network(prefix, strict=False)
        obj = model(
            metadata=PrefixMeta(interface_id=interface_id),
            spec=PrefixSpec(prefix=network),
        )
        request = getattr(dpdk_pb2, f"{method}Request")(
            interface_id=interface_id.encode(),
            prefix=prefix_to_proto(network),
        )
        res = self._call(method, request, obj, timeout)
        self._raise_for_status(res.status, obj)
        return obj

    def add_prefix(self, prefix: Prefix, timeout: Optional[float] = None) -> Prefix:
        return self._create_prefix("CreatePrefix", prefix, Prefix, timeout)

    def list_prefixes(self, interface_id: str, timeout: Optional[float] = None) -> PrefixList:
        return self._list_prefixes("ListPrefixes", interface_id, Prefix, Kind.PREFIX_LIST, timeout)

    def delete_prefix(self, interface_id: str, prefix: NetworkLike, timeout: Optional[float] = None) -> Prefix:
        return self._delete_prefix("DeletePrefix", interface_id, prefix, Prefix, timeout)

    def create_load_balancer_prefix(
        self, prefix: LoadBalancerPrefix, timeout: Optional[float] = None
    ) -> LoadBalancerPrefix:
        return self._create_prefix("CreateLoadBalancerPrefix", prefix, LoadBalancerPrefix, timeout)

    def list_load_balancer_prefixes(self, interface_id: str, timeout: Optional[float] = None) -> PrefixList:
        return self._list_prefixes(
            "ListLoadBalancerPrefixes",
            interface_id,
            LoadBalancerPrefix,
            Kind.LOAD_BALANCER_PREFIX_LIST,
            timeout,
        )

    def delete_load_balancer_prefix(
        self, interface_id: str, prefix: NetworkLike, timeout: Optional[float] = None
    ) -> LoadBalancerPrefix:
        return self._delete_prefix("DeleteLoadBalancerPrefix", interface_id, prefix, LoadBalancerPrefix, timeout)

    # ------------------------------------------------------------------
    # Virtual IPs
    # ------------------------------------------------------------------

    def add_virtual_ip(self, vip: VirtualIP, timeout: Optional[float] = None) -> VirtualIP:
        request = dpdk_pb2.CreateVipRequest(
            interface_id=vip.metadata.interface_id.encode(),
            vip_ip=address_to_proto(vip.spec.ip),
        )
        obj = VirtualIP(
            metadata=vip.metadata.model_copy(),
            spec=VirtualIPSpec(ip=vip.spec.ip),
        )
        res = self._call("CreateVip", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.spec.underlay_route = decode_address(res.underlay_route, "underlay route")
        return obj

    def get_virtual_ip(self, interface_id: str, timeout: Optional[float] = None) -> VirtualIP:
        obj = VirtualIP(metadata=VirtualIPMeta(interface_id=interface_id))
        request = dpdk_pb2.GetVipRequest(interface_id=interface_id.encode())
        res = self._call("GetVip", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        return virtual_ip_from_proto(interface_id, res)

    def delete_virtual_ip(self, interface_id: str, timeout: Optional[float] = None) -> VirtualIP:
        obj = VirtualIP(metadata=VirtualIPMeta(interface_id=interface_id))
        request = dpdk_pb2.DeleteVipRequest(interface_id=interface_id.encode())
        res = self._call("DeleteVip", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        return obj

    # ------------------------------------------------------------------
    # Load balancers
    # ------------------------------------------------------------------

    def create_load_balancer(self, lb: LoadBalancer, timeout: Optional[float] = None) -> LoadBalancer:
        request = load_balancer_to_create_request(lb)
        obj = LoadBalancer(metadata=lb.metadata.model_copy())
        res = self._call("CreateLoadBalancer", request, obj, timeout)
        self._raise_for_status(res.status, obj)

        obj.spec = lb.spec.model_copy(deep=True)
        obj.spec.underlay_route = decode_address(res.underlay_route, "underlay route")
        return obj

    def get_load_balancer(self, lb_id: str, timeout: Optional[float] = None) -> LoadBalancer:
        obj = LoadBalancer(metadata=LoadBalancerMeta(id=lb_id))
        request = dpdk_pb2.GetLoadBalancerRequest(loadbalancer_id=lb_id.encode())
        res = self._call("GetLoadBalancer", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        return load_balancer_from_proto(lb_id, res)

    def delete_load_balancer(self, lb_id: str, timeout: Optional[float] = None) -> LoadBalancer:
        obj = LoadBalancer(metadata=LoadBalancerMeta(id=lb_id))
        request = dpdk_pb2.DeleteLoadBalancerRequest(loadbalancer_id=lb_id.encode())
        res = self._call("DeleteLoadBalancer", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        return obj

    # ------------------------------------------------------------------
    # Load balancer targets
    # ------------------------------------------------------------------

    def add_load_balancer_target(
        self, target: LoadBalancerTarget, timeout: Optional[float] = None
    ) -> LoadBalancerTarget:
        request = dpdk_pb2.CreateLoadBalancerTargetRequest(
            loadbalancer_id=target.metadata.load_balancer_id.encode(),
            target_ip=address_to_proto(target.spec.target_ip),
        )
        obj = LoadBalancerTarget(metadata=target.metadata.model_copy())
        res = self._call("CreateLoadBalancerTarget", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.spec = target.spec.model_copy()
        return obj

    def get_load_balancer_targets(self, lb_id: str, timeout: Optional[float] = None) -> LoadBalancerTargetList:
        obj = LoadBalancerTargetList(metadata=LoadBalancerTargetListMeta(load_balancer_id=lb_id))
        request = dpdk_pb2.ListLoadBalancerTargetsRequest(loadbalancer_id=lb_id.encode())
        res = self._call("ListLoadBalancerTargets", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.items = [load_balancer_target_from_proto(lb_id, ip) for ip in res.target_ips]
        return obj

    def delete_load_balancer_target(
        self, lb_id: str, target_ip: AddressLike, timeout: Optional[float] = None
    ) -> LoadBalancerTarget:
        ip = ipaddress.ip_address(target_ip)
        obj = LoadBalancerTarget(
            metadata=LoadBalancerTargetMeta(load_balancer_id=lb_id),
            spec=LoadBalancerTargetSpec(target_ip=ip),
        )
        request = dpdk_pb2.DeleteLoadBalancerTargetRequest(
            loadbalancer_id=lb_id.encode(),
            target_ip=address_to_proto(ip),
        )
        res = self._call("DeleteLoadBalancerTarget", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        return obj

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    def add_route(self, route: Route, timeout: Optional[float] = None) -> Route:
        request = dpdk_pb2.CreateRouteRequest(
            vni=route.metadata.vni,
            route=route_to_proto(route.spec.prefix, route.spec.next_hop),
        )
        obj = Route(
            metadata=route.metadata.model_copy(),
            spec=RouteSpec(prefix=route.spec.prefix, next_hop=RouteNextHop()),
        )
        res = self._call("CreateRoute", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.spec = route.spec.model_copy(deep=True)
        return obj

    def list_routes(self, vni: int, timeout: Optional[float] = None) -> RouteList:
        obj = RouteList(metadata=RouteMeta(vni=vni))
        res = self._call("ListRoutes", dpdk_pb2.ListRoutesRequest(vni=vni), obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.items = [route_from_proto(vni, route) for route in res.routes]
        return obj

    def delete_route(self, vni: int, prefix: NetworkLike, timeout: Optional[float] = None) -> Route:
        network = ipaddress.ip_network(prefix, strict=False)
        obj = Route(
            metadata=RouteMeta(vni=vni),
            spec=RouteSpec(prefix=network, next_hop=RouteNextHop()),
        )
        request = dpdk_pb2.DeleteRouteRequest(vni=vni, route=route_to_proto(network, None))
        res = self._call("DeleteRoute", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        return obj

    # ------------------------------------------------------------------
    # NAT
    # ------------------------------------------------------------------

    def add_nat(self, nat: Nat, timeout: Optional[float] = None) -> Nat:
        request = dpdk_pb2.CreateNatRequest(
            interface_id=nat.metadata.interface_id.encode(),
            nat_ip=address_to_proto(nat.spec.nat_ip),
            min_port=nat.spec.min_port,
            max_port=nat.spec.max_port,
        )
        obj = Nat(metadata=nat.metadata.model_copy())
        res = self._call("CreateNat", request, obj, timeout)
        self._raise_for_status(res.status, obj)

        obj.spec = nat.spec.model_copy()
        obj.spec.underlay_route = decode_address(res.underlay_route, "underlay route")
        return obj

    def get_nat(self, interface_id: str, timeout: Optional[float] = None) -> Nat:
        obj = Nat(metadata=NatMeta(interface_id=interface_id))
        request = dpdk_pb2.GetNatRequest(interface_id=interface_id.encode())
        res = self._call("GetNat", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        return nat_from_proto(interface_id, res)

    def delete_nat(self, interface_id: str, timeout: Optional[float] = None) -> Nat:
        obj = Nat(metadata=NatMeta(interface_id=interface_id))
        request = dpdk_pb2.DeleteNatRequest(interface_id=interface_id.encode())
        res = self._call("DeleteNat", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        return obj

    def add_neighbor_nat(self, nnat: NeighborNat, timeout: Optional[float] = None) -> NeighborNat:
        request = neighbor_nat_to_create_request(nnat)
        obj = NeighborNat(metadata=nnat.metadata.model_copy())
        res = self._call("CreateNeighborNat", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.spec = nnat.spec.model_copy()
        return obj

    def delete_neighbor_nat(self, nnat: NeighborNat, timeout: Optional[float] = None) -> NeighborNat:
        request = dpdk_pb2.DeleteNeighborNatRequest(
            nat_ip=address_to_proto(nnat.metadata.nat_ip),
            vni=nnat.spec.vni,
            min_port=nnat.spec.min_port,
            max_port=nnat.spec.max_port,
        )
        obj = NeighborNat(metadata=nnat.metadata.model_copy())
        res = self._call("DeleteNeighborNat", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        return obj

    def get_nat_info(
        self, nat_ip: AddressLike, nat_type: str = "any", timeout: Optional[float] = None
    ) -> NatList:
        """
        List NAT entries behind a NAT VIP.

        Args:
            nat_ip: the NAT VIP to query
            nat_type: "local"/"1", "neigh"/"neighbor"/"2" or "any"/"0"/""

        Returns:
            NatList whose ``metadata.nat_type`` is the canonical query type.
            For "any" dpservice is queried for local entries, then for
            neighbor entries, and the results are concatenated in that order.

        Raises:
            InvalidEnumError: unknown ``nat_type`` (no RPC is issued)
            TransportError / ServerError: on any sub-call; no partial result
            ResponseMismatchError: a response reports a different VIP
        """
        query = canonicalize.nat_info_type(nat_type)
        vip = ipaddress.ip_address(nat_ip)
        obj = NatList(metadata=NatListMeta(nat_ip=vip, nat_type=query.name))

        if query.code == NatInfoType.NAT_INFO_ANY:
            info_types = (NatInfoType.NAT_INFO_LOCAL, NatInfoType.NAT_INFO_NEIGHBOR)
        else:
            info_types = (query.code,)

        items: list[Nat] = []
        for info_type in info_types:
            request = dpdk_pb2.GetNatInfoRequest(nat_ip=address_to_proto(vip), nat_info_type=info_type)
            res = self._call("GetNatInfo", request, obj, timeout)
            self._raise_for_status(res.status, obj)

            reported = decode_address(res.nat_ip.address, "nat ip")
            if reported is not None and reported != vip:
                raise ResponseMismatchError("nat ip", vip, reported)

            items.extend(nat_info_entry_to_nat(entry, vip) for entry in res.nat_info_entries)

        obj.items = items
        return obj

    # ------------------------------------------------------------------
    # Firewall rules
    # ------------------------------------------------------------------

    def add_firewall_rule(self, rule: FirewallRule, timeout: Optional[float] = None) -> FirewallRule:
        """
        Add a firewall rule to an interface.

        Direction, action and IP version of ``rule`` are canonicalized in
        place ("accept" -> "Accept") before the request is sent; an unknown
        spelling raises InvalidEnumError without issuing an RPC.
        """
        request = dpdk_pb2.CreateFirewallRuleRequest(
            interface_id=rule.metadata.interface_id.encode(),
            rule=firewall_rule_to_proto(rule),
        )
        obj = FirewallRule(
            metadata=rule.metadata.model_copy(),
            spec=FirewallRuleSpec(rule_id=rule.spec.rule_id),
        )
        res = self._call("CreateFirewallRule", request, obj, timeout)
        self._raise_for_status(res.status, obj)

        obj.spec = rule.spec.model_copy(deep=True)
        if not obj.spec.rule_id and res.rule_id:
            obj.spec.rule_id = decode_text(res.rule_id, "rule id")
        return obj

    def get_firewall_rule(self, interface_id: str, rule_id: str, timeout: Optional[float] = None) -> FirewallRule:
        obj = FirewallRule(
            metadata=FirewallRuleMeta(interface_id=interface_id),
            spec=FirewallRuleSpec(rule_id=rule_id),
        )
        request = dpdk_pb2.GetFirewallRuleRequest(
            interface_id=interface_id.encode(),
            rule_id=rule_id.encode(),
        )
        res = self._call("GetFirewallRule", request, obj, timeout)
        self._raise_for_status(res.status, obj)

        rule = firewall_rule_from_proto(interface_id, res.rule)
        rule.status = obj.status
        return rule

    def list_firewall_rules(self, interface_id: str, timeout: Optional[float] = None) -> FirewallRuleList:
        obj = FirewallRuleList(metadata=FirewallRuleMeta(interface_id=interface_id))
        request = dpdk_pb2.ListFirewallRulesRequest(interface_id=interface_id.encode())
        res = self._call("ListFirewallRules", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.items = [firewall_rule_from_proto(interface_id, rule) for rule in res.rules]
        return obj

    def delete_firewall_rule(self, interface_id: str, rule_id: str, timeout: Optional[float] = None) -> FirewallRule:
        obj = FirewallRule(
            metadata=FirewallRuleMeta(interface_id=interface_id),
            spec=FirewallRuleSpec(rule_id=rule_id),
        )
        request = dpdk_pb2.DeleteFirewallRuleRequest(
            interface_id=interface_id.encode(),
            rule_id=rule_id.encode(),
        )
        res = self._call("DeleteFirewallRule", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        return obj

    # ------------------------------------------------------------------
    # VNI
    # ------------------------------------------------------------------

    def get_vni(self, vni: int, vni_type: int = 0, timeout: Optional[float] = None) -> Vni:
        """Report whether ``vni`` is in use (vni_type: 0 = IPv4, 1 = IPv6, 2 = both)."""
        vni_type = canonicalize.vni_type(vni_type)
        obj = Vni(metadata=VniMeta(vni=vni, vni_type=vni_type))
        request = dpdk_pb2.CheckVniInUseRequest(vni=vni, type=vni_type)
        res = self._call("CheckVniInUse", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        obj.spec.in_use = res.in_use
        return obj

    def reset_vni(self, vni: int, vni_type: int = 0, timeout: Optional[float] = None) -> Vni:
        vni_type = canonicalize.vni_type(vni_type)
        obj = Vni(metadata=VniMeta(vni=vni, vni_type=vni_type))
        request = dpdk_pb2.ResetVniRequest(vni=vni, type=vni_type)
        res = self._call("ResetVni", request, obj, timeout)
        self._raise_for_status(res.status, obj)
        return obj

    def close(self):
        """Close the gRPC channel."""
        if self.channel:
            self.channel.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
