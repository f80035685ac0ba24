"""dpservice wire schema: protobuf messages, enums and the gRPC stub."""

from . import dpdk_pb2
from .dpdk_pb2_grpc import (
    SERVICE_NAME,
    DPDKonmetalServicer,
    DPDKonmetalStub,
    add_DPDKonmetalServicer_to_server,
)
from .schema import (
    FirewallAction,
    InterfaceType,
    IpVersion,
    NatInfoType,
    Protocol,
    TrafficDirection,
    VniType,
)

__all__ = [
    "dpdk_pb2",
    "SERVICE_NAME",
    "DPDKonmetalServicer",
    "DPDKonmetalStub",
    "add_DPDKonmetalServicer_to_server",
    "FirewallAction",
    "InterfaceType",
    "IpVersion",
    "NatInfoType",
    "Protocol",
    "TrafficDirection",
    "VniType",
]
