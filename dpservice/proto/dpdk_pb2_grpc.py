"""
gRPC client stub and server registration for the dpservice API.

Provides:
  - DPDKonmetalStub: client stub, one unary-unary callable per method
  - DPDKonmetalServicer: base class for server implementations
  - add_DPDKonmetalServicer_to_server: registration function
"""

import grpc

from . import dpdk_pb2
from .schema import METHODS, PACKAGE, SERVICE

SERVICE_NAME = f"{PACKAGE}.{SERVICE}"


def _request_class(method: str):
    return getattr(dpdk_pb2, f"{method}Request")


def _response_class(method: str):
    return getattr(dpdk_pb2, f"{method}Response")


class DPDKonmetalStub:
    """Client stub for calling the dpservice gRPC API."""

    def __init__(self, channel: grpc.Channel) -> None:
        for method in METHODS:
            setattr(
                self,
                method,
                channel.unary_unary(
                    f"/{SERVICE_NAME}/{method}",
                    request_serializer=_request_class(method).SerializeToString,
                    response_deserializer=_response_class(method).FromString,
                ),
            )


class DPDKonmetalServicer:
    """Base class for dpservice gRPC implementations.

    Subclasses override the methods they serve with the usual
    ``Method(self, request, context)`` signature; everything else answers
    UNIMPLEMENTED.
    """


def _unimplemented(method: str):
    def handler(self, request, context):
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details("Method not implemented!")
        raise NotImplementedError("Method not implemented!")

    handler.__name__ = method
    handler.__qualname__ = f"DPDKonmetalServicer.{method}"
    return handler


for _method in METHODS:
    setattr(DPDKonmetalServicer, _method, _unimplemented(_method))


def add_DPDKonmetalServicer_to_server(servicer: DPDKonmetalServicer, server: grpc.Server) -> None:
    """Register a DPDKonmetalServicer with a gRPC server."""
    rpc_method_handlers = {
        method: grpc.unary_unary_rpc_method_handler(
            getattr(servicer, method),
            request_deserializer=_request_class(method).FromString,
            response_serializer=_response_class(method).SerializeToString,
        )
        for method in METHODS
    }
    generic_handler = grpc.method_handlers_generic_handler(SERVICE_NAME, rpc_method_handlers)
    server.add_generic_rpc_handlers((generic_handler,))
