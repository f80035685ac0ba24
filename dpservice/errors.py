"""
Error types raised by the dpservice client.

Three disjoint categories:

- TransportError: the gRPC call itself did not complete.
- ServerError: the call completed but the embedded status code is non-zero.
  The precise cause is ``ServerError.code`` (one of the constants below).
- ConversionError: a wire value could not be decoded (ParseError), an enum
  token was not recognized (InvalidEnumError) or a response contradicted
  the request (ResponseMismatchError).
"""

from typing import Any, Iterable, Optional

import grpc

# dpservice status codes carried in ``Status.code``
BAD_REQUEST = 101
NOT_FOUND = 201
ALREADY_EXISTS = 202
WRONG_TYPE = 203
BAD_IPVER = 204
NO_VM = 205
NO_VNI = 206
ITERATOR = 207
OUT_OF_MEMORY = 208
LIMIT_REACHED = 209
ALREADY_ACTIVE = 210
NOT_ACTIVE = 211
ROLLBACK = 212
RTE_RULE_ADD = 213
RTE_RULE_DEL = 214
ROUTE_EXISTS = 301
ROUTE_NOT_FOUND = 302
ROUTE_INSERT = 303
ROUTE_BAD_PORT = 304
ROUTE_RESET = 305
DNAT_NO_DATA = 321
DNAT_CREATE = 322
DNAT_EXISTS = 323
SNAT_NO_DATA = 341
SNAT_CREATE = 342
SNAT_EXISTS = 343
VNI_INIT4 = 361
VNI_INIT6 = 362
VNI_FREE4 = 363
VNI_FREE6 = 364
PORT_START = 381
PORT_STOP = 382
VNF_INSERT = 401
VM_HANDLE = 402
NO_BACKIP = 421
NO_LB = 422
NO_DROP_SUPPORT = 441


class DPServiceError(Exception):
    """Base class for every error raised by this package."""


class TransportError(DPServiceError):
    """The gRPC call did not complete (connectivity, deadline, rejected request).

    ``obj`` is a best-effort domain object carrying only kind and identity.
    The original ``grpc.RpcError`` is kept as ``rpc_error`` and as
    ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[grpc.StatusCode] = None,
        obj: Any = None,
        rpc_error: Optional[grpc.RpcError] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.obj = obj
        self.rpc_error = rpc_error


class ServerError(DPServiceError):
    """dpservice answered with a non-zero status code.

    ``obj`` carries kind, identity and the status copied from the response.
    """

    def __init__(self, code: int, message: str = "", obj: Any = None):
        self.code = code
        self.message = message
        self.obj = obj
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.message:
            return f"[error code {self.code}] {self.message}"
        return f"error code {self.code}"


class ConversionError(DPServiceError):
    """A value could not be translated between the wire and the domain model."""


class ParseError(ConversionError):
    """A non-empty wire value is not a valid address, prefix or number."""

    def __init__(self, field: str, value: Any, reason: str = ""):
        self.field = field
        self.value = value
        self.reason = reason
        message = f"error parsing {field}: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidEnumError(ConversionError):
    """An enumeration token is not one of the accepted spellings."""

    def __init__(self, field: str, value: Any, allowed: Iterable[str]):
        self.field = field
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            f"{field} can be only: {'/'.join(self.allowed)} (got {value!r})"
        )


class ResponseMismatchError(ConversionError):
    """A response describes a different resource than the one requested."""

    def __init__(self, field: str, expected: Any, actual: Any):
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(f"{field} mismatch: requested {expected}, got {actual}")


def is_status_error_code(err: Optional[BaseException], *codes: int) -> bool:
    """Return True if ``err`` is a ServerError whose code is one of ``codes``."""
    if not isinstance(err, ServerError):
        return False
    return err.code in codes


def ignore_status_error_code(err: Optional[BaseException], code: int) -> Optional[BaseException]:
    """Return None when ``err`` is a ServerError with ``code``, else ``err``.

    Example:
        try:
            client.delete_interface("vm4")
        except ServerError as e:
            if ignore_status_error_code(e, NOT_FOUND):
                raise
    """
    if is_status_error_code(err, code):
        return None
    return err
