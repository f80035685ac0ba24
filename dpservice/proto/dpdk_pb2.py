"""
Protobuf message classes for the dpservice wire schema.

Builds a ``FileDescriptorProto`` from :mod:`dpservice.proto.schema`,
registers it in the default descriptor pool and materializes the message
classes and enum values into this module, the same way protoc-generated
``*_pb2`` modules do.
"""

from google.protobuf import descriptor_pb2 as _descriptor_pb2
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf.internal import builder as _builder

from .schema import ENUMS, FILE_NAME, MESSAGES, PACKAGE, SERVICE, METHODS

_FIELD = _descriptor_pb2.FieldDescriptorProto

_SCALAR_TYPES = {
    "bool": _FIELD.TYPE_BOOL,
    "bytes": _FIELD.TYPE_BYTES,
    "int32": _FIELD.TYPE_INT32,
    "string": _FIELD.TYPE_STRING,
    "uint32": _FIELD.TYPE_UINT32,
}

_ENUM_NAMES = {enum.__name__ for enum in ENUMS}


def _add_field(message, number: int, field: tuple, oneofs: list[str]) -> None:
    name, type_spec, *oneof = field

    label = _FIELD.LABEL_OPTIONAL
    if type_spec.startswith("repeated "):
        label = _FIELD.LABEL_REPEATED
        type_spec = type_spec[len("repeated "):]

    proto_field = message.field.add(name=name, number=number, label=label)
    if type_spec in _SCALAR_TYPES:
        proto_field.type = _SCALAR_TYPES[type_spec]
    elif type_spec in _ENUM_NAMES:
        proto_field.type = _FIELD.TYPE_ENUM
        proto_field.type_name = f".{PACKAGE}.{type_spec}"
    elif type_spec in MESSAGES:
        proto_field.type = _FIELD.TYPE_MESSAGE
        proto_field.type_name = f".{PACKAGE}.{type_spec}"
    else:
        raise ValueError(f"Unknown type '{type_spec}' for field {message.name}.{name}")

    if oneof:
        group = oneof[0]
        if group not in oneofs:
            oneofs.append(group)
            message.oneof_decl.add(name=group)
        proto_field.oneof_index = oneofs.index(group)


def build_file_descriptor() -> _descriptor_pb2.FileDescriptorProto:
    """Translate the schema tables into a proto3 ``FileDescriptorProto``."""
    file_proto = _descriptor_pb2.FileDescriptorProto(
        name=FILE_NAME,
        package=PACKAGE,
        syntax="proto3",
    )

    for enum in ENUMS:
        enum_proto = file_proto.enum_type.add(name=enum.__name__)
        for member in enum:
            enum_proto.value.add(name=member.name, number=int(member))

    for message_name, fields in MESSAGES.items():
        message = file_proto.message_type.add(name=message_name)
        oneofs: list[str] = []
        for number, field in enumerate(fields, start=1):
            _add_field(message, number, field, oneofs)

    service = file_proto.service.add(name=SERVICE)
    for method in METHODS:
        service.method.add(
            name=method,
            input_type=f".{PACKAGE}.{method}Request",
            output_type=f".{PACKAGE}.{method}Response",
        )

    return file_proto


DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(
    build_file_descriptor().SerializeToString()
)

_globals = globals()
_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)
_builder.BuildTopDescriptorsAndMessages(DESCRIPTOR, "dpservice.proto.dpdk_pb2", _globals)
