"""Message classes and client stub for the subset of the node's ``concordium.P2P``
gRPC service used by the exporter.

Mirrors ``concordium_p2p_rpc.proto``:

    service P2P {
      rpc PeerTotalSent(Empty) returns (NumberResponse) {}
      rpc PeerTotalReceived(Empty) returns (NumberResponse) {}
      rpc NodeInfo(Empty) returns (NodeInfoResponse) {}
      rpc GetConsensusStatus(Empty) returns (JsonResponse) {}
      rpc GetBirkParameters(BlockHash) returns (JsonResponse) {}
    }

The descriptor is registered at import time so no protoc step is needed.
Field numbers must stay in sync with the node's proto file.
"""

from __future__ import annotations

import grpc
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory, wrappers_pb2

PACKAGE = "concordium"
SERVICE = f"{PACKAGE}.P2P"

_Field = descriptor_pb2.FieldDescriptorProto


def _add_field(message: descriptor_pb2.DescriptorProto, name: str, number: int, type_: int, type_name: str = "") -> None:
    field = message.field.add(name=name, number=number, type=type_, label=_Field.LABEL_OPTIONAL)
    # scalar fields must leave type_name unset
    if type_name:
        field.type_name = type_name


def _file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    proto = descriptor_pb2.FileDescriptorProto(
        name="concordium_exporter/concordium_p2p_rpc.proto",
        package=PACKAGE,
        syntax="proto3",
        dependency=[wrappers_pb2.DESCRIPTOR.name],
    )

    proto.message_type.add(name="Empty")

    number_response = proto.message_type.add(name="NumberResponse")
    _add_field(number_response, "value", 1, _Field.TYPE_UINT64)

    json_response = proto.message_type.add(name="JsonResponse")
    _add_field(json_response, "value", 1, _Field.TYPE_STRING)

    block_hash = proto.message_type.add(name="BlockHash")
    _add_field(block_hash, "block_hash", 1, _Field.TYPE_STRING)

    node_info = proto.message_type.add(name="NodeInfoResponse")
    _add_field(node_info, "node_id", 1, _Field.TYPE_MESSAGE, ".google.protobuf.StringValue")
    _add_field(node_info, "current_localtime", 2, _Field.TYPE_UINT64)
    _add_field(node_info, "peer_type", 3, _Field.TYPE_STRING)
    _add_field(node_info, "consensus_baker_running", 4, _Field.TYPE_BOOL)
    _add_field(node_info, "consensus_running", 5, _Field.TYPE_BOOL)
    _add_field(node_info, "consensus_type", 6, _Field.TYPE_STRING)
    _add_field(node_info, "consensus_finalizer_committee", 8, _Field.TYPE_BOOL)
    _add_field(node_info, "consensus_baker_id", 9, _Field.TYPE_MESSAGE, ".google.protobuf.UInt64Value")
    return proto


_POOL = descriptor_pool.Default()
_POOL.AddSerializedFile(_file_descriptor().SerializeToString())


def _message_class(name: str):
    return message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{PACKAGE}.{name}"))


Empty = _message_class("Empty")
NumberResponse = _message_class("NumberResponse")
JsonResponse = _message_class("JsonResponse")
BlockHash = _message_class("BlockHash")
NodeInfoResponse = _message_class("NodeInfoResponse")


class P2PStub:
    """Async client stub, laid out like a grpcio-tools generated ``P2PStub``."""

    def __init__(self, channel: grpc.aio.Channel):
        self.PeerTotalSent = channel.unary_unary(
            f"/{SERVICE}/PeerTotalSent",
            request_serializer=Empty.SerializeToString,
            response_deserializer=NumberResponse.FromString,
        )
        self.PeerTotalReceived = channel.unary_unary(
            f"/{SERVICE}/PeerTotalReceived",
            request_serializer=Empty.SerializeToString,
            response_deserializer=NumberResponse.FromString,
        )
        self.NodeInfo = channel.unary_unary(
            f"/{SERVICE}/NodeInfo",
            request_serializer=Empty.SerializeToString,
            response_deserializer=NodeInfoResponse.FromString,
        )
        self.GetConsensusStatus = channel.unary_unary(
            f"/{SERVICE}/GetConsensusStatus",
            request_serializer=Empty.SerializeToString,
            response_deserializer=JsonResponse.FromString,
        )
        self.GetBirkParameters = channel.unary_unary(
            f"/{SERVICE}/GetBirkParameters",
            request_serializer=BlockHash.SerializeToString,
            response_deserializer=JsonResponse.FromString,
        )
