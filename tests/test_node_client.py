"""Tests for the gRPC adapter over the node's P2P service."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import grpc
import pytest
from google.protobuf import wrappers_pb2

from concordium_exporter import rpc
from concordium_exporter.errors import NodeTransportError
from concordium_exporter.node_client import NodeClient

AUTH = (("authentication", "rpcadmin"),)


@pytest.fixture
def stub():
    return MagicMock()


@pytest.fixture
def client(stub):
    return NodeClient(stub, "rpcadmin")


def _rpc_error(code: grpc.StatusCode, details: str) -> grpc.aio.AioRpcError:
    return grpc.aio.AioRpcError(code, grpc.aio.Metadata(), grpc.aio.Metadata(), details=details)


class TestNodeClient:
    @pytest.mark.asyncio
    async def test_counters_carry_authentication(self, stub, client):
        stub.PeerTotalSent = AsyncMock(return_value=rpc.NumberResponse(value=500))
        stub.PeerTotalReceived = AsyncMock(return_value=rpc.NumberResponse(value=300))

        assert await client.peer_total_sent() == 500
        assert await client.peer_total_received() == 300

        for method in (stub.PeerTotalSent, stub.PeerTotalReceived):
            method.assert_awaited_once()
            assert method.call_args.kwargs["metadata"] == AUTH
            assert isinstance(method.call_args.args[0], rpc.Empty)

    @pytest.mark.asyncio
    async def test_consensus_status_returns_raw_json(self, stub, client):
        stub.GetConsensusStatus = AsyncMock(return_value=rpc.JsonResponse(value='{"bestBlock": "abc"}'))

        assert await client.consensus_status() == '{"bestBlock": "abc"}'

    @pytest.mark.asyncio
    async def test_birk_parameters_sends_block_hash(self, stub, client):
        stub.GetBirkParameters = AsyncMock(return_value=rpc.JsonResponse(value='{"bakers": []}'))

        assert await client.birk_parameters("abc") == '{"bakers": []}'
        request = stub.GetBirkParameters.call_args.args[0]
        assert request.block_hash == "abc"

    @pytest.mark.asyncio
    async def test_node_info_with_baker_id(self, stub, client):
        stub.NodeInfo = AsyncMock(
            return_value=rpc.NodeInfoResponse(
                consensus_running=True,
                consensus_baker_running=True,
                consensus_baker_id=wrappers_pb2.UInt64Value(value=7),
            )
        )

        info = await client.node_info()

        assert info.consensus_running is True
        assert info.consensus_baker_running is True
        assert info.consensus_baker_id == 7

    @pytest.mark.asyncio
    async def test_node_info_baker_id_zero_is_present(self, stub, client):
        stub.NodeInfo = AsyncMock(
            return_value=rpc.NodeInfoResponse(consensus_baker_id=wrappers_pb2.UInt64Value(value=0))
        )

        info = await client.node_info()

        assert info.has_baker_identity
        assert info.consensus_baker_id == 0

    @pytest.mark.asyncio
    async def test_node_info_without_baker_id(self, stub, client):
        stub.NodeInfo = AsyncMock(return_value=rpc.NodeInfoResponse(consensus_running=True))

        info = await client.node_info()

        assert info.consensus_baker_id is None
        assert not info.has_baker_identity
        assert info.consensus_baker_running is False

    @pytest.mark.asyncio
    async def test_rpc_error_becomes_transport_error(self, stub, client, log_messages):
        stub.PeerTotalSent = AsyncMock(side_effect=_rpc_error(grpc.StatusCode.UNAVAILABLE, "connection refused"))

        with pytest.raises(NodeTransportError) as exc_info:
            await client.peer_total_sent()

        err = exc_info.value
        assert err.step == "PeerTotalSent"
        assert err.code == "UNAVAILABLE"
        assert err.details == "connection refused"
        assert isinstance(err.__cause__, grpc.aio.AioRpcError)
        assert any(m.startswith("ERROR") and "PeerTotalSent" in m for m in log_messages)


def test_stub_method_paths():
    channel = MagicMock()

    rpc.P2PStub(channel)

    paths = [c.args[0] for c in channel.unary_unary.call_args_list]
    assert paths == [
        "/concordium.P2P/PeerTotalSent",
        "/concordium.P2P/PeerTotalReceived",
        "/concordium.P2P/NodeInfo",
        "/concordium.P2P/GetConsensusStatus",
        "/concordium.P2P/GetBirkParameters",
    ]


def test_node_info_wire_format():
    """consensus_baker_id travels as field 9 wrapped in UInt64Value."""
    message = rpc.NodeInfoResponse(consensus_running=True, consensus_baker_id=wrappers_pb2.UInt64Value(value=7))

    decoded = rpc.NodeInfoResponse.FromString(message.SerializeToString())

    assert decoded.HasField("consensus_baker_id")
    assert decoded.consensus_baker_id.value == 7
    assert rpc.NodeInfoResponse.DESCRIPTOR.fields_by_name["consensus_baker_id"].number == 9


@pytest.mark.parametrize(
    "message",
    [
        rpc.Empty(),
        rpc.NumberResponse(value=500),
        rpc.JsonResponse(value='{"bestBlock": "abc"}'),
        rpc.BlockHash(block_hash="abc"),
    ],
)
def test_message_round_trip(message):
    decoded = type(message).FromString(message.SerializeToString())

    assert decoded == message


def test_scalar_fields_have_no_type_name():
    for message_class in (rpc.NumberResponse, rpc.JsonResponse, rpc.BlockHash):
        for field in message_class.DESCRIPTOR.fields:
            assert field.message_type is None
