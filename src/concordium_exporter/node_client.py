from __future__ import annotations

from typing import Any

import grpc
from loguru import logger

from concordium_exporter import rpc
from concordium_exporter.errors import NodeTransportError
from concordium_exporter.models import NodeInfo

AUTH_METADATA_KEY = "authentication"


class NodeClient:
    """Thin async wrapper over the node's P2P service.

    Every call carries the ``authentication`` metadata. Transport failures are
    logged and re-raised as ``NodeTransportError`` tagged with the RPC name.
    """

    def __init__(self, stub: rpc.P2PStub, password: str):
        self._stub = stub
        self._metadata = ((AUTH_METADATA_KEY, password),)

    @classmethod
    def from_channel(cls, channel: grpc.aio.Channel, password: str) -> NodeClient:
        return cls(rpc.P2PStub(channel), password)

    async def _call(self, method: str, request: Any) -> Any:
        logger.debug(f"Calling {method}")
        try:
            return await getattr(self._stub, method)(request, metadata=self._metadata)
        except grpc.aio.AioRpcError as e:
            logger.error(f"Error calling {method}: {e.code().name} {e.details()}")
            raise NodeTransportError(method, e.code().name, e.details()) from e

    async def consensus_status(self) -> str:
        response = await self._call("GetConsensusStatus", rpc.Empty())
        return response.value

    async def peer_total_sent(self) -> int:
        response = await self._call("PeerTotalSent", rpc.Empty())
        return response.value

    async def peer_total_received(self) -> int:
        response = await self._call("PeerTotalReceived", rpc.Empty())
        return response.value

    async def node_info(self) -> NodeInfo:
        response = await self._call("NodeInfo", rpc.Empty())
        baker_id = response.consensus_baker_id.value if response.HasField("consensus_baker_id") else None
        return NodeInfo(
            consensus_running=response.consensus_running,
            consensus_baker_running=response.consensus_baker_running,
            consensus_baker_id=baker_id,
        )

    async def birk_parameters(self, block_hash: str) -> str:
        response = await self._call("GetBirkParameters", rpc.BlockHash(block_hash=block_hash))
        return response.value
