from __future__ import annotations

import asyncio
import json

import pytest
from loguru import logger
from prometheus_client.parser import text_string_to_metric_families

from concordium_exporter.errors import NodeTransportError
from concordium_exporter.models import NodeInfo

CONSENSUS_STATUS = {
    "bestBlock": "abc",
    "bestBlockHeight": 100,
    "lastFinalizedBlockHeight": 98,
    "lastFinalizedTime": "2021-06-09T12:00:00Z",
    "genesisBlock": "9dd9ca4d19e9393877d2c44b70f89acbfc0883c2243e5eeaecc0d1cd0503f478",
    "blockArriveLatencyEMA": 0.25,
    "blockArriveLatencyEMSD": 0.05,
    "blockReceiveLatencyEMA": 0.2,
    "blockReceiveLatencyEMSD": 0.04,
    "blockArrivePeriodEMA": 10.1,
    "blockArrivePeriodEMSD": 2.3,
    "blockReceivePeriodEMA": 10.0,
    "blockReceivePeriodEMSD": 2.1,
    "blocksReceivedCount": 120,
    "blocksVerifiedCount": 118,
    "transactionsPerBlockEMA": 0.5,
    "transactionsPerBlockEMSD": 0.7,
    "finalizationPeriodEMA": 20.5,
    "finalizationPeriodEMSD": 4.2,
    "finalizationCount": 42,
    "epochDuration": 3600000,
    "slotDuration": 250,
}

BIRK_PARAMETERS = {
    "electionDifficulty": 0.025,
    "electionNonce": "60ab0feb036f5e3646f957085238ba7b1e4e9b55a1ab1ab4b72b8b7a9c2f1d6e",
    "bakers": [
        {"bakerId": 1, "bakerLotteryPower": 0.3, "bakerAccount": "3ZFGxLtnUUSJGW2WqjMh1DDjxyq5rnytCwkSqxFTpsWSFdQnNn"},
        {"bakerId": 7, "bakerLotteryPower": 0.02, "bakerAccount": "4Z8LBaxh6t4KhkXhySiYAuFkStj9zJMmMVvJEkwGRJKjHeZHXm"},
    ],
}


class FakeNode:
    """In-memory stand-in for ``NodeClient`` that records the RPCs it serves."""

    def __init__(
        self,
        *,
        consensus: dict | str = CONSENSUS_STATUS,
        sent: int = 500,
        received: int = 300,
        node_info: NodeInfo | None = None,
        birk: dict | str = BIRK_PARAMETERS,
        delay: float = 0.0,
        fail_on: str | None = None,
        error: Exception | None = None,
        hang_on: str | None = None,
    ):
        self.consensus = consensus if isinstance(consensus, str) else json.dumps(consensus)
        self.sent = sent
        self.received = received
        self.info = node_info or NodeInfo(consensus_running=True, consensus_baker_running=True, consensus_baker_id=7)
        self.birk = birk if isinstance(birk, str) else json.dumps(birk)
        self.delay = delay
        self.fail_on = fail_on
        self.error = error
        self.hang_on = hang_on
        self.calls: list[str] = []
        self.birk_block_hashes: list[str] = []
        self.cancelled = False

    async def _serve(self, method: str) -> None:
        self.calls.append(method)
        if self.delay:
            await asyncio.sleep(self.delay)
        if method == self.hang_on:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if method == self.fail_on:
            raise self.error or NodeTransportError(method, "UNAVAILABLE", "node down")

    async def consensus_status(self) -> str:
        await self._serve("GetConsensusStatus")
        return self.consensus

    async def peer_total_sent(self) -> int:
        await self._serve("PeerTotalSent")
        return self.sent

    async def peer_total_received(self) -> int:
        await self._serve("PeerTotalReceived")
        return self.received

    async def node_info(self) -> NodeInfo:
        await self._serve("NodeInfo")
        return self.info

    async def birk_parameters(self, block_hash: str) -> str:
        self.birk_block_hashes.append(block_hash)
        await self._serve("GetBirkParameters")
        return self.birk


def parse_exposition(body: bytes) -> dict[str, float]:
    """Map gauge name -> value from a text exposition body."""
    values = {}
    for family in text_string_to_metric_families(body.decode("utf-8")):
        for sample in family.samples:
            values[sample.name] = sample.value
    return values


@pytest.fixture
def fake_node():
    return FakeNode


@pytest.fixture
def parse_metrics():
    return parse_exposition


@pytest.fixture
def log_messages():
    """Capture loguru output as ``"LEVEL message"`` strings."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(str(m)), level="DEBUG", format="{level} {message}")
    yield messages
    logger.remove(handler_id)
