"""Assemble one ``MetricsSnapshot`` from a fixed sequence of node calls.

Steps run strictly in order:

    1. GetConsensusStatus  -> consensus fields (embedded JSON)
    2. PeerTotalSent       -> peer_total_sent
    3. PeerTotalReceived   -> peer_total_received
    4. NodeInfo            -> role flags, baker id
    5. GetBirkParameters   -> lottery power, estimated blocks per day
                              (only when baker reporting is enabled and the
                              node has a baker id)

Each step returns the field updates it produced. The first ``CollectionError``
aborts the sequence and is re-raised with the partial snapshot attached.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Protocol, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from concordium_exporter.errors import CollectionError, PayloadDecodeError, ScrapeTimeoutError
from concordium_exporter.models import BirkParameters, ConsensusStatus, MetricsSnapshot, NodeInfo

# Fixed network slot cadence used to turn lottery power into blocks per day.
SLOTS_PER_DAY = 35000

ModelT = TypeVar("ModelT", bound=BaseModel)


class NodeAPI(Protocol):
    async def consensus_status(self) -> str: ...

    async def peer_total_sent(self) -> int: ...

    async def peer_total_received(self) -> int: ...

    async def node_info(self) -> NodeInfo: ...

    async def birk_parameters(self, block_hash: str) -> str: ...


@dataclass
class _BuildState:
    snapshot: MetricsSnapshot = field(default_factory=MetricsSnapshot)
    node_info: NodeInfo | None = None


Step = Callable[[_BuildState], Awaitable[dict[str, Any]]]


class SnapshotBuilder:
    def __init__(self, client: NodeAPI, *, report_baker: bool = False):
        self._client = client
        self._report_baker = report_baker
        self._steps: tuple[Step, ...] = (
            self._consensus_status,
            self._peer_total_sent,
            self._peer_total_received,
            self._node_info,
            self._baker_performance,
        )

    async def build(self) -> MetricsSnapshot:
        """Run every step once and return the resulting snapshot.

        Raises:
            CollectionError: the first failing step, with ``partial`` set to the
                snapshot assembled up to that point.
        """
        state = _BuildState()
        logger.debug("Start fetching metrics")
        for step in self._steps:
            try:
                updates = await step(state)
            except CollectionError as e:
                e.partial = state.snapshot
                raise
            if updates:
                state.snapshot = state.snapshot.model_copy(update=updates)
        logger.info("Finished fetching metrics")
        return state.snapshot

    async def _consensus_status(self, state: _BuildState) -> dict[str, Any]:
        payload = await self._client.consensus_status()
        status = _decode("GetConsensusStatus", ConsensusStatus, payload)
        return status.model_dump()

    async def _peer_total_sent(self, state: _BuildState) -> dict[str, Any]:
        return {"peer_total_sent": float(await self._client.peer_total_sent())}

    async def _peer_total_received(self, state: _BuildState) -> dict[str, Any]:
        return {"peer_total_received": float(await self._client.peer_total_received())}

    async def _node_info(self, state: _BuildState) -> dict[str, Any]:
        info = await self._client.node_info()
        state.node_info = info
        # baker id is only reported for nodes configured as bakers
        report_id = self._report_baker and info.has_baker_identity
        return {
            "consensus_running": 1.0 if info.consensus_running else 0.0,
            "baker_running": 1.0 if info.consensus_baker_running else 0.0,
            "baker_id": float(info.consensus_baker_id) if report_id else 0.0,
        }

    async def _baker_performance(self, state: _BuildState) -> dict[str, Any]:
        if not self._report_baker:
            return {}
        info = state.node_info
        if info is None or not info.has_baker_identity:
            logger.debug("Node has no baker id, skipping GetBirkParameters")
            return {}

        payload = await self._client.birk_parameters(state.snapshot.best_block)
        roster = _decode("GetBirkParameters", BirkParameters, payload)
        baker = roster.find_baker(info.consensus_baker_id)
        if baker is None:
            logger.warning(f"Baker {info.consensus_baker_id} not found in the roster of block {state.snapshot.best_block}")
            return {}
        return {
            "baker_lottery_power": baker.lottery_power,
            "estimated_baking_block": baker.lottery_power * SLOTS_PER_DAY,
        }


def _decode(step: str, model: type[ModelT], payload: str) -> ModelT:
    try:
        return model.model_validate_json(payload)
    except ValidationError as e:
        raise PayloadDecodeError(step, f"malformed {model.__name__} payload: {e.error_count()} error(s)") from e


async def build_snapshot(client: NodeAPI, *, report_baker: bool = False, timeout_sec: float | None = None) -> MetricsSnapshot:
    """Build a fresh snapshot, bounded by ``timeout_sec`` when given."""
    builder = SnapshotBuilder(client, report_baker=report_baker)
    if timeout_sec is None:
        return await builder.build()
    try:
        return await asyncio.wait_for(builder.build(), timeout=timeout_sec)
    except asyncio.TimeoutError as e:
        raise ScrapeTimeoutError(timeout_sec) from e
