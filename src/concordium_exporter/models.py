from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class ConsensusStatus(BaseModel):
    """JSON payload of ``GetConsensusStatus``.

    Only the fields published as gauges are decoded, everything else the node
    sends is ignored. ``null`` values (e.g. ``finalizationPeriodEMA`` before the
    first finalization) decode to the field default.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    best_block: str = Field(default="", alias="bestBlock")
    best_block_height: float = Field(default=0.0, alias="bestBlockHeight")
    last_finalized_block_height: float = Field(default=0.0, alias="lastFinalizedBlockHeight")
    block_arrive_latency_ema: float = Field(default=0.0, alias="blockArriveLatencyEMA")
    block_arrive_latency_emsd: float = Field(default=0.0, alias="blockArriveLatencyEMSD")
    block_receive_latency_ema: float = Field(default=0.0, alias="blockReceiveLatencyEMA")
    block_receive_latency_emsd: float = Field(default=0.0, alias="blockReceiveLatencyEMSD")
    block_arrive_period_ema: float = Field(default=0.0, alias="blockArrivePeriodEMA")
    block_arrive_period_emsd: float = Field(default=0.0, alias="blockArrivePeriodEMSD")
    block_receive_period_ema: float = Field(default=0.0, alias="blockReceivePeriodEMA")
    block_receive_period_emsd: float = Field(default=0.0, alias="blockReceivePeriodEMSD")
    blocks_received_count: float = Field(default=0.0, alias="blocksReceivedCount")
    blocks_verified_count: float = Field(default=0.0, alias="blocksVerifiedCount")
    transactions_per_block_ema: float = Field(default=0.0, alias="transactionsPerBlockEMA")
    transactions_per_block_emsd: float = Field(default=0.0, alias="transactionsPerBlockEMSD")
    finalization_period_ema: float = Field(default=0.0, alias="finalizationPeriodEMA")
    finalization_period_emsd: float = Field(default=0.0, alias="finalizationPeriodEMSD")
    finalization_count: float = Field(default=0.0, alias="finalizationCount")
    epoch_duration: float = Field(default=0.0, alias="epochDuration")
    slot_duration: float = Field(default=0.0, alias="slotDuration")

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class BakerEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    baker_id: int = Field(alias="bakerId")
    lottery_power: float = Field(alias="bakerLotteryPower")
    account: str = Field(default="", alias="bakerAccount")


class BirkParameters(BaseModel):
    """JSON payload of ``GetBirkParameters``: election parameters plus the baker roster."""

    model_config = ConfigDict(populate_by_name=True)

    election_difficulty: float = Field(default=0.0, alias="electionDifficulty")
    election_nonce: str = Field(default="", alias="electionNonce")
    bakers: list[BakerEntry] = []

    def find_baker(self, baker_id: int) -> BakerEntry | None:
        """Scan the whole roster; a duplicated id resolves to its last entry."""
        found = None
        for baker in self.bakers:
            if baker.baker_id == baker_id:
                found = baker
        return found


class NodeInfo(BaseModel):
    """Role flags reported by ``NodeInfo``.

    ``consensus_baker_id`` is ``None`` when the node has no baker identity,
    which can be the case even while the baker is running.
    """

    consensus_running: bool = False
    consensus_baker_running: bool = False
    consensus_baker_id: int | None = None

    @property
    def has_baker_identity(self) -> bool:
        return self.consensus_baker_id is not None


class MetricsSnapshot(BaseModel):
    """Point-in-time node state assembled from one full collection pass."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    peer_total_sent: float = 0.0
    peer_total_received: float = 0.0

    best_block: str = ""
    best_block_height: float = 0.0
    last_finalized_block_height: float = 0.0
    block_arrive_latency_ema: float = 0.0
    block_arrive_latency_emsd: float = 0.0
    block_receive_latency_ema: float = 0.0
    block_receive_latency_emsd: float = 0.0
    block_arrive_period_ema: float = 0.0
    block_arrive_period_emsd: float = 0.0
    block_receive_period_ema: float = 0.0
    block_receive_period_emsd: float = 0.0
    blocks_received_count: float = 0.0
    blocks_verified_count: float = 0.0
    transactions_per_block_ema: float = 0.0
    transactions_per_block_emsd: float = 0.0
    finalization_period_ema: float = 0.0
    finalization_period_emsd: float = 0.0
    finalization_count: float = 0.0
    epoch_duration: float = 0.0
    slot_duration: float = 0.0

    consensus_running: float = 0.0
    baker_running: float = 0.0
    baker_id: float = 0.0
    baker_lottery_power: float = 0.0
    estimated_baking_block: float = 0.0
