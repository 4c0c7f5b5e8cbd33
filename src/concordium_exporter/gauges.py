"""Exported node gauges.

One row per gauge: exposition name, snapshot field, help text. Both
``describe()`` and ``collect()`` iterate this table.
"""

from __future__ import annotations

from typing import NamedTuple

from concordium_exporter.models import MetricsSnapshot

PREFIX = "concordium_"


class GaugeSpec(NamedTuple):
    name: str
    field: str
    help: str

    def value(self, snapshot: MetricsSnapshot) -> float:
        return float(getattr(snapshot, self.field))


GAUGES: tuple[GaugeSpec, ...] = (
    # --- Peer traffic ---
    GaugeSpec(f"{PREFIX}peer_total_sent_amount", "peer_total_sent", "Peer total sent packets in Byte"),
    GaugeSpec(f"{PREFIX}peer_total_received_amount", "peer_total_received", "Peer total received packets in Byte"),
    # --- Consensus status ---
    GaugeSpec(f"{PREFIX}last_finalized_block_height", "last_finalized_block_height", "Last finalized block height"),
    GaugeSpec(f"{PREFIX}block_arrive_latency_inEMSD", "block_arrive_latency_emsd", "Arrived block latency in EMSD"),
    GaugeSpec(f"{PREFIX}block_receive_latency_inEMSD", "block_receive_latency_emsd", "Received block latency in EMSD"),
    GaugeSpec(f"{PREFIX}block_receive_period_inEMSD", "block_receive_period_emsd", "Received block period in EMSD"),
    GaugeSpec(f"{PREFIX}block_arrive_period_inEMSD", "block_arrive_period_emsd", "Arrived block period in EMSD"),
    GaugeSpec(f"{PREFIX}block_received_count", "blocks_received_count", "Received block count"),
    GaugeSpec(
        f"{PREFIX}transactions_per_block_inEMSD", "transactions_per_block_emsd", "Transaction count per block in EMSD"
    ),
    GaugeSpec(f"{PREFIX}finalization_period_inEMA", "finalization_period_ema", "Finalization period in EMA"),
    GaugeSpec(f"{PREFIX}best_block_height", "best_block_height", "Best block height"),
    GaugeSpec(f"{PREFIX}finalization_count", "finalization_count", "Finalization count"),
    GaugeSpec(f"{PREFIX}epoch_duration", "epoch_duration", "Epoch duration(const.)"),
    GaugeSpec(f"{PREFIX}blocks_verified_count", "blocks_verified_count", "Verified blocks count"),
    GaugeSpec(f"{PREFIX}slot_duration", "slot_duration", "Slot duration(const.)"),
    GaugeSpec(f"{PREFIX}finalization_period_inEMSD", "finalization_period_emsd", "Finalization period in EMSD"),
    GaugeSpec(f"{PREFIX}transactions_per_block_inEMA", "transactions_per_block_ema", "Transactions per block in EMA"),
    GaugeSpec(f"{PREFIX}block_arrive_latency_inEMA", "block_arrive_latency_ema", "Arrived block latency in EMA"),
    GaugeSpec(f"{PREFIX}block_receive_latency_inEMA", "block_receive_latency_ema", "Received block latency in EMA"),
    GaugeSpec(f"{PREFIX}block_arrive_period_inEMA", "block_arrive_period_ema", "Arrived block period in EMA"),
    GaugeSpec(f"{PREFIX}block_receive_period_inEMA", "block_receive_period_ema", "Received block period in EMA"),
    # --- Node roles ---
    GaugeSpec(
        f"{PREFIX}baker_running", "baker_running", "Bool value of whether baker is running. true=1, false=0"
    ),
    GaugeSpec(
        f"{PREFIX}consensus_running",
        "consensus_running",
        "Bool value of whether consensus module is running. true=1, false=0",
    ),
    # --- Baker ---
    GaugeSpec(f"{PREFIX}baker_id", "baker_id", "Baker ID in integer"),
    GaugeSpec(f"{PREFIX}baker_lottery_power", "baker_lottery_power", "Baker Block Minting Probability"),
    GaugeSpec(
        f"{PREFIX}estimated_baking_block_per_day",
        "estimated_baking_block",
        "The number of blocks your baker is expected to bake per day",
    ),
)
