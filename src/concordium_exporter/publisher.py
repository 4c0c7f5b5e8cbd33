"""Per-scrape gauge publication."""

from __future__ import annotations

from typing import Iterator

from loguru import logger
from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from concordium_exporter.builder import NodeAPI, build_snapshot
from concordium_exporter.errors import CollectionError
from concordium_exporter.gauges import GAUGES
from concordium_exporter.models import MetricsSnapshot


class SnapshotCollector(Collector):
    """Exposes one snapshot as constant gauges. Yields nothing without a snapshot."""

    def __init__(self, snapshot: MetricsSnapshot | None):
        self._snapshot = snapshot

    def describe(self) -> Iterator[GaugeMetricFamily]:
        for gauge in GAUGES:
            yield GaugeMetricFamily(gauge.name, gauge.help)

    def collect(self) -> Iterator[GaugeMetricFamily]:
        if self._snapshot is None:
            return
        for gauge in GAUGES:
            yield GaugeMetricFamily(gauge.name, gauge.help, value=gauge.value(self._snapshot))


def render_snapshot(snapshot: MetricsSnapshot | None) -> bytes:
    """Render in the Prometheus text format on a throwaway registry, so nothing
    but the node gauges (no python_gc_*, process_*, ...) ends up in the output."""
    registry = CollectorRegistry()
    registry.register(SnapshotCollector(snapshot))
    return generate_latest(registry)


class GaugePublisher:
    """Builds a fresh snapshot for every scrape and renders it.

    Never raises for a failed build: the error is logged and the scrape is
    rendered empty so the exporter itself keeps looking healthy.
    """

    def __init__(self, client: NodeAPI, *, report_baker: bool = False, scrape_timeout_sec: float | None = 10.0):
        self._client = client
        self._report_baker = report_baker
        self._scrape_timeout_sec = scrape_timeout_sec

    async def collect_snapshot(self) -> MetricsSnapshot | None:
        try:
            return await build_snapshot(
                self._client,
                report_baker=self._report_baker,
                timeout_sec=self._scrape_timeout_sec,
            )
        except CollectionError as e:
            logger.error(f"Failed to collect node metrics: {e}")
        except Exception:
            logger.exception("Unexpected error while collecting node metrics")
        return None

    async def scrape(self) -> bytes:
        return render_snapshot(await self.collect_snapshot())
