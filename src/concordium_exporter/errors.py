from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from concordium_exporter.models import MetricsSnapshot


class CollectionError(Exception):
    """A snapshot build failed at ``step``.

    ``partial`` holds whatever the build had assembled before the failure. It is
    attached by the builder and is never published.
    """

    def __init__(self, step: str, message: str, partial: MetricsSnapshot | None = None):
        super().__init__(f"{step}: {message}")
        self.step = step
        self.message = message
        self.partial = partial


class NodeTransportError(CollectionError):
    """The gRPC call to the node failed."""

    def __init__(self, step: str, code: str, details: str | None = None):
        super().__init__(step, f"rpc failed with {code}: {details or 'no details'}")
        self.code = code
        self.details = details


class PayloadDecodeError(CollectionError):
    """An embedded JSON payload could not be decoded."""


class ScrapeTimeoutError(CollectionError):
    def __init__(self, timeout_sec: float):
        super().__init__("scrape", f"deadline of {timeout_sec}s exceeded")
        self.timeout_sec = timeout_sec
