__version__ = "1.3.0"

from concordium_exporter.builder import SnapshotBuilder, build_snapshot  # noqa: E402
from concordium_exporter.models import MetricsSnapshot  # noqa: E402
from concordium_exporter.publisher import GaugePublisher  # noqa: E402

__all__ = ["GaugePublisher", "MetricsSnapshot", "SnapshotBuilder", "build_snapshot", "__version__"]
