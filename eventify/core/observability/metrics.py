from __future__ import annotations

from collections import Counter
from typing import Dict

from prometheus_client import Counter as PromCounter

# Publish counters (dispatcher-level)
_PUBLISHED = Counter()

# Artifact write outcomes (generator-level)
_ARTIFACTS = Counter()

_PROM_PUBLISHED = PromCounter(
    "eventify_events_published_total",
    "Events handed to the bus by the dispatcher",
    ["event_type"],
)

_PROM_ARTIFACTS = PromCounter(
    "eventify_artifacts_written_total",
    "Generated artifact writes by outcome",
    ["artifact", "status"],
)


def reset_metrics() -> None:
    """
    Test helper: clears the in-process counters to avoid cross-test leakage.
    Prometheus counters are process-global and are left alone.
    """
    _PUBLISHED.clear()
    _ARTIFACTS.clear()


def inc_published(event_type: str) -> None:
    _PUBLISHED["published_total"] += 1
    _PUBLISHED[event_type] += 1
    _PROM_PUBLISHED.labels(event_type=event_type).inc()


def inc_artifact(artifact: str, ok: bool) -> None:
    status = "ok" if ok else "failed"
    _ARTIFACTS[f"{artifact}|{status}"] += 1
    _ARTIFACTS[f"artifacts_{status}"] += 1
    _PROM_ARTIFACTS.labels(artifact=artifact, status=status).inc()


def snapshot_published() -> Dict[str, int]:
    return dict(_PUBLISHED)


def snapshot_artifacts() -> Dict[str, int]:
    return dict(_ARTIFACTS)
