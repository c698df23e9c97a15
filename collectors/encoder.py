"""Categorical vocabularies and one-hot gauge encoding"""
from typing import List, Sequence
from metrics.models import Observation


SERVICE_STATES = (
    "stopped", "start pending", "stop pending", "running",
    "continue pending", "pause pending", "paused", "unknown",
)

SERVICE_STATUSES = (
    "ok", "error", "degraded", "unknown",
    "pred fail", "starting", "stopping", "service",
    "stressed", "nonrecover", "no contact", "lost comm",
)

SERVICE_START_MODES = (
    "boot", "system", "auto", "manual", "disabled",
)


def encode_onehot(identity_label: str, observed_value: str, vocabulary: Sequence[str],
                  timestamp: float, target_metric, sink) -> List[Observation]:
    """Emit one observation per vocabulary entry, 1.0 for the matching entry and 0.0 otherwise

    Matching is case-insensitive. A value outside the vocabulary produces only
    0.0 observations.

    Args:
        identity_label: First label value of every series (e.g. the service name)
        observed_value: Raw categorical value read from the row
        vocabulary: Canonical entries, emitted in order as the second label value
        timestamp: Cycle timestamp shared by every observation
        target_metric: Gauge family handle with two label keys
        sink: Anything whose set_gauge(handle, timestamp, value, label_values)
            returns the recorded Observation

    Returns:
        The emitted observations, in vocabulary order
    """
    observed = (observed_value or "").casefold()
    emitted = []

    for entry in vocabulary:
        value = 1.0 if observed == entry.casefold() else 0.0
        emitted.append(sink.set_gauge(target_metric, timestamp, value, (identity_label, entry)))

    return emitted
