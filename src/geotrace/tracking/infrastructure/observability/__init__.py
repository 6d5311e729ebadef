"""Observability for tracking infrastructure."""

from tracking.infrastructure.observability.repository_probe import (
    DefaultTrackingRepositoryProbe,
    TrackingRepositoryProbe,
)

__all__ = [
    "DefaultTrackingRepositoryProbe",
    "TrackingRepositoryProbe",
]
