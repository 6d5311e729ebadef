"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped metadata that should be included with all
    instrumentation events, so that store activity can be correlated with
    the caller that triggered it.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        user_id: Login of the user performing the operation (if applicable).
        group_id: Tenant group the operation is scoped to (if applicable).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", group_id="g1")
        probe = DefaultTrackingRepositoryProbe().with_context(context)
    """

    request_id: str | None = None
    user_id: str | None = None
    group_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean. The group is
        reported as ``context_group_id`` so it never collides with the
        group an individual probe event is about.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.user_id is not None:
            result["user_id"] = self.user_id
        if self.group_id is not None:
            result["context_group_id"] = self.group_id
        result.update(self.extra)
        return result

    def with_group(self, group_id: str) -> ObservationContext:
        """Create a new context with the group set."""
        return ObservationContext(
            request_id=self.request_id,
            user_id=self.user_id,
            group_id=group_id,
            extra=self.extra,
        )

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return ObservationContext(
            request_id=self.request_id,
            user_id=self.user_id,
            group_id=self.group_id,
            extra={**self.extra, **kwargs},
        )
