"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class StoreProbe(Protocol):
    """Domain probe for store handle observability.

    This probe captures domain-significant events related to opening and
    closing the store and leasing connections from it, without exposing
    logging implementation details.
    """

    def store_opened(self, host: str, database: str) -> None:
        """Record that the store was opened and answered a round trip."""
        ...

    def store_open_failed(self, host: str, database: str, error: Exception) -> None:
        """Record that the store could not be reached while opening."""
        ...

    def store_closed(self, database: str) -> None:
        """Record that the store released its connections."""
        ...

    def lease_acquired(self) -> None:
        """Record that a session lease was handed out."""
        ...

    def lease_released(self) -> None:
        """Record that a session lease was given back."""
        ...

    def lease_failed(self, error: Exception) -> None:
        """Record that a lease failed because the store was unreachable."""
        ...

    def with_context(self, context: ObservationContext) -> StoreProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultStoreProbe:
    """Default implementation of StoreProbe using structlog.

    Supports observation context for including request-scoped metadata
    with all log events.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultStoreProbe:
        """Create a new probe with observation context bound."""
        return DefaultStoreProbe(logger=self._logger, context=context)

    def store_opened(self, host: str, database: str) -> None:
        """Record that the store was opened and answered a round trip."""
        self._logger.info(
            "store_opened",
            host=host,
            database=database,
            **self._get_context_kwargs(),
        )

    def store_open_failed(self, host: str, database: str, error: Exception) -> None:
        """Record that the store could not be reached while opening."""
        self._logger.error(
            "store_open_failed",
            host=host,
            database=database,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def store_closed(self, database: str) -> None:
        """Record that the store released its connections."""
        self._logger.info(
            "store_closed",
            database=database,
            **self._get_context_kwargs(),
        )

    def lease_acquired(self) -> None:
        """Record that a session lease was handed out."""
        self._logger.debug(
            "store_lease_acquired",
            **self._get_context_kwargs(),
        )

    def lease_released(self) -> None:
        """Record that a session lease was given back."""
        self._logger.debug(
            "store_lease_released",
            **self._get_context_kwargs(),
        )

    def lease_failed(self, error: Exception) -> None:
        """Record that a lease failed because the store was unreachable."""
        self._logger.error(
            "store_lease_failed",
            error=str(error),
            **self._get_context_kwargs(),
        )
