"""Per-operation event outbox."""

import logfire

from chorus.domain.model.event import Event
from chorus.domain.service.publisher import EventPublisher


class TransactionalPublisher(EventPublisher):
    """Publisher for one comment operation.

    Events go straight to the hub until the store opens a transaction with
    ``defer()``. From then on they wait for ``flush()`` after the commit,
    or are dropped by ``discard()`` when the transaction does not commit.
    """

    def __init__(self, hub: EventPublisher) -> None:
        self.hub = hub
        self._pending: list[Event] | None = None

    @property
    def deferred(self) -> bool:
        return self._pending is not None

    def defer(self) -> None:
        """Hold events until the surrounding transaction ends."""
        if self._pending is None:
            self._pending = []

    def publish(self, event: Event) -> int:
        if self._pending is None:
            return self.hub.publish(event)
        self._pending.append(event)
        return 0

    def publish_now(self, event: Event) -> int:
        return self.hub.publish(event)

    def flush(self) -> int:
        """Publish held events after a successful commit.

        Returns:
            Number of deliveries across all held events
        """
        events, self._pending = self._pending or [], None
        return sum(self.hub.publish(event) for event in events)

    def discard(self) -> int:
        """Drop held events after a rollback.

        Returns:
            Number of dropped events
        """
        events, self._pending = self._pending or [], None
        if events:
            logfire.info(
                "Events dropped with rolled back operation",
                event_types=[event.type.value for event in events],
            )
        return len(events)
