"""In-process broadcast hub for connected realtime sessions."""

import asyncio
from uuid import UUID, uuid4

import logfire

from chorus.domain.model.event import Event
from chorus.domain.service.publisher import EventPublisher


class Subscription:
    """One connected observer: a bounded queue of pending events."""

    def __init__(self, maxsize: int) -> None:
        self.id: UUID = uuid4()
        self.dropped = 0
        self._queue: asyncio.Queue[Event] = asyncio.Queue(maxsize=maxsize)

    def offer(self, event: Event) -> bool:
        """Queue an event without waiting; drop it when the queue is full."""
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            return False
        return True

    async def next_event(self) -> Event:
        """Wait for the next queued event."""
        return await self._queue.get()

    @property
    def pending(self) -> int:
        return self._queue.qsize()


class BroadcastHub(EventPublisher):
    """Set of connected observers with best-effort publish-to-all.

    There is no acknowledgement, retry or replay. An observer whose queue
    is full misses the event; everybody else still gets it.
    """

    def __init__(self, queue_size: int = 100) -> None:
        self.queue_size = queue_size
        self._subscriptions: dict[UUID, Subscription] = {}

    def subscribe(self) -> Subscription:
        """Register a new observer."""
        subscription = Subscription(maxsize=self.queue_size)
        self._subscriptions[subscription.id] = subscription
        logfire.info(
            "Observer subscribed",
            subscription_id=str(subscription.id),
            observers=len(self._subscriptions),
        )
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove an observer. Unknown subscriptions are ignored."""
        if self._subscriptions.pop(subscription.id, None) is not None:
            logfire.info(
                "Observer unsubscribed",
                subscription_id=str(subscription.id),
                observers=len(self._subscriptions),
                dropped=subscription.dropped,
            )

    @property
    def observer_count(self) -> int:
        return len(self._subscriptions)

    def publish(self, event: Event) -> int:
        """Deliver an event to every registered observer."""
        delivered = 0
        # Copy: observers may unsubscribe while we iterate
        for subscription in list(self._subscriptions.values()):
            if subscription.offer(event):
                delivered += 1
            else:
                logfire.warn(
                    "Observer queue full, event dropped",
                    subscription_id=str(subscription.id),
                    event_type=event.type.value,
                )

        logfire.debug(
            "Event published",
            event_type=event.type.value,
            delivered=delivered,
            observers=len(self._subscriptions),
        )
        return delivered
