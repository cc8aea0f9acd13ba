"""Event publisher port."""

from abc import ABC, abstractmethod

from chorus.domain.model.event import Event


class EventPublisher(ABC):
    """Fan-out of result events to connected observers.

    Publishing never blocks and never raises because of a slow or gone
    observer.
    """

    @abstractmethod
    def publish(self, event: Event) -> int:
        """Publish the result of a state change.

        Implementations bound to a store transaction hold the event until
        the transaction commits and drop it if it rolls back.

        Args:
            event: The event to deliver

        Returns:
            Number of observers that accepted the event so far
        """
        pass

    def publish_now(self, event: Event) -> int:
        """Publish an event that must go out even if the operation fails."""
        return self.publish(event)
