"""Broadcast event."""

from typing import Any

from chorus.domain.model.common import DomainModel
from chorus.domain.value import EventType


class Event(DomainModel):
    """State change fanned out to every connected observer."""

    type: EventType
    data: dict[str, Any]

    def to_message(self) -> dict[str, Any]:
        """Render the event as the JSON envelope sent over the wire."""
        return {"type": self.type.value, "data": self.data}
