"""Realtime broadcast providers."""

from dishka import Scope, provide

from chorus.adapter.realtime import BroadcastHub, TransactionalPublisher
from chorus.config import RealtimeSettings
from chorus.domain.service import EventPublisher
from chorus.util.di.base import ProviderBase


class RealtimeProvider(ProviderBase):
    """One hub per application, one outbox per comment operation."""

    @provide(scope=Scope.APP)
    def get_broadcast_hub(self, realtime_settings: RealtimeSettings) -> BroadcastHub:
        """Provide the broadcast hub."""
        return BroadcastHub(queue_size=realtime_settings.queue_size)

    @provide(scope=Scope.REQUEST)
    def get_transactional_publisher(self, hub: BroadcastHub) -> TransactionalPublisher:
        """Provide the outbox the store session flushes after commit."""
        return TransactionalPublisher(hub)

    @provide(scope=Scope.REQUEST)
    def get_event_publisher(self, outbox: TransactionalPublisher) -> EventPublisher:
        """Expose the operation's outbox as the domain's event publisher."""
        return outbox
