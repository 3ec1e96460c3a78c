"""
Diffusion des notifications de changement aux abonnés.

Les événements sont publiés par l'appelant après le commit, jamais pendant
la transaction. Chaque type d'agrégat a son canal ; l'échec d'un abonné est
journalisé sans empêcher la notification des autres.
"""

from collections import defaultdict
from collections.abc import Callable, Iterable

from loguru import logger

from videostore.core.events import AggregateKind, ChangeEvent

CHANNEL_MESSAGES = {
    AggregateKind.ACTOR: "actorListNotification",
    AggregateKind.MOVIE: "movieListNotification",
}

Subscriber = Callable[[str, ChangeEvent], None]


class ChangeBroadcaster:
    """
    Diffuseur de notifications par type d'agrégat.

    Example:
        broadcaster = ChangeBroadcaster()
        unsubscribe = broadcaster.subscribe(AggregateKind.MOVIE, refresh_movie_list)
        broadcaster.publish(outcome.events)
        unsubscribe()
    """

    def __init__(self) -> None:
        self._subscribers: dict[AggregateKind, list[Subscriber]] = defaultdict(list)

    def subscribe(self, kind: AggregateKind, callback: Subscriber) -> Callable[[], None]:
        """
        Abonne un callback aux changements d'un type d'agrégat.

        Returns:
            Fonction de désabonnement
        """
        self._subscribers[kind].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[kind]:
                self._subscribers[kind].remove(callback)

        return unsubscribe

    def subscriber_count(self, kind: AggregateKind) -> int:
        return len(self._subscribers[kind])

    def publish(self, events: Iterable[ChangeEvent]) -> int:
        """
        Envoie chaque événement aux abonnés de son canal.

        Returns:
            Nombre de notifications délivrées
        """
        delivered = 0
        for event in events:
            message = CHANNEL_MESSAGES[event.kind]
            for callback in list(self._subscribers[event.kind]):
                try:
                    callback(message, event)
                except Exception:
                    logger.exception("Échec de notification {} ({})", message, event)
                    continue
                delivered += 1
            logger.debug("{} : {}", message, event)
        return delivered
