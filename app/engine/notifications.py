"""
In-process publication of applied deliveries.

The engine only announces what happened; relaying it to spectators
(websocket, polling) is up to whoever subscribes.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from app.engine.state import DeliveryEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryApplied:
    match_id: int
    event_id: int
    sequence: Optional[int]
    event: DeliveryEvent
    runs: int
    wickets: int
    legal_balls: int
    innings_ended: bool = False
    match_completed: bool = False
    result_summary: Optional[str] = None


Subscriber = Callable[[DeliveryApplied], None]


class DeliveryPublisher:
    def __init__(self):
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback. Returns a function that removes it again."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, notification: DeliveryApplied) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(notification)
            except Exception:
                # Scoring has already committed at this point
                logger.exception("Delivery subscriber failed for match %s", notification.match_id)


publisher = DeliveryPublisher()
