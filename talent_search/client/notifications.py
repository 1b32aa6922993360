from typing import Callable, List
from enum import Enum
import logging

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class NotificationVariant(str, Enum):
    DEFAULT = 'default'
    DESTRUCTIVE = 'destructive'


class Notification(BaseModel):
    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT


class NotificationCenter:
    """Collects user-facing notifications and fans them out to listeners."""

    def __init__(self):
        self.history: List[Notification] = []
        self._listeners: List[Callable[[Notification], None]] = []

    def subscribe(self, listener: Callable[[Notification], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, title: str, description: str,
               variant: NotificationVariant = NotificationVariant.DEFAULT) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.history.append(notification)
        log = logger.warning if variant == NotificationVariant.DESTRUCTIVE else logger.info
        log(f"{title}: {description}")
        for listener in list(self._listeners):
            listener(notification)
        return notification

    def error(self, title: str, description: str) -> Notification:
        return self.notify(title, description, NotificationVariant.DESTRUCTIVE)

    @property
    def last(self):
        return self.history[-1] if self.history else None
