from typing import Any, Callable, List, Optional
import logging

logger = logging.getLogger(__name__)


def _user_id_of(session: Any) -> Optional[str]:
    user = getattr(session, "user", None) if session is not None else None
    user_id = getattr(user, "id", None)
    return str(user_id) if user_id else None


class SessionProvider:
    """
    Holds the signed-in user id and tells listeners when it changes.

    Can be bound to a Supabase auth client so that sign-in/sign-out events
    keep it current.
    """

    def __init__(self, user_id: Optional[str] = None):
        self._user_id = user_id
        self._listeners: List[Callable[[Optional[str]], None]] = []
        self._subscription = None

    def get_current_user(self) -> Optional[str]:
        return self._user_id

    def on_session_change(self, callback: Callable[[Optional[str]], None]) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def set_session(self, user_id: Optional[str]) -> None:
        if user_id == self._user_id:
            return
        self._user_id = user_id
        logger.info(f"Session changed: {'signed in' if user_id else 'signed out'}")
        for callback in list(self._listeners):
            callback(user_id)

    async def bind(self, auth) -> None:
        """Track a Supabase auth client (``client.auth``)."""
        session = await auth.get_session()
        self.set_session(_user_id_of(session))
        self._subscription = auth.on_auth_state_change(
            lambda _event, new_session: self.set_session(_user_id_of(new_session))
        )

    def unbind(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
