"""
Session Store Module
====================

Holds the identity supplied by the auth collaborator. The store does not
authenticate anyone: sign-in and sign-out are reported to it.
"""

from typing import Callable, List, Optional

from contacerta.core.logging import get_logger, identity_id_context
from contacerta.schemas.identity import Identity

# Initialize logger
logger = get_logger(__name__)

# Called with (previous, current)
IdentityListener = Callable[[Optional[Identity], Optional[Identity]], None]


class SessionStore:
    """
    Current identity plus change notification.

    Usage:
        session = SessionStore()
        unsubscribe = session.subscribe(on_identity_change)
        session.sign_in(identity)
    """

    def __init__(self, identity: Optional[Identity] = None):
        self._identity = identity
        self._listeners: List[IdentityListener] = []

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    def sign_in(self, identity: Identity) -> None:
        """Record an authenticated identity (also used for token refresh)."""
        previous = self._identity
        self._identity = identity
        identity_id_context.set(str(identity.id))
        logger.info("session_signed_in", identity_id=str(identity.id))
        self._notify(previous, identity)

    def sign_out(self) -> None:
        previous = self._identity
        if previous is None:
            return
        self._identity = None
        identity_id_context.set(None)
        logger.info("session_signed_out", identity_id=str(previous.id))
        self._notify(previous, None)

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, previous: Optional[Identity], current: Optional[Identity]) -> None:
        for listener in list(self._listeners):
            listener(previous, current)
