"""Session id and notification propagation.

Both are written only from call-completion code running on the event loop,
so no locking is needed.
"""

from __future__ import annotations

import logging
from typing import Any

from zimbra_batch.request.models import Reply
from zimbra_batch.request.ports import NotificationHandler

log = logging.getLogger("zimbra.batch")

# Value sent until the server hands out a real session id.
PLACEHOLDER_SESSION_ID = "1"


class NotificationRelay:
    """Forwards notification payloads to the embedding application."""

    def __init__(self, handler: NotificationHandler | None = None):
        self._handler = handler

    def relay(self, notification: Any) -> None:
        if notification is None or self._handler is None:
            return
        try:
            self._handler(notification)
        except Exception:
            # The call itself succeeded; its callers still get their results.
            log.exception("Notification handler failed")


class SessionState:
    """The one session id shared by every call of a dispatcher."""

    def __init__(
        self,
        relay: NotificationRelay,
        initial_id: str = PLACEHOLDER_SESSION_ID,
    ):
        self._id = initial_id
        self._relay = relay

    @property
    def id(self) -> str:
        return self._id

    def snapshot(self) -> str:
        return self._id

    def absorb(self, reply: Reply) -> None:
        """Apply a completed call's envelope: new session id, then notification."""
        if reply.session_id and reply.session_id != self._id:
            log.debug(f"Session id replaced: {self._id} -> {reply.session_id}")
            self._id = reply.session_id
        self._relay.relay(reply.notification)
