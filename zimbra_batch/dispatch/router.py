"""Request router: the dispatch core's entry point."""

from __future__ import annotations

import asyncio

from zimbra_batch.dispatch.coalescer import BatchCoalescer
from zimbra_batch.dispatch.executor import SingleCallExecutor
from zimbra_batch.dispatch.session import (
    PLACEHOLDER_SESSION_ID,
    NotificationRelay,
    SessionState,
)
from zimbra_batch.request.models import Request
from zimbra_batch.request.ports import NotificationHandler, Transport


class RequestRouter:
    """Sends account-scoped requests alone and batches everything else.

    Owns the session state shared by both paths.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        notification_handler: NotificationHandler | None = None,
        initial_session_id: str = PLACEHOLDER_SESSION_ID,
        debug: bool = False,
    ):
        self._session = SessionState(NotificationRelay(notification_handler), initial_session_id)
        self._coalescer = BatchCoalescer(transport, self._session, debug=debug)
        self._executor = SingleCallExecutor(transport, self._session, debug=debug)

    @property
    def session_id(self) -> str:
        return self._session.id

    @property
    def in_flight(self) -> int:
        return self._coalescer.in_flight + self._executor.in_flight

    def submit(self, request: Request) -> asyncio.Future:
        if request.account_name:
            return self._executor.submit(request)
        return self._coalescer.submit(request)

    async def drain(self) -> None:
        """Wait until every submitted call has completed."""
        # Let a scheduled flush run before looking at in-flight tasks.
        while self._coalescer.pending_count:
            await asyncio.sleep(0)
        await self._coalescer.drain()
        await self._executor.drain()
