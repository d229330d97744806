"""Batch coalescer.

Requests submitted during one event-loop iteration are collected and sent as
a single BatchRequest. The first submission of a window schedules the flush
with ``loop.call_soon``, so everything submitted before the loop gets back
to its ready queue lands in the same batch.
"""

from __future__ import annotations

import asyncio

from zimbra_batch.dispatch.base import BaseDispatch, log
from zimbra_batch.dispatch.session import SessionState
from zimbra_batch.request.models import Envelope, Request
from zimbra_batch.request.ports import Transport


class BatchCoalescer(BaseDispatch):
    def __init__(self, transport: Transport, session: SessionState, *, debug: bool = False):
        super().__init__(transport, session, debug=debug)
        self._pending: list[tuple[Request, asyncio.Future]] = []
        self._flush_handle: asyncio.Handle | None = None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def submit(self, request: Request) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._pending.append((request, future))
        if self._flush_handle is None:
            self._flush_handle = loop.call_soon(self._flush)
        return future

    def _flush(self) -> None:
        self._flush_handle = None
        batch, self._pending = self._pending, []
        if not batch:
            return

        requests = tuple(request for request, _ in batch)
        futures = [future for _, future in batch]
        envelope = Envelope(requests=requests, session_id=self._session.snapshot())
        log.debug(
            f"Flushing batch of {len(requests)} "
            f"[{', '.join(r.name for r in requests)}] session={envelope.session_id}"
        )
        self._spawn(self._call(envelope, futures))
