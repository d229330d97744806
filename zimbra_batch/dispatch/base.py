"""Shared completion logic for the batch and single-call paths."""

from __future__ import annotations

import asyncio
import logging
from typing import Coroutine, Sequence

from zimbra_batch.dispatch.session import SessionState
from zimbra_batch.errors import ZimbraProtocolError
from zimbra_batch.request.models import Envelope, Failure, ItemResult
from zimbra_batch.request.ports import Transport

log = logging.getLogger("zimbra.batch")


def settle(future: asyncio.Future, result: ItemResult) -> None:
    # A caller may have stopped waiting; the call completes regardless.
    if future.done():
        return
    if isinstance(result, Failure):
        future.set_exception(result.error)
    else:
        future.set_result(result.body)


def reject(future: asyncio.Future, error: BaseException) -> None:
    if future.done():
        return
    if isinstance(error, asyncio.CancelledError):
        future.cancel()
    else:
        future.set_exception(error)


class BaseDispatch:
    def __init__(self, transport: Transport, session: SessionState, *, debug: bool = False):
        self._transport = transport
        self._session = session
        self._debug = debug
        self._tasks: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _call(self, envelope: Envelope, futures: Sequence[asyncio.Future]) -> None:
        """Run one transport call and hand each caller its own outcome."""
        try:
            reply = await self._transport.execute(envelope)
            if len(reply.results) != len(futures):
                raise ZimbraProtocolError(
                    f"expected {len(futures)} result(s), got {len(reply.results)}"
                )
        except asyncio.CancelledError as e:
            for future in futures:
                reject(future, e)
            raise
        except Exception as e:
            names = ", ".join(r.name for r in envelope.requests)
            log.warning(f"Zimbra call failed for [{names}]: {type(e).__name__}: {e}")
            for future in futures:
                reject(future, e)
            return

        self._session.absorb(reply)

        for request, future, result in zip(envelope.requests, futures, reply.results):
            if self._debug:
                log.debug(f"[Batch Client Request] {request.name} {request.body!r} -> {result!r}")
            settle(future, result)
