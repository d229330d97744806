"""Shared fixtures: a scripted in-memory transport."""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any, Callable

import pytest

from zimbra_batch.request.models import Envelope, Reply, Success


def echo_reply(envelope: Envelope, **kwargs: Any) -> Reply:
    """Every request succeeds with ``{"name": <request name>}``."""
    return Reply(
        results=tuple(Success({"name": r.name}) for r in envelope.requests),
        **kwargs,
    )


class FakeTransport:
    """Records envelopes and answers from a queue of scripted replies.

    A queued item may be a ``Reply``, an exception to raise, or a callable
    taking the envelope. With nothing queued every request is echoed back.
    Set ``gate`` to hold all replies until the event is set.
    """

    def __init__(self) -> None:
        self.envelopes: list[Envelope] = []
        self.gate: asyncio.Event | None = None
        self.closed = False
        self._script: deque[Any] = deque()

    def queue(self, *items: Reply | BaseException | Callable[[Envelope], Reply]) -> None:
        self._script.extend(items)

    async def execute(self, envelope: Envelope) -> Reply:
        self.envelopes.append(envelope)
        item = self._script.popleft() if self._script else echo_reply
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if isinstance(item, BaseException):
            raise item
        if callable(item):
            return item(envelope)
        return item

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
