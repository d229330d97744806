"""Ports (interfaces) consumed by the dispatch core.

The core only ever talks to a ``Transport``; the aiohttp implementation lives
in ``transport.py`` and tests substitute their own.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol

from zimbra_batch.request.models import Envelope, Reply

# Receives the opaque notification payload of a completed call.
NotificationHandler = Callable[[Any], None]


class Transport(Protocol):
    async def execute(self, envelope: Envelope) -> Reply:
        """Run one HTTP call.

        Raises ``ZimbraTransportError`` when the call as a whole fails.
        """
        ...

    async def aclose(self) -> None: ...
