"""Single-call executor for requests acting as another account.

Such requests cannot share a BatchRequest (the account is set once per SOAP
header), so each one becomes its own HTTP call.
"""

from __future__ import annotations

import asyncio

from zimbra_batch.dispatch.base import BaseDispatch, log
from zimbra_batch.request.models import Envelope, Request


class SingleCallExecutor(BaseDispatch):
    def submit(self, request: Request) -> asyncio.Future:
        if not request.account_name:
            raise ValueError(f"{request.name} has no account scope")

        future = asyncio.get_running_loop().create_future()
        envelope = Envelope(
            requests=(request,),
            session_id=self._session.snapshot(),
            account_name=request.account_name,
            batch=False,
        )
        log.debug(
            f"Dispatching {request.name} as {request.account_name} "
            f"session={envelope.session_id}"
        )
        self._spawn(self._call(envelope, [future]))
        return future
