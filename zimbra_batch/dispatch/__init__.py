"""Request dispatch core.

- serialized session id (snapshot at dispatch, replaced at completion)
- per-iteration request coalescing into one BatchRequest
- single calls for account-scoped requests
- per-item result isolation
"""

from zimbra_batch.dispatch.coalescer import BatchCoalescer
from zimbra_batch.dispatch.executor import SingleCallExecutor
from zimbra_batch.dispatch.router import RequestRouter
from zimbra_batch.dispatch.session import (
    PLACEHOLDER_SESSION_ID,
    NotificationRelay,
    SessionState,
)

__all__ = [
    "BatchCoalescer",
    "NotificationRelay",
    "PLACEHOLDER_SESSION_ID",
    "RequestRouter",
    "SessionState",
    "SingleCallExecutor",
]
