"""Request/reply data structures shared by the dispatch core and transports."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from zimbra_batch.errors import ZimbraFaultError


class Namespace(str, Enum):
    Mail = "urn:zimbraMail"
    Account = "urn:zimbraAccount"
    Zimbra = "urn:zimbra"


@dataclass(frozen=True, eq=False)
class Request:
    """One logical SOAP request.

    ``eq=False`` keeps identity per submission: two structurally equal
    requests are still two requests.

    ``body`` is deep-copied into a read-only mapping, so later changes to the
    caller's dict never reach the wire.
    """

    name: str
    namespace: Namespace = Namespace.Mail
    body: Mapping[str, Any] | None = None
    # Account to act as; forces the single-call path.
    account_name: str | None = None

    def __post_init__(self) -> None:
        if self.body is not None:
            object.__setattr__(self, "body", MappingProxyType(copy.deepcopy(dict(self.body))))


@dataclass(frozen=True)
class Success:
    body: Any


@dataclass(frozen=True)
class Failure:
    error: ZimbraFaultError


ItemResult = Success | Failure


@dataclass(frozen=True)
class Envelope:
    """Everything one transport call carries out."""

    requests: tuple[Request, ...]
    session_id: str
    account_name: str | None = None
    batch: bool = True


@dataclass(frozen=True)
class Reply:
    """Everything one transport call brings back.

    ``results`` is positionally aligned with ``Envelope.requests``.
    """

    results: tuple[ItemResult, ...]
    session_id: str | None = None
    notification: Any = None
