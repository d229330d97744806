"""Zimbra JSON SOAP envelope codec.

Pure functions: build the outgoing ``{"Header", "Body"}`` document for an
``Envelope`` and turn the server's reply document back into a ``Reply``.

Batch replies are keyed by response name rather than ordered, e.g.::

    {"BatchResponse": {
        "GetFolderResponse": [{"requestId": "0", ...}],
        "Fault": [{"requestId": "1", "Reason": {"Text": "..."}}]}}

so every sub-request carries its position as ``requestId`` and the reply is
put back in submission order from that.
"""

from __future__ import annotations

import json
from typing import Any

from zimbra_batch.errors import ZimbraFaultError, ZimbraProtocolError
from zimbra_batch.request.models import (
    Envelope,
    Failure,
    ItemResult,
    Namespace,
    Reply,
    Request,
    Success,
)

BATCH_REQUEST = "BatchRequest"
BATCH_RESPONSE = "BatchResponse"
FAULT = "Fault"


def request_key(name: str) -> str:
    return f"{name}Request"


def response_key(name: str) -> str:
    return f"{name}Response"


def _preview(payload: object, limit: int = 200) -> str:
    try:
        text = json.dumps(payload, default=str)
    except (TypeError, ValueError):
        text = repr(payload)
    return text[:limit]


def _request_item(request: Request) -> dict[str, Any]:
    return {"_jsns": Namespace(request.namespace).value, **(request.body or {})}


def build_soap_payload(
    envelope: Envelope, *, user_agent: str, auth_token: str | None = None
) -> dict[str, Any]:
    context: dict[str, Any] = {
        "_jsns": Namespace.Zimbra.value,
        "session": {"id": envelope.session_id},
        "userAgent": {"name": user_agent},
    }
    if auth_token:
        context["authToken"] = auth_token
    if envelope.account_name:
        context["account"] = {"by": "name", "_content": envelope.account_name}

    if envelope.batch:
        batch: dict[str, Any] = {"_jsns": Namespace.Zimbra.value, "onerror": "continue"}
        for position, request in enumerate(envelope.requests):
            item = _request_item(request)
            item["requestId"] = position
            batch.setdefault(request_key(request.name), []).append(item)
        body = {BATCH_REQUEST: batch}
    else:
        (request,) = envelope.requests
        body = {request_key(request.name): _request_item(request)}

    return {"Header": {"context": context}, "Body": body}


def soap_url(origin: str, soap_pathname: str, envelope: Envelope) -> str:
    if envelope.batch:
        return f"{origin}{soap_pathname}/{BATCH_REQUEST}"
    return f"{origin}{soap_pathname}/{request_key(envelope.requests[0].name)}"


def fault_error(fault: object, request_name: str | None = None) -> ZimbraFaultError:
    if not isinstance(fault, dict):
        return ZimbraFaultError(str(fault), request_name=request_name)

    reason = fault.get("Reason")
    text = reason.get("Text") if isinstance(reason, dict) else None

    code = None
    detail = fault.get("Detail")
    if isinstance(detail, dict):
        error = detail.get("Error")
        if isinstance(error, dict):
            code = error.get("Code")

    return ZimbraFaultError(
        str(text or "Unknown SOAP fault"),
        code=code if isinstance(code, str) else None,
        request_name=request_name,
        fault=fault,
    )


def _extract_session_id(context: dict) -> str | None:
    session = context.get("session")
    if isinstance(session, dict):
        session = session.get("id") or session.get("_content")
    if isinstance(session, (str, int)) and str(session):
        return str(session)
    return None


def _extract_notification(context: dict) -> object | None:
    notify = context.get("notify")
    if isinstance(notify, list):
        return notify[0] if notify else None
    return notify


def _parse_batch(envelope: Envelope, body: dict) -> tuple[ItemResult, ...]:
    # The server rejected the BatchRequest as a whole (e.g. service.AUTH_EXPIRED):
    # every request fails with that fault, as it would have on its own.
    if FAULT in body and BATCH_RESPONSE not in body:
        return tuple(
            Failure(fault_error(body[FAULT], request.name)) for request in envelope.requests
        )

    batch = body.get(BATCH_RESPONSE)
    if not isinstance(batch, dict):
        raise ZimbraProtocolError("missing BatchResponse", payload_preview=_preview(body))

    size = len(envelope.requests)
    slots: list[ItemResult | None] = [None] * size

    for key, entries in batch.items():
        if key.startswith("_"):
            continue
        if isinstance(entries, dict):
            entries = [entries]
        if not isinstance(entries, list):
            raise ZimbraProtocolError(
                f"unexpected BatchResponse entry {key!r}", payload_preview=_preview(entries)
            )
        for entry in entries:
            if not isinstance(entry, dict):
                raise ZimbraProtocolError(
                    f"unexpected {key} item", payload_preview=_preview(entry)
                )
            try:
                position = int(entry.get("requestId"))
            except (TypeError, ValueError):
                raise ZimbraProtocolError(
                    f"{key} item without a usable requestId",
                    payload_preview=_preview(entry),
                ) from None
            if not 0 <= position < size or slots[position] is not None:
                raise ZimbraProtocolError(
                    f"unexpected requestId {position} in batch of {size}",
                    payload_preview=_preview(entry),
                )

            name = envelope.requests[position].name
            if key == FAULT:
                slots[position] = Failure(fault_error(entry, name))
            else:
                slots[position] = Success(
                    {k: v for k, v in entry.items() if k != "requestId"}
                )

    missing = [i for i, slot in enumerate(slots) if slot is None]
    if missing:
        raise ZimbraProtocolError(
            f"no reply for requestId(s) {missing}", payload_preview=_preview(batch)
        )
    return tuple(slots)  # type: ignore[arg-type]


def _parse_single(envelope: Envelope, body: dict) -> tuple[ItemResult, ...]:
    name = envelope.requests[0].name
    if FAULT in body:
        return (Failure(fault_error(body[FAULT], name)),)
    key = response_key(name)
    if key not in body:
        raise ZimbraProtocolError(f"missing {key}", payload_preview=_preview(body))
    return (Success(body[key]),)


def parse_reply(envelope: Envelope, payload: object) -> Reply:
    if not isinstance(payload, dict):
        raise ZimbraProtocolError("reply is not a JSON object", payload_preview=_preview(payload))

    body = payload.get("Body")
    if not isinstance(body, dict):
        raise ZimbraProtocolError("reply has no Body", payload_preview=_preview(payload))

    header = payload.get("Header")
    context = header.get("context") if isinstance(header, dict) else None
    if not isinstance(context, dict):
        context = {}

    if envelope.batch:
        results = _parse_batch(envelope, body)
    else:
        results = _parse_single(envelope, body)

    return Reply(
        results=results,
        session_id=_extract_session_id(context),
        notification=_extract_notification(context),
    )
