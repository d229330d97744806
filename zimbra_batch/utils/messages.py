"""Post-processing for normalized messages."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

# Zimbra address type codes
ADDRESS_FIELDS = {
    "f": "from",
    "t": "to",
    "c": "cc",
    "b": "bcc",
    "s": "sender",
    "r": "replyTo",
}


def attachment_url(origin: str, message_id: str, part: str) -> str:
    return f"{origin}/service/home/~/?auth=co&id={quote(str(message_id))}&part={quote(str(part))}"


def _walk_parts(parts: list[dict]) -> list[dict]:
    out: list[dict] = []
    for part in parts:
        if not isinstance(part, dict):
            continue
        out.append(part)
        children = part.get("mimeParts")
        if isinstance(children, list):
            out.extend(_walk_parts(children))
    return out


def normalize_mime_parts(message: dict[str, Any], origin: str | None = None) -> dict[str, Any]:
    """Lift body text/html and attachments out of the MIME tree."""
    parts = message.get("mimeParts")
    if not isinstance(parts, list):
        return message

    message = dict(message)
    attachments: list[dict] = []
    for part in _walk_parts(parts):
        content_type = str(part.get("contentType") or "").lower()
        if part.get("contentDisposition") == "attachment" or part.get("filename"):
            attachment = dict(part)
            if origin and message.get("id") is not None and part.get("part"):
                attachment["url"] = attachment_url(origin, message["id"], part["part"])
            attachments.append(attachment)
            continue
        if not part.get("body"):
            continue
        if content_type == "text/html" and "html" not in message:
            message["html"] = part.get("content")
        elif content_type == "text/plain" and "text" not in message:
            message["text"] = part.get("content")

    if attachments:
        message["attachments"] = attachments
    return message


def normalize_email_addresses(message: dict[str, Any]) -> dict[str, Any]:
    """Group ``emailAddresses`` into from/to/cc/bcc/sender/replyTo lists."""
    addresses = message.get("emailAddresses")
    if not isinstance(addresses, list):
        return message

    message = dict(message)
    for address in addresses:
        if not isinstance(address, dict):
            continue
        field = ADDRESS_FIELDS.get(address.get("type"))
        if field:
            message.setdefault(field, []).append(address)
    return message
