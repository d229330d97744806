"""SOAP request layer: data model, wire codec and HTTP transport."""

from zimbra_batch.request.models import (
    Envelope,
    Failure,
    ItemResult,
    Namespace,
    Reply,
    Request,
    Success,
)
from zimbra_batch.request.ports import NotificationHandler, Transport
from zimbra_batch.request.transport import HttpTransport

__all__ = [
    "Envelope",
    "Failure",
    "HttpTransport",
    "ItemResult",
    "Namespace",
    "NotificationHandler",
    "Reply",
    "Request",
    "Success",
    "Transport",
]
