"""Zimbra client exceptions.

Two failure kinds reach callers:

- ``ZimbraFaultError``: the server rejected one specific request. Only the
  caller that issued that request sees it, even when it travelled in a batch.
- ``ZimbraTransportError`` (and subclasses): the HTTP call itself failed, so
  every request carried by that call fails with the same exception.
"""

from __future__ import annotations


class ZimbraError(RuntimeError):
    """Base class for Zimbra client errors."""


class ZimbraFaultError(ZimbraError):
    """SOAP fault returned for a single request."""

    def __init__(
        self,
        reason: str,
        *,
        code: str | None = None,
        request_name: str | None = None,
        fault: dict | None = None,
    ):
        self.reason = reason
        self.code = code
        self.request_name = request_name
        self.fault = fault
        super().__init__(self.__str__())

    def __str__(self) -> str:
        prefix = f"{self.request_name}: " if self.request_name else ""
        if self.code:
            return f"{prefix}{self.reason} ({self.code})"
        return f"{prefix}{self.reason}"


class ZimbraTransportError(ZimbraError):
    """The HTTP call could not complete or returned an unusable reply."""


class ZimbraHTTPError(ZimbraTransportError):
    """Non-2xx reply from the SOAP endpoint that carries no SOAP fault.

    Typically a proxy/load-balancer page (502/503) or a servlet error; the
    body is kept as ``payload_preview`` since it is rarely JSON.
    """

    def __init__(
        self,
        status: int,
        *,
        url: str,
        detail: str | None = None,
        method: str = "POST",
    ):
        self.status = int(status)
        self.url = url
        self.method = method
        self.payload_preview = (detail or "").strip()[:200] or None
        super().__init__(self.__str__())

    @property
    def retryable(self) -> bool:
        """Gateway/availability errors where resubmitting may succeed."""
        return self.status in {502, 503, 504}

    def __str__(self) -> str:
        text = f"Zimbra SOAP {self.method} {self.url} returned HTTP {self.status}"
        if self.payload_preview:
            return f"{text}: {self.payload_preview}"
        return text


class ZimbraProtocolError(ZimbraTransportError):
    """Reply that cannot be read as a SOAP envelope (not UTF-8, not JSON, or
    missing/duplicate batch positions)."""

    def __init__(
        self,
        message: str,
        *,
        payload_preview: str | None = None,
        status: int | None = None,
    ):
        self.message = message
        self.payload_preview = payload_preview
        self.status = status
        super().__init__(self.__str__())

    def __str__(self) -> str:
        text = f"Zimbra protocol error: {self.message}"
        if self.status is not None:
            text = f"{text} [HTTP {self.status}]"
        if self.payload_preview:
            return f"{text} (payload={self.payload_preview!r})"
        return text
