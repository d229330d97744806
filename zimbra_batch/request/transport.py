"""HTTP transport for the Zimbra SOAP endpoint.

Owns the aiohttp client session. Payload shaping/parsing lives in
``envelope.py``.
"""

from __future__ import annotations

import asyncio
import json
import logging

import aiohttp

from zimbra_batch.config import ZimbraClientConfig
from zimbra_batch.errors import ZimbraHTTPError, ZimbraProtocolError, ZimbraTransportError
from zimbra_batch.request.envelope import FAULT, build_soap_payload, parse_reply, soap_url
from zimbra_batch.request.models import Envelope, Reply

log = logging.getLogger("zimbra")


def build_http_timeout(config: ZimbraClientConfig) -> aiohttp.ClientTimeout:
    return aiohttp.ClientTimeout(total=float(config.http_timeout_s))


def _carries_fault(payload: object) -> bool:
    body = payload.get("Body") if isinstance(payload, dict) else None
    return isinstance(body, dict) and FAULT in body


class HttpTransport:
    """POSTs JSON SOAP envelopes with aiohttp."""

    def __init__(
        self,
        config: ZimbraClientConfig,
        session: aiohttp.ClientSession | None = None,
    ):
        self._config = config
        self._session = session
        self._owns_session = session is None

    def _client_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=build_http_timeout(self._config))
            self._owns_session = True
        return self._session

    async def execute(self, envelope: Envelope) -> Reply:
        url = soap_url(self._config.origin, self._config.soap_pathname, envelope)
        payload = build_soap_payload(
            envelope,
            user_agent=self._config.user_agent,
            auth_token=self._config.auth_token,
        )

        try:
            async with self._client_session().post(url, json=payload) as resp:
                status = resp.status
                reason = resp.reason
                raw = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ZimbraTransportError(
                f"Zimbra request to {url} failed: {type(e).__name__}: {e}"
            ) from e

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ZimbraProtocolError(
                f"reply from {url} is not UTF-8 (HTTP {status})",
                payload_preview=raw[:200].decode("utf-8", errors="replace"),
                status=status,
            ) from e

        try:
            data = json.loads(text) if text else None
        except json.JSONDecodeError:
            data = None

        if status >= 400:
            # Faults (per single call, or for a rejected BatchRequest) come back as
            # HTTP 500 with a regular envelope.
            if _carries_fault(data):
                log.debug(f"Zimbra HTTP {status} carried a SOAP fault for {url}")
                return parse_reply(envelope, data)
            raise ZimbraHTTPError(status, url=url, detail=text.strip() or reason)

        if data is None:
            raise ZimbraProtocolError("reply is not JSON", payload_preview=text[:200], status=status)
        return parse_reply(envelope, data)

    async def aclose(self) -> None:
        session = self._session
        self._session = None
        if session is not None and self._owns_session and not session.closed:
            await session.close()
