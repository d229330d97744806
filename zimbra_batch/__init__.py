"""Batching async client for the Zimbra JSON SOAP API."""

from zimbra_batch.client import ZimbraBatchClient
from zimbra_batch.config import ZimbraClientConfig, get_client_config, load_env
from zimbra_batch.errors import (
    ZimbraError,
    ZimbraFaultError,
    ZimbraHTTPError,
    ZimbraProtocolError,
    ZimbraTransportError,
)
from zimbra_batch.request import Namespace, Request

__all__ = [
    "Namespace",
    "Request",
    "ZimbraBatchClient",
    "ZimbraClientConfig",
    "ZimbraError",
    "ZimbraFaultError",
    "ZimbraHTTPError",
    "ZimbraProtocolError",
    "ZimbraTransportError",
    "get_client_config",
    "load_env",
]
