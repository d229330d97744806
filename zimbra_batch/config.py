"""Client configuration.

Values come from explicit arguments or the environment (call ``load_env()``
first to pick up a ``.env`` file, or the one named by ``ZIMBRA_ENV_FILE``).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_ORIGIN = "http://localhost:8080"
DEFAULT_SOAP_PATHNAME = "/service/soap"
DEFAULT_USER_AGENT = "zimbra-batch-client"


@dataclass(frozen=True)
class ZimbraClientConfig:
    origin: str = DEFAULT_ORIGIN
    soap_pathname: str = DEFAULT_SOAP_PATHNAME
    user_agent: str = DEFAULT_USER_AGENT
    http_timeout_s: float = 60.0
    auth_token: str | None = None

    # Log every demultiplexed item at DEBUG level.
    debug: bool = False


def load_env(env_path: Path | str | None = None, *, override: bool = True) -> dict[str, str]:
    """Load a .env file (ZIMBRA_* settings) into os.environ.

    The file is ``env_path``, else ``$ZIMBRA_ENV_FILE``, else ``.env`` in the
    working directory. A missing file is not an error. Lines may be prefixed
    with ``export`` and values may be quoted. Returns what was set.
    """
    if env_path is None:
        env_path = os.getenv("ZIMBRA_ENV_FILE") or Path.cwd() / ".env"
    env_path = Path(env_path)
    if not env_path.is_file():
        return {}

    loaded: dict[str, str] = {}
    for line in env_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, val = line.split("=", 1)
        key = key.removeprefix("export ").strip()
        if not override and key in os.environ:
            continue
        loaded[key] = os.environ[key] = val.strip().strip("'\"")
    return loaded


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def get_client_config() -> ZimbraClientConfig:
    origin = (os.getenv("ZIMBRA_ORIGIN") or DEFAULT_ORIGIN).strip().rstrip("/")
    soap_pathname = (
        os.getenv("ZIMBRA_SOAP_PATHNAME") or DEFAULT_SOAP_PATHNAME
    ).strip().rstrip("/")
    if not soap_pathname.startswith("/"):
        soap_pathname = f"/{soap_pathname}"

    auth_token = (os.getenv("ZIMBRA_AUTH_TOKEN") or "").strip() or None

    return ZimbraClientConfig(
        origin=origin,
        soap_pathname=soap_pathname,
        user_agent=(os.getenv("ZIMBRA_USER_AGENT") or DEFAULT_USER_AGENT).strip(),
        http_timeout_s=float(os.getenv("ZIMBRA_HTTP_TIMEOUT_S", "60")),
        auth_token=auth_token,
        debug=_env_flag("ZIMBRA_BATCH_DEBUG"),
    )
