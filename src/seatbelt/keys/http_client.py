"""Async HTTP helper for key validation.

A thin wrapper around ``httpx.AsyncClient`` with a bounded timeout and a
fixed user-agent. httpx is an optional dependency (``seatbelt[keys]``) and
is imported lazily so that ``seatbelt check`` never needs it.

Request URLs and headers carry credentials, so nothing in this module logs
them; failures are logged by provider label only.
"""

from __future__ import annotations

import logging
from typing import Any

from seatbelt.exceptions import KeyCheckError

logger = logging.getLogger(__name__)

# Timeout for every key validation request (seconds).
DEFAULT_TIMEOUT: float = 5.0

# User-Agent sent with every request.
USER_AGENT: str = "seatbelt-keys/0.1"

# Status code reported when no HTTP response was received.
NO_RESPONSE: int = 0


def _ensure_httpx() -> Any:  # noqa: ANN401
    """Lazily import httpx and raise a friendly error if missing.

    Returns:
        The ``httpx`` module.

    Raises:
        KeyCheckError: If httpx is not installed.
    """
    try:
        import httpx

        return httpx
    except ImportError as exc:
        raise KeyCheckError(
            "httpx is required for key validation.\n"
            "Install it with: pip install seatbelt[keys]"
        ) from exc


def make_client(timeout: float = DEFAULT_TIMEOUT, transport: Any = None) -> Any:
    """Create an ``httpx.AsyncClient`` for key checks.

    Args:
        timeout: Per-request timeout in seconds.
        transport: Optional transport (``httpx.MockTransport`` in tests).
    """
    httpx = _ensure_httpx()
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
        transport=transport,
    )


async def fetch_status(
    client: Any,
    label: str,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict[str, str] | None = None,
) -> tuple[int, str]:
    """GET a URL and return ``(status_code, body)``.

    Returns ``(NO_RESPONSE, "")`` on timeouts and connection errors.
    """
    httpx = _ensure_httpx()
    try:
        resp = await client.get(url, headers=headers, params=params)
    except httpx.TimeoutException:
        logger.warning("Timeout validating %s", label)
        return NO_RESPONSE, ""
    except httpx.RequestError as exc:
        logger.warning("Request error validating %s: %s", label, type(exc).__name__)
        return NO_RESPONSE, ""
    return resp.status_code, resp.text
