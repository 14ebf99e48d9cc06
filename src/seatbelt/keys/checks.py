"""Live API key validation.

Each provider is described by a ``KeySpec``: which variables it needs, one
lightweight read-only request, and how response codes map to outcomes.
All HTTP checks run concurrently on one ``httpx.AsyncClient``; results are
returned in table order regardless of completion order.

Outcomes:
    pass  The provider accepted the key.
    warn  Inconclusive: rate limited, restricted, unreachable, or a
          required key is not configured.
    fail  The provider rejected the key, or a key is exposed to clients.
    skip  An optional key is not configured.

Key values are sent only to their own provider and never logged, rendered
or stored in results.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping

from dotenv import dotenv_values

from seatbelt.keys.http_client import DEFAULT_TIMEOUT, NO_RESPONSE, fetch_status, make_client

logger = logging.getLogger(__name__)


class KeyOutcome(Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"
    SKIP = "skip"


@dataclass(frozen=True)
class KeyResult:
    label: str
    outcome: KeyOutcome
    detail: str


@dataclass(frozen=True)
class Request:
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class KeySpec:
    """How to validate one provider's key.

    Attributes:
        label: Display name of the key.
        provider: Provider name used in connection messages.
        variables: Variables that must all be set for the check to run.
        build: Builds the request from the variable values.
        statuses: Map of HTTP status to (outcome, detail). Unlisted codes
            are a warning with the code in the detail.
        required: A missing required key warns instead of skipping.
        missing_detail: Detail shown when the key is not configured.
    """

    label: str
    provider: str
    variables: tuple[str, ...]
    build: Callable[[Mapping[str, str]], Request]
    statuses: dict[int, tuple[KeyOutcome, str]]
    required: bool = False
    missing_detail: str = "Not configured (optional)"

    def configured(self, values: Mapping[str, str]) -> bool:
        return all(values.get(name) for name in self.variables)

    def interpret(self, status: int, body: str) -> KeyResult:
        if status == NO_RESPONSE:
            return KeyResult(self.label, KeyOutcome.WARN, f"Could not connect to {self.provider}")
        outcome, detail = self.statuses.get(
            status, (KeyOutcome.WARN, f"Unexpected response: {status}")
        )
        return KeyResult(self.label, outcome, detail)


class SlackKeySpec(KeySpec):
    """Slack reports validity in the JSON body, not the status code."""

    def interpret(self, status: int, body: str) -> KeyResult:
        try:
            data = json.loads(body) if body else {}
        except ValueError:
            data = {}
        if not isinstance(data, dict) or "ok" not in data:
            return KeyResult(self.label, KeyOutcome.WARN, "Could not verify")
        if data["ok"] is True:
            return KeyResult(
                self.label, KeyOutcome.PASS, f"Valid - Team: {data.get('team', 'unknown')}"
            )
        return KeyResult(
            self.label, KeyOutcome.FAIL, f"Invalid - Error: {data.get('error', 'unknown')}"
        )


_OK = (KeyOutcome.PASS, "Valid and active")


def _bearer(var: str) -> Callable[[Mapping[str, str]], dict[str, str]]:
    return lambda v: {"Authorization": f"Bearer {v[var]}"}


KEY_SPECS: tuple[KeySpec, ...] = (
    KeySpec(
        "Supabase Anon Key", "Supabase",
        ("VITE_SUPABASE_URL", "VITE_SUPABASE_ANON_KEY"),
        lambda v: Request(
            v["VITE_SUPABASE_URL"].rstrip("/") + "/rest/v1/",
            headers={
                "apikey": v["VITE_SUPABASE_ANON_KEY"],
                **_bearer("VITE_SUPABASE_ANON_KEY")(v),
            },
        ),
        {
            200: _OK,
            401: (KeyOutcome.FAIL, "Invalid or expired (401 Unauthorized)"),
            403: (KeyOutcome.WARN, "Valid but restricted (403 Forbidden)"),
        },
        required=True,
        missing_detail="Not configured in .env.local",
    ),
    KeySpec(
        "Mapbox Token", "Mapbox", ("VITE_MAPBOX_TOKEN",),
        lambda v: Request(
            "https://api.mapbox.com/geocoding/v5/mapbox.places/test.json",
            params={"access_token": v["VITE_MAPBOX_TOKEN"], "limit": "1"},
        ),
        {
            200: _OK,
            401: (KeyOutcome.FAIL, "Invalid token (401)"),
            403: (KeyOutcome.FAIL, "Token forbidden - check domain restrictions (403)"),
        },
        required=True,
        missing_detail="Not configured",
    ),
    KeySpec(
        "OpenAI API Key", "OpenAI", ("OPENAI_API_KEY",),
        lambda v: Request("https://api.openai.com/v1/models", headers=_bearer("OPENAI_API_KEY")(v)),
        {
            200: _OK,
            401: (KeyOutcome.FAIL, "Invalid or expired (401)"),
            429: (KeyOutcome.WARN, "Rate limited but valid (429)"),
        },
    ),
    KeySpec(
        "Anthropic API Key", "Anthropic", ("ANTHROPIC_API_KEY",),
        lambda v: Request(
            "https://api.anthropic.com/v1/models",
            headers={"x-api-key": v["ANTHROPIC_API_KEY"], "anthropic-version": "2023-06-01"},
        ),
        {
            200: _OK,
            401: (KeyOutcome.FAIL, "Invalid or expired (401)"),
            403: (KeyOutcome.FAIL, "Forbidden - check permissions (403)"),
        },
    ),
    KeySpec(
        "Pinecone API Key", "Pinecone", ("PINECONE_API_KEY",),
        lambda v: Request(
            "https://api.pinecone.io/indexes", headers={"Api-Key": v["PINECONE_API_KEY"]}
        ),
        {
            200: _OK,
            401: (KeyOutcome.FAIL, "Invalid or expired (401)"),
            403: (KeyOutcome.FAIL, "Forbidden (403)"),
        },
    ),
    SlackKeySpec(
        "Slack Bot Token", "Slack", ("SLACK_BOT_TOKEN",),
        lambda v: Request("https://slack.com/api/auth.test", headers=_bearer("SLACK_BOT_TOKEN")(v)),
        {},
    ),
    KeySpec(
        "LangSmith API Key", "LangSmith", ("LANGSMITH_API_KEY",),
        lambda v: Request(
            "https://api.smith.langchain.com/api/v1/info",
            headers={"x-api-key": v["LANGSMITH_API_KEY"]},
        ),
        {
            200: _OK,
            401: (KeyOutcome.FAIL, "Invalid or expired (401)"),
            403: (KeyOutcome.FAIL, "Invalid or expired (403)"),
        },
    ),
    KeySpec(
        "Brave Search API", "Brave Search", ("BRAVE_API_KEY",),
        lambda v: Request(
            "https://api.search.brave.com/res/v1/web/search",
            headers={"X-Subscription-Token": v["BRAVE_API_KEY"]},
            params={"q": "test", "count": "1"},
        ),
        {
            200: _OK,
            401: (KeyOutcome.FAIL, "Invalid key (401)"),
            429: (KeyOutcome.WARN, "Rate limited but valid (429)"),
        },
    ),
    KeySpec(
        "Datadog API Key", "Datadog", ("DATADOG_API_KEY",),
        lambda v: Request(
            "https://api.datadoghq.com/api/v1/validate",
            headers={"DD-API-KEY": v["DATADOG_API_KEY"]},
        ),
        {
            200: _OK,
            403: (KeyOutcome.FAIL, "Invalid or expired (403)"),
        },
    ),
    KeySpec(
        "GitHub Token", "GitHub", ("GITHUB_TOKEN",),
        lambda v: Request(
            "https://api.github.com/user", headers={"Authorization": f"token {v['GITHUB_TOKEN']}"}
        ),
        {
            200: _OK,
            401: (KeyOutcome.FAIL, "Invalid or expired (401)"),
            403: (KeyOutcome.WARN, "Rate limited or scope issue (403)"),
        },
        missing_detail="Not in .env.local (using gh CLI auth instead)",
    ),
    KeySpec(
        "Figma API Key", "Figma", ("FIGMA_API_KEY",),
        lambda v: Request("https://api.figma.com/v1/me", headers={"X-Figma-Token": v["FIGMA_API_KEY"]}),
        {
            200: _OK,
            403: (KeyOutcome.FAIL, "Invalid or expired (403)"),
        },
        missing_detail="Not in .env.local (configured in MCP servers)",
    ),
)

_HIVE_FORMAT = re.compile(r"^[A-Za-z0-9]{20,}$")


# ---------------------------------------------------------------------------
# Offline checks
# ---------------------------------------------------------------------------


def check_hive(values: Mapping[str, str]) -> list[KeyResult]:
    """Hive has no health endpoint: check the key format and client exposure."""
    key = values.get("HIVE_API_KEY") or values.get("VITE_HIVE_API_KEY")
    if not key:
        return [KeyResult("Hive AI API Key", KeyOutcome.SKIP, "Not configured (optional)")]
    results = []
    if _HIVE_FORMAT.match(key):
        results.append(KeyResult(
            "Hive AI API Key", KeyOutcome.PASS, "Format valid (cannot verify without API call)"
        ))
    else:
        results.append(KeyResult(
            "Hive AI API Key", KeyOutcome.WARN, "Unusual format - verify manually"
        ))
    if values.get("VITE_HIVE_API_KEY"):
        results.append(KeyResult(
            "Hive AI Security", KeyOutcome.FAIL,
            "Using VITE_HIVE_API_KEY exposes key to client! Use HIVE_API_KEY instead",
        ))
    return results


def check_aws(values: Mapping[str, str]) -> KeyResult:
    if values.get("AWS_ACCESS_KEY_ID") and values.get("AWS_SECRET_ACCESS_KEY"):
        return KeyResult(
            "AWS Credentials", KeyOutcome.PASS,
            "Configured in environment (auth checked separately)",
        )
    return KeyResult(
        "AWS Credentials", KeyOutcome.SKIP,
        "Not in .env.local (may use ~/.aws/credentials)",
    )


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def load_key_values(secrets_file: Path) -> dict[str, str]:
    """Read key values from a dotenv file. A missing file yields no keys."""
    if not secrets_file.is_file():
        return {}
    return {k: v for k, v in dotenv_values(secrets_file).items() if k and v}


async def _check_one(client: Any, spec: KeySpec, values: Mapping[str, str]) -> KeyResult:
    if not spec.configured(values):
        outcome = KeyOutcome.WARN if spec.required else KeyOutcome.SKIP
        return KeyResult(spec.label, outcome, spec.missing_detail)
    request = spec.build(values)
    status, body = await fetch_status(
        client, spec.label, request.url,
        headers=request.headers or None,
        params=request.params or None,
    )
    return spec.interpret(status, body)


async def check_keys(
    values: Mapping[str, str],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Any = None,
    specs: tuple[KeySpec, ...] = KEY_SPECS,
) -> list[KeyResult]:
    """Validate every configured key.

    Args:
        values: Variable name to value, usually from ``load_key_values``.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (for testing).
        specs: Providers to check.

    Returns:
        One result per HTTP provider, then the Hive and AWS checks.

    Raises:
        KeyCheckError: If httpx is not installed.
    """
    async with make_client(timeout, transport) as client:
        http_results = await asyncio.gather(
            *(_check_one(client, spec, values) for spec in specs)
        )
    results = list(http_results)
    results.extend(check_hive(values))
    results.append(check_aws(values))
    for result in results:
        logger.debug("Key check %s: %s", result.label, result.outcome.value)
    return results


def run_key_checks(
    values: Mapping[str, str],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Any = None,
) -> list[KeyResult]:
    """Synchronous entry point around ``check_keys``."""
    return asyncio.run(check_keys(values, timeout=timeout, transport=transport))
