"""
================================================================================
API Request Client
================================================================================

httpx wrapper used by the API request tests.

Each call goes through a RetryPolicy:
    - connection/timeout errors are retried with exponential backoff
    - 429 responses wait for Retry-After (capped) and are retried
    - the final 429 raises RateLimitExceeded

Every completed call is reported to Allure as one step holding the URL,
query parameters, the request body, a cURL command and the response.
Credentials in headers and bodies are masked before anything is reported.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
import shlex
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import allure
import httpx
from allure_commons.types import AttachmentType
from loguru import logger

from practice_autotest.common.config_loader import ConfigLoader


# Responses longer than this are truncated in the Allure attachment
REPORT_BODY_LIMIT = 3000

MASK = "***MASKED***"
SENSITIVE_HEADERS = frozenset({"authorization", "x-api-key", "cookie", "set-cookie"})
SENSITIVE_FIELD_TOKENS = ("password", "secret", "token", "api_key", "authorization", "session")


class HttpClientError(Exception):
    """Base error of the API request client."""


class RateLimitExceeded(HttpClientError):
    """Every attempt was answered with 429."""


# =============================================================================
# Redaction and reporting helpers
# =============================================================================

def redact_headers(headers: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of `headers` with credential headers masked."""
    return {
        name: MASK if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def redact_body(payload: Any) -> Any:
    """Mask any field whose name looks like a credential, at any depth."""
    if isinstance(payload, dict):
        masked = {}
        for field_name, value in payload.items():
            lowered = field_name.lower()
            if any(token in lowered for token in SENSITIVE_FIELD_TOKENS):
                masked[field_name] = MASK
            else:
                masked[field_name] = redact_body(value)
        return masked
    if isinstance(payload, list):
        return [redact_body(item) for item in payload]
    return payload


def build_curl(method: str, url: str, headers: Mapping[str, Any], body: Any = None) -> str:
    """Shell-quoted cURL equivalent of a call. Pass already-redacted values."""
    lines = [f"curl -X {method}"]
    lines.extend(f"-H {shlex.quote(f'{name}: {value}')}" for name, value in headers.items())
    if body:
        lines.append(f"-d {shlex.quote(json.dumps(body, ensure_ascii=False))}")
    lines.append(shlex.quote(url))
    return " \\\n  ".join(lines)


def _response_preview(response: httpx.Response) -> str:
    try:
        text = json.dumps(response.json(), ensure_ascii=False, indent=2)
    except ValueError:
        text = response.text or "<empty>"
    if len(text) > REPORT_BODY_LIMIT:
        return f"{text[:REPORT_BODY_LIMIT]}\n\n... [{len(text)} chars, truncated] ..."
    return text


# =============================================================================
# Retry policy
# =============================================================================

@dataclass(frozen=True)
class RetryPolicy:
    """
    Attempts and waits (seconds) for one API call.

    Read from `api.retry_count`, `api.retry_backoff` and `api.retry_max_wait`.
    """
    attempts: int = 3
    backoff: float = 0.5
    max_wait: float = 5.0

    @classmethod
    def from_config(cls, config: Any) -> "RetryPolicy":
        defaults = cls()
        return cls(
            attempts=max(1, int(config.get("api.retry_count", defaults.attempts))),
            backoff=float(config.get("api.retry_backoff", defaults.backoff)),
            max_wait=float(config.get("api.retry_max_wait", defaults.max_wait)),
        )

    def network_delay(self, attempt: int) -> float:
        """Exponential delay after the `attempt`-th (0-based) network failure."""
        return min(self.backoff * (2 ** attempt), self.max_wait)

    def rate_limit_delay(self, response: httpx.Response) -> float:
        """Retry-After seconds, falling back to the base backoff, capped."""
        try:
            delay = float(response.headers.get("Retry-After", ""))
        except ValueError:
            delay = self.backoff
        return min(delay, self.max_wait)


# =============================================================================
# Client
# =============================================================================

class HttpClient:
    """
    API request client with retries and Allure reporting.

    Must be used as a context manager; the underlying httpx.Client lives
    only inside the `with` block.

    Usage:
        >>> with HttpClient(base_url="https://corp.example.com") as client:
        ...     response = client.get(
        ...         "/api/v1/guia-despacho/auditoria",
        ...         params={"tipoGeneracion": 1, "idGuiaDespachos": 889905},
        ...     )
        ...     assert response.status_code == 200
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Args:
            config: Configuration source (defaults to the ConfigLoader singleton)
            base_url: Overrides `api.base_url`
            transport: Custom httpx transport, e.g. httpx.MockTransport in tests
        """
        config = config if config is not None else ConfigLoader()
        self.base_url = base_url or config.get("api.base_url", "http://localhost:8000")
        self.timeout = float(config.get("api.timeout", 30))
        self.retry = RetryPolicy.from_config(config)

        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> "HttpClient":
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        Send a request, retrying per the RetryPolicy.

        Args:
            method: HTTP verb
            url: Path relative to base_url, or an absolute URL
            **kwargs: Passed to httpx.Client.request (params, json, headers, ...)

        Raises:
            HttpClientError: Used outside a `with` block
            RateLimitExceeded: Still rate limited after the last attempt
            httpx.TransportError: Network failure on the last attempt
        """
        if self._client is None:
            raise HttpClientError(
                "HttpClient is not open; use it as 'with HttpClient() as client:'"
            )

        attempts = self.retry.attempts
        for attempt in range(1, attempts + 1):
            try:
                response = self._client.request(method, url, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as e:
                if attempt == attempts:
                    logger.error(f"{method} {url} failed after {attempts} attempts: {e}")
                    raise
                delay = self.retry.network_delay(attempt - 1)
                logger.warning(f"{method} {url}: {e} (attempt {attempt}/{attempts}, next in {delay}s)")
                time.sleep(delay)
                continue

            if response.status_code != 429:
                logger.debug(f"{method} {url} -> {response.status_code}")
                self._report(method, url, kwargs, response)
                return response

            delay = self.retry.rate_limit_delay(response)
            logger.warning(f"{method} {url}: 429 (attempt {attempt}/{attempts}, next in {delay}s)")
            if attempt < attempts:
                time.sleep(delay)

        raise RateLimitExceeded(f"{method} {url} still rate limited after {attempts} attempts")

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", url, **kwargs)

    def _report(
        self,
        method: str,
        url: str,
        kwargs: Dict[str, Any],
        response: httpx.Response,
    ) -> None:
        full_url = str(response.request.url)
        headers = redact_headers(kwargs.get("headers") or {})
        body = redact_body(kwargs.get("json"))
        verdict = "PASS" if response.status_code < 400 else "FAIL"

        with allure.step(f"[{verdict}] {method} {url} -> {response.status_code}"):
            allure.attach(full_url, name="Request URL", attachment_type=AttachmentType.TEXT)
            if kwargs.get("params"):
                allure.attach(
                    json.dumps(kwargs["params"], ensure_ascii=False, indent=2, default=str),
                    name="Query Params",
                    attachment_type=AttachmentType.JSON,
                )
            if body:
                allure.attach(
                    json.dumps(body, ensure_ascii=False, indent=2),
                    name="Request Body",
                    attachment_type=AttachmentType.JSON,
                )
            allure.attach(
                build_curl(method, full_url, headers, body),
                name="cURL",
                attachment_type=AttachmentType.TEXT,
            )
            allure.attach(
                _response_preview(response),
                name=f"Response ({response.status_code})",
                attachment_type=AttachmentType.JSON,
            )


__all__ = [
    "HttpClient",
    "HttpClientError",
    "RateLimitExceeded",
    "RetryPolicy",
    "build_curl",
    "redact_body",
    "redact_headers",
]
