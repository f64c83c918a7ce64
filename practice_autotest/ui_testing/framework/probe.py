"""
================================================================================
Probes
================================================================================

Non-fatal checks. A probe awaits a bounded wait and reports the outcome as a
ProbeResult instead of raising. Only timeout-class failures are downgraded:

    - playwright TimeoutError
    - WaitTimeoutError / ElementNotFoundError

Anything else (closed target, lost connection, programming errors) still
propagates, so a broken driver is never reported as a plain "not found".

Usage:
    result = await probe(page.wait_for_url(lambda u: "/done/" in u, timeout=5000))
    if not result:
        logger.info(result.reason)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Optional

from loguru import logger
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .exceptions import WaitTimeoutError


# Exceptions a probe turns into `ok=False`
PROBE_DOWNGRADED_ERRORS = (PlaywrightTimeoutError, WaitTimeoutError)


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a probe: `ok` plus the downgraded error, if any."""
    ok: bool
    error: Optional[BaseException] = None

    def __bool__(self) -> bool:
        return self.ok

    @property
    def reason(self) -> str:
        if self.ok:
            return "ok"
        return str(self.error).splitlines()[0] if self.error else "negative result"


async def probe(awaitable: Awaitable[object], description: str = "probe") -> ProbeResult:
    """
    Await `awaitable` and convert a timeout into a negative ProbeResult.

    Args:
        awaitable: A bounded wait (must carry its own timeout)
        description: Label used in the log line

    Returns:
        ProbeResult(ok=True) when the wait completed, ProbeResult(ok=False)
        when it timed out
    """
    try:
        await awaitable
    except PROBE_DOWNGRADED_ERRORS as e:
        result = ProbeResult(ok=False, error=e)
        logger.info(f"Probe '{description}' negative: {result.reason}")
        return result
    return ProbeResult(ok=True)


__all__ = [
    "ProbeResult",
    "probe",
    "PROBE_DOWNGRADED_ERRORS",
]
