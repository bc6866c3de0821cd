"""Uniform provider result shape and the guarded call wrapper.

Every adapter returns a ProviderResult. Missing credentials, non-2xx
responses, timeouts and unparseable payloads all become
``ProviderResult(success=False, ...)`` so callers never branch on
provider-specific exception types.
"""

import asyncio
import time
from collections.abc import Awaitable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

import httpx
from pydantic import ValidationError

from backend.app.models.common import Provenance
from backend.app.utils.logging import StructuredProviderLogger
from backend.app.utils.metrics import PrometheusProviderMetrics

T = TypeVar("T")


_metrics = PrometheusProviderMetrics()
_call_logger = StructuredProviderLogger()


class FailureReason(str, Enum):
    """Why a provider call did not produce data."""

    not_configured = "not_configured"
    http_error = "http_error"
    timeout = "timeout"
    invalid_response = "invalid_response"
    not_found = "not_found"
    no_route = "no_route"
    unresolvable = "unresolvable"


@dataclass(frozen=True)
class ProviderResult(Generic[T]):
    """Normalized outcome of one provider interaction."""

    success: bool
    source: Provenance
    data: T | None = None
    error: str | None = None
    reason: FailureReason | None = None

    @classmethod
    def live(cls, data: T, note: str | None = None) -> "ProviderResult[T]":
        """Successful live result; ``note`` carries non-fatal remarks."""
        return cls(success=True, source=Provenance.live, data=data, error=note)

    @classmethod
    def mock(cls, data: T) -> "ProviderResult[T]":
        """Successful result backed by static example data."""
        return cls(success=True, source=Provenance.mock, data=data)

    @classmethod
    def failure(cls, error: str, reason: FailureReason) -> "ProviderResult[T]":
        """Failed call."""
        return cls(success=False, source=Provenance.error, error=error, reason=reason)


async def guarded_call(
    provider: str,
    call: Awaitable[ProviderResult[T]],
    timeout_seconds: float,
) -> ProviderResult[T]:
    """Await an adapter call, bounding it and converting escaped errors.

    Args:
        provider: Provider label for logs and metrics (e.g. "here.geocode")
        call: Adapter coroutine returning a ProviderResult
        timeout_seconds: Upper bound on the whole call

    Returns:
        The adapter's own result, or a failure result if the call timed
        out, hit a transport error or returned a payload that did not parse
    """
    started = time.perf_counter()
    try:
        result = await asyncio.wait_for(call, timeout=timeout_seconds)
    except TimeoutError:
        result = ProviderResult.failure(
            f"{provider} did not respond within {timeout_seconds:g}s.",
            FailureReason.timeout,
        )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        result = ProviderResult.failure(
            f"{provider} request failed: {type(e).__name__}: {e}",
            FailureReason.http_error,
        )
    except (ValidationError, KeyError, IndexError, ValueError, TypeError) as e:
        result = ProviderResult.failure(
            f"{provider} returned an unexpected response: {type(e).__name__}",
            FailureReason.invalid_response,
        )

    latency_ms = (time.perf_counter() - started) * 1000
    outcome = "success" if result.success else "failure"
    _metrics.record_call(provider, outcome, latency_ms)
    _call_logger.log_call(
        provider,
        outcome,
        latency_ms,
        reason=result.reason.value if result.reason else None,
        error=None if result.success else result.error,
    )
    return result
