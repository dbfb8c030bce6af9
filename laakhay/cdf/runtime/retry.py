"""Retry policy: backoff delays, outcome classification and the retry middleware.

Architecture:
    Backoff is a pure, restartable generator of delays; it knows nothing about
    failures. `classify` decides what kind of outcome a response or exception
    is. RetryMiddleware combines the two: it re-runs the inner chain while the
    outcome is retryable and retries remain, sleeping between attempts.

Design Decisions:
    - Delays grow as min(previous * multiplier, max) before jitter
    - Jitter is relative to the delay (+/- jitter * delay) and the result is
      clamped to [0, max], so a zero initial delay stays zero
    - Non-idempotent requests are only retried when they provably had no
      effect: connection errors, 429 and 401
    - A 401 is retried once (after the auth middleware has invalidated the
      token); a second consecutive 401 is returned to the caller
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Iterator
from enum import Enum

from ..core.config import MAX_RETRIES_LIMIT, ClientConfig
from ..core.exceptions import TransportError
from .rest.messages import HTTPRequest, HTTPResponse, RequestContext
from .rest.middleware import Next

logger = logging.getLogger(__name__)

AUTO_RETRYABLE_HEADER = "cdf-is-auto-retryable"
TRANSIENT_STATUSES = frozenset({408, 429})


class Backoff:
    """Exponential backoff with uniform relative jitter.

    Examples:
        >>> from itertools import islice
        >>> list(islice(Backoff(0.5, 2.0, jitter=0).bounds(), 4))
        [0.5, 1.0, 2.0, 2.0]
    """

    def __init__(
        self,
        initial: float,
        maximum: float,
        jitter: float = 0.25,
        multiplier: float = 2.0,
        rng: random.Random | None = None,
    ) -> None:
        if initial < 0 or maximum < 0:
            raise ValueError("Backoff delays must be >= 0")
        if jitter < 0:
            raise ValueError("jitter must be >= 0")
        self.initial = initial
        self.maximum = maximum
        self.jitter = jitter
        self.multiplier = multiplier
        self._rng = rng or random.Random()

    @classmethod
    def from_config(cls, config: ClientConfig) -> Backoff:
        return cls(config.initial_backoff, config.max_backoff, config.jitter)

    def bounds(self) -> Iterator[float]:
        """Pre-jitter delays. Infinite; each call starts over."""
        delay = min(self.initial, self.maximum)
        while True:
            yield delay
            delay = min(delay * self.multiplier, self.maximum)

    def delays(self) -> Iterator[float]:
        """Jittered delays, each within [0, maximum]. Infinite; each call starts over."""
        for bound in self.bounds():
            offset = bound * self._rng.uniform(-self.jitter, self.jitter)
            yield min(max(bound + offset, 0.0), self.maximum)


class Retryable(str, Enum):
    """Classification of a failed attempt."""

    TRANSIENT = "transient"
    UNAUTHORIZED = "unauthorized"
    FATAL = "fatal"


def classify(outcome: HTTPResponse | BaseException) -> Retryable | None:
    """Classify an attempt's outcome; None means success."""
    if isinstance(outcome, BaseException):
        if isinstance(outcome, TransportError):
            return Retryable.TRANSIENT
        return Retryable.FATAL
    if outcome.ok:
        return None
    if outcome.status == 401:
        return Retryable.UNAUTHORIZED
    if outcome.headers.get(AUTO_RETRYABLE_HEADER, "").lower() == "true":
        return Retryable.TRANSIENT
    if outcome.status in TRANSIENT_STATUSES or 500 <= outcome.status < 600:
        return Retryable.TRANSIENT
    return Retryable.FATAL


def _safe_to_repeat(outcome: HTTPResponse | BaseException) -> bool:
    """Whether a failed non-idempotent attempt certainly had no effect."""
    if isinstance(outcome, BaseException):
        return isinstance(outcome, TransportError) and outcome.connect
    return outcome.status in (401, 429)


class RetryMiddleware:
    """Retry transient failures with backoff, and a 401 once."""

    def __init__(self, max_retries: int = 5, backoff: Backoff | None = None) -> None:
        self.max_retries = min(max(max_retries, 0), MAX_RETRIES_LIMIT)
        self.backoff = backoff or Backoff(0.125, 300.0)

    @classmethod
    def from_config(cls, config: ClientConfig) -> RetryMiddleware:
        return cls(config.effective_max_retries, Backoff.from_config(config))

    async def handle(
        self, request: HTTPRequest, context: RequestContext, next: Next
    ) -> HTTPResponse:
        idempotent = context.is_idempotent(request)
        delays = self.backoff.delays()
        retries = 0
        previous_unauthorized = False

        while True:
            outcome: HTTPResponse | BaseException
            try:
                outcome = await next(request.copy(), context)
            except TransportError as e:
                outcome = e

            kind = classify(outcome)
            if kind is None or not self._should_retry(
                kind, outcome, idempotent, retries, previous_unauthorized
            ):
                if isinstance(outcome, BaseException):
                    raise outcome
                return outcome

            retries += 1
            if kind is Retryable.UNAUTHORIZED:
                previous_unauthorized = True
                delay = 0.0
            else:
                previous_unauthorized = False
                delay = self._next_delay(delays, outcome)

            logger.warning(
                "request_retry",
                extra={
                    "method": request.method.value,
                    "url": request.url,
                    "attempt": retries,
                    "max_retries": self.max_retries,
                    "reason": kind.value,
                    "status": outcome.status if isinstance(outcome, HTTPResponse) else None,
                    "error": str(outcome) if isinstance(outcome, BaseException) else None,
                    "delay_s": delay,
                },
            )
            if delay > 0:
                await asyncio.sleep(delay)

    def _should_retry(
        self,
        kind: Retryable,
        outcome: HTTPResponse | BaseException,
        idempotent: bool,
        retries: int,
        previous_unauthorized: bool,
    ) -> bool:
        if kind is Retryable.FATAL or retries >= self.max_retries:
            return False
        if kind is Retryable.UNAUTHORIZED and previous_unauthorized:
            return False
        return idempotent or _safe_to_repeat(outcome)

    def _next_delay(self, delays: Iterator[float], outcome: HTTPResponse | BaseException) -> float:
        """Next backoff delay, stretched to honor Retry-After (up to the backoff maximum)."""
        delay = next(delays)
        if isinstance(outcome, HTTPResponse):
            retry_after = outcome.headers.get("Retry-After")
            if retry_after:
                try:
                    delay = max(delay, min(float(retry_after), self.backoff.maximum))
                except ValueError:
                    pass
        return delay
