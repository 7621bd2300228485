from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from json_salvage.extraction.extractor import JSONExtractError

T = TypeVar("T")

RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


def is_retryable_transport_error(exc: BaseException) -> bool:
    # TimeoutException is a TransportError.
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return False


@dataclass(frozen=True)
class TransportRetryConfig:
    attempts: int = 5
    min_seconds: float = 1.0
    max_seconds: float = 20.0


def transport_retry(
    cfg: TransportRetryConfig,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Retry an async HTTP call on timeouts, connection failures and 408/429/5xx replies."""

    def _decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        return retry(
            reraise=True,
            retry=retry_if_exception(is_retryable_transport_error),
            stop=stop_after_attempt(cfg.attempts),
            wait=wait_exponential_jitter(
                initial=cfg.min_seconds,
                max=cfg.max_seconds,
                jitter=1.0 + random.random(),
            ),
        )(fn)

    return _decorator


def reprompt_retrying(attempts: int) -> AsyncRetrying:
    """
    Retry loop for extraction misses: the model is asked again immediately,
    up to `attempts` calls in total, and the last JSONExtractError propagates.
    """
    return AsyncRetrying(
        reraise=True,
        retry=retry_if_exception_type(JSONExtractError),
        stop=stop_after_attempt(max(1, attempts)),
    )
