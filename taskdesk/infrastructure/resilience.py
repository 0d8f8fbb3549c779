# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Retry helpers for outbound HTTP calls."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from taskdesk.shared.logging import logger

T = TypeVar("T")

BACKOFF_CAP = 5.0


def call_with_retries(  # noqa: UP047
    func: Callable[..., T],
    *args: Any,
    max_retries: int,
    backoff_base: float,
    **kwargs: Any,
) -> T:
    """Run ``func`` and retry it on transport-level failures only.

    HTTP error statuses are not retried; the last transport error is re-raised.
    Only use this for idempotent requests.
    """

    retry = Retrying(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=backoff_base, max=BACKOFF_CAP),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    for attempt in retry:
        with attempt:
            if attempt.retry_state.attempt_number > 1:
                logger.debug(
                    f"resilience: retry attempt={attempt.retry_state.attempt_number} "
                    f"func={getattr(func, '__name__', func)}"
                )
            return func(*args, **kwargs)
    raise RuntimeError("resilience: reached unexpected branch")


__all__ = ["BACKOFF_CAP", "call_with_retries"]
