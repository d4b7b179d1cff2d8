"""Retry policy: status classification, attempt phases and backoff timing.

Every attempt ends in one of four phases. A move or MKCOL starts PENDING,
moves to RETRYING while transient failures remain within the attempt budget,
and finishes SUCCEEDED or FAILED. The classification and the backoff delay
are pure functions; tenacity only drives the loop.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from tenacity import (
    Retrying,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_incrementing,
)

from .constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_BASE_MS
from .errors import TransportError
from .logging_utils import before_sleep_log_event


class MoveDecision(Enum):
    RESTORED = "restored"
    ALREADY_PRESENT = "already_present"
    REMATERIALIZE_AND_RETRY = "rematerialize_and_retry"
    RETRY = "retry"
    FAIL = "fail"

    @property
    def is_retryable(self) -> bool:
        return self in (MoveDecision.REMATERIALIZE_AND_RETRY, MoveDecision.RETRY)

    @property
    def is_success(self) -> bool:
        return self in (MoveDecision.RESTORED, MoveDecision.ALREADY_PRESENT)


class AttemptPhase(Enum):
    PENDING = "pending"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay_sec: float = DEFAULT_RETRY_BASE_MS / 1000

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        if self.base_delay_sec < 0:
            raise ValueError("base_delay_sec must be non-negative.")


def backoff_delay_sec(attempt_number: int, base_delay_sec: float) -> float:
    """Delay before the attempt after `attempt_number`: 1x, 2x, 3x the base."""
    return base_delay_sec * max(attempt_number, 1)


def classify_move_status(status: int) -> MoveDecision:
    if 200 <= status < 300:
        return MoveDecision.RESTORED
    if status in (405, 412):
        return MoveDecision.ALREADY_PRESENT
    if status in (409, 423):
        return MoveDecision.REMATERIALIZE_AND_RETRY
    if status in (502, 503):
        return MoveDecision.RETRY
    return MoveDecision.FAIL


def attempt_phase(
    decision: MoveDecision | None, *, attempt_number: int, max_attempts: int
) -> AttemptPhase:
    """Phase reached after an attempt; `decision` is None for a transport error."""
    if attempt_number < 1:
        return AttemptPhase.PENDING
    if decision is not None and decision.is_success:
        return AttemptPhase.SUCCEEDED
    retryable = decision is None or decision.is_retryable
    if retryable and attempt_number < max_attempts:
        return AttemptPhase.RETRYING
    return AttemptPhase.FAILED


def build_retrying(
    policy: RetryPolicy,
    *,
    should_retry_result: Callable[[Any], bool],
    on_exhausted: Callable[[Any], Any],
    operation: str,
    target: str,
    sleep: Callable[[float], None] = time.sleep,
) -> Retrying:
    """Attempt loop retrying TransportError and results flagged as transient."""
    return Retrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_incrementing(
            start=policy.base_delay_sec, increment=policy.base_delay_sec
        ),
        retry=(
            retry_if_exception_type(TransportError)
            | retry_if_result(should_retry_result)
        ),
        before_sleep=before_sleep_log_event(operation=operation, target=target),
        retry_error_callback=on_exhausted,
        sleep=sleep,
    )
