from __future__ import annotations

import pytest

from davrestore.retry_policy import (
    AttemptPhase,
    MoveDecision,
    RetryPolicy,
    attempt_phase,
    backoff_delay_sec,
    build_retrying,
    classify_move_status,
)
from test_helpers import SleepRecorder


@pytest.mark.parametrize(
    ("status", "decision"),
    [
        (201, MoveDecision.RESTORED),
        (204, MoveDecision.RESTORED),
        (405, MoveDecision.ALREADY_PRESENT),
        (412, MoveDecision.ALREADY_PRESENT),
        (409, MoveDecision.REMATERIALIZE_AND_RETRY),
        (423, MoveDecision.REMATERIALIZE_AND_RETRY),
        (502, MoveDecision.RETRY),
        (503, MoveDecision.RETRY),
        (401, MoveDecision.FAIL),
        (404, MoveDecision.FAIL),
        (500, MoveDecision.FAIL),
        (507, MoveDecision.FAIL),
    ],
)
def test_classify_move_status(status: int, decision: MoveDecision) -> None:
    assert classify_move_status(status) is decision


def test_backoff_grows_linearly_with_attempt_number() -> None:
    assert [backoff_delay_sec(n, 0.3) for n in (1, 2, 3)] == pytest.approx(
        [0.3, 0.6, 0.9]
    )
    assert backoff_delay_sec(2, 0.0) == 0.0


def test_attempt_phase_transitions() -> None:
    assert attempt_phase(None, attempt_number=0, max_attempts=3) is AttemptPhase.PENDING
    assert (
        attempt_phase(MoveDecision.RESTORED, attempt_number=1, max_attempts=3)
        is AttemptPhase.SUCCEEDED
    )
    assert (
        attempt_phase(MoveDecision.ALREADY_PRESENT, attempt_number=3, max_attempts=3)
        is AttemptPhase.SUCCEEDED
    )
    assert (
        attempt_phase(MoveDecision.REMATERIALIZE_AND_RETRY, attempt_number=2, max_attempts=3)
        is AttemptPhase.RETRYING
    )
    assert attempt_phase(None, attempt_number=2, max_attempts=3) is AttemptPhase.RETRYING
    assert (
        attempt_phase(MoveDecision.RETRY, attempt_number=3, max_attempts=3)
        is AttemptPhase.FAILED
    )
    assert (
        attempt_phase(MoveDecision.FAIL, attempt_number=1, max_attempts=3)
        is AttemptPhase.FAILED
    )


def test_retry_policy_rejects_invalid_values() -> None:
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)
    with pytest.raises(ValueError):
        RetryPolicy(base_delay_sec=-1)


def test_retry_loop_sleeps_follow_backoff_delay() -> None:
    sleep_recorder = SleepRecorder()
    policy = RetryPolicy(max_attempts=4, base_delay_sec=0.25)
    retrying = build_retrying(
        policy,
        should_retry_result=lambda result: True,
        on_exhausted=lambda retry_state: "exhausted",
        operation="mkcol",
        target="Docs",
        sleep=sleep_recorder,
    )

    assert retrying(lambda: 423) == "exhausted"
    assert sleep_recorder.delays == pytest.approx(
        [backoff_delay_sec(n, 0.25) for n in (1, 2, 3)]
    )
