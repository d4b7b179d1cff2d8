"""Move one trash entry back to its destination."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from tenacity import RetryCallState

from .dav_client import DavClient
from .dav_paths import DavEndpoints
from .errors import MaterializationError, TransportError
from .logging_utils import log_event
from .materializer import DestinationMaterializer
from .models import Outcome, TrashEntry
from .retry_policy import (
    MoveDecision,
    RetryPolicy,
    attempt_phase,
    build_retrying,
    classify_move_status,
)


@dataclass(frozen=True)
class _MoveAttempt:
    status: int
    decision: MoveDecision


class RestoreExecutor:
    def __init__(
        self,
        *,
        client: DavClient,
        endpoints: DavEndpoints,
        materializer: DestinationMaterializer,
        policy: RetryPolicy,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._endpoints = endpoints
        self._materializer = materializer
        self._policy = policy
        self._sleep = sleep

    def restore(self, entry: TrashEntry) -> Outcome:
        """Materialize the parent chain, then MOVE without overwriting."""
        try:
            self._materializer.ensure_parents(entry.destination_path)
        except MaterializationError as exc:
            return Outcome.failed(attempts=0, status=None, reason=str(exc))

        return self.move(entry)

    def move(self, entry: TrashEntry) -> Outcome:
        source_url = self._endpoints.source_url(entry.source_ref)
        destination_url = self._endpoints.files_url(entry.destination_path)
        attempts = 0

        def _attempt() -> _MoveAttempt:
            nonlocal attempts
            attempts += 1
            try:
                status = self._client.move(source_url, destination_url, overwrite=False)
            except TransportError:
                self._log_attempt(entry, attempts, None, None)
                raise
            decision = classify_move_status(status)
            self._log_attempt(entry, attempts, status, decision)
            if (
                decision is MoveDecision.REMATERIALIZE_AND_RETRY
                and attempts < self._policy.max_attempts
            ):
                self._rematerialize(entry)
            return _MoveAttempt(status=status, decision=decision)

        def _exhausted(retry_state: RetryCallState) -> Outcome:
            outcome = retry_state.outcome
            if outcome is not None and outcome.failed:
                return Outcome.failed(
                    attempts=attempts,
                    status=None,
                    reason=f"transport error: {outcome.exception()}",
                )
            last: _MoveAttempt = outcome.result()
            return Outcome.failed(
                attempts=attempts,
                status=last.status,
                reason=f"gave up after {attempts} attempts",
            )

        retrying = build_retrying(
            self._policy,
            should_retry_result=lambda attempt: attempt.decision.is_retryable,
            on_exhausted=_exhausted,
            operation="move",
            target=entry.destination_path,
            sleep=self._sleep,
        )
        result = retrying(_attempt)
        if isinstance(result, Outcome):
            return result

        if result.decision is MoveDecision.RESTORED:
            return Outcome.restored(attempts=attempts, status=result.status)
        if result.decision is MoveDecision.ALREADY_PRESENT:
            return Outcome.already_present(attempts=attempts, status=result.status)
        return Outcome.failed(
            attempts=attempts,
            status=result.status,
            reason=f"HTTP {result.status}, not retried",
        )

    def _rematerialize(self, entry: TrashEntry) -> None:
        try:
            self._materializer.ensure_parents(entry.destination_path, refresh=True)
        except MaterializationError as exc:
            # The move retry decides the outcome.
            log_event(
                "rematerialize_failed",
                level=logging.WARNING,
                destination=entry.destination_path,
                error=str(exc),
            )

    def _log_attempt(
        self,
        entry: TrashEntry,
        attempt_number: int,
        status: int | None,
        decision: MoveDecision | None,
    ) -> None:
        phase = attempt_phase(
            decision,
            attempt_number=attempt_number,
            max_attempts=self._policy.max_attempts,
        )
        log_event(
            "move_attempt",
            destination=entry.destination_path,
            attempt=attempt_number,
            status=status,
            decision=decision.value if decision is not None else "transport_error",
            phase=phase.value,
        )
