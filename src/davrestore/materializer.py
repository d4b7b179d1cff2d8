"""Destination directory materialization (existence check, then MKCOL if absent)."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from tenacity import RetryCallState

from .constants import EXISTENCE_PROPFIND_BODY
from .dav_client import DavClient
from .dav_paths import DavEndpoints, ancestor_paths
from .errors import MaterializationError
from .logging_utils import log_event
from .models import DavResponse
from .retry_policy import RetryPolicy, build_retrying

# 301/302: some servers redirect MKCOL on an existing collection.
_MKCOL_EXISTS_STATUSES = frozenset({301, 302, 405})
_MKCOL_TRANSIENT_STATUSES = frozenset({409, 423})


@dataclass(frozen=True)
class _MkcolAttempt:
    status: int

    @property
    def is_transient(self) -> bool:
        return self.status in _MKCOL_TRANSIENT_STATUSES


class DestinationMaterializer:
    """Ensures the ancestor directories of a destination path exist.

    Directories confirmed during the run are remembered so sibling entries do
    not re-check the same chain; `refresh=True` bypasses that memory.
    """

    def __init__(
        self,
        *,
        client: DavClient,
        endpoints: DavEndpoints,
        policy: RetryPolicy,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._endpoints = endpoints
        self._policy = policy
        self._sleep = sleep
        self._confirmed: set[str] = set()

    def ensure_parents(self, destination_path: str, *, refresh: bool = False) -> None:
        for directory_path in ancestor_paths(destination_path):
            if not refresh and directory_path in self._confirmed:
                continue
            self.ensure_directory(directory_path)
            self._confirmed.add(directory_path)

    def ensure_directory(self, directory_path: str) -> None:
        url = self._endpoints.files_url(directory_path)
        if self._exists(url, directory_path):
            return

        retrying = build_retrying(
            self._policy,
            should_retry_result=lambda attempt: attempt.is_transient,
            on_exhausted=_raise_exhausted(directory_path),
            operation="mkcol",
            target=directory_path,
            sleep=self._sleep,
        )
        attempt: _MkcolAttempt = retrying(
            lambda: _MkcolAttempt(self._client.create_collection(url))
        )

        status = attempt.status
        if 200 <= status < 300 or status in _MKCOL_EXISTS_STATUSES:
            log_event("mkcol", path=directory_path, status=status)
            return
        raise MaterializationError(f"MKCOL '{directory_path}' HTTP {status}")

    def _exists(self, url: str, directory_path: str) -> bool:
        retrying = build_retrying(
            self._policy,
            should_retry_result=lambda response: False,
            on_exhausted=_raise_check_exhausted(directory_path),
            operation="exists",
            target=directory_path,
            sleep=self._sleep,
        )
        response: DavResponse = retrying(
            lambda: self._client.query(url, 0, EXISTENCE_PROPFIND_BODY)
        )
        # Anything but 2xx (404, 405, 501, ...) is treated as absent.
        return response.is_success


def _raise_check_exhausted(directory_path: str) -> Callable[[RetryCallState], DavResponse]:
    def _callback(retry_state: RetryCallState) -> DavResponse:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        raise MaterializationError(
            f"PROPFIND '{directory_path}' failed after "
            f"{retry_state.attempt_number} attempts: {error}"
        ) from error

    return _callback


def _raise_exhausted(directory_path: str) -> Callable[[RetryCallState], _MkcolAttempt]:
    def _callback(retry_state: RetryCallState) -> _MkcolAttempt:
        outcome = retry_state.outcome
        if outcome is not None and outcome.failed:
            raise MaterializationError(
                f"MKCOL '{directory_path}' failed: {outcome.exception()}"
            ) from outcome.exception()
        status = outcome.result().status if outcome is not None else "unknown"
        raise MaterializationError(
            f"MKCOL '{directory_path}' HTTP {status} after "
            f"{retry_state.attempt_number} attempts"
        )

    return _callback
