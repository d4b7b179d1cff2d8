"""Pytest configuration and fixtures for davrestore tests."""

from __future__ import annotations

import pytest

from davrestore.materializer import DestinationMaterializer
from davrestore.restore_executor import RestoreExecutor
from davrestore.retry_policy import RetryPolicy
from test_helpers import ENDPOINTS, FakeDavClient, SleepRecorder


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def retry_policy() -> RetryPolicy:
    return RetryPolicy(max_attempts=4, base_delay_sec=0.3)


@pytest.fixture
def fake_client() -> FakeDavClient:
    return FakeDavClient()


@pytest.fixture
def materializer(
    fake_client: FakeDavClient,
    retry_policy: RetryPolicy,
    sleep_recorder: SleepRecorder,
) -> DestinationMaterializer:
    return DestinationMaterializer(
        client=fake_client,
        endpoints=ENDPOINTS,
        policy=retry_policy,
        sleep=sleep_recorder,
    )


@pytest.fixture
def executor(
    fake_client: FakeDavClient,
    materializer: DestinationMaterializer,
    retry_policy: RetryPolicy,
    sleep_recorder: SleepRecorder,
) -> RestoreExecutor:
    return RestoreExecutor(
        client=fake_client,
        endpoints=ENDPOINTS,
        materializer=materializer,
        policy=retry_policy,
        sleep=sleep_recorder,
    )
