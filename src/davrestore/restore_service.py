"""Restore run orchestration."""

from __future__ import annotations

import time
from collections.abc import Callable

from .config import RestoreConfig
from .dav_client import DavClient
from .dav_paths import DavEndpoints
from .logging_utils import log_event
from .materializer import DestinationMaterializer
from .models import RestorePlan, RunSummary
from .partitioner import build_restore_plan
from .reporter import RunReporter
from .restore_executor import RestoreExecutor
from .trash_catalog_service import collect_trash_catalog


def open_client(config: RestoreConfig) -> DavClient:
    return DavClient(
        username=config.username,
        password=config.password,
        verify_tls=config.verify_tls,
        timeout_sec=config.timeout_sec,
    )


def run_restore(
    config: RestoreConfig,
    *,
    client: DavClient,
    reporter: RunReporter,
    sleep: Callable[[float], None] = time.sleep,
) -> RunSummary:
    """Discover, plan and restore; entries are processed strictly in plan order.

    Discovery and parse failures propagate before any entry is touched.
    Per-entry failures are reported and never abort the run.
    """
    endpoints = DavEndpoints(base_url=config.base_url, username=config.username)

    entries, warnings = collect_trash_catalog(
        client=client,
        endpoints=endpoints,
        cutoff=config.cutoff,
        prefix=config.prefix,
        dump_path=config.dump_path,
    )
    for warning in warnings:
        reporter.report_warning(warning)

    plan = build_restore_plan(
        entries, selector=config.shard, index_range=config.index_range
    )
    _log_plan(plan)
    reporter.report_plan(plan)

    materializer = DestinationMaterializer(
        client=client,
        endpoints=endpoints,
        policy=config.retry_policy,
        sleep=sleep,
    )
    executor = RestoreExecutor(
        client=client,
        endpoints=endpoints,
        materializer=materializer,
        policy=config.retry_policy,
        sleep=sleep,
    )

    for entry in plan.entries:
        outcome = executor.restore(entry)
        log_event(
            "entry_outcome",
            destination=entry.destination_path,
            kind="dir" if entry.is_directory else "file",
            outcome=outcome.kind.value,
            attempts=outcome.attempts,
            status=outcome.last_status,
            reason=outcome.reason,
        )
        reporter.report_outcome(entry, outcome)

    return reporter.report_summary()


def _log_plan(plan: RestorePlan) -> None:
    log_event(
        "plan_built",
        catalog_size=plan.catalog_size,
        planned=len(plan),
        directories=plan.directory_count,
        files=plan.file_count,
        shard=plan.shard.shard,
        total_shards=plan.shard.total_shards,
        range_start=plan.index_range.start,
        range_end=plan.index_range.end,
    )
