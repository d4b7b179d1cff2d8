"""User-facing progress lines and the final tally."""

from __future__ import annotations

from collections.abc import Callable

from .constants import FAIL_PREFIX, OK_PREFIX, WARN_PREFIX
from .models import (
    CatalogWarning,
    Outcome,
    OutcomeKind,
    RestorePlan,
    RunSummary,
    TrashEntry,
)


def _tag(prefix: str) -> str:
    # Outcome lines share one target column.
    return prefix.ljust(len(FAIL_PREFIX))


def render_outcome(entry: TrashEntry, outcome: Outcome) -> str:
    target = f"{entry.kind_label} → {entry.destination_path}"
    if outcome.kind is OutcomeKind.RESTORED:
        return f"{_tag(OK_PREFIX)} {target}"
    if outcome.kind is OutcomeKind.ALREADY_PRESENT:
        return f"{_tag(OK_PREFIX)} {target} (already present, not overwritten)"

    details = []
    if outcome.last_status is not None:
        details.append(f"last HTTP {outcome.last_status}")
    if outcome.reason:
        details.append(outcome.reason)
    suffix = f" ({'; '.join(details)})" if details else ""
    return f"{_tag(FAIL_PREFIX)} {target}{suffix}"


def render_catalog_warning(warning: CatalogWarning) -> str:
    return f"{WARN_PREFIX} {warning.source_ref}: {warning.message}"


def render_plan_header(plan: RestorePlan) -> str:
    line = (
        f"Found {len(plan)} items in shard {plan.shard.shard}/{plan.shard.total_shards} "
        f"(dirs={plan.directory_count}, files={plan.file_count})"
    )
    if not plan.index_range.is_full:
        end = "end" if plan.index_range.end is None else str(plan.index_range.end)
        line += f" range [{plan.index_range.start}..{end}]"
    return line


def render_summary(summary: RunSummary) -> str:
    return (
        f"Done: OK={summary.ok_count} "
        f"(restored={summary.restored_count}, "
        f"already present={summary.already_present_count}) "
        f"FAIL={summary.failed_count}"
    )


def render_error(message: str) -> str:
    return f"{FAIL_PREFIX} {message}"


class RunReporter:
    """Prints one line per outcome and keeps the run tally."""

    def __init__(self, emit: Callable[[str], None] = print) -> None:
        self._emit = emit
        self._counts = {kind: 0 for kind in OutcomeKind}

    def report_warning(self, warning: CatalogWarning) -> None:
        self._emit(render_catalog_warning(warning))

    def report_plan(self, plan: RestorePlan) -> None:
        self._emit(render_plan_header(plan))

    def report_outcome(self, entry: TrashEntry, outcome: Outcome) -> None:
        self._counts[outcome.kind] += 1
        self._emit(render_outcome(entry, outcome))

    def summary(self) -> RunSummary:
        return RunSummary(
            restored_count=self._counts[OutcomeKind.RESTORED],
            already_present_count=self._counts[OutcomeKind.ALREADY_PRESENT],
            failed_count=self._counts[OutcomeKind.FAILED],
        )

    def report_summary(self) -> RunSummary:
        summary = self.summary()
        self._emit(render_summary(summary))
        return summary
