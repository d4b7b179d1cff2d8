"""CLI entry and startup wiring."""

from __future__ import annotations

import argparse
import logging
import os
import time
from collections.abc import Mapping

from .config import resolve_restore_config
from .constants import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RETRY_BASE_MS,
    DEFAULT_TIMEOUT_SEC,
    ENV_PASSWORD,
)
from .errors import DavRestoreError
from .logging_utils import log_event, sanitize_error_message, setup_logging
from .reporter import RunReporter, render_error
from .restore_service import open_client, run_restore
from .timestamps import format_timestamp


def main(argv: list[str] | None = None, environ: Mapping[str, str] | None = None) -> int:
    """Exit code reflects discovery only; failed entries are in the summary."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    env = os.environ if environ is None else environ

    try:
        config = resolve_restore_config(args, env)
    except DavRestoreError as exc:
        print(render_error(sanitize_error_message(str(exc))))
        return 1

    setup_logging(config.log_file)
    log_event(
        "run_start",
        base_url=config.base_url,
        user=config.username,
        cutoff=format_timestamp(config.cutoff),
        shard=config.shard.shard,
        total_shards=config.shard.total_shards,
        range_start=config.index_range.start,
        range_end=config.index_range.end,
        prefix=config.prefix,
        verify_tls=config.verify_tls,
    )
    if not config.verify_tls:
        print("[WARN] TLS certificate verification is disabled (--insecure).")

    started = time.monotonic()
    print("Collecting trashed items to restore")
    try:
        with open_client(config) as client:
            summary = run_restore(config, client=client, reporter=RunReporter())
    except DavRestoreError as exc:
        message = sanitize_error_message(str(exc))
        log_event(
            "run_stop",
            level=logging.ERROR,
            reason="discovery_failed",
            elapsed_ms=int((time.monotonic() - started) * 1000),
            error_type=type(exc).__name__,
            error=message,
        )
        print(render_error(message))
        return 1

    log_event(
        "run_stop",
        reason="completed",
        restored=summary.restored_count,
        already_present=summary.already_present_count,
        failed=summary.failed_count,
        elapsed_ms=int((time.monotonic() - started) * 1000),
    )
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="davrestore",
        description=(
            "Restore items deleted on or after a cutoff from a WebDAV trash "
            "collection back to their original locations."
        ),
    )
    parser.add_argument("--url", help="Server base URL, e.g. https://cloud.example.com.")
    parser.add_argument("--user", help="Account whose trash is restored.")
    parser.add_argument(
        "--password-env",
        help=f"Environment variable holding the password (default: {ENV_PASSWORD}).",
    )
    parser.add_argument(
        "--since",
        help="Cutoff: ISO-8601 datetime or YYYY-MM-DD. Naive values are UTC.",
    )
    parser.add_argument("--shard", type=int, help="Shard index for this worker.")
    parser.add_argument("--shards", type=int, help="Total number of shards.")
    parser.add_argument(
        "--from",
        dest="range_from",
        type=int,
        default=0,
        help="First plan position to process (after sharding).",
    )
    parser.add_argument(
        "--to",
        dest="range_to",
        type=int,
        default=None,
        help="Last plan position to process, inclusive.",
    )
    parser.add_argument(
        "--prefix",
        help="Only restore entries whose destination path starts with this prefix.",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Disable TLS certificate verification.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_SEC,
        help=f"HTTP timeout in seconds (default: {DEFAULT_TIMEOUT_SEC:g}).",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help=f"Attempts per MOVE/MKCOL (default: {DEFAULT_MAX_ATTEMPTS}).",
    )
    parser.add_argument(
        "--retry-base-ms",
        type=int,
        default=DEFAULT_RETRY_BASE_MS,
        help=f"Backoff base; delay is base x attempt (default: {DEFAULT_RETRY_BASE_MS}).",
    )
    parser.add_argument("--log-file", help="Write structured diagnostic log here.")
    parser.add_argument(
        "--dump-response",
        help="Save the raw trash listing here when it cannot be used.",
    )
    return parser
