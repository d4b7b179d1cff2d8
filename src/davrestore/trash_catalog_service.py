"""Trash discovery: query, parse, validate and filter trashed items."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from .constants import TRASH_PROPFIND_BODY
from .dav_client import DavClient
from .dav_paths import DavEndpoints, normalize_relative_path, server_relative_href
from .errors import DiscoveryError, ParseError, TransportError
from .logging_utils import log_event
from .models import CatalogWarning, TrashEntry, TrashProperties
from .propfind_parser import parse_trash_multistatus
from .timestamps import format_timestamp, parse_delete_timestamp


def collect_trash_catalog(
    *,
    client: DavClient,
    endpoints: DavEndpoints,
    cutoff: datetime,
    prefix: str | None = None,
    dump_path: Path | None = None,
) -> tuple[list[TrashEntry], list[CatalogWarning]]:
    trash_url = endpoints.trash_root_url()
    try:
        response = client.query(trash_url, 1, TRASH_PROPFIND_BODY)
    except TransportError as exc:
        raise DiscoveryError(f"Trash query failed: {exc}") from exc

    if not response.is_success:
        dump_note = _dump_body(dump_path, response.body)
        raise DiscoveryError(
            f"Trash query returned HTTP {response.status} for {trash_url}{dump_note}"
        )

    try:
        items = parse_trash_multistatus(response.body)
    except ParseError as exc:
        dump_note = _dump_body(dump_path, response.body)
        raise ParseError(f"{exc}{dump_note}") from exc

    entries, warnings = build_trash_entries(items, cutoff=cutoff, prefix=prefix)
    log_event(
        "catalog_collected",
        url=trash_url,
        response_items=len(items),
        eligible=len(entries),
        skipped_with_warning=len(warnings),
        cutoff=format_timestamp(cutoff),
        prefix=prefix,
    )
    return entries, warnings


def build_trash_entries(
    items: list[TrashProperties],
    *,
    cutoff: datetime,
    prefix: str | None = None,
) -> tuple[list[TrashEntry], list[CatalogWarning]]:
    """Turn parsed response items into eligible entries.

    The first item is the trash root collection itself and is always dropped.
    """
    entries: list[TrashEntry] = []
    warnings: list[CatalogWarning] = []
    normalized_prefix = prefix.lstrip("/") if prefix else ""

    for item in items[1:]:
        if not item.has_trash_metadata:
            continue

        source_ref = server_relative_href(item.href)
        destination_path = normalize_relative_path(item.original_location or "")
        if not destination_path:
            warnings.append(
                CatalogWarning(source_ref, "Missing original location; skipped")
            )
            continue
        if not item.deleted_at_raw:
            warnings.append(
                CatalogWarning(source_ref, "Missing delete timestamp; skipped")
            )
            continue

        try:
            deleted_at = parse_delete_timestamp(item.deleted_at_raw)
        except ValueError as exc:
            warnings.append(CatalogWarning(source_ref, f"{exc}; skipped"))
            continue

        if deleted_at < cutoff:
            continue
        if normalized_prefix and not destination_path.startswith(normalized_prefix):
            continue

        entries.append(
            TrashEntry(
                source_ref=source_ref,
                destination_path=destination_path,
                is_directory=item.is_collection,
                deleted_at=deleted_at,
                display_name=item.original_filename or destination_path.split("/")[-1],
            )
        )

    for warning in warnings:
        log_event("catalog_skip", source_ref=warning.source_ref, reason=warning.message)
    return entries, warnings


def _dump_body(dump_path: Path | None, body: bytes) -> str:
    if dump_path is None:
        return ""
    try:
        dump_path.parent.mkdir(parents=True, exist_ok=True)
        dump_path.write_bytes(body)
    except OSError as exc:
        return f" (failed to save response to {dump_path}: {exc})"
    return f" (response saved to {dump_path})"
