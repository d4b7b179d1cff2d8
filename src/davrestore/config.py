"""Startup configuration: CLI flags, environment fallbacks and validation."""

from __future__ import annotations

import argparse
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from urllib.parse import urlsplit

from .constants import (
    ENV_PASSWORD,
    ENV_SHARD,
    ENV_SHARDS,
    ENV_SINCE,
    ENV_URL,
    ENV_USER,
)
from .errors import ConfigError
from .models import IndexRange, ShardSelector
from .retry_policy import RetryPolicy
from .timestamps import parse_cutoff


@dataclass(frozen=True)
class RestoreConfig:
    base_url: str
    username: str
    password: str
    cutoff: datetime
    shard: ShardSelector
    index_range: IndexRange
    prefix: str | None
    verify_tls: bool
    timeout_sec: float
    retry_policy: RetryPolicy
    log_file: Path | None
    dump_path: Path | None


def resolve_restore_config(
    args: argparse.Namespace, environ: Mapping[str, str]
) -> RestoreConfig:
    base_url = _require(args.url or environ.get(ENV_URL), "--url", ENV_URL)
    _validate_base_url(base_url)
    username = _require(args.user or environ.get(ENV_USER), "--user", ENV_USER)

    password_env = args.password_env or ENV_PASSWORD
    password = environ.get(password_env)
    if not password:
        raise ConfigError(
            f"Environment variable '{password_env}' not set. "
            "The credential is only read from the environment."
        )

    raw_since = _require(args.since or environ.get(ENV_SINCE), "--since", ENV_SINCE)
    try:
        cutoff = parse_cutoff(raw_since)
    except ValueError as exc:
        raise ConfigError(f"Invalid --since value '{raw_since}': {exc}") from exc

    shard_value = _int_setting(args.shard, environ.get(ENV_SHARD), ENV_SHARD, 0)
    shards_value = _int_setting(args.shards, environ.get(ENV_SHARDS), ENV_SHARDS, 1)
    try:
        shard = ShardSelector(shard=shard_value, total_shards=shards_value)
        index_range = IndexRange(start=args.range_from, end=args.range_to)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    if args.timeout <= 0:
        raise ConfigError("--timeout must be positive.")
    try:
        retry_policy = RetryPolicy(
            max_attempts=args.max_attempts,
            base_delay_sec=args.retry_base_ms / 1000,
        )
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    return RestoreConfig(
        base_url=base_url.rstrip("/"),
        username=username,
        password=password,
        cutoff=cutoff,
        shard=shard,
        index_range=index_range,
        prefix=args.prefix or None,
        verify_tls=not args.insecure,
        timeout_sec=float(args.timeout),
        retry_policy=retry_policy,
        log_file=Path(args.log_file).expanduser() if args.log_file else None,
        dump_path=Path(args.dump_response).expanduser() if args.dump_response else None,
    )


def _require(value: str | None, flag: str, env_name: str) -> str:
    if value is None or not value.strip():
        raise ConfigError(f"Missing {flag} (or environment variable {env_name}).")
    return value.strip()


def _int_setting(
    flag_value: int | None, env_value: str | None, env_name: str, default: int
) -> int:
    if flag_value is not None:
        return flag_value
    if env_value is None or not env_value.strip():
        return default
    try:
        return int(env_value)
    except ValueError as exc:
        raise ConfigError(
            f"Environment variable {env_name} must be an integer: {env_value!r}"
        ) from exc


def _validate_base_url(base_url: str) -> None:
    parts = urlsplit(base_url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigError(f"Server URL must be http(s)://host[/path]: {base_url}")
