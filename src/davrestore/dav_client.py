"""WebDAV protocol client.

Issues PROPFIND, MKCOL and MOVE against the server and returns raw status
codes. Non-2xx statuses are data, not errors; only network-level failures
raise (as TransportError).
"""

from __future__ import annotations

import time

import httpx

from .constants import (
    DEFAULT_TIMEOUT_SEC,
    HTTP_CONNECT_TIMEOUT_SEC,
    HTTP_POOL_TIMEOUT_SEC,
    USER_AGENT,
    XML_CONTENT_TYPE,
)
from .errors import TransportError
from .logging_utils import log_event
from .models import DavResponse


def build_httpx_timeout(timeout_sec: float) -> httpx.Timeout:
    return httpx.Timeout(
        connect=min(HTTP_CONNECT_TIMEOUT_SEC, timeout_sec),
        read=timeout_sec,
        write=timeout_sec,
        pool=HTTP_POOL_TIMEOUT_SEC,
    )


class DavClient:
    """Owns one keep-alive HTTP connection pool for the lifetime of a run."""

    def __init__(
        self,
        *,
        username: str,
        password: str,
        verify_tls: bool = True,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._http = httpx.Client(
            auth=httpx.BasicAuth(username, password),
            verify=verify_tls,
            timeout=build_httpx_timeout(timeout_sec),
            headers={"User-Agent": USER_AGENT},
            follow_redirects=False,
            transport=transport,
        )

    def __enter__(self) -> DavClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def query(self, url: str, depth: int, request_body: str) -> DavResponse:
        """PROPFIND `url`; depth 0 checks the resource, depth 1 lists children."""
        if depth not in (0, 1):
            raise ValueError(f"Unsupported PROPFIND depth: {depth}")
        return self._send(
            "PROPFIND",
            url,
            headers={"Depth": str(depth), "Content-Type": XML_CONTENT_TYPE},
            content=request_body.encode("utf-8"),
            log_fields={"depth": depth},
        )

    def create_collection(self, url: str) -> int:
        response = self._send("MKCOL", url, headers={"Content-Length": "0"})
        return response.status

    def move(self, source_url: str, destination_url: str, overwrite: bool = False) -> int:
        response = self._send(
            "MOVE",
            source_url,
            headers={
                "Destination": destination_url,
                "Overwrite": "T" if overwrite else "F",
            },
            log_fields={"destination": destination_url},
        )
        return response.status

    def _send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        content: bytes | None = None,
        log_fields: dict[str, object] | None = None,
    ) -> DavResponse:
        started = time.monotonic()
        try:
            response = self._http.request(method, url, headers=headers, content=content)
        except httpx.RequestError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        log_event(
            "dav_request",
            method=method,
            url=url,
            status=response.status_code,
            elapsed_ms=int((time.monotonic() - started) * 1000),
            **(log_fields or {}),
        )
        return DavResponse(status=response.status_code, body=response.content)
