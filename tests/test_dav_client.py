from __future__ import annotations

import base64

import httpx
import pytest

from davrestore.constants import TRASH_PROPFIND_BODY
from davrestore.dav_client import DavClient
from davrestore.errors import TransportError
from test_helpers import files_url


def _client(handler) -> DavClient:
    return DavClient(
        username="alice",
        password="s3cret",
        transport=httpx.MockTransport(handler),
    )


def test_query_sends_propfind_with_depth_and_basic_auth() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(207, content=b"<d:multistatus xmlns:d='DAV:'/>")

    with _client(handler) as client:
        response = client.query(
            "https://cloud.example.com/remote.php/dav/trash-bin/alice", 1, TRASH_PROPFIND_BODY
        )

    assert response.status == 207
    assert response.is_success
    assert response.body == b"<d:multistatus xmlns:d='DAV:'/>"
    request = seen[0]
    assert request.method == "PROPFIND"
    assert request.headers["Depth"] == "1"
    assert request.headers["Content-Type"].startswith("application/xml")
    assert b"trashbin-original-location" in request.content
    expected_auth = base64.b64encode(b"alice:s3cret").decode("ascii")
    assert request.headers["Authorization"] == f"Basic {expected_auth}"


def test_move_sends_destination_and_no_overwrite() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201)

    destination = files_url("Docs/a b.txt")
    with _client(handler) as client:
        status = client.move(
            "https://cloud.example.com/remote.php/dav/trash-bin/alice/a.d1", destination
        )

    assert status == 201
    assert seen[0].method == "MOVE"
    assert seen[0].headers["Destination"] == destination
    assert seen[0].headers["Overwrite"] == "F"


def test_non_success_statuses_are_returned_not_raised() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "MKCOL":
            return httpx.Response(405)
        return httpx.Response(404)

    with _client(handler) as client:
        assert client.create_collection(files_url("Docs")) == 405
        assert client.query(files_url("Docs"), 0, "<propfind/>").status == 404


def test_transport_failures_raise_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client:
        with pytest.raises(TransportError, match="connection refused"):
            client.create_collection(files_url("Docs"))


def test_query_rejects_unsupported_depth() -> None:
    with _client(lambda request: httpx.Response(207)) as client:
        with pytest.raises(ValueError):
            client.query(files_url("Docs"), 2, "<propfind/>")


def test_undecodable_response_body_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            201,
            headers={"Content-Encoding": "gzip"},
            stream=httpx.ByteStream(b"not gzip"),
        )

    with _client(handler) as client:
        with pytest.raises(TransportError, match="MOVE"):
            client.move(
                "https://cloud.example.com/remote.php/dav/trash-bin/alice/a.d1",
                files_url("a.txt"),
            )
