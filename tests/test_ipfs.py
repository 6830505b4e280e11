"""Tests for the IPFS gateway client."""

import httpx
import pytest

from artwork_indexer.metadata.ipfs import IpfsClient


def make_client(handler) -> IpfsClient:
    transport = httpx.MockTransport(handler)
    return IpfsClient(
        "https://ipfs.example.org/ipfs/",
        client=httpx.Client(transport=transport),
    )


class TestIpfsClient:
    """Tests for IpfsClient.fetch()."""

    def test_fetch_returns_body(self):
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, content=b'{"name": "A"}')

        with make_client(handler) as client:
            assert client.fetch("QmABC") == b'{"name": "A"}'

        assert requested == ["https://ipfs.example.org/ipfs/QmABC"]

    def test_not_found(self):
        with make_client(lambda request: httpx.Response(404)) as client:
            assert client.fetch("QmMissing") is None

    @pytest.mark.parametrize("status", [500, 502, 429])
    def test_server_errors(self, status):
        with make_client(lambda request: httpx.Response(status)) as client:
            assert client.fetch("QmABC") is None

    def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with make_client(handler) as client:
            assert client.fetch("QmABC") is None

    def test_empty_body(self):
        with make_client(lambda request: httpx.Response(200, content=b"")) as client:
            assert client.fetch("QmABC") is None
