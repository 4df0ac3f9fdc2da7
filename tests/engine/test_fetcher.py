from __future__ import annotations

import httpx
import pytest

from news_relay.config import ListingConfig
from news_relay.engine import Fetcher
from news_relay.errors import NetworkError


def test_fetch_returns_body(mock_client) -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, text="<html>listing</html>")

    fetcher = Fetcher(ListingConfig(url="https://news.example.com/"), client=mock_client(handler))

    assert fetcher.fetch() == "<html>listing</html>"
    assert len(captured) == 1
    assert captured[0].method == "GET"
    assert str(captured[0].url) == "https://news.example.com/"


def test_default_client_sends_configured_user_agent() -> None:
    fetcher = Fetcher(ListingConfig(user_agent="relay-test/1.0"))
    try:
        assert fetcher._client.headers["User-Agent"] == "relay-test/1.0"
        assert fetcher._client.follow_redirects is True
    finally:
        fetcher.close()
    assert fetcher._client.is_closed


def test_non_2xx_status_raises_network_error(mock_client) -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(503, text="busy")

    fetcher = Fetcher(ListingConfig(), client=mock_client(handler))
    with pytest.raises(NetworkError, match="503"):
        fetcher.fetch()
    assert len(calls) == 1


def test_transport_failure_raises_network_error(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("dns failure", request=request)

    fetcher = Fetcher(ListingConfig(), client=mock_client(handler))
    with pytest.raises(NetworkError) as excinfo:
        fetcher.fetch()
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_injected_client_is_not_closed(mock_client) -> None:
    client = mock_client(lambda request: httpx.Response(200, text="ok"))
    with Fetcher(ListingConfig(), client=client) as fetcher:
        fetcher.fetch()
    assert not client.is_closed
