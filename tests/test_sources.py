"""Tests for the raw configuration sources, including remote fetches."""

from __future__ import annotations

import plistlib

import httpx
import pytest

from layerconf.coding import CodingType
from layerconf.config import Config
from layerconf.errors import DecodeError, NetworkError, UnknownEncodingError
from layerconf.sources import command_line_pairs, environment_pairs, fetch_url


def _client(handler) -> httpx.Client:  # type: ignore[no-untyped-def]
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_load_from_url_uses_content_type() -> None:
    requests: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(str(request.url))
        return httpx.Response(
            200,
            content=b'{"properties": {"mode": "remote"}}',
            headers={"content-type": "application/json; charset=utf-8"},
        )

    client = _client(handler)
    config = Config().load_from_url("https://config.example.com/settings", client=client)

    assert config.get_property("mode") == "remote"
    assert requests == ["https://config.example.com/settings"]
    assert not client.is_closed


def test_load_from_url_falls_back_to_extension() -> None:
    body = plistlib.dumps({"connections": [{"name": "db", "uri": "postgres://remote/app"}]})

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body, headers={"content-type": "application/octet-stream"})

    config = Config().load_from_url("https://config.example.com/app.plist", client=_client(handler))

    assert config.connection_names == ("db",)


def test_load_from_url_without_known_encoding() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"{}", headers={"content-type": "text/html"})

    with pytest.raises(UnknownEncodingError):
        Config().load_from_url("https://config.example.com/settings", client=_client(handler))


def test_load_from_url_reports_http_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, content=b"unavailable")

    config = Config(properties={"mode": "dev"})

    with pytest.raises(NetworkError) as excinfo:
        config.load_from_url("https://config.example.com/app.json", client=_client(handler))

    assert isinstance(excinfo.value.__cause__, httpx.HTTPStatusError)
    assert dict(config.properties) == {"mode": "dev"}


def test_load_from_url_reports_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError, match="connection refused"):
        Config().load_from_url("https://config.example.com/app.json", client=_client(handler))


def test_load_from_url_reports_malformed_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"})

    with pytest.raises(DecodeError):
        Config().load_from_url("https://config.example.com/app.json", client=_client(handler))


def test_fetch_url_closes_client_it_creates(monkeypatch: pytest.MonkeyPatch) -> None:
    created: list[httpx.Client] = []
    original = httpx.Client

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"{}", headers={"content-type": "application/json"})

    def _factory(**kwargs: object) -> httpx.Client:
        client = original(transport=httpx.MockTransport(handler))
        created.append(client)
        return client

    monkeypatch.setattr("layerconf.sources.httpx.Client", _factory)

    coding, data = fetch_url("https://config.example.com/app")

    assert coding is CodingType.JSON
    assert data == b"{}"
    assert created and created[0].is_closed


def test_environment_pairs_filters_keys() -> None:
    environ = {"APP_MODE": "prod", "HOME": "/root"}

    assert environment_pairs(lambda key: key.startswith("APP_"), environ) == {"APP_MODE": "prod"}
    assert environment_pairs(environ=environ) == environ


def test_command_line_pairs_splits_at_first_separator() -> None:
    pairs = command_line_pairs(["--url=https://host/?a=b", "-x=1", "--flag"])

    assert pairs == {"url": "https://host/?a=b"}


@pytest.mark.parametrize(
    "identifier,expected",
    [
        ("json", CodingType.JSON),
        (".plist", CodingType.PLIST),
        ("JSON", CodingType.JSON),
        ("yaml", None),
        (None, None),
    ],
)
def test_coding_from_extension(identifier: str | None, expected: CodingType | None) -> None:
    assert CodingType.from_extension(identifier) is expected


def test_coding_from_mime_type() -> None:
    assert CodingType.from_mime_type("application/json") is CodingType.JSON
    assert CodingType.from_mime_type("application/x-plist") is CodingType.PLIST
    assert CodingType.from_mime_type("text/plain") is None
    assert CodingType.PLIST.mime_type == "application/x-plist"
