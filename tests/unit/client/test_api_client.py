"""Tests for the Fortune API HTTP client."""

import json

import httpx
import pytest

from fortune.client.api_client import (
    FortuneApiClient,
    FortuneApiError,
    new_fortune_api_client,
)
from fortune.core.settings import ClientSettings

TOKEN = "Bearer test-token"


def _envelope(code: int, data=None, message=None) -> dict:
    status = "success" if 200 <= code < 300 else "error"
    return {"status": status, "code": code, "message": message, "data": data}


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


def _client(
    response: httpx.Response, token: str | None = None
) -> tuple[FortuneApiClient, Recorder]:
    recorder = Recorder(response)
    http = httpx.Client(
        base_url="http://fortune.test", transport=httpx.MockTransport(recorder)
    )
    return FortuneApiClient(http, token), recorder


class TestGetFortune:
    def test_returns_quote(self) -> None:
        client, recorder = _client(
            httpx.Response(200, json=_envelope(200, {"fortune": "Be bold."}))
        )
        assert client.get_fortune() == "Be bold."
        assert recorder.requests[0].url.path == "/api/v1/fortune"
        assert "Authorization" not in recorder.requests[0].headers

    def test_error_envelope_raises(self) -> None:
        client, _ = _client(
            httpx.Response(
                404, json=_envelope(404, message="No fortunes available")
            )
        )
        with pytest.raises(FortuneApiError, match=r"No fortunes available \(404\)"):
            client.get_fortune()


class TestGetAllFortunes:
    def test_sends_token(self) -> None:
        client, recorder = _client(
            httpx.Response(200, json=_envelope(200, ["a", "b"])), TOKEN
        )
        assert client.get_all_fortunes() == ["a", "b"]
        request = recorder.requests[0]
        assert request.url.path == "/api/v1/fortune/all"
        assert request.headers["Authorization"] == TOKEN

    def test_updated_token_used(self) -> None:
        client, recorder = _client(httpx.Response(200, json=_envelope(200, [])))
        client.update_bearer_token("Bearer newer")
        assert client.get_all_fortunes() == []
        assert recorder.requests[0].headers["Authorization"] == "Bearer newer"

    def test_unauthorized(self) -> None:
        client, _ = _client(
            httpx.Response(401, json=_envelope(401, message="Unauthorized"))
        )
        with pytest.raises(FortuneApiError, match=r"Unauthorized \(401\)"):
            client.get_all_fortunes()


class TestAddFortune:
    def test_posts_payload(self) -> None:
        client, recorder = _client(
            httpx.Response(201, json=_envelope(201, message="Created")), TOKEN
        )
        assert client.add_fortune("New one") is True
        request = recorder.requests[0]
        assert request.method == "POST"
        assert json.loads(request.content) == {"fortune": "New one"}
        assert request.headers["Authorization"] == TOKEN

    def test_conflict_raises(self) -> None:
        client, _ = _client(
            httpx.Response(409, json=_envelope(409, message="Conflict")), TOKEN
        )
        with pytest.raises(FortuneApiError, match=r"Conflict \(409\)"):
            client.add_fortune("dup")


class TestResponseHandling:
    def test_non_json_error(self) -> None:
        client, _ = _client(httpx.Response(502, text="<html>bad gateway</html>"))
        with pytest.raises(FortuneApiError, match=r"Unreadable response \(502\)"):
            client.get_fortune()

    def test_empty_error_body(self) -> None:
        client, _ = _client(httpx.Response(500))
        with pytest.raises(FortuneApiError, match="unknown error"):
            client.get_fortune()


class TestNewFortuneApiClient:
    def test_uses_base_url_and_timeouts(self) -> None:
        recorder = Recorder(
            httpx.Response(200, json=_envelope(200, {"fortune": "x"}))
        )
        settings = ClientSettings(
            url="http://api.example.com", connect_timeout=1500, read_timeout=2500
        )
        with new_fortune_api_client(
            settings, transport=httpx.MockTransport(recorder)
        ) as client:
            assert client.get_fortune() == "x"

        request = recorder.requests[0]
        assert str(request.url) == "http://api.example.com/api/v1/fortune"
        timeout = request.extensions["timeout"]
        assert timeout["connect"] == 1.5
        assert timeout["read"] == 2.5
        assert timeout["write"] == 10.0

    def test_trusts_configured_certificates(
        self, make_pem, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        pem = make_pem("fortune.example.com")
        seen: dict = {}
        real_client = httpx.Client

        def _capture(**kwargs):
            seen.update(kwargs)
            return real_client(**kwargs)

        monkeypatch.setattr(httpx, "Client", _capture)
        settings = ClientSettings(url="https://localhost", ssl_certs=pem.cert_b64)
        new_fortune_api_client(settings).close()
        context = seen["verify"]
        assert len(context.get_ca_certs()) == 1
