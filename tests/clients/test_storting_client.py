from __future__ import annotations

import httpx
import pytest

from storting_transcripts.clients import StortingClient
from storting_transcripts.config import StortingAPIConfig
from storting_transcripts.core.errors import RequestTimeout, UpstreamError


def _client(handler, **overrides) -> StortingClient:
    config = StortingAPIConfig(base_url="https://data.example.invalid/", **overrides)
    return StortingClient(config, transport=httpx.MockTransport(handler))


def test_list_transcripts_sends_query_and_parses_envelope():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"sesjon_id": "2023-2024", "publikasjoner_liste": [{"id": "10", "tittel": "Møte"}, {"id": 11}]},
        )

    refs = _client(handler).list_transcripts("2023-2024")

    assert [ref.id for ref in refs] == ["10", "11"]
    assert refs[0].source_url == "https://data.example.invalid/eksport/publikasjon?publikasjonid=10"
    request = seen[0]
    assert request.url.path == "/eksport/publikasjoner"
    assert dict(request.url.params) == {
        "publikasjontype": "referat",
        "sesjonid": "2023-2024",
        "format": "json",
    }
    assert request.headers["User-Agent"] == StortingAPIConfig().user_agent


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>maintenance</html>"),
        httpx.Response(200, json={"unexpected": []}),
        httpx.Response(200, json=[{"id": "10"}]),
        httpx.Response(200, json={"publikasjoner_liste": [{"tittel": "no id"}]}),
        httpx.Response(200, json={"publikasjoner_liste": [{"id": "10"}, {"id": "a/b"}]}),
        httpx.Response(200, json={"publikasjoner_liste": [{"id": ".hidden"}]}),
    ],
)
def test_list_transcripts_rejects_unexpected_payloads(response):
    client = _client(lambda request: response)

    with pytest.raises(UpstreamError):
        client.list_transcripts("2023-2024")


def test_fetch_transcript_returns_raw_body():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/eksport/publikasjon"
        assert request.url.params["publikasjonid"] == "refs-202324-01-15"
        return httpx.Response(200, content="<referat>æøå</referat>".encode("utf8"))

    body = _client(handler).fetch_transcript("refs-202324-01-15")

    assert body == "<referat>æøå</referat>".encode("utf8")


def test_timeouts_are_retried_then_raised_as_request_timeout():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ReadTimeout("upstream hung", request=request)

    client = _client(handler, max_retries=2)

    with pytest.raises(RequestTimeout) as excinfo:
        client.fetch_transcript("10")

    assert isinstance(excinfo.value, TimeoutError)
    assert len(attempts) == 2


def test_transient_server_error_is_retried():
    responses = [httpx.Response(503), httpx.Response(200, content=b"<referat/>")]

    body = _client(lambda request: responses.pop(0)).fetch_transcript("10")

    assert body == b"<referat/>"


def test_client_error_is_not_retried():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(404)

    with pytest.raises(UpstreamError):
        _client(handler, max_retries=3).fetch_transcript("missing")
    assert len(attempts) == 1
