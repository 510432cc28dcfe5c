import httpx
import pytest

from fuse_server.core.errors import UpstreamError
from fuse_server.schemas.ai import SuggestionRequest
from fuse_server.services.ai import SuggestionClient, get_suggestion_client

ENDPOINT = "http://ai.studio.io/suggest"


def client_for(handler):
    return SuggestionClient(ENDPOINT, transport=httpx.MockTransport(handler))


def test_suggest_sends_metadata_and_decodes_reply():
    seen = {}

    def handler(request):
        seen["body"] = request.read()
        seen["url"] = str(request.url)
        return httpx.Response(200, json={
            "title": "Top 10 cats",
            "description": "Cats, ranked",
            "keywords": ["cats"],
            "chapters": ["00:00 Intro"],
            "thumbnail": "http://img.studio.io/t.png",
            "category": "15",
        })

    metadata = SuggestionRequest(title="cats", description="some cats", keywords=["pets"], category="15")
    suggestions = client_for(handler).suggest(metadata)

    assert seen["url"] == ENDPOINT
    assert b'"videoTitle":"cats"' in seen["body"].replace(b" ", b"")
    assert b'"videoKeywords":["pets"]' in seen["body"].replace(b" ", b"")
    assert suggestions.title == "Top 10 cats"
    assert suggestions.chapters == ["00:00 Intro"]


def test_error_status_is_reported():
    def handler(request):
        return httpx.Response(503, json={"error": "model overloaded"})

    with pytest.raises(UpstreamError, match="model overloaded"):
        client_for(handler).suggest(SuggestionRequest())


def test_error_status_without_body():
    def handler(request):
        return httpx.Response(500, text="boom")

    with pytest.raises(UpstreamError, match="500"):
        client_for(handler).suggest(SuggestionRequest())


def test_transport_failure():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(UpstreamError, match="Failed to get AI suggestions"):
        client_for(handler).suggest(SuggestionRequest())


def test_undecodable_reply():
    def handler(request):
        return httpx.Response(200, text="<html>")

    with pytest.raises(UpstreamError, match="Failed to decode"):
        client_for(handler).suggest(SuggestionRequest())


def test_unconfigured_endpoint():
    with pytest.raises(UpstreamError, match="not configured"):
        SuggestionClient(None).suggest(SuggestionRequest())


def test_dependency_uses_settings(settings):
    ai_client = get_suggestion_client(settings)

    assert ai_client.endpoint == settings.ai_service_url
    assert ai_client.timeout == settings.ai_timeout_seconds


def test_suggestions_route(client, app, alice):
    _, headers = alice

    def handler(request):
        return httpx.Response(200, json={"title": "Suggested"})

    app.dependency_overrides[get_suggestion_client] = lambda: client_for(handler)
    response = client.post("/ai/suggestions", json={"title": "mine"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["title"] == "Suggested"
    assert response.json()["keywords"] == []


def test_suggestions_route_upstream_failure(client, app, alice):
    _, headers = alice

    def handler(request):
        return httpx.Response(502, json={"error": "down"})

    app.dependency_overrides[get_suggestion_client] = lambda: client_for(handler)
    response = client.post("/ai/suggestions", json={}, headers=headers)

    assert response.status_code == 502
    assert response.json() == {"error": "AI service returned error: down"}
