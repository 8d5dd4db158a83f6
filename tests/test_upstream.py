import json

import httpx
import pytest

from school_chat.core.upstream import GeminiClient, build_payload


def test_build_payload_is_single_turn():
    assert build_payload("What are the school timings?") == {
        "contents": [{"parts": [{"text": "What are the school timings?"}]}]
    }


def test_endpoint_accepts_prefixed_model_names():
    client = GeminiClient(api_base="https://example.test/v1beta/")
    assert client.endpoint("gemini-2.5-flash") == "https://example.test/v1beta/models/gemini-2.5-flash:generateContent"
    assert client.endpoint("models/gemini-2.5-flash") == client.endpoint("gemini-2.5-flash")


@pytest.mark.asyncio
async def test_generate_content_sends_key_and_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = request.url
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"candidates": []})

    client = GeminiClient(api_base="https://example.test/v1beta", transport=httpx.MockTransport(handler))
    response = await client.generate_content("gemini-2.5-flash", "k3y/+", "Fees?")

    assert response.status_code == 200
    assert seen["method"] == "POST"
    assert seen["url"].path == "/v1beta/models/gemini-2.5-flash:generateContent"
    assert seen["url"].params["key"] == "k3y/+"
    assert seen["content_type"] == "application/json"
    assert seen["body"] == {"contents": [{"parts": [{"text": "Fees?"}]}]}


@pytest.mark.asyncio
async def test_generate_content_does_not_raise_on_error_status():
    transport = httpx.MockTransport(lambda request: httpx.Response(429, text="rate limited"))
    client = GeminiClient(transport=transport)

    response = await client.generate_content("gemini-2.5-flash", "key", "hi")

    assert response.status_code == 429
    assert response.text == "rate limited"
