import json

import httpx
import pytest

from recorder.llm import CompletionError, LLMClient, LLMClientConfig, Message

URL = "http://llm.test/v1/chat/completions"


def make_client(handler, **cfg):
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return LLMClient(http, LLMClientConfig(url=URL, **cfg))


def ok_response(content):
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def test_complete_success():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["content_type"] = request.headers.get("content-type")
        seen["body"] = json.loads(request.content)
        seen["timeout"] = request.extensions["timeout"]["read"]
        return ok_response("  Hello world  ")

    client = make_client(handler, model="test-model", timeout=5.0, temperature=0.3, max_tokens=100)
    result = client.complete([Message("system", "You are helpful."), Message("user", "Hi")])

    assert result == "Hello world"
    assert seen["method"] == "POST"
    assert seen["content_type"] == "application/json"
    assert seen["body"]["model"] == "test-model"
    assert seen["timeout"] == 5.0


def test_complete_empty_choices():
    client = make_client(lambda r: httpx.Response(200, json={"choices": []}), model="m", timeout=5.0)
    with pytest.raises(ValueError, match="no choices"):
        client.complete([Message("user", "Hi")])


def test_complete_non_ok_status():
    client = make_client(lambda r: httpx.Response(429, content=b"rate limited"), model="m", timeout=5.0)
    with pytest.raises(CompletionError) as info:
        client.complete([Message("user", "Hi")])
    assert info.value.status_code == 429
    assert info.value.body == b"rate limited"
    assert str(info.value) == "chat completion: status 429"


def test_complete_malformed_json():
    client = make_client(lambda r: httpx.Response(200, content=b"not json"), model="m", timeout=5.0)
    with pytest.raises(ValueError):
        client.complete([Message("user", "Hi")])


def test_complete_transport_error_propagates():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler, model="m", timeout=10.0)
    with pytest.raises(httpx.ConnectError):
        client.complete([Message("user", "Hi")])


def test_complete_request_payload():
    received = {}

    def handler(request):
        received.update(json.loads(request.content))
        return ok_response("ok")

    client = make_client(handler, model="gpt-4", timeout=5.0, temperature=0.7, max_tokens=2048)
    result = client.complete([Message("system", "sys"), Message("user", "usr")])

    assert result == "ok"
    assert received["model"] == "gpt-4"
    assert received["temperature"] == 0.7
    assert received["max_tokens"] == 2048
    assert received["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "usr"},
    ]


def test_complete_missing_content_is_empty():
    client = make_client(lambda r: httpx.Response(200, json={"choices": [{"message": {}}]}), model="m")
    assert client.complete([Message("user", "Hi")]) == ""