from __future__ import annotations

import json

import httpx
import pytest

from taskrelay.core.parsing.errors import ConfigMissingError, EmptyResponseError, NetworkError, ParseError, UpstreamError
from taskrelay.core.parsing.parser import OutputParser


@pytest.mark.asyncio
async def test_parse_posts_policy_request_and_returns_fields(configured_settings, mock_completions) -> None:
    client, requests = mock_completions('```json\n{"name": "Tom", "age": "28"}\n```')
    parser = OutputParser(settings=configured_settings, client=client)

    fields = await parser.parse("Name: Tom, Age: 28")

    assert [(field.key, field.value) for field in fields] == [("name", "Tom"), ("age", "28")]
    assert len(requests) == 1
    request = requests[0]
    assert str(request.url) == "https://llm.example/api/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test-123456"
    payload = json.loads(request.content)
    assert payload["model"] == "anthropic/claude-3.5-sonnet"
    assert payload["temperature"] == 0.1
    assert payload["max_tokens"] == 500
    assert payload["top_p"] == 0.9
    assert payload["frequency_penalty"] == 0.0
    assert payload["presence_penalty"] == 0.0
    assert payload["messages"][0]["role"] == "user"
    assert "Name: Tom, Age: 28" in payload["messages"][0]["content"]


@pytest.mark.asyncio
async def test_empty_object_reply_is_zero_fields(configured_settings, mock_completions) -> None:
    client, _ = mock_completions("{}")
    parser = OutputParser(settings=configured_settings, client=client)

    assert await parser.parse("") == []


@pytest.mark.asyncio
async def test_prose_reply_uses_fallback(configured_settings, mock_completions) -> None:
    client, _ = mock_completions('I cannot help. {"a":"1"}')
    parser = OutputParser(settings=configured_settings, client=client)

    fields = await parser.parse("a is 1")
    assert [(field.key, field.value) for field in fields] == [("a", "1")]


@pytest.mark.asyncio
async def test_upstream_status_raises_upstream_error(configured_settings, mock_completions) -> None:
    client, _ = mock_completions(status=429)
    parser = OutputParser(settings=configured_settings, client=client)

    with pytest.raises(UpstreamError) as exc_info:
        await parser.parse("anything")
    assert exc_info.value.status == 429
    assert exc_info.value.body == "upstream unhappy"


@pytest.mark.asyncio
async def test_transport_failure_raises_network_error(configured_settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    parser = OutputParser(settings=configured_settings, client=client)

    with pytest.raises(NetworkError) as exc_info:
        await parser.parse("anything")
    assert isinstance(exc_info.value.__cause__.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"choices": []}, {"choices": [{"message": {"content": ""}}]}, {"error": "nope"}])
async def test_missing_content_raises_empty_response(configured_settings, mock_completions, body) -> None:
    client, _ = mock_completions(body=body)
    parser = OutputParser(settings=configured_settings, client=client)

    with pytest.raises(EmptyResponseError):
        await parser.parse("anything")


@pytest.mark.asyncio
async def test_unparseable_reply_raises_parse_error(configured_settings, mock_completions) -> None:
    client, _ = mock_completions("no json at all")
    parser = OutputParser(settings=configured_settings, client=client)

    with pytest.raises(ParseError):
        await parser.parse("anything")


@pytest.mark.asyncio
async def test_missing_configuration_fails_before_any_request(settings, mock_completions) -> None:
    client, requests = mock_completions("{}")
    parser = OutputParser(settings=settings, client=client)

    with pytest.raises(ConfigMissingError):
        await parser.parse("anything")
    assert requests == []


@pytest.mark.asyncio
async def test_whitespace_api_key_is_rejected(settings, configure_llm, mock_completions) -> None:
    configure_llm(settings, api_key="   ")
    client, requests = mock_completions("{}")
    parser = OutputParser(settings=settings, client=client)

    with pytest.raises(ConfigMissingError, match="empty"):
        await parser.parse("anything")
    assert requests == []


@pytest.mark.asyncio
async def test_default_endpoint_when_base_url_blank(settings, mock_completions) -> None:
    from taskrelay.core.settings.schemas import LLMConfig

    settings.save_llm_config(LLMConfig(provider="openrouter", model_name="", api_key="sk-test-123456"))
    client, requests = mock_completions("{}")
    parser = OutputParser(settings=settings, client=client)

    await parser.parse("x")
    assert str(requests[0].url) == "https://openrouter.ai/api/v1/chat/completions"
    assert json.loads(requests[0].content)["model"] == "anthropic/claude-3.5-sonnet"
