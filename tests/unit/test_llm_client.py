import io
import json
from urllib import error

import pytest

import ai_coder.llm.client as client_module
from ai_coder.llm.client import LLMRequestError, OpenAIChatCompletionsClient, parse_completion
from ai_coder.llm.types import ChatMessage


class _FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _response_body(message: dict) -> bytes:
    return json.dumps({"choices": [{"message": message, "finish_reason": "stop"}]}).encode()


def test_parse_completion_reads_tool_calls() -> None:
    completion = parse_completion(
        {
            "choices": [
                {
                    "message": {
                        "content": None,
                        "tool_calls": [
                            {
                                "id": "call_1",
                                "type": "function",
                                "function": {"name": "terminal", "arguments": '{"input":"ls"}'},
                            }
                        ],
                    },
                    "finish_reason": "tool_calls",
                }
            ]
        }
    )

    choice = completion.choices[0]
    assert choice.content == ""
    assert choice.finish_reason == "tool_calls"
    assert choice.tool_calls[0].id == "call_1"
    assert choice.tool_calls[0].function.name == "terminal"
    assert choice.tool_calls[0].function.arguments == '{"input":"ls"}'


def test_parse_completion_encodes_decoded_arguments() -> None:
    completion = parse_completion(
        {
            "choices": [
                {
                    "message": {
                        "tool_calls": [
                            {"function": {"name": "done", "arguments": {"message": "ok"}}}
                        ]
                    }
                }
            ]
        }
    )

    call = completion.choices[0].tool_calls[0]
    assert call.id == ""
    assert json.loads(call.function.arguments) == {"message": "ok"}


def test_parse_completion_joins_content_parts() -> None:
    completion = parse_completion(
        {"choices": [{"message": {"content": [{"text": "hello "}, {"text": "world"}]}}]}
    )

    assert completion.text == "hello world"


def test_parse_completion_without_choices() -> None:
    completion = parse_completion({})

    assert completion.choices == []
    assert completion.text == ""


def test_parse_completion_rejects_malformed_bodies() -> None:
    with pytest.raises(LLMRequestError, match="malformed response"):
        parse_completion({"choices": [{"message": "hi"}]})

    with pytest.raises(LLMRequestError, match="malformed response"):
        parse_completion(["not", "an", "object"])

    with pytest.raises(LLMRequestError, match="malformed response"):
        parse_completion({"choices": 3})


def test_client_rejects_json_body_that_is_not_an_object(monkeypatch) -> None:
    monkeypatch.setattr(
        client_module.request,
        "urlopen",
        lambda req, timeout: _FakeResponse(b'"just text"'),
    )
    client = OpenAIChatCompletionsClient(model="gpt-test", max_retries=0)

    with pytest.raises(LLMRequestError):
        client.complete(messages=[ChatMessage.user("hi")])


def test_client_sends_tools_and_auth_header(monkeypatch) -> None:
    captured = {}

    def fake_urlopen(req, timeout):
        captured["url"] = req.full_url
        captured["headers"] = dict(req.header_items())
        captured["body"] = json.loads(req.data.decode("utf-8"))
        captured["timeout"] = timeout
        return _FakeResponse(_response_body({"content": "hi"}))

    monkeypatch.setattr(client_module.request, "urlopen", fake_urlopen)
    client = OpenAIChatCompletionsClient(
        model="gpt-4o-mini",
        base_url="https://example.test/v1/",
        api_key="secret",
        timeout_s=5.0,
    )
    tools = [{"type": "function", "function": {"name": "done", "parameters": {}}}]

    completion = client.complete(
        messages=[ChatMessage.system("sys")],
        tools=tools,
        tool_choice="required",
    )

    assert completion.text == "hi"
    assert captured["url"] == "https://example.test/v1/chat/completions"
    assert captured["headers"]["Authorization"] == "Bearer secret"
    assert captured["timeout"] == 5.0
    assert captured["body"]["model"] == "gpt-4o-mini"
    assert captured["body"]["tools"] == tools
    assert captured["body"]["tool_choice"] == "required"
    assert captured["body"]["messages"] == [{"role": "system", "content": "sys"}]


def test_client_omits_auth_and_tool_choice_without_tools(monkeypatch) -> None:
    captured = {}

    def fake_urlopen(req, timeout):
        captured["headers"] = dict(req.header_items())
        captured["body"] = json.loads(req.data.decode("utf-8"))
        return _FakeResponse(_response_body({"content": "{}"}))

    monkeypatch.setattr(client_module.request, "urlopen", fake_urlopen)
    client = OpenAIChatCompletionsClient(model="llama3", base_url="http://localhost:11434/v1")

    client.complete(
        messages=[ChatMessage.user("hi")],
        tool_choice="required",
        response_format={"type": "json_object"},
    )

    assert "Authorization" not in captured["headers"]
    assert "tools" not in captured["body"]
    assert "tool_choice" not in captured["body"]
    assert captured["body"]["response_format"] == {"type": "json_object"}


def test_client_retries_then_raises(monkeypatch) -> None:
    calls = []

    def failing_urlopen(req, timeout):
        calls.append(req)
        raise error.URLError("connection refused")

    monkeypatch.setattr(client_module.request, "urlopen", failing_urlopen)
    client = OpenAIChatCompletionsClient(model="gpt-4o-mini", max_retries=2, backoff_s=0.0)

    with pytest.raises(LLMRequestError, match="connection refused"):
        client.complete(messages=[ChatMessage.user("hi")])

    assert len(calls) == 3


def test_client_rejects_non_json_body(monkeypatch) -> None:
    monkeypatch.setattr(
        client_module.request,
        "urlopen",
        lambda req, timeout: _FakeResponse(b"<html>bad gateway</html>"),
    )
    client = OpenAIChatCompletionsClient(model="gpt-4o-mini", max_retries=0)

    with pytest.raises(LLMRequestError, match="non-JSON"):
        client.complete(messages=[ChatMessage.user("hi")])
