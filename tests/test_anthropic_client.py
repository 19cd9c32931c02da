from types import SimpleNamespace

import anthropic
import httpx
import pytest

from storyboard.errors import ConfigurationError, ModelUnavailable
from storyboard.services.anthropic import AnthropicClient

REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


class FakeMessages:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.response


def make_client(response=None, error=None):
    client = AnthropicClient(api_key="sk-test", model="claude-test")
    messages = FakeMessages(response=response, error=error)
    client._client = SimpleNamespace(messages=messages)
    return client, messages


def call(client):
    return client.create_structured(
        prompt="plan it",
        schema={"type": "object", "properties": {}},
        tool_name="record",
        system="be brief",
    )


def test_requires_api_key():
    with pytest.raises(ConfigurationError):
        AnthropicClient(api_key="")


def test_forces_the_output_tool_and_returns_its_input():
    block = SimpleNamespace(type="tool_use", name="record", input={"scenes": []})
    client, messages = make_client(response=SimpleNamespace(content=[block]))

    assert call(client) == {"scenes": []}
    assert messages.kwargs["tool_choice"] == {"type": "tool", "name": "record"}
    assert messages.kwargs["tools"][0]["input_schema"] == {"type": "object", "properties": {}}
    assert messages.kwargs["system"] == "be brief"
    assert messages.kwargs["model"] == "claude-test"


def test_falls_back_to_text():
    block = SimpleNamespace(type="text", text='{"scenes": []}')
    client, _ = make_client(response=SimpleNamespace(content=[block]))

    assert call(client) == '{"scenes": []}'


def test_empty_content_returns_none():
    client, _ = make_client(response=SimpleNamespace(content=[]))

    assert call(client) is None


def test_rejected_key_is_a_configuration_error():
    error = anthropic.AuthenticationError(
        "invalid x-api-key",
        response=httpx.Response(401, request=REQUEST),
        body=None,
    )
    client, _ = make_client(error=error)

    with pytest.raises(ConfigurationError):
        call(client)


def test_connection_error_is_model_unavailable():
    client, _ = make_client(error=anthropic.APIConnectionError(request=REQUEST))

    with pytest.raises(ModelUnavailable):
        call(client)


def test_server_error_is_model_unavailable():
    error = anthropic.InternalServerError(
        "overloaded",
        response=httpx.Response(500, request=REQUEST),
        body=None,
    )
    client, messages = make_client(error=error)

    with pytest.raises(ModelUnavailable):
        call(client)
