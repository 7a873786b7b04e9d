import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from agri_ai.errors import GatewayConfigError, GatewayError
from agri_ai.services import gateway


def make_client(content="ok", error=None):
    client = MagicMock()
    if error:
        client.chat.completions.create = AsyncMock(side_effect=error)
    else:
        response = MagicMock()
        response.choices = [MagicMock(message=MagicMock(content=content))]
        client.chat.completions.create = AsyncMock(return_value=response)
    return client


def test_missing_credential_fails_at_call_time(monkeypatch):
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    with pytest.raises(GatewayConfigError):
        asyncio.run(gateway.generate_text("hello"))


def test_generate_text():
    client = make_client("Use drip irrigation.")
    with patch.object(gateway, "get_client", return_value=client):
        assert asyncio.run(gateway.generate_text("water tips?")) == "Use drip irrigation."

    kwargs = client.chat.completions.create.await_args.kwargs
    assert kwargs["messages"] == [{"role": "user", "content": "water tips?"}]


def test_analyze_image_strips_data_uri():
    client = make_client('{"isPlant": true}')
    with patch.object(gateway, "get_client", return_value=client):
        asyncio.run(gateway.analyze_image("data:image/png;base64,AAAA", "is this a plant?"))

    content = client.chat.completions.create.await_args.kwargs["messages"][0]["content"]
    assert content[0] == {"type": "text", "text": "is this a plant?"}
    assert content[1]["image_url"]["url"] == "data:image/jpeg;base64,AAAA"


def test_call_failure_becomes_gateway_error():
    client = make_client(error=RuntimeError("connection reset"))
    with patch.object(gateway, "get_client", return_value=client):
        with pytest.raises(GatewayError, match="AI vision service temporarily unavailable"):
            asyncio.run(gateway.analyze_image("AAAA", "prompt"))


class TestClientLifecycle:

    @pytest.fixture(autouse=True)
    def fresh_gateway(self, monkeypatch):
        monkeypatch.setattr(gateway, "_http_client", None)
        monkeypatch.setattr(gateway, "_client", None)
        monkeypatch.setattr(gateway, "_client_key", None)

    def test_same_key_reuses_client(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "key-one")
        assert gateway.get_client() is gateway.get_client()

    def test_key_change_reuses_connection_pool(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "key-one")
        first = gateway.get_client()
        pool = gateway._http_client

        monkeypatch.setenv("GROQ_API_KEY", "key-two")
        second = gateway.get_client()

        assert second is not first
        assert second.api_key == "key-two"
        assert gateway._http_client is pool
        assert not pool.is_closed

    def test_close_releases_pool(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "key-one")
        gateway.get_client()
        pool = gateway._http_client

        asyncio.run(gateway.close())

        assert pool.is_closed
        assert gateway._client is None
        assert gateway._http_client is None


def test_empty_content():
    client = make_client(None)
    with patch.object(gateway, "get_client", return_value=client):
        assert asyncio.run(gateway.generate_text("hi")) == ""
