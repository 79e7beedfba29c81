"""
Tests for the Action completion wrapper, with fake provider clients
"""

from types import SimpleNamespace

import httpx
import openai
import pytest
from ollama import ResponseError

from eventplanner.lib.action import Action
from eventplanner.lib.config import Settings
from eventplanner.lib.exceptions import ConfigurationError, PlannerError, TransportError


API_URL = "https://api.openai.com/v1/chat/completions"


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeOpenAI:
    """Stands in for openai.OpenAI; create() behaviour is set per test"""
    calls = []
    outcome = None

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self.create))

    def create(self, **request):
        FakeOpenAI.calls.append({"client": self.kwargs, "request": request})
        if isinstance(FakeOpenAI.outcome, Exception):
            raise FakeOpenAI.outcome
        return completion(FakeOpenAI.outcome)


class TestAction:
    """Test suite for model dispatch and transport errors"""

    @pytest.fixture
    def fake_openai(self, monkeypatch):
        FakeOpenAI.calls = []
        FakeOpenAI.outcome = '{"schedule": []}'
        monkeypatch.setattr("eventplanner.lib.action.OpenAI", FakeOpenAI)
        return FakeOpenAI

    @pytest.fixture
    def action(self):
        action = Action(model="gpt-4.1-mini")
        action.settings = Settings(api_key="sk-test", base_url="http://localhost:8000/v1", timeout=30.0)
        return action

    def test_dummy_model_echoes_prompt(self):
        assert Action(model="dummy").prompt("hello") == "hello"

    def test_unknown_model(self):
        with pytest.raises(ConfigurationError):
            Action(model="no-such-model").prompt("hello")

    def test_prompt_length_limit(self):
        action = Action(model="dummy")
        action.set_limit_characters_prompt(10)
        with pytest.raises(PlannerError):
            action.prompt("x" * 11)

    def test_openai_request(self, action, fake_openai):
        action.set_system_prompt("You are an event planner.")
        assert action.prompt("Plan it") == '{"schedule": []}'

        call = fake_openai.calls[0]
        assert call["client"] == {"api_key": "sk-test", "base_url": "http://localhost:8000/v1", "timeout": 30.0}
        assert call["request"]["model"] == "gpt-4.1-mini"
        assert call["request"]["messages"] == [
            {"role": "system", "content": "You are an event planner."},
            {"role": "user", "content": "Plan it"},
        ]
        assert "response_format" not in call["request"]

    def test_openai_schema_request(self, action, fake_openai):
        action.prompt("Plan it", schema={"name": "logistics", "type": "object", "properties": {}})

        response_format = fake_openai.calls[0]["request"]["response_format"]
        assert response_format["type"] == "json_schema"
        assert response_format["json_schema"]["name"] == "logistics"
        assert "name" not in response_format["json_schema"]["schema"]

    def test_openai_empty_content(self, action, fake_openai):
        fake_openai.outcome = None
        assert action.prompt("Plan it") == ""

    def test_openai_status_error(self, action, fake_openai):
        response = httpx.Response(500, request=httpx.Request("POST", API_URL), text="boom")
        fake_openai.outcome = openai.APIStatusError("server error", response=response, body=None)

        with pytest.raises(TransportError) as excinfo:
            action.prompt("Plan it")

        assert excinfo.value.status_code == 500
        assert excinfo.value.body == "boom"
        assert str(excinfo.value) == "OpenAI API returned error code: 500: boom"

    def test_openai_connection_error(self, action, fake_openai):
        fake_openai.outcome = openai.APIConnectionError(request=httpx.Request("POST", API_URL))

        with pytest.raises(TransportError) as excinfo:
            action.prompt("Plan it")

        assert excinfo.value.status_code is None
        assert "no response" in str(excinfo.value)

    def test_openai_missing_api_key(self, action, fake_openai):
        action.settings = Settings()
        with pytest.raises(ConfigurationError):
            action.prompt("Plan it")
        assert fake_openai.calls == []

    def test_ollama_reply(self, monkeypatch):
        def fake_chat(model, messages):
            return SimpleNamespace(message=SimpleNamespace(content=f"{model}:{messages[-1]['content']}"))

        monkeypatch.setattr("eventplanner.lib.action.chat", fake_chat)
        assert Action(model="llama3.2").prompt("hi") == "llama3.2:hi"

    def test_ollama_error(self, monkeypatch):
        def fake_chat(model, messages):
            raise ResponseError("model not found", 404)

        monkeypatch.setattr("eventplanner.lib.action.chat", fake_chat)
        with pytest.raises(TransportError) as excinfo:
            Action(model="phi4").prompt("hi")
        assert excinfo.value.status_code == 404
