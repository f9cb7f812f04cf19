"""Unit tests for the Gemini completion client and the timeout race."""

import asyncio
from types import SimpleNamespace

import pytest

from contract_timeline.analysis.completion_client import GeminiCompletionClient, TimeoutRace
from contract_timeline.analysis.exceptions import (
    CompletionTimeoutError,
    EmptyResponseError,
    UpstreamError,
)


class FakeModel:
    """Stand-in for a GenerativeModel."""

    def __init__(self, text="{}", delay=0.0, error=None):
        self.text = text
        self.delay = delay
        self.error = error
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class TestTimeoutRace:
    """Tests for TimeoutRace."""

    def test_fast_request_wins(self):
        async def request():
            return "done"

        race = TimeoutRace(timeout=1.0)

        assert asyncio.run(race.run(request())) == "done"
        assert race.pending_abandoned == 0

    def test_request_error_propagates(self):
        async def request():
            raise UpstreamError(message="boom")

        race = TimeoutRace(timeout=1.0)

        with pytest.raises(UpstreamError):
            asyncio.run(race.run(request()))

    def test_slow_request_times_out(self):
        async def scenario():
            race = TimeoutRace(timeout=0.02)
            with pytest.raises(CompletionTimeoutError) as exc_info:
                await race.run(asyncio.sleep(5, result="late"))
            return race, exc_info.value

        race, error = asyncio.run(scenario())

        assert error.timeout == 0.02
        assert "timed out" in error.message

    def test_abandoned_request_keeps_running_and_is_discarded(self):
        completed = []

        async def slow_request():
            await asyncio.sleep(0.05)
            completed.append(True)
            return "late answer"

        async def scenario():
            race = TimeoutRace(timeout=0.01)
            with pytest.raises(CompletionTimeoutError):
                await race.run(slow_request())
            assert race.pending_abandoned == 1
            await asyncio.sleep(0.15)
            return race

        race = asyncio.run(scenario())

        assert completed == [True]
        assert race.pending_abandoned == 0

    def test_late_error_is_discarded(self):
        async def failing_request():
            await asyncio.sleep(0.05)
            raise RuntimeError("connection reset")

        async def scenario():
            race = TimeoutRace(timeout=0.01)
            with pytest.raises(CompletionTimeoutError):
                await race.run(failing_request())
            await asyncio.sleep(0.15)
            return race

        race = asyncio.run(scenario())

        assert race.pending_abandoned == 0


class TestGeminiCompletionClient:
    """Tests for GeminiCompletionClient with an injected model."""

    def test_requires_key_or_model(self):
        with pytest.raises(ValueError):
            GeminiCompletionClient(api_key=None)

    def test_returns_raw_text(self):
        model = FakeModel(text='```json\n{"metadata": {}}\n```')
        client = GeminiCompletionClient(model=model)

        text = asyncio.run(client.complete("analyze this"))

        assert text == '```json\n{"metadata": {}}\n```'
        assert model.prompts == ["analyze this"]

    def test_empty_response_raises(self):
        client = GeminiCompletionClient(model=FakeModel(text="   "))

        with pytest.raises(EmptyResponseError) as exc_info:
            asyncio.run(client.complete("prompt"))

        assert exc_info.value.message == "No response from Gemini API"

    def test_none_text_raises_empty_response(self):
        client = GeminiCompletionClient(model=FakeModel(text=None))

        with pytest.raises(EmptyResponseError):
            asyncio.run(client.complete("prompt"))

    def test_upstream_error_passes_message_through(self):
        model = FakeModel(error=RuntimeError("API key not valid"))
        client = GeminiCompletionClient(model=model)

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(client.complete("prompt"))

        assert exc_info.value.message == "API key not valid"
        assert exc_info.value.details["error_type"] == "RuntimeError"

    def test_slow_model_times_out(self):
        client = GeminiCompletionClient(model=FakeModel(delay=1.0), timeout=0.02)

        with pytest.raises(CompletionTimeoutError) as exc_info:
            asyncio.run(client.complete("prompt"))

        assert exc_info.value.timeout == 0.02
        assert client.timeout == 0.02

    def test_one_request_per_call(self):
        model = FakeModel(text="{}")
        client = GeminiCompletionClient(model=model)

        asyncio.run(client.complete("a"))
        asyncio.run(client.complete("b"))

        assert model.prompts == ["a", "b"]
