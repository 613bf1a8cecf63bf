import asyncio
import json

import httpx
import pytest

from config import Settings
from errors import CandidatesExhausted, ErrorKind, ServiceError
from speech.elevenlabs import SPEECH_MODELS, synthesize, voice_settings

AUDIO = b"ID3\x04fake-mp3"


def _synthesize(settings, statuses: dict, speech_type="workout", text="Three sets of ten."):
    """statuses maps model_id -> HTTP status; 200 returns AUDIO."""
    seen = []

    def handler(request):
        body = json.loads(request.content)
        seen.append(body)
        status = statuses.get(body["model_id"], 200)
        return httpx.Response(status, content=AUDIO if status == 200 else b"{}")

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            return await synthesize(http, settings, text, speech_type)

    return lambda: asyncio.run(run()), seen


@pytest.fixture
def settings():
    return Settings(elevenlabs_api_key="sk_test", elevenlabs_voice_id="voice-1")


def test_first_model_succeeds(settings):
    run, seen = _synthesize(settings, {}, text="  Three sets of ten.  ")
    assert run() == AUDIO
    assert [b["model_id"] for b in seen] == SPEECH_MODELS[:1]
    assert seen[0]["text"] == "Three sets of ten."


def test_missing_model_moves_to_the_next(settings):
    run, seen = _synthesize(settings, {SPEECH_MODELS[0]: 404})
    assert run() == AUDIO
    assert [b["model_id"] for b in seen] == SPEECH_MODELS[:2]


def test_unauthorized_stops_after_one_attempt(settings):
    run, seen = _synthesize(settings, {m: 401 for m in SPEECH_MODELS})
    with pytest.raises(ServiceError) as exc_info:
        run()
    assert len(seen) == 1
    assert exc_info.value.kind is ErrorKind.UNAUTHORIZED
    assert "Invalid ElevenLabs API key" in exc_info.value.message


def test_every_model_failing(settings):
    run, seen = _synthesize(settings, {m: 500 for m in SPEECH_MODELS})
    with pytest.raises(CandidatesExhausted) as exc_info:
        run()
    assert len(seen) == len(SPEECH_MODELS)
    for model in SPEECH_MODELS:
        assert model in exc_info.value.message


def test_voice_coach_settings(settings):
    run, seen = _synthesize(settings, {}, speech_type="voice-coach")
    run()
    assert seen[0]["voice_settings"] == voice_settings("voice-coach") == {
        "stability": 0.6, "similarity_boost": 0.8,
    }


def test_missing_key_is_a_configuration_error():
    run, seen = _synthesize(Settings(), {})
    with pytest.raises(ServiceError) as exc_info:
        run()
    assert exc_info.value.kind is ErrorKind.CONFIGURATION
    assert seen == []


def test_malformed_key_is_rejected_before_any_call():
    run, seen = _synthesize(Settings(elevenlabs_api_key="abc123"), {})
    with pytest.raises(ServiceError) as exc_info:
        run()
    assert exc_info.value.kind is ErrorKind.INVALID_INPUT
    assert exc_info.value.message == "Invalid API key format"
    assert seen == []
