"""Tests for the AssemblyAI client using a stub HTTP session."""

from __future__ import annotations

from pathlib import Path

import pytest
import requests

from podpace.asr.assemblyai import AssemblyAIClient, build_assemblyai_client
from podpace.asr.base import TranscriptionError, TranscriptionFailedError, TranscriptionTimeoutError
from podpace.models.config import AnalyzeConfig


class StubResponse:
    def __init__(self, status_code: int, payload: dict | None = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> dict:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class StubSession:
    """Serves queued responses per HTTP method and records requests."""

    def __init__(self, *, post: list | None = None, get: list | None = None) -> None:
        self.queues = {"post": list(post or []), "get": list(get or [])}
        self.requests: list[tuple[str, str, dict]] = []

    def _next(self, method: str, url: str, kwargs: dict):
        self.requests.append((method, url, kwargs))
        item = self.queues[method].pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url: str, **kwargs):
        return self._next("post", url, kwargs)

    def get(self, url: str, **kwargs):
        return self._next("get", url, kwargs)


def make_client(session: StubSession, **overrides) -> AssemblyAIClient:
    config = AnalyzeConfig(poll_interval_seconds=0, max_poll_attempts=4, **overrides)
    return AssemblyAIClient("test-key", config, session=session)


def test_upload_posts_bytes(tmp_path: Path) -> None:
    audio = tmp_path / "show.mp3"
    audio.write_bytes(b"abc")
    session = StubSession(post=[StubResponse(200, {"upload_url": "https://cdn/u1"})])

    assert make_client(session).upload(audio) == "https://cdn/u1"
    method, url, kwargs = session.requests[0]
    assert url == "https://api.assemblyai.com/v2/upload"
    assert kwargs["headers"]["authorization"] == "test-key"


def test_upload_error_status(tmp_path: Path) -> None:
    audio = tmp_path / "show.mp3"
    audio.write_bytes(b"abc")
    session = StubSession(post=[StubResponse(401, text="Unauthorized")])

    with pytest.raises(TranscriptionError, match="401"):
        make_client(session).upload(audio)


def test_submit_requests_speaker_labels() -> None:
    session = StubSession(post=[StubResponse(200, {"id": "t-9", "status": "queued"})])

    assert make_client(session, language_code="en").submit("https://cdn/u1") == "t-9"
    _, url, kwargs = session.requests[0]
    assert url.endswith("/transcript")
    assert kwargs["json"] == {
        "audio_url": "https://cdn/u1",
        "speaker_labels": True,
        "language_code": "en",
    }


def test_wait_polls_until_completed() -> None:
    completed = {
        "id": "t-9",
        "status": "completed",
        "utterances": [
            {"speaker": "A", "start": 0, "end": 1200, "text": "Hello there.", "confidence": 0.9,
             "words": [{"text": "Hello", "start": 0, "end": 500, "speaker": "A"}]},
        ],
    }
    session = StubSession(get=[
        StubResponse(200, {"id": "t-9", "status": "queued"}),
        requests.ConnectionError("reset"),
        StubResponse(503, text="busy"),
        StubResponse(200, completed),
    ])

    result = make_client(session).wait("t-9")

    assert result.status == "completed"
    assert result.utterances[0].speaker == "A"
    assert len(session.requests) == 4


def test_wait_raises_on_error_status() -> None:
    session = StubSession(get=[StubResponse(200, {"id": "t-9", "status": "error", "error": "bad audio"})])

    with pytest.raises(TranscriptionFailedError, match="bad audio"):
        make_client(session).wait("t-9")


def test_wait_times_out_after_max_attempts() -> None:
    session = StubSession(get=[StubResponse(200, {"id": "t-9", "status": "processing"})] * 4)

    with pytest.raises(TranscriptionTimeoutError, match="4 attempts"):
        make_client(session).wait("t-9")
    assert len(session.requests) == 4


def test_build_client_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ASSEMBLYAI_API_KEY", raising=False)
    with pytest.raises(TranscriptionError, match="ASSEMBLYAI_API_KEY"):
        build_assemblyai_client(AnalyzeConfig())

    monkeypatch.setenv("ASSEMBLYAI_API_KEY", "k")
    assert isinstance(build_assemblyai_client(AnalyzeConfig()), AssemblyAIClient)
