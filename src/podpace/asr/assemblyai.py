"""AssemblyAI client: upload, diarized transcription, status polling."""

from __future__ import annotations

import os
from pathlib import Path

import requests
from requests import Response, Session
from tenacity import RetryCallState, RetryError

from podpace.asr.base import (
    TranscriptionError,
    TranscriptionFailedError,
    TranscriptionTimeoutError,
)
from podpace.models.config import AnalyzeConfig
from podpace.models.transcript import TranscriptResult, TranscriptStatus
from podpace.utils.progress import log_step, log_warning
from podpace.utils.retry import poller


class PollHTTPError(TranscriptionError):
    """Non-2xx response while polling; treated as transient."""


class AssemblyAIClient:
    """Thin wrapper over the AssemblyAI v2 REST API."""

    name = "assemblyai"

    def __init__(
        self,
        api_key: str,
        config: AnalyzeConfig | None = None,
        *,
        session: Session | None = None,
        label: str = "AssemblyAI",
    ) -> None:
        self.config = config or AnalyzeConfig()
        self.label = label
        self._api_key = api_key
        self._session = session or requests.Session()

    @property
    def _base(self) -> str:
        return self.config.api_base_url.rstrip("/")

    def _check(self, response: Response, action: str) -> dict:
        if response.status_code >= 400:
            raise TranscriptionError(
                f"AssemblyAI {action} failed: {response.status_code} - {response.text[:500]}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise TranscriptionError(f"AssemblyAI {action} returned invalid JSON") from e

    def upload(self, audio_path: Path) -> str:
        """Upload the raw audio bytes. Returns the service-side URL."""
        log_step(self.label, f"Uploading {Path(audio_path).name}")
        try:
            with open(audio_path, "rb") as f:
                response = self._session.post(
                    f"{self._base}/upload",
                    headers={"authorization": self._api_key},
                    data=f,
                    timeout=self.config.request_timeout_seconds,
                )
        except requests.RequestException as e:
            raise TranscriptionError(f"AssemblyAI upload failed: {e}") from e

        upload_url = self._check(response, "upload").get("upload_url")
        if not upload_url:
            raise TranscriptionError("AssemblyAI upload response missing upload_url")
        return upload_url

    def submit(self, audio_url: str) -> str:
        """Submit a diarized transcription job. Returns the transcript id."""
        payload: dict = {"audio_url": audio_url, "speaker_labels": True}
        if self.config.language_code:
            payload["language_code"] = self.config.language_code

        try:
            response = self._session.post(
                f"{self._base}/transcript",
                headers={"authorization": self._api_key, "content-type": "application/json"},
                json=payload,
                timeout=self.config.request_timeout_seconds,
            )
        except requests.RequestException as e:
            raise TranscriptionError(f"AssemblyAI job submission failed: {e}") from e

        transcript_id = self._check(response, "job submission").get("id")
        if not transcript_id:
            raise TranscriptionError("AssemblyAI submission response missing transcript id")
        log_step(self.label, f"Submitted transcript {transcript_id}")
        return transcript_id

    def fetch(self, transcript_id: str) -> TranscriptResult:
        """Fetch the current transcript state once."""
        response = self._session.get(
            f"{self._base}/transcript/{transcript_id}",
            headers={"authorization": self._api_key},
            timeout=self.config.request_timeout_seconds,
        )
        if response.status_code >= 400:
            raise PollHTTPError(f"poll returned {response.status_code}")
        return TranscriptResult.model_validate(response.json())

    def _before_sleep(self, state: RetryCallState) -> None:
        outcome = state.outcome
        if outcome is not None and outcome.failed:
            log_warning(f"{self.label} polling error: {outcome.exception()} (attempt {state.attempt_number})")
        elif outcome is not None:
            log_step(self.label, f"Status: {outcome.result().status} (attempt {state.attempt_number})")

    def wait(self, transcript_id: str) -> TranscriptResult:
        """Poll until the transcript completes.

        Raises:
            TranscriptionFailedError: the service reported ``error``.
            TranscriptionTimeoutError: ``max_poll_attempts`` polls without completion.
        """
        retrying = poller(
            interval_seconds=self.config.poll_interval_seconds,
            max_attempts=self.config.max_poll_attempts,
            pending=lambda result: result.is_pending,
            transient=(requests.RequestException, PollHTTPError),
            before_sleep=self._before_sleep,
        )
        try:
            result = retrying(self.fetch, transcript_id)
        except RetryError as e:
            raise TranscriptionTimeoutError(
                f"AssemblyAI transcription timed out after {self.config.max_poll_attempts} attempts"
            ) from e

        if result.status == TranscriptStatus.ERROR:
            raise TranscriptionFailedError(f"AssemblyAI transcription failed: {result.error}")
        log_step(self.label, f"Transcript {transcript_id} completed")
        return result


def build_assemblyai_client(config: AnalyzeConfig, *, session: Session | None = None) -> AssemblyAIClient:
    """Create a client using the API key from ``config.api_key_env``."""
    api_key = os.environ.get(config.api_key_env, "").strip()
    if not api_key:
        raise TranscriptionError(f"{config.api_key_env} environment variable is not set")
    return AssemblyAIClient(api_key, config, session=session)
