"""Global pytest fixtures for PodPace."""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from podpace.ledger.memory import MemoryLedger
from podpace.models.config import AdjustConfig, AnalyzeConfig, Settings, StorageConfig
from podpace.models.job import JobRecord, JobStatus
from podpace.models.transcript import TranscriptResult, Utterance
from podpace.utils.ffmpeg import FFmpegError, RubberbandError
from podpace.utils.ffprobe import AudioInfo


def read_slice(path: Path) -> dict:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def parse_concat_list(list_path: Path) -> list[Path]:
    paths = []
    for line in Path(list_path).read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        quoted = line[len("file "):]
        paths.append(Path(quoted[1:-1].replace("'\\''", "'")))
    return paths


class FakeAudioTools:
    """Writes JSON stand-ins for audio slices and records every call.

    A slice records its source span and resulting duration; ``stretch``
    divides the duration by the tempo and ``concatenate`` sums durations
    in list order.
    """

    name = "fake"

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.fail_extract_at: set[int] = set()
        self.fail_stretch = False
        self.fail_concat = False
        self.concat_inputs: list[dict] = []
        self._lock = threading.Lock()

    def _record(self, *call) -> None:
        with self._lock:
            self.calls.append(call)

    def calls_of(self, kind: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == kind]

    def extract(self, source: Path, output: Path, start_s: float, duration_s: float) -> None:
        self._record("extract", Path(output).name, start_s, duration_s)
        index = int(Path(output).name.split("_")[1])
        if index in self.fail_extract_at:
            raise FFmpegError(["ffmpeg"], 1, "Invalid data found when processing input")
        Path(output).write_text(
            json.dumps({"start": start_s, "duration": duration_s, "tempo": 1.0}),
            encoding="utf-8",
        )

    def stretch(self, input_path: Path, output: Path, tempo: float) -> None:
        self._record("stretch", Path(input_path).name, tempo)
        if self.fail_stretch:
            raise RubberbandError(["rubberband"], 1, "stretch failed")
        data = read_slice(input_path)
        data["duration"] = data["duration"] / tempo
        data["tempo"] = tempo
        Path(output).write_text(json.dumps(data), encoding="utf-8")

    def concatenate(self, list_path: Path, output: Path) -> None:
        self._record("concatenate", Path(list_path).name)
        if self.fail_concat:
            raise FFmpegError(["ffmpeg"], 1, "concat failed")
        slices = [read_slice(p) for p in parse_concat_list(list_path)]
        self.concat_inputs = slices
        Path(output).write_text(
            json.dumps({"duration": sum(s["duration"] for s in slices), "slices": slices}),
            encoding="utf-8",
        )


class FakeTranscriber:
    """In-process stand-in for the hosted ASR service."""

    name = "fake-asr"

    def __init__(self, utterances: list[Utterance] | None = None) -> None:
        self.utterances = utterances or []
        self.calls: list[tuple] = []
        self.fail_with: Exception | None = None

    def upload(self, audio_path: Path) -> str:
        self.calls.append(("upload", Path(audio_path).name))
        return "https://cdn.example/upload/abc"

    def submit(self, audio_url: str) -> str:
        self.calls.append(("submit", audio_url))
        return "transcript-1"

    def wait(self, transcript_id: str) -> TranscriptResult:
        self.calls.append(("wait", transcript_id))
        if self.fail_with is not None:
            raise self.fail_with
        return TranscriptResult(id=transcript_id, status="completed", utterances=self.utterances)


class FlakyLedger(MemoryLedger):
    """MemoryLedger whose storage fails on demand.

    ``fail_write_on`` holds statuses whose write raises ``OSError``;
    ``reads_allowed`` lets that many reads through before every read fails.
    Every requested transition is recorded in ``requested``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.fail_write_on: set[JobStatus] = set()
        self.reads_allowed: int | None = None
        self.requested: list[JobStatus] = []

    def _read(self, job_id: str) -> dict[str, str] | None:
        if self.reads_allowed is not None:
            if self.reads_allowed <= 0:
                raise OSError(5, "Input/output error")
            self.reads_allowed -= 1
        return super()._read(job_id)

    def _write(self, job_id: str, fields: dict[str, str]) -> None:
        if JobStatus(fields["status"]) in self.fail_write_on:
            raise OSError(28, "No space left on device")
        super()._write(job_id, fields)

    def transition(self, job_id: str, status: JobStatus, **kwargs) -> JobRecord:
        self.requested.append(JobStatus(status))
        return super().transition(job_id, status, **kwargs)


def fake_probe(path, *, binary: str = "ffprobe") -> AudioInfo:
    return AudioInfo(
        path=str(path),
        duration_seconds=62.0,
        sample_rate=44100,
        channels=1,
        codec="mp3",
        format_name="mp3",
    )


@pytest.fixture
def ledger() -> MemoryLedger:
    return MemoryLedger()


@pytest.fixture
def flaky_ledger() -> FlakyLedger:
    return FlakyLedger()


@pytest.fixture
def tools() -> FakeAudioTools:
    return FakeAudioTools()


@pytest.fixture
def two_speaker_utterances() -> list[Utterance]:
    """Speaker A at 120 WPM, speaker B at 180 WPM, alternating."""
    words_a = " ".join(["alpha"] * 60)
    words_b = " ".join(["bravo"] * 45)
    return [
        Utterance(speaker="A", start=0, end=30_000, text=words_a),
        Utterance(speaker="B", start=30_000, end=45_000, text=words_b),
        Utterance(speaker="A", start=45_000, end=75_000, text=words_a),
        Utterance(speaker="B", start=75_000, end=90_000, text=words_b),
    ]


@pytest.fixture
def transcriber(two_speaker_utterances) -> FakeTranscriber:
    return FakeTranscriber(two_speaker_utterances)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        analyze=AnalyzeConfig(poll_interval_seconds=0, max_poll_attempts=3),
        adjust=AdjustConfig(),
        storage=StorageConfig(
            upload_dir=str(tmp_path / "uploads"),
            output_dir=str(tmp_path / "output"),
            temp_dir=str(tmp_path / "temp_adjust"),
            ledger_dir=str(tmp_path / "ledger"),
        ),
    )


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    path = tmp_path / "incoming" / "episode 12.mp3"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"ID3\x03\x00fake-mp3-payload")
    return path


@pytest.fixture
def probe():
    return fake_probe


@pytest.fixture
def make_transcriber():
    return FakeTranscriber


@pytest.fixture
def concat_list_paths():
    return parse_concat_list
