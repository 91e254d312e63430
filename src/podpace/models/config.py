"""Configuration models for each pipeline stage."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from podpace.utils.io import read_yaml

DEFAULT_CONFIG_FILE = "podpace.yaml"


class AnalyzeConfig(BaseModel):
    """Configuration for the analyze stage and the hosted ASR client."""

    api_base_url: str = "https://api.assemblyai.com/v2"
    api_key_env: str = "ASSEMBLYAI_API_KEY"
    request_timeout_seconds: float = Field(default=120.0, gt=0)
    poll_interval_seconds: float = Field(default=5.0, ge=0)
    max_poll_attempts: int = Field(default=720, ge=1)  # 720 x 5s = 1 hour
    language_code: str | None = None
    include_gaps: bool = False  # emit speakerless segments for silence between utterances
    workers: int = Field(default=5, ge=1, le=32)


class AdjustConfig(BaseModel):
    """Configuration for the adjust and reconstruction stages.

    ``min_tempo``/``max_tempo`` are unset by default. Rubber Band keeps speech
    intelligible roughly within 0.5x-2.0x; factors outside that range are
    passed through as computed unless a clamp is configured.
    """

    sample_rate: int = Field(default=44100, ge=8000, le=192000)
    channels: int = Field(default=1, ge=1, le=2)
    output_codec: str = "libmp3lame"
    output_bitrate_kbps: int = Field(default=192, ge=32, le=320)
    output_extension: str = "mp3"
    noop_threshold: float = Field(default=0.01, ge=0.0, le=0.5)
    min_tempo: float | None = Field(default=None, gt=0)
    max_tempo: float | None = Field(default=None, gt=0)
    workers: int = Field(default=2, ge=1, le=8)
    segment_workers: int = Field(default=1, ge=1, le=16)
    ffmpeg_binary: str = "ffmpeg"
    rubberband_binary: str = "rubberband"

    @model_validator(mode="after")
    def _check_clamps(self) -> "AdjustConfig":
        if self.min_tempo and self.max_tempo and self.min_tempo > self.max_tempo:
            raise ValueError("min_tempo must not exceed max_tempo")
        return self


class StorageConfig(BaseModel):
    """Where uploads, outputs, scratch files and the job ledger live."""

    upload_dir: str = "uploads"
    output_dir: str = "output"
    temp_dir: str = "temp_adjust"
    ledger_dir: str = "ledger"
    ffprobe_binary: str = "ffprobe"


_ENV_OVERRIDES = {
    "PODPACE_UPLOAD_DIR": "upload_dir",
    "PODPACE_OUTPUT_DIR": "output_dir",
    "PODPACE_TEMP_DIR": "temp_dir",
    "PODPACE_LEDGER_DIR": "ledger_dir",
}


class Settings(BaseModel):
    """All stage configurations."""

    analyze: AnalyzeConfig = Field(default_factory=AnalyzeConfig)
    adjust: AdjustConfig = Field(default_factory=AdjustConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "Settings":
        """Load settings from YAML (if present), then apply environment overrides."""
        config_path = Path(path) if path else Path(DEFAULT_CONFIG_FILE)
        data: dict = {}
        if config_path.exists():
            data = read_yaml(config_path)
        elif path is not None:
            raise FileNotFoundError(f"Config file not found: {config_path}")

        storage = dict(data.get("storage") or {})
        for env_key, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_key)
            if value:
                storage[field_name] = value
        data["storage"] = storage

        return cls(**data)
