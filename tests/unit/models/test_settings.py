"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from podpace.models.config import AdjustConfig, Settings


def test_defaults_without_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for key in ("PODPACE_UPLOAD_DIR", "PODPACE_OUTPUT_DIR", "PODPACE_TEMP_DIR", "PODPACE_LEDGER_DIR"):
        monkeypatch.delenv(key, raising=False)

    settings = Settings.load()

    assert settings.analyze.poll_interval_seconds == 5
    assert settings.analyze.max_poll_attempts == 720
    assert settings.analyze.workers == 5
    assert settings.adjust.workers == 2
    assert settings.adjust.output_bitrate_kbps == 192
    assert settings.storage.temp_dir == "temp_adjust"


def test_yaml_and_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "podpace.yaml"
    config.write_text(
        "analyze:\n"
        "  include_gaps: true\n"
        "adjust:\n"
        "  max_tempo: 1.5\n"
        "storage:\n"
        "  output_dir: /srv/out\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("PODPACE_OUTPUT_DIR", "/data/out")

    settings = Settings.load(config)

    assert settings.analyze.include_gaps is True
    assert settings.adjust.max_tempo == 1.5
    assert settings.storage.output_dir == "/data/out"


def test_explicit_missing_config(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        Settings.load(tmp_path / "missing.yaml")


def test_inverted_clamps_rejected() -> None:
    with pytest.raises(ValueError):
        AdjustConfig(min_tempo=2.0, max_tempo=0.5)
