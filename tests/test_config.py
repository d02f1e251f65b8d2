"""Tests for JournalConfig."""

from __future__ import annotations

from pathlib import Path

import pytest

from luminary_journal.config import JournalConfig
from luminary_journal.exceptions import ValidationError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "LUMINARY_REMOTE_URL",
        "LUMINARY_PROBE_TIMEOUT",
        "LUMINARY_PROBE_INTERVAL",
        "LUMINARY_REQUEST_TIMEOUT",
        "LUMINARY_LOCAL_PATH",
        "LUMINARY_MIRROR_KEY",
        "LUMINARY_LOCAL_ID_PREFIX",
    ):
        monkeypatch.delenv(var, raising=False)


class TestJournalConfig:
    """Tests for defaults and validation."""

    def test_defaults(self) -> None:
        config = JournalConfig()

        assert config.remote_url == "http://localhost:3001"
        assert config.probe_timeout == 1.2
        assert config.probe_interval == 30.0
        assert config.request_timeout is None
        assert config.local_path is None
        assert config.mirror_key == "luminary_journal_entries"
        assert config.local_id_prefix == "local-"

    def test_non_positive_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            JournalConfig(probe_timeout=0)

    def test_empty_local_prefix_rejected(self) -> None:
        with pytest.raises(ValidationError):
            JournalConfig(local_id_prefix="")

    def test_with_overrides_ignores_unknown_keys(self) -> None:
        config = JournalConfig().with_overrides({"remote_url": "http://x", "colour": "blue"})
        assert config.remote_url == "http://x"


class TestFromEnvironment:
    def test_reads_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LUMINARY_REMOTE_URL", "http://journal.example:8080")
        monkeypatch.setenv("LUMINARY_PROBE_TIMEOUT", "0.5")
        monkeypatch.setenv("LUMINARY_REQUEST_TIMEOUT", "10")
        monkeypatch.setenv("LUMINARY_LOCAL_PATH", "/tmp/mirror")

        config = JournalConfig.from_environment()

        assert config.remote_url == "http://journal.example:8080"
        assert config.probe_timeout == 0.5
        assert config.request_timeout == 10.0
        assert config.local_path == "/tmp/mirror"
        assert config.probe_interval == 30.0

    def test_bad_number_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LUMINARY_PROBE_INTERVAL", "often")
        with pytest.raises(ValidationError) as exc_info:
            JournalConfig.from_environment()
        assert exc_info.value.field == "probe_interval"


class TestFromSettingsFile:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert JournalConfig.from_settings_file(tmp_path / "missing.yaml") == JournalConfig()

    def test_reads_journal_section(self, tmp_path: Path) -> None:
        settings = tmp_path / "settings.yaml"
        settings.write_text(
            "journal:\n"
            "  remote_url: http://cloud.example\n"
            "  probe_interval: 10\n"
            "  mirror_key: my_entries\n"
            "other:\n"
            "  ignored: true\n"
        )

        config = JournalConfig.from_settings_file(settings)

        assert config.remote_url == "http://cloud.example"
        assert config.probe_interval == 10.0
        assert config.mirror_key == "my_entries"

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        settings = tmp_path / "settings.yaml"
        settings.write_text("journal: [unclosed\n")
        with pytest.raises(ValidationError):
            JournalConfig.from_settings_file(settings)

    def test_environment_overrides_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        settings = tmp_path / "settings.yaml"
        settings.write_text("journal:\n  remote_url: http://from-file\n  probe_timeout: 2\n")
        monkeypatch.setenv("LUMINARY_REMOTE_URL", "http://from-env")

        config = JournalConfig.load(settings)

        assert config.remote_url == "http://from-env"
        assert config.probe_timeout == 2.0
