"""
Configuration for the journal sync core.

Configuration can be provided directly, via a settings file, or via
environment variables. ``JournalConfig.load`` layers them: defaults, then
the settings file, then the environment.

Settings file (~/.luminary/settings.yaml):

    ```yaml
    journal:
      remote_url: "http://localhost:3001"
      probe_timeout: 1.2
      probe_interval: 30
      local_path: "~/.luminary/mirror"
    ```

Environment Variables:
    LUMINARY_REMOTE_URL: Base URL of the remote store
    LUMINARY_PROBE_TIMEOUT: Seconds before a connectivity probe gives up
    LUMINARY_PROBE_INTERVAL: Seconds between periodic probes
    LUMINARY_REQUEST_TIMEOUT: Total timeout for entry requests (unset: transport default)
    LUMINARY_LOCAL_PATH: Directory of the on-device mirror
    LUMINARY_MIRROR_KEY: Key of the mirror blob
    LUMINARY_LOCAL_ID_PREFIX: Prefix of ids minted while offline
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from .entries.ids import LOCAL_ID_PREFIX
from .exceptions import ValidationError
from .mirror.entry_mirror import DEFAULT_MIRROR_KEY

DEFAULT_SETTINGS_PATH = Path.home() / ".luminary" / "settings.yaml"

_ENV_VARS = {
    "remote_url": "LUMINARY_REMOTE_URL",
    "probe_timeout": "LUMINARY_PROBE_TIMEOUT",
    "probe_interval": "LUMINARY_PROBE_INTERVAL",
    "request_timeout": "LUMINARY_REQUEST_TIMEOUT",
    "local_path": "LUMINARY_LOCAL_PATH",
    "mirror_key": "LUMINARY_MIRROR_KEY",
    "local_id_prefix": "LUMINARY_LOCAL_ID_PREFIX",
}
_FLOAT_FIELDS = {"probe_timeout", "probe_interval", "request_timeout"}


@dataclass
class JournalConfig:
    """Configuration for the persistence gateway and connectivity prober.

    Attributes:
        remote_url: Base URL of the remote store
        probe_timeout: Seconds a connectivity probe may take
        probe_interval: Seconds between periodic probes
        request_timeout: Total timeout for entry requests; None keeps the
            HTTP client's own limit
        local_path: Directory of the file-backed mirror (None: ~/.luminary/mirror)
        mirror_key: Key of the mirror blob
        local_id_prefix: Prefix marking ids minted while offline
    """

    remote_url: str = "http://localhost:3001"
    probe_timeout: float = 1.2
    probe_interval: float = 30.0
    request_timeout: float | None = None
    local_path: str | None = None
    mirror_key: str = DEFAULT_MIRROR_KEY
    local_id_prefix: str = LOCAL_ID_PREFIX

    def __post_init__(self) -> None:
        if self.probe_timeout <= 0:
            raise ValidationError("probe_timeout", "must be positive", str(self.probe_timeout))
        if self.probe_interval <= 0:
            raise ValidationError("probe_interval", "must be positive", str(self.probe_interval))
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValidationError(
                "request_timeout", "must be positive", str(self.request_timeout)
            )
        if not self.local_id_prefix:
            raise ValidationError("local_id_prefix", "must not be empty")

    def with_overrides(self, values: Mapping[str, Any]) -> JournalConfig:
        """Return a copy with known keys replaced; unknown keys are ignored."""
        known = {f.name for f in fields(self)}
        changes = {
            name: _coerce(name, value)
            for name, value in values.items()
            if name in known and value is not None
        }
        return replace(self, **changes)

    @classmethod
    def from_environment(cls, base: JournalConfig | None = None) -> JournalConfig:
        """Create configuration from environment variables.

        Args:
            base: Configuration to start from (default: built-in defaults)
        """
        values = {
            name: os.environ[var] for name, var in _ENV_VARS.items() if os.environ.get(var)
        }
        return (base or cls()).with_overrides(values)

    @classmethod
    def from_settings_file(cls, config_path: Path | None = None) -> JournalConfig:
        """Create configuration from the ``journal`` section of a YAML file.

        A missing file yields the defaults.
        """
        path = config_path or DEFAULT_SETTINGS_PATH
        if not path.exists():
            return cls()
        try:
            settings = yaml.safe_load(path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ValidationError("settings", f"invalid YAML in {path}: {e}") from e
        section = settings.get("journal") or {}
        if not isinstance(section, dict):
            raise ValidationError("journal", "must be a mapping", str(section))
        return cls().with_overrides(section)

    @classmethod
    def load(cls, config_path: Path | None = None) -> JournalConfig:
        """Defaults, then the settings file, then environment variables."""
        return cls.from_environment(base=cls.from_settings_file(config_path))


def _coerce(name: str, value: Any) -> Any:
    if name in _FLOAT_FIELDS:
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValidationError(name, "must be a number", str(value)) from None
    return str(value)
