"""Configuration management for StudyFlow."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

STUDYFLOW_HOME = Path(os.environ.get("STUDYFLOW_HOME", Path.home() / "studyflow"))
CONFIG_FILE = STUDYFLOW_HOME / "config" / "studyflow.conf"
CONNECTIONS_FILE = STUDYFLOW_HOME / "config" / ".connections.json"
DATA_DIR = STUDYFLOW_HOME / "data"


@dataclass
class Config:
    """StudyFlow configuration."""

    timezone: str = "America/Toronto"
    http_timeout: float = 15.0
    sync_interval_minutes: int = 60
    data_file: str = ""

    @property
    def data_path(self) -> Path:
        """Where the assignment store lives on disk."""
        if self.data_file:
            return Path(self.data_file).expanduser()
        return DATA_DIR / "assignments.json"


@dataclass
class ConnectionConfig:
    """Stored credentials and state for one external source."""

    source: str
    base_url: str = ""
    token: str = ""
    connected: bool = False
    auto_sync: bool = True

    @property
    def has_credentials(self) -> bool:
        return bool(self.token.strip())

    def to_dict(self) -> dict:
        return {
            "base_url": self.base_url,
            "token": self.token,
            "connected": self.connected,
            "auto_sync": self.auto_sync,
        }


class ConnectionSettings:
    """
    Per-source connection settings persisted as one JSON file.

    Each source is stored under its name, e.g. ``{"CANVAS": {...}}``.
    """

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path).expanduser() if path else CONNECTIONS_FILE

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable connection settings {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def load(self, source: str) -> ConnectionConfig:
        """Load settings for a source. Unknown sources get defaults."""
        data = self._read().get(source, {})
        return ConnectionConfig(
            source=source,
            base_url=data.get("base_url", ""),
            token=data.get("token", ""),
            connected=bool(data.get("connected", False)),
            auto_sync=bool(data.get("auto_sync", True)),
        )

    def save(self, connection: ConnectionConfig) -> None:
        """Write one source's settings, keeping the others."""
        data = self._read()
        data[connection.source] = connection.to_dict()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))
        self.path.chmod(0o600)


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from studyflow.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "timezone":
                config.timezone = value
            case "http_timeout":
                try:
                    config.http_timeout = float(value)
                except ValueError:
                    logger.warning(f"Invalid HTTP_TIMEOUT {value!r}, keeping {config.http_timeout}")
            case "sync_interval_minutes":
                try:
                    config.sync_interval_minutes = int(value)
                except ValueError:
                    logger.warning(
                        f"Invalid SYNC_INTERVAL_MINUTES {value!r}, "
                        f"keeping {config.sync_interval_minutes}"
                    )
            case "data_file":
                config.data_file = value

    return config
