"""Configuration loading helpers for news-relay."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..errors import ConfigurationError
from .models import RelayConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_FILENAME = "relay_config.yaml"
HOME_ENV = "NEWS_RELAY_HOME"

# env var -> (section, key); section None means top level
ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "NEWS_RELAY_TELEGRAM_TOKEN": ("telegram", "bot_token"),
    "NEWS_RELAY_TELEGRAM_CHANNEL": ("telegram", "channel"),
    "NEWS_RELAY_MIN_SCORE": (None, "min_score"),
}


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot parse configuration file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


def apply_env_overrides(payload: dict[str, Any], environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Return a copy of ``payload`` with environment overrides merged in."""

    env = os.environ if environ is None else environ
    merged = {key: (dict(value) if isinstance(value, dict) else value) for key, value in payload.items()}
    for name, (section, key) in ENV_OVERRIDES.items():
        value = env.get(name)
        if value is None or value == "":
            continue
        if section is None:
            merged[key] = value
        else:
            if not isinstance(merged.get(section), dict):
                merged[section] = {}
            merged[section][key] = value
    return merged


@dataclass(slots=True)
class ConfigLocator:
    """Resolve important paths from project root."""

    project_root: Path | None = None
    data_dir: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV)
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path(__file__).resolve().parents[2]).resolve()
        self.project_root = root
        self.data_dir = (root / "data").resolve()
        self.logs_dir = (root / "logs").resolve()
        self.ensure_directories()

    def ensure_directories(self) -> None:
        for directory in (self.data_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def config_path(self) -> Path:
        for ext in CONFIG_EXTENSIONS:
            candidate = self.data_dir / f"relay_config{ext}"
            if candidate.exists():
                return candidate
        return self.data_dir / CONFIG_FILENAME


class ConfigRepository:
    """Repository encapsulating config IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._cache: RelayConfig | None = None

    def load_config(self) -> RelayConfig:
        if self._cache is not None:
            return self._cache
        path = self.locator.config_path()
        if path.exists():
            payload = _read_file(path)
        else:
            payload = {}
            self.save_config(RelayConfig())
        try:
            config = RelayConfig.model_validate(apply_env_overrides(payload))
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration in {path}:\n{exc}") from exc
        self._cache = config
        return config

    def save_config(self, config: RelayConfig) -> Path:
        """Persist ``config``; the bot token stays in the environment only."""

        path = self.locator.config_path()
        payload = config.model_dump(mode="json")
        payload["telegram"]["bot_token"] = ""
        _write_file(path, payload)
        self._cache = None
        return path

    def log_path(self, config: RelayConfig | None = None) -> Path:
        config = config or self.load_config()
        return config.resolved_log_path(self.locator.data_dir)


__all__ = [
    "CONFIG_EXTENSIONS",
    "ConfigLocator",
    "ConfigRepository",
    "ENV_OVERRIDES",
    "apply_env_overrides",
]
