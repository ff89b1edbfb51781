"""Runtime configuration helpers for sessionline."""
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

CONFIG_PATH_ENV = "SESSIONLINE_CONFIG_PATH"
ENV_OVERRIDES = {
    "SESSIONLINE_DEBUG": "debug",
    "SESSIONLINE_TIMER": "timer",
    "SESSIONLINE_ENTITY": "entity",
    "SESSIONLINE_INTERVAL": "interval",
}


def default_config_files() -> List[Path]:
    return [
        Path.cwd() / ".sessionline.toml",
        Path.home() / ".config" / "sessionline" / "config.toml",
    ]


class ConfigError(ValueError):
    """Raised when a configuration file cannot be used."""


class SessionLineSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")
    debug: bool = Field(default=False, description="Log each status as a line instead of animating")
    timer: bool = Field(default=True, description="Show elapsed seconds before the entity")
    interval: float = Field(default=0.1, gt=0, description="Seconds between render ticks")
    entity: str = Field(default="sessionline", min_length=1, description="Default entity label")
    use_color: bool = Field(default=True, description="Use colored output")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


@dataclass
class ConfigLoadResult:
    settings: SessionLineSettings
    source: Optional[Path]
    searched: List[Path]


def _load_toml(path: Path) -> Dict[str, Any]:
    with path.open("rb") as fh:
        data = tomllib.load(fh)
    # Either a flat file or a [sessionline] table.
    section = data.get("sessionline")
    return dict(section) if isinstance(section, dict) else data


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for env_name, field_name in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is not None and value != "":
            overrides[field_name] = value
    return overrides


def load_config(explicit_path: Optional[Path] = None) -> ConfigLoadResult:
    """Load configuration from the first available location."""
    candidates: List[Path] = []
    if explicit_path is not None:
        candidates.append(explicit_path.expanduser())
    env_path = os.getenv(CONFIG_PATH_ENV)
    if env_path:
        candidates.append(Path(env_path).expanduser())
    candidates.extend(default_config_files())

    config_data: Dict[str, Any] = {}
    loaded_from: Optional[Path] = None
    for candidate in candidates:
        if candidate.is_file():
            try:
                config_data = _load_toml(candidate)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"invalid TOML in {candidate}: {exc}") from exc
            loaded_from = candidate
            break

    config_data.update(_env_overrides())
    try:
        settings = SessionLineSettings(**config_data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
    return ConfigLoadResult(settings=settings, source=loaded_from, searched=candidates)


__all__ = [
    "ConfigError",
    "ConfigLoadResult",
    "SessionLineSettings",
    "default_config_files",
    "load_config",
]
