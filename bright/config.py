"""Engine configuration.

Settings come from, in increasing priority:

1. dataclass defaults,
2. a YAML file (JSON is accepted too, it is valid YAML),
3. ``BRIGHT_<FIELD>`` environment variables.

Example bright.yaml:
    engine:
      identity_fast_path: true
      emit_events: true
      log_level: WARNING
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def _env_override(key: str, default: Any) -> Any:
    """Get environment variable with type coercion."""
    env_key = f"BRIGHT_{key.upper()}"
    value = os.environ.get(env_key)

    if value is None:
        return default

    # bool first: bool is a subclass of int
    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    return value


@dataclass
class EngineConfig:
    """Behavioural switches for sessions created by ``bright.init``."""

    # Try identity comparison before the structural one.
    identity_fast_path: bool = True
    # Publish step/commit events when a bus is attached.
    emit_events: bool = True
    # Only applied by the demo CLI; the library never configures logging.
    log_level: str = "WARNING"

    def __post_init__(self):
        self.identity_fast_path = _env_override("IDENTITY_FAST_PATH", self.identity_fast_path)
        self.emit_events = _env_override("EMIT_EVENTS", self.emit_events)
        self.log_level = str(_env_override("LOG_LEVEL", self.log_level)).upper()
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {self.log_level!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Create config from a mapping, with or without an ``engine`` section."""
        section = data.get("engine", data)
        return cls(**(section or {}))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "EngineConfig":
        return cls.from_dict(_load_yaml(path))

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "EngineConfig":
        """Load config from file or defaults.

        Search order:
        1. Explicit path if provided
        2. BRIGHT_CONFIG environment variable
        3. ./bright.yaml or ./bright.yml
        4. Default config
        """
        if path:
            return cls.from_file(path)

        env_path = os.environ.get("BRIGHT_CONFIG")
        if env_path and Path(env_path).exists():
            return cls.from_file(env_path)

        for name in ("bright.yaml", "bright.yml"):
            if Path(name).exists():
                return cls.from_file(name)

        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return {"engine": asdict(self)}

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(self.to_dict(), default_flow_style=False), encoding="utf-8")


def load_config(path: Optional[str] = None) -> EngineConfig:
    """Main entry point for configuration loading."""
    return EngineConfig.load(path)


def create_default_config() -> str:
    """Default config file content as a YAML string."""
    return """# bright engine configuration

engine:
  # Compare selector values by identity before comparing structurally.
  identity_fast_path: true
  # Publish STEP_COMPUTED / STEP_SKIPPED / CYCLE_COMMIT on an attached bus.
  emit_events: true
  # Log level used by the bright-demo CLI.
  log_level: WARNING
"""
