from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import BaseModel


class AppConfig(BaseModel):
    """Typed configuration loaded from YAML or environment."""

    LOG_LEVEL: str = "INFO"

    # Strike ladder -------------------------------------------------------
    STRIKE_GAP: float = 50.0
    STRIKE_COUNT: int = 15

    # Payoff sampling and heuristics ---------------------------------------
    PAYOFF_RANGE: float = 0.20
    PAYOFF_SAMPLES: int = 101
    MARGIN_RATE: float = 0.15

    # Optional override for the bundled strategy catalog
    TEMPLATES_FILE: str | None = None

    # Snapshot used by the command line when no flags are given
    DEFAULT_SYMBOL: str = "NIFTY"
    DEFAULT_SPOT: float = 24500.0
    DEFAULT_LOT_SIZE: int = 75
    DEFAULT_IV: float = 12.5
    DEFAULT_DTE: int = 14


_BASE_DIR = Path(__file__).resolve().parent.parent


def _load_env(path: Path) -> Dict[str, Any]:
    """Parse simple KEY=VALUE lines from an .env file."""
    data: Dict[str, Any] = {}
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" in line:
            key, val = line.split("=", 1)
            data[key.strip()] = val.strip()
    return data


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load configuration from a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        content = yaml.safe_load(f)
    return content or {}


def _config_path() -> Path | None:
    config_path = os.environ.get("PAYOFFKIT_CONFIG")
    if config_path:
        return Path(config_path)
    candidates = [
        _BASE_DIR / "config.yaml",
        _BASE_DIR / "config.yml",
        _BASE_DIR / ".env",
    ]
    return next((p for p in candidates if p.exists()), None)


def load_config() -> AppConfig:
    """Load configuration from .env or YAML file."""
    path = _config_path()

    data: Dict[str, Any] = {}
    if path and path.exists():
        if path.suffix in {".yaml", ".yml"}:
            data = _load_yaml(path)
        else:
            data = _load_env(path)

    cfg = {**AppConfig().model_dump(), **data}
    return AppConfig(**cfg)


def save_config(config: AppConfig, path: Path | None = None) -> None:
    """Persist configuration to a YAML file."""
    if path is None:
        env_path = os.environ.get("PAYOFFKIT_CONFIG")
        path = Path(env_path) if env_path else _BASE_DIR / "config.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.model_dump(), f)


CONFIG = load_config()
LOCK = threading.Lock()


def get(name: str, default: Any | None = None) -> Any:
    """Return configuration value for name with optional fallback.

    Both reads and writes are synchronized using ``LOCK`` so concurrent
    access from multiple threads is safe.
    """
    with LOCK:
        return getattr(CONFIG, name, default)


def reload() -> None:
    """Reload configuration from disk into the global CONFIG object."""
    global CONFIG
    with LOCK:
        CONFIG = load_config()


def update(values: Dict[str, Any], *, persist: bool = True) -> None:
    """Update global configuration with provided key/value pairs."""
    with LOCK:
        for key, val in values.items():
            if hasattr(CONFIG, key):
                setattr(CONFIG, key, val)
        if persist:
            save_config(CONFIG)
