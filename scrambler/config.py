"""Configuration loader for Scrambler.

Defaults come from FALLBACK_DEFAULTS, overridden by an optional
scrambler.json in the working directory, overridden by environment
variables.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "scrambler.json"

# Hardcoded fallback defaults
FALLBACK_DEFAULTS: dict[str, Any] = {
    "data_dir": "scrambler_data",
    "backup_suffix": ".bak",
    "max_attempts": 10_000,
    "case_insensitive_collisions": False,
    "lock_timeout": 10.0,
}

ENV_OVERRIDES = {
    "SCRAMBLER_DATA_DIR": ("data_dir", str),
    "SCRAMBLER_MAX_ATTEMPTS": ("max_attempts", int),
    "SCRAMBLER_CASE_INSENSITIVE": ("case_insensitive_collisions", None),
    "SCRAMBLER_LOCK_TIMEOUT": ("lock_timeout", float),
}


def _as_bool(value: Any) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class ScramblerConfig:
    """Runtime settings shared by the store and the engine."""
    data_dir: Path = Path(FALLBACK_DEFAULTS["data_dir"])
    backup_suffix: str = FALLBACK_DEFAULTS["backup_suffix"]
    max_attempts: int = FALLBACK_DEFAULTS["max_attempts"]
    case_insensitive_collisions: bool = FALLBACK_DEFAULTS["case_insensitive_collisions"]
    lock_timeout: float = FALLBACK_DEFAULTS["lock_timeout"]

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if not self.backup_suffix:
            raise ValueError("backup_suffix must not be empty")


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a JSON object", path)
        return {}
    return data


def load_config(
    config_path: Optional[Path | str] = None,
    environ: Optional[dict[str, str]] = None,
    **overrides: Any,
) -> ScramblerConfig:
    """
    Build a ScramblerConfig.

    Precedence (lowest to highest): fallbacks, config file, environment,
    keyword overrides. Keyword overrides set to None are ignored.
    """
    values = dict(FALLBACK_DEFAULTS)

    path = Path(config_path) if config_path else Path.cwd() / CONFIG_FILENAME
    if path.exists():
        file_values = _read_config_file(path)
        values.update({k: v for k, v in file_values.items() if k in FALLBACK_DEFAULTS})

    env = os.environ if environ is None else environ
    for variable, (key, convert) in ENV_OVERRIDES.items():
        raw = env.get(variable)
        if raw is None or raw == "":
            continue
        if convert is None:
            values[key] = _as_bool(raw)
            continue
        try:
            values[key] = convert(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r: not a valid %s", variable, raw, convert.__name__)

    values.update({k: v for k, v in overrides.items() if v is not None})

    return ScramblerConfig(
        data_dir=Path(values["data_dir"]),
        backup_suffix=str(values["backup_suffix"]),
        max_attempts=int(values["max_attempts"]),
        case_insensitive_collisions=_as_bool(values["case_insensitive_collisions"]),
        lock_timeout=float(values["lock_timeout"]),
    )
