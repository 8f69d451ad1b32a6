from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.weights import WeightConfiguration

"""Dashboard configuration loader.

Responsibilities:
- Load YAML config (default ``config/dashboard.yml``)
- Validate against the bundled JSON schema
- Apply defaults for omitted keys
"""

__all__ = [
    "ConfigError",
    "DashboardConfig",
    "DEFAULT_CONFIG_PATH",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("schema.json")
DEFAULT_CONFIG_PATH = Path("config/dashboard.yml")

DEFAULT_WEIGHTS = WeightConfiguration(w_recent=0.5, w_mid=0.3, w_old=0.2)
DEFAULT_CURRENCY = "RM"
DEFAULT_ERROR_LOG_DIR = "./logs"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DashboardConfig:
    weights: WeightConfiguration
    currency: str
    error_log_dir: Path

    @classmethod
    def default(cls) -> DashboardConfig:
        return cls(
            weights=DEFAULT_WEIGHTS,
            currency=DEFAULT_CURRENCY,
            error_log_dir=Path(DEFAULT_ERROR_LOG_DIR),
        )


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> DashboardConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    raw_weights = data.get("weights")
    if raw_weights is None:
        weights = DEFAULT_WEIGHTS
    else:
        weights = WeightConfiguration(
            w_recent=float(raw_weights["recent"]),
            w_mid=float(raw_weights["mid"]),
            w_old=float(raw_weights["old"]),
        )
    return DashboardConfig(
        weights=weights,
        currency=data.get("currency", DEFAULT_CURRENCY),
        error_log_dir=Path(data.get("error_log_dir", DEFAULT_ERROR_LOG_DIR)),
    )
