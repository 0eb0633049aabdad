from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.options import DEFAULT_DELIMITER, DEFAULT_TIME_LAYOUT, ReaderOptions

"""Config loader for the TOA5 long-format conversion tool.

Responsibilities:
- Load YAML config (default config/toa5.yml)
- Validate against config_schema.json (shipped next to this module)
- Apply defaults (timezone=UTC, delimiter=",", file_pattern="*.dat")
- Resolve the timezone name into a tzinfo for ReaderOptions
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"

DEFAULT_FILE_PATTERN = "*.dat"
DEFAULT_TIMEZONE = "UTC"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ImportConfig:
    source_directory: str
    output_directory: str
    file_pattern: str
    delimiter: str
    time_layout: str
    timezone: str

    def reader_options(self) -> ReaderOptions:
        return ReaderOptions(
            delimiter=self.delimiter,
            time_layout=self.time_layout,
            time_location=resolve_timezone(self.timezone),
        )


def resolve_timezone(name: str) -> tzinfo:
    """Resolve an IANA zone name. ``UTC`` maps to datetime.UTC directly."""
    if name.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {name}") from e


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Args:
        data: Configuration data to validate

    Raises:
        ConfigError: If any of the following occurs:
            - The schema file does not exist.
            - The schema file is not valid JSON.
            - The config data fails schema validation (e.g., missing required keys,
              wrong types, unknown keys).
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


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    tz = data.get("timezone", DEFAULT_TIMEZONE)
    resolve_timezone(tz)  # 不正なタイムゾーンはロード時点で ConfigError
    return ImportConfig(
        source_directory=data["source_directory"],
        output_directory=data["output_directory"],
        file_pattern=data.get("file_pattern", DEFAULT_FILE_PATTERN),
        delimiter=data.get("delimiter", DEFAULT_DELIMITER),
        time_layout=data.get("time_layout", DEFAULT_TIME_LAYOUT),
        timezone=tz,
    )
