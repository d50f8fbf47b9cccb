from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.process_config import ProcessConfig, ProcessType

"""Process config store.

Responsibilities:
- Locate the application-scoped YAML file holding one entry per process type
- Validate it against process_config_schema.json
- Fall back to the built-in defaults for types that were never saved
- Validate and persist edits made to a single process type

The store is passed explicitly to whatever needs a ProcessConfig; nothing in
the engine reads it as global state.
"""

__all__ = [
    "ConfigError",
    "ProcessConfigStore",
    "default_config_path",
]

SCHEMA_PATH = Path(__file__).with_name("process_config_schema.json")
CONFIG_DIR_ENV = "MERGE_SPLITTER_CONFIG_DIR"
APP_DIR_NAME = "merge-splitter"
CONFIG_FILE_NAME = "process_configs.yml"


class ConfigError(Exception):
    pass


def default_config_path() -> Path:
    """Resolve the config file location.

    Order: $MERGE_SPLITTER_CONFIG_DIR, then $XDG_CONFIG_HOME/merge-splitter,
    then ~/.config/merge-splitter.
    """
    explicit = os.getenv(CONFIG_DIR_ENV)
    if explicit:
        return Path(explicit).expanduser() / CONFIG_FILE_NAME
    base = os.getenv("XDG_CONFIG_HOME")
    root = Path(base).expanduser() if base else Path.home() / ".config"
    return root / APP_DIR_NAME / CONFIG_FILE_NAME


def _load_schema() -> dict[str, Any]:
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e


def _validate_config_schema(data: Any) -> None:
    """Validate the raw mapping against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing/broken, or data fails validation
            (unknown process type key, missing column, wrong type, extra keys).
    """
    schema = _load_schema()
    try:
        jsonschema.validate(data, schema)
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _parse_entry(key: str, raw: dict[str, Any]) -> ProcessConfig:
    ptype = ProcessType.parse(key)
    default = ProcessConfig.default_for_type(ptype)
    return ProcessConfig(
        process_type=ptype,
        weight_column=raw["weight_column"],
        box_column=raw["box_column"],
        copy_images=raw.get("copy_images", default.copy_images),
    )


class ProcessConfigStore:
    """Keyed store of ProcessConfig, persisted as YAML."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path if path is not None else default_config_path()

    def _read_raw(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
        except OSError as e:
            raise ConfigError(f"cannot read config file {self.path}: {e}") from e
        _validate_config_schema(data)
        return data

    def load_all(self) -> dict[ProcessType, ProcessConfig]:
        """Every process type, saved values first, defaults for the rest."""
        configs = {ptype: ProcessConfig.default_for_type(ptype) for ptype in ProcessType}
        for key, raw in self._read_raw().items():
            cfg = _parse_entry(key, raw)
            errors = cfg.validation_errors()
            if errors:
                raise ConfigError(f"config for {key}: {'; '.join(errors)}")
            configs[cfg.process_type] = cfg
        return configs

    def get(self, process_type: ProcessType | str) -> ProcessConfig:
        try:
            ptype = ProcessType.parse(process_type)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        return self.load_all()[ptype]

    def save(self, config: ProcessConfig) -> Path:
        """Validate and persist one process type, keeping the other entries."""
        errors = config.validation_errors()
        if errors:
            raise ConfigError(f"invalid config for {config.process_type.value}: {'; '.join(errors)}")
        data = self._read_raw()
        data[config.process_type.value] = config.to_mapping()
        _validate_config_schema(data)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                yaml.safe_dump(data, allow_unicode=True, sort_keys=True),
                encoding="utf-8",
            )
        except OSError as e:
            raise ConfigError(f"cannot write config file {self.path}: {e}") from e
        return self.path
