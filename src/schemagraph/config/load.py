from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError
from ruamel.yaml import YAML

from schemagraph.errors import ConfigError

from .model import GeneratorSettings

_yaml = YAML(typ="safe")


def load_settings(path: Path, *, required: bool = True) -> GeneratorSettings:
    if not path.exists():
        if required:
            raise ConfigError(f"Missing settings: {path}")
        return GeneratorSettings()
    data = _load_yaml(path)
    if data is None:
        return GeneratorSettings()
    if not isinstance(data, dict):
        raise ConfigError("Settings must be a YAML mapping at the top level.")
    try:
        return GeneratorSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def _load_yaml(path: Path) -> Any:
    try:
        return _yaml.load(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ConfigError(f"Failed to parse YAML: {path}") from exc
