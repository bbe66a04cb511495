"""Configuration loading helpers."""

from __future__ import annotations

import json
import os
from pathlib import Path

import yaml

from .models import GeneratorConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_ENV_VAR = "TLDSGEN_CONFIG"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


class ConfigRepository:
    """Resolve, read and write the generator configuration file."""

    def __init__(self, path: Path | None = None) -> None:
        if path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            path = Path(env_path).expanduser() if env_path else None
        self.path = path
        self._cache: GeneratorConfig | None = None

    def load(self) -> GeneratorConfig:
        if self._cache is not None:
            return self._cache
        if self.path is None:
            config = GeneratorConfig()
        else:
            if not self.path.exists():
                raise FileNotFoundError(f"Configuration not found: {self.path}")
            if self.path.suffix not in CONFIG_EXTENSIONS:
                raise ValueError(
                    f"Unsupported configuration format {self.path.suffix!r}; "
                    f"expected one of {', '.join(CONFIG_EXTENSIONS)}"
                )
            config = GeneratorConfig.model_validate(_read_file(self.path))
        self._cache = config
        return config

    def save(self, config: GeneratorConfig) -> Path:
        if self.path is None:
            raise ValueError("No configuration path to save to")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        _write_file(self.path, config.model_dump(mode="json"))
        self._cache = config
        return self.path


__all__ = ["CONFIG_ENV_VAR", "CONFIG_EXTENSIONS", "ConfigRepository"]
