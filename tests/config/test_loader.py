from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from tldsgen.config import CONFIG_ENV_VAR, ConfigRepository, GeneratorConfig, SourceConfig

YAML_CONFIG = """
request_timeout: 12
retry_attempts: 2
output_format: go
output_path: out/tlds.go
sources:
  - name: local
    url: https://mirror.example/tlds.txt
    pattern: "^[^#]+$"
"""


def test_loader_defaults_without_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    config = ConfigRepository().load()
    assert config == GeneratorConfig()


def test_loader_reads_yaml(tmp_path: Path) -> None:
    path = tmp_path / "tldsgen.yaml"
    path.write_text(YAML_CONFIG, encoding="utf-8")
    config = ConfigRepository(path).load()
    assert config.request_timeout == 12
    assert config.retry_attempts == 2
    assert config.output_format == "go"
    assert config.output_path == Path("out/tlds.go")
    assert config.sources == [
        SourceConfig(name="local", url="https://mirror.example/tlds.txt", pattern="^[^#]+$")
    ]


def test_loader_uses_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"overall_timeout": 42}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    assert ConfigRepository().load().overall_timeout == 42


def test_loader_roundtrip(tmp_path: Path) -> None:
    repo = ConfigRepository(tmp_path / "nested" / "config.yaml")
    config = GeneratorConfig(retry_attempts=3, output_format="txt")
    repo.save(config)
    assert ConfigRepository(repo.path).load() == config


def test_loader_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ConfigRepository(tmp_path / "missing.yaml").load()

    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        ConfigRepository(listing).load()

    invalid = tmp_path / "invalid.yaml"
    invalid.write_text("sources: []\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        ConfigRepository(invalid).load()

    toml = tmp_path / "config.toml"
    toml.write_text("x = 1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        ConfigRepository(toml).load()


def test_loader_rejects_null_output_path(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("output_path: null\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        ConfigRepository(path).load()
