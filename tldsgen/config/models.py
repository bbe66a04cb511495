"""Pydantic models describing sources and generator settings."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .. import __version__


class SourceConfig(BaseModel):
    """A remote listing plus the pattern that picks the TLD out of each line."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    pattern: str

    @field_validator("name", "url")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"Source url must be http(s): {value}")
        return value

    @field_validator("pattern")
    @classmethod
    def _compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid pattern {value!r}: {exc}") from exc
        return value


IANA_SOURCE = SourceConfig(
    name="iana",
    url="https://data.iana.org/TLD/tlds-alpha-by-domain.txt",
    pattern=r"^[^#]+$",
)
PUBLIC_SUFFIX_SOURCE = SourceConfig(
    name="publicsuffix",
    url="https://publicsuffix.org/list/effective_tld_names.dat",
    pattern=r"^[^/.]+$",
)


def default_sources() -> list[SourceConfig]:
    return [IANA_SOURCE, PUBLIC_SUFFIX_SOURCE]


class GeneratorConfig(BaseModel):
    """Settings for one generation run."""

    sources: list[SourceConfig] = Field(default_factory=default_sources, min_length=1)
    request_timeout: float = Field(default=30.0, gt=0)
    overall_timeout: float | None = 300.0
    retry_attempts: int = Field(default=0, ge=0)
    retry_backoff: float = Field(default=1.0, ge=0)
    max_workers: int | None = None
    user_agent: str = f"tldsgen/{__version__}"
    output_path: Path = Field(default=Path("tlds.py"))
    output_format: Literal["py", "go", "txt"] = "py"

    @field_validator("overall_timeout", "max_workers")
    @classmethod
    def _positive(cls, value: float | int | None) -> float | int | None:
        if value is not None and value <= 0:
            raise ValueError("must be positive when set")
        return value

    @model_validator(mode="after")
    def _unique_sources(self) -> "GeneratorConfig":
        names = [source.name for source in self.sources]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate source names: {', '.join(duplicates)}")
        return self

    @property
    def source_urls(self) -> list[str]:
        return [source.url for source in self.sources]


__all__ = [
    "GeneratorConfig",
    "IANA_SOURCE",
    "PUBLIC_SUFFIX_SOURCE",
    "SourceConfig",
    "default_sources",
]
