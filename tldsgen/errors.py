"""Exception hierarchy shared by the pipeline and the CLI."""

from __future__ import annotations

from typing import Sequence


class TldsgenError(Exception):
    """Base class for all generator errors."""


class FetchError(TldsgenError):
    """One source could not be retrieved."""

    def __init__(self, url: str, cause: object) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"could not fetch {url}: {cause}")


class AggregateFetchError(TldsgenError):
    """At least one configured source failed, so no list is produced."""

    def __init__(self, errors: Sequence[FetchError]) -> None:
        self.errors = tuple(errors)
        lines = ["there were some errors while fetching the TLDs"]
        lines.extend(f"  {error}" for error in self.errors)
        super().__init__("\n".join(lines))

    @property
    def failed_urls(self) -> list[str]:
        return [error.url for error in self.errors]


class PipelineTimeoutError(TldsgenError):
    """The sources did not all finish within the overall timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"sources did not finish within {timeout:g}s")


__all__ = ["AggregateFetchError", "FetchError", "PipelineTimeoutError", "TldsgenError"]
