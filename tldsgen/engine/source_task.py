"""Per-source task: fetch a listing and feed accepted entries to the merger."""

from __future__ import annotations

from threading import Event

import structlog

from ..config import SourceConfig
from ..errors import FetchError
from ..logging_conf import source_logger
from .extract import Extractor, normalize
from .fetcher import Fetcher
from .merger import Merger


class SourceFetcher:
    """Run one source to completion; never lets a fetch failure escape."""

    def __init__(
        self,
        source: SourceConfig,
        fetcher: Fetcher,
        merger: Merger,
        cancel: Event | None = None,
        logger: structlog.BoundLogger | None = None,
        deadline: float | None = None,
    ) -> None:
        self.source = source
        self.fetcher = fetcher
        self.merger = merger
        self.cancel = cancel or Event()
        self.deadline = deadline
        self.extractor = Extractor(source.pattern)
        self.logger = logger or source_logger(source.name)

    def run(self) -> int:
        """Return the number of entries delivered to the merger."""

        self.logger.info("fetching", url=self.source.url)
        delivered = 0
        try:
            for line in self.fetcher.iter_lines(
                self.source.url, cancel=self.cancel, deadline=self.deadline
            ):
                token = self.extractor.extract(line)
                if token is None:
                    continue
                tld = normalize(token)
                if tld is None:
                    continue
                self.merger.submit_entry(tld)
                delivered += 1
        except FetchError as exc:
            if self.cancel.is_set():
                self.logger.info("source_cancelled", url=self.source.url)
                return delivered
            self.merger.submit_error(exc)
            return delivered
        self.logger.info("source_done", url=self.source.url, entries=delivered)
        return delivered


__all__ = ["SourceFetcher"]
