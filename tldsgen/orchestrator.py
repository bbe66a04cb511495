"""Coordinator running every source in parallel and finalising the TLD list."""

from __future__ import annotations

import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from threading import Event
from typing import Sequence

import structlog

from .config import GeneratorConfig, SourceConfig
from .engine import Fetcher, Merger, SourceFetcher
from .errors import AggregateFetchError, FetchError, PipelineTimeoutError
from .logging_conf import configure_logging

# In-flight requests are cut off this long after the overall timeout, so the
# coordinator always observes the timeout first.
FETCH_GRACE = 0.5


@dataclass(frozen=True, slots=True)
class TldList:
    """Sorted, unique TLDs plus the URLs of the listings they came from."""

    tlds: tuple[str, ...]
    sources: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.tlds)


class Orchestrator:
    """Fan out one task per source, join them, then read the merged result."""

    def __init__(
        self,
        config: GeneratorConfig,
        fetcher: Fetcher | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or Fetcher(config)
        self.logger = (logger or configure_logging()).bind(component="orchestrator")

    def close(self) -> None:
        if self._owns_fetcher:
            self.fetcher.close()

    def __enter__(self) -> "Orchestrator":
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    def run(self, sources: Sequence[SourceConfig] | None = None) -> TldList:
        sources = list(self.config.sources if sources is None else sources)
        if not sources:
            raise ValueError("At least one source is required")

        cancel = Event()
        deadline = None
        if self.config.overall_timeout is not None:
            deadline = time.monotonic() + self.config.overall_timeout + FETCH_GRACE
        merger = Merger().start()
        workers = self.config.max_workers or len(sources)
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tldsgen-source")
        try:
            futures: dict[Future[int], SourceConfig] = {
                executor.submit(
                    SourceFetcher(source, self.fetcher, merger, cancel, deadline=deadline).run
                ): source
                for source in sources
            }
            done, pending = wait(futures, timeout=self.config.overall_timeout)
            if pending:
                cancel.set()
                self.logger.error(
                    "pipeline_timeout",
                    timeout=self.config.overall_timeout,
                    pending=[futures[future].name for future in pending],
                )
                raise PipelineTimeoutError(self.config.overall_timeout or 0.0)

            for future in done:
                exc = future.exception()
                if exc is not None:
                    source = futures[future]
                    self.logger.error(
                        "source_crashed", source=source.name, error=repr(exc)
                    )
                    merger.submit_error(FetchError(source.url, exc))
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
            merger.close()

        merger.join()
        snapshot = merger.snapshot()
        if snapshot.failed:
            raise AggregateFetchError(snapshot.errors)

        result = TldList(
            tlds=tuple(sorted(snapshot.entries)),
            sources=tuple(source.url for source in sources),
        )
        self.logger.info("pipeline_done", tlds=len(result), sources=len(sources))
        return result


__all__ = ["Orchestrator", "TldList"]
