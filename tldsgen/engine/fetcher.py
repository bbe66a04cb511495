"""Blocking HTTP retrieval of source listings."""

from __future__ import annotations

import time
from threading import Event
from typing import Callable, Iterator

import httpx
import structlog

from ..config import GeneratorConfig
from ..errors import FetchError

# A zero socket timeout would mean non-blocking rather than "expired"
_MIN_ATTEMPT_TIMEOUT = 0.01


class Fetcher:
    """Stream listing lines over a shared httpx client, with bounded retries."""

    def __init__(
        self,
        config: GeneratorConfig,
        transport: httpx.BaseTransport | None = None,
        logger: structlog.BoundLogger | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.logger = logger or structlog.get_logger("tldsgen.fetcher")
        self._sleep = sleep
        self._client = httpx.Client(
            follow_redirects=True,
            timeout=config.request_timeout,
            headers={"User-Agent": config.user_agent},
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    def iter_lines(
        self,
        url: str,
        cancel: Event | None = None,
        deadline: float | None = None,
    ) -> Iterator[str]:
        """Yield the lines of ``url`` without their terminators.

        ``deadline`` is a :func:`time.monotonic` instant; no attempt waits on
        the network past it. Raises :class:`FetchError` once every attempt has
        failed. A failed response's body is never read. A retry after a
        partial read starts the listing over, so callers must tolerate
        repeated lines.
        """

        attempts = self.config.retry_attempts + 1
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            self._check(url, cancel, deadline)
            try:
                with self._client.stream(
                    "GET", url, timeout=self._attempt_timeout(deadline)
                ) as response:
                    if self._is_failure(response):
                        raise _StatusError(response)
                    chunks = self._guarded(response.iter_text(), url, cancel, deadline)
                    for line in _split_lines(chunks):
                        if cancel is not None and cancel.is_set():
                            raise FetchError(url, "cancelled")
                        yield line
                return
            except (httpx.HTTPError, _StatusError) as exc:
                last_error = exc
                if attempt >= attempts or not self._is_retryable(exc):
                    break
                delay = self.config.retry_backoff * (2 ** (attempt - 1))
                self.logger.warning(
                    "fetch_retry", url=url, attempt=attempt, delay=delay, error=str(exc)
                )
                if cancel is not None:
                    if cancel.wait(delay):
                        raise FetchError(url, "cancelled") from exc
                elif delay:
                    self._sleep(delay)
        raise FetchError(url, last_error) from last_error

    def _attempt_timeout(self, deadline: float | None) -> float:
        if deadline is None:
            return self.config.request_timeout
        remaining = deadline - time.monotonic()
        return max(_MIN_ATTEMPT_TIMEOUT, min(self.config.request_timeout, remaining))

    def _guarded(
        self,
        chunks: Iterator[str],
        url: str,
        cancel: Event | None,
        deadline: float | None,
    ) -> Iterator[str]:
        for chunk in chunks:
            self._check(url, cancel, deadline)
            yield chunk

    @staticmethod
    def _check(url: str, cancel: Event | None, deadline: float | None) -> None:
        if cancel is not None and cancel.is_set():
            raise FetchError(url, "cancelled")
        if deadline is not None and time.monotonic() >= deadline:
            raise FetchError(url, "deadline exceeded")

    @staticmethod
    def _is_failure(response: httpx.Response) -> bool:
        return response.status_code >= 400

    @staticmethod
    def _is_retryable(exc: Exception) -> bool:
        # Client errors other than throttling will not change on retry
        if isinstance(exc, _StatusError):
            return exc.status_code >= 500 or exc.status_code == 429
        return True


def _split_lines(chunks: Iterator[str]) -> Iterator[str]:
    """Split decoded text into lines, dropping a trailing carriage return from each."""

    pending = ""
    for chunk in chunks:
        pending += chunk
        *lines, pending = pending.split("\n")
        for line in lines:
            yield line.removesuffix("\r")
    if pending:
        yield pending.removesuffix("\r")


class _StatusError(Exception):
    """Unsuccessful status; rendered like ``404 Not Found``."""

    def __init__(self, response: httpx.Response) -> None:
        self.status_code = response.status_code
        super().__init__(f"{response.status_code} {response.reason_phrase}".strip())


__all__ = ["Fetcher"]
