"""Single-consumer merge of entries and fetch errors from all sources."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from queue import Queue
from threading import Lock, Thread

import structlog

from ..errors import FetchError


class _Kind(str, Enum):
    ENTRY = "entry"
    ERROR = "error"
    STOP = "stop"


@dataclass(frozen=True, slots=True)
class MergeSnapshot:
    """State of the merger once every delivered message has been applied."""

    entries: frozenset[str]
    errors: tuple[FetchError, ...]

    @property
    def failed(self) -> bool:
        return bool(self.errors)


class Merger:
    """Own the result set and the failure list on a dedicated thread.

    Producers only ever talk to the merger through :meth:`submit_entry` and
    :meth:`submit_error`; both message kinds share one FIFO inbox so the
    consumer handles whichever arrives first. :meth:`close` enqueues a stop
    marker behind everything already submitted, so once :meth:`join` returns
    the state reflects every message delivered before the close.
    """

    def __init__(self, logger: structlog.BoundLogger | None = None) -> None:
        self.logger = logger or structlog.get_logger("tldsgen.merger")
        self._inbox: Queue[tuple[_Kind, object]] = Queue()
        self._entries: set[str] = set()
        self._errors: list[FetchError] = []
        self._thread = Thread(target=self._consume, name="tldsgen-merger", daemon=True)
        self._state_lock = Lock()
        self._closed = False
        self._drained = False

    def start(self) -> "Merger":
        self._thread.start()
        return self

    def submit_entry(self, entry: str) -> None:
        self._put(_Kind.ENTRY, entry)

    def submit_error(self, error: FetchError) -> None:
        self._put(_Kind.ERROR, error)

    def close(self) -> None:
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
            self._inbox.put((_Kind.STOP, None))

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the consumer to drain; return ``True`` when it has."""

        self._thread.join(timeout)
        return not self._thread.is_alive()

    def snapshot(self) -> MergeSnapshot:
        if not self._drained:
            raise RuntimeError("Merger has not drained yet; call close() and join() first")
        return MergeSnapshot(entries=frozenset(self._entries), errors=tuple(self._errors))

    # ------------------------------------------------------------------
    def _put(self, kind: _Kind, payload: object) -> None:
        with self._state_lock:
            if self._closed:
                self.logger.debug("message_after_close", kind=kind.value)
                return
            self._inbox.put((kind, payload))

    def _consume(self) -> None:
        while True:
            kind, payload = self._inbox.get()
            if kind is _Kind.STOP:
                break
            if kind is _Kind.ENTRY:
                self._entries.add(payload)  # type: ignore[arg-type]
            else:
                error: FetchError = payload  # type: ignore[assignment]
                self.logger.error("fetch_failed", url=error.url, error=str(error.cause))
                self._errors.append(error)
        self._drained = True
        self.logger.debug(
            "merger_drained", entries=len(self._entries), errors=len(self._errors)
        )


__all__ = ["MergeSnapshot", "Merger"]
