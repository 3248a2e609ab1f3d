"""
app/queries/base.py

Request lifecycle for one statistics view.

A :class:`StatsQuery` tracks the latest filters of a view and keeps a
:class:`QueryState` snapshot up to date:

- every effective filter change bumps a generation counter and submits
  exactly one fetch to an executor;
- a completion is applied only while its generation is current, so the
  last-issued request wins and superseded responses are dropped;
- a filter change or ``close()`` cancels the in-flight future, and a
  cancellation never surfaces as an error;
- previous data is kept while a new request is loading;
- each instance owns a small cache keyed by encoded filters, with a
  staleness window; expired entries are evicted.  ``refetch()`` bypasses it.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from functools import lru_cache, partial
from typing import Any, Callable, Generic, Mapping, TypeVar

from app.config import get_stats_query_settings
from app.connectors.stats_api import StatsRequestError
from stats.filters import filters_cache_key
from stats.logging_utils import log_event

logger = logging.getLogger(__name__)

T = TypeVar("T")

CacheKey = tuple[tuple[str, str], ...]
Listener = Callable[["QueryState[Any]"], None]


@dataclass(frozen=True)
class QueryState(Generic[T]):
    data: T | None = None
    is_loading: bool = False
    error: Exception | None = None
    generation: int = 0


@dataclass(frozen=True)
class _CacheEntry(Generic[T]):
    data: T
    fetched_at: float


@lru_cache(maxsize=1)
def default_executor() -> Executor:
    """
    Shared worker pool for queries that are not given an executor.
    """

    return ThreadPoolExecutor(
        max_workers=get_stats_query_settings().max_workers,
        thread_name_prefix="stats-query",
    )


class StatsQuery(ABC, Generic[T]):
    """
    Base lifecycle; subclasses say how filters are encoded and fetched.
    """

    def __init__(
        self,
        *,
        filters: Mapping[str, Any] | None = None,
        executor: Executor | None = None,
        stale_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._executor = executor or default_executor()
        self._stale_seconds = (
            get_stats_query_settings().stale_seconds if stale_seconds is None else max(0.0, stale_seconds)
        )
        self._clock = clock
        self._lock = threading.RLock()
        self._filters: dict[str, Any] = dict(filters or {})
        self._key: CacheKey | None = None
        self._generation = 0
        self._future: Future | None = None
        self._cache: dict[CacheKey, _CacheEntry[T]] = {}
        self._listeners: list[Listener] = []
        self._state: QueryState[T] = QueryState()
        self._closed = False

    # ------------------------------------------------------------------
    # Subclass contract
    # ------------------------------------------------------------------

    @abstractmethod
    def encode(self, filters: Mapping[str, Any]) -> Mapping[str, Any]:
        """
        Wire parameters for *filters*; used as the cache identity.
        """

    @abstractmethod
    def fetch(self, filters: Mapping[str, Any]) -> T:
        """
        Perform the request.  Runs on the executor.
        """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> QueryState[T]:
        with self._lock:
            return self._state

    @property
    def filters(self) -> dict[str, Any]:
        with self._lock:
            return dict(self._filters)

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register *listener* for state changes; returns an unsubscribe callable.
        """

        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def start(self) -> "StatsQuery[T]":
        with self._lock:
            if self._key is None and not self._closed:
                self._key = filters_cache_key(self.encode(self._filters))
                self._issue(force=False)
        return self

    def set_filters(self, filters: Mapping[str, Any] | None) -> bool:
        """
        Replace the filters.  Returns True when a new generation was issued.
        """

        new_filters = dict(filters or {})
        key = filters_cache_key(self.encode(new_filters))
        with self._lock:
            if self._closed:
                return False
            self._filters = new_filters
            if key == self._key:
                return False
            self._key = key
            self._issue(force=False)
            return True

    def refetch(self) -> None:
        with self._lock:
            if self._closed:
                return
            if self._key is None:
                self._key = filters_cache_key(self.encode(self._filters))
            self._issue(force=True)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._generation += 1
            self._cancel_in_flight()
            self._listeners.clear()
            self._state = replace(self._state, is_loading=False, generation=self._generation)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_fresh(self, entry: _CacheEntry[T]) -> bool:
        return self._clock() - entry.fetched_at <= self._stale_seconds

    def _evict_stale(self) -> None:
        for key in [key for key, entry in self._cache.items() if not self._is_fresh(entry)]:
            del self._cache[key]

    def _cancel_in_flight(self) -> None:
        if self._future is not None and not self._future.done():
            self._future.cancel()
        self._future = None

    def _issue(self, *, force: bool) -> None:
        self._generation += 1
        generation = self._generation
        key = self._key
        self._cancel_in_flight()
        self._evict_stale()

        cached = self._cache.get(key) if key is not None else None
        if not force and cached is not None and self._is_fresh(cached):
            self._set_state(QueryState(data=cached.data, is_loading=False, error=None, generation=generation))
            return

        # previous data stays visible while loading
        self._set_state(replace(self._state, is_loading=True, error=None, generation=generation))
        future = self._executor.submit(self.fetch, dict(self._filters))
        self._future = future
        future.add_done_callback(partial(self._complete, generation, key))

    def _complete(self, generation: int, key: CacheKey | None, future: Future) -> None:
        if future.cancelled():
            return

        with self._lock:
            if self._closed or generation != self._generation:
                log_event(
                    logger,
                    logging.DEBUG,
                    "stats_query_stale_response",
                    generation=generation,
                    current=self._generation,
                )
                return

            self._future = None
            exc = future.exception()
            if exc is None:
                data = future.result()
                self._evict_stale()
                if key is not None:
                    self._cache[key] = _CacheEntry(data=data, fetched_at=self._clock())
                self._set_state(QueryState(data=data, is_loading=False, error=None, generation=generation))
                return

            if not isinstance(exc, StatsRequestError):
                logger.error("Statistics query failed unexpectedly", exc_info=exc)
            self._set_state(replace(self._state, is_loading=False, error=exc))

    def _set_state(self, state: QueryState[T]) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
