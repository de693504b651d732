"""Synchronized lazy value cell."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

_UNSET = object()


class Lazy(Generic[T]):
    """Compute a value at most once, on first ``get()``.

    Concurrent first callers block on the lock and all observe the same
    value. If the factory raises, the cell stays unset and the exception
    propagates, so a later ``get()`` tries again.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._value: object = _UNSET
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._value is not _UNSET

    def get(self) -> T:
        value = self._value
        if value is not _UNSET:
            return value  # type: ignore[return-value]

        with self._lock:
            if self._value is _UNSET:
                self._value = self._factory()
            return self._value  # type: ignore[return-value]
