"""Asynchronous logging of entries and observed values to a file."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable
from typing import Any

Observable = Callable[[], str]


def _number_text(value: int | float) -> str:
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    return f"{value:f}"


class Observables:
    """A registry of things that can describe themselves as text."""

    def __init__(self) -> None:
        self._registry: list[Observable] = []

    def add(self, obj: Any) -> None:
        """Register an object with ``to_string()`` or a number."""
        to_string = getattr(obj, "to_string", None)
        if callable(to_string):
            self._registry.append(lambda: str(to_string()))
        elif isinstance(obj, (int, float)):
            text = _number_text(obj)
            self._registry.append(lambda: text)
        else:
            raise TypeError(f"cannot observe {type(obj).__name__}: no to_string()")

    def copy(self) -> list[Observable]:
        return list(self._registry)

    def clear(self) -> None:
        self._registry.clear()

    def __len__(self) -> int:
        return len(self._registry)


class PerformanceMonitor:
    """Writes logged entries and observed values to a file from a thread."""

    def __init__(self, filename: str, log_interval_ms: int = 2100) -> None:
        self._file = open(filename, "w", encoding="utf-8")
        self._interval = log_interval_ms / 1000.0
        self._queue: deque[str] = deque()
        self._condition = threading.Condition()
        self._alive = True
        self._closed = False
        self._observables = Observables()
        self._observables_lock = threading.Lock()
        self._writer = threading.Thread(target=self._write_loop, daemon=True)
        self._writer.start()

    def _drain(self) -> None:
        while self._queue:
            self._file.write(self._queue.popleft() + "\n")

    def _write_loop(self) -> None:
        while self._alive:
            with self._condition:
                self._condition.wait_for(
                    lambda: bool(self._queue) or not self._alive, timeout=self._interval
                )
                self._drain()
            with self._observables_lock:
                observables = self._observables.copy()
            for observable in observables:
                self._file.write(observable() + "\n")
            self._file.flush()

    def log(self, entry: str) -> None:
        with self._condition:
            self._queue.append(entry)
            self._condition.notify()

    def observe(self, obj: Any) -> None:
        with self._observables_lock:
            self._observables.add(obj)

    def close(self) -> None:
        """Stop the writer, write what is left and close the file."""
        if self._closed:
            return
        self._closed = True
        with self._condition:
            self._alive = False
            self._condition.notify_all()
        self._writer.join()
        self._drain()
        self._file.flush()
        self._file.close()

    def __enter__(self) -> PerformanceMonitor:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()