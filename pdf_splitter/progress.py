from __future__ import annotations

import threading
from typing import Callable

from .types import RunResult
from .utils import clamp

ProgressCallback = Callable[[float, "RunResult | None"], None]


class ProgressReporter:
    """Progress value in [0, 1] plus a terminal result.

    The value never decreases between `reset()` calls. Subscribers are called
    with (value, result) after every change; result is None until the run ends.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0.0
        self._result: RunResult | None = None
        self._subscribers: list[ProgressCallback] = []

    @property
    def value(self) -> float:
        with self._lock:
            return self._value

    @property
    def result(self) -> RunResult | None:
        with self._lock:
            return self._result

    def subscribe(self, callback: ProgressCallback) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def reset(self) -> None:
        with self._lock:
            self._value = 0.0
            self._result = None
        self._notify(0.0, None)

    def advance(self, value: float) -> float:
        with self._lock:
            new_value = max(self._value, clamp(float(value), 0.0, 1.0))
            changed = new_value != self._value
            self._value = new_value
        if changed:
            self._notify(new_value, None)
        return new_value

    def finish(self, result: RunResult, *, complete: bool = True) -> None:
        with self._lock:
            if complete:
                self._value = 1.0
            self._result = result
            value = self._value
        self._notify(value, result)

    def _notify(self, value: float, result: RunResult | None) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(value, result)
