from __future__ import annotations

import time
from typing import Callable, Iterable, List, TypeVar

T = TypeVar("T")


class SequentialTaskRunner:
    """
    Runs tasks one at a time, in order, waiting `delay_secs` between
    consecutive tasks. Used to pace calls against rate-limited providers.
    """

    def __init__(self, delay_secs: float, sleep: Callable[[float], None] = time.sleep) -> None:
        self.delay_secs = max(0.0, float(delay_secs))
        self._sleep = sleep

    def run(self, tasks: Iterable[Callable[[], T]]) -> List[T]:
        results: List[T] = []
        for index, task in enumerate(tasks):
            if index and self.delay_secs:
                self._sleep(self.delay_secs)
            results.append(task())
        return results
