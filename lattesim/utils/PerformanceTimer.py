import logging
import threading
import time
from contextlib import contextmanager
from typing import Iterator, Optional

import numpy as np


class PerformanceTimer:
    """Rolling window of timing samples with periodic log reports."""

    def __init__(self, name: str = "Performance", sample_count: int = 100, report_interval: Optional[int] = None) -> None:
        """Initialize performance timer.

        Args:
            name: Name to display in reports
            sample_count: Number of samples to keep for statistics
            report_interval: Log a report every N samples (None = at sample_count)
        """
        self.name = name
        self.sample_count = sample_count
        self.report_interval = report_interval or sample_count
        self.times: np.ndarray = np.zeros(sample_count, dtype=float)
        self.current_index: int = 0
        self.count: int = 0
        self.mutex = threading.Lock()

    @contextmanager
    def measure(self, report: bool = True) -> Iterator[None]:
        """Time the enclosed block and add it as a sample."""
        start: float = time.perf_counter()
        try:
            yield
        finally:
            self.add_time((time.perf_counter() - start) * 1000.0, report)

    def add_time(self, time_ms: float, report: bool = True) -> None:
        with self.mutex:
            self.times[self.current_index] = time_ms
            self.current_index = (self.current_index + 1) % self.sample_count
            self.count += 1
            should_report = self.count % self.report_interval == 0

        # report outside the lock, it takes the lock again
        if report and should_report:
            self._log_report()

    def _window(self) -> np.ndarray:
        return self.times[:min(self.count, self.sample_count)]

    def get_average(self) -> float:
        with self.mutex:
            if self.count == 0:
                return 0.0
            return float(np.mean(self._window()))

    def get_minimum(self) -> float:
        with self.mutex:
            if self.count == 0:
                return 0.0
            return float(np.min(self._window()))

    def get_maximum(self) -> float:
        with self.mutex:
            if self.count == 0:
                return 0.0
            return float(np.max(self._window()))

    def _log_report(self) -> None:
        logging.info(f"{self.name}: avg={self.get_average():.2f}ms, min={self.get_minimum():.2f}ms, max={self.get_maximum():.2f}ms")

    def reset(self) -> None:
        with self.mutex:
            self.times.fill(0)
            self.current_index = 0
            self.count = 0
