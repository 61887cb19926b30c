"""Rendering statistics."""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class MetricsSnapshot:
    frames: int
    skipped_frames: int
    cells_updated: int
    escape_codes: int
    bytes_written: int
    total_seconds: float

    @property
    def average_bytes_per_frame(self) -> float:
        return self.bytes_written / self.frames if self.frames else 0.0

    @property
    def average_frame_ms(self) -> float:
        return self.total_seconds * 1000 / self.frames if self.frames else 0.0


class RenderMetrics:
    """Thread-safe counters updated by each flush."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._frames = 0
            self._skipped = 0
            self._cells = 0
            self._codes = 0
            self._bytes = 0
            self._seconds = 0.0

    def record_frame(self, cells: int, codes: int, nbytes: int, seconds: float) -> None:
        with self._lock:
            self._frames += 1
            self._cells += cells
            self._codes += codes
            self._bytes += nbytes
            self._seconds += seconds

    def record_skipped(self) -> None:
        with self._lock:
            self._skipped += 1

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            return MetricsSnapshot(
                frames=self._frames,
                skipped_frames=self._skipped,
                cells_updated=self._cells,
                escape_codes=self._codes,
                bytes_written=self._bytes,
                total_seconds=self._seconds,
            )
