from __future__ import annotations

import csv
import os
import time
from typing import Any, List


def default_detection_log_path(prefix_dir: str = "logs", basename_prefix: str = "detection_log") -> str:
    """Return default CSV log path like `logs/detection_log_YYYYmmdd_HHMMSS.csv`."""
    ts = time.strftime("%Y%m%d_%H%M%S")
    return os.path.join(prefix_dir, f"{basename_prefix}_{ts}.csv")


class DetectionLogger:
    """Low-overhead CSV logger of detect-vs-track decisions, one row per frame.

    What it logs:
    - whether a full cascade detection ran this frame and how many faces it found
    - how many boxes the tracker set reported
    - whether the trackers have been seeded at least once

    Rows are buffered and flushed every `flush_every` frames.
    """

    def __init__(self, path: str, flush_every: int = 60) -> None:
        self.path = path
        self.flush_every = max(1, int(flush_every))
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        self._fp = open(path, "w", newline="", encoding="utf-8")
        self._wr = csv.writer(self._fp)
        self._wr.writerow(
            [
                "frame_idx",
                "t_sec",
                "dt_sec",
                "source",
                "redetected",
                "n_detections",
                "n_tracks",
                "initialized",
            ]
        )

        self._buf: List[List[Any]] = []
        self._frames = 0
        self._detections = 0
        self._empty_detections = 0

    def log(
        self,
        *,
        frame_idx: int,
        t_sec: float,
        dt_sec: float,
        source: str,
        redetected: bool,
        n_detections: int,
        n_tracks: int,
        initialized: bool,
    ) -> None:
        self._frames += 1
        if redetected:
            self._detections += 1
            if n_detections == 0:
                self._empty_detections += 1

        self._buf.append(
            [
                int(frame_idx),
                float(t_sec),
                float(dt_sec),
                str(source),
                int(bool(redetected)),
                int(n_detections),
                int(n_tracks),
                int(bool(initialized)),
            ]
        )
        if len(self._buf) >= self.flush_every:
            self.flush()

    def flush(self) -> None:
        if not self._buf:
            return
        self._wr.writerows(self._buf)
        self._buf.clear()
        self._fp.flush()

    def close(self) -> None:
        try:
            self.flush()
        finally:
            self._fp.close()

    def summary_text(self) -> str:
        if self._frames <= 0:
            return "(no frames logged)"
        rate = self._detections / float(self._frames)
        return (
            f"frames={self._frames}, detection_passes={self._detections}, "
            f"empty_passes={self._empty_detections}, redetect_rate={rate:.3f}"
        )
