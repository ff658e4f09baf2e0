from __future__ import annotations

from typing import List, Sequence

import numpy as np

from ..detection.types import BoundingBox


class StaticTrackerSet:
    """Tracker set that keeps the seeded boxes unchanged (no motion model)."""

    def __init__(self) -> None:
        self._boxes: List[BoundingBox] = []
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def seed(self, frame: np.ndarray, boxes: Sequence[BoundingBox]) -> None:
        self._boxes = [tuple(int(v) for v in b) for b in boxes]  # type: ignore[misc]
        self._initialized = True

    def update(self, frame: np.ndarray) -> List[BoundingBox]:
        return list(self._boxes)
