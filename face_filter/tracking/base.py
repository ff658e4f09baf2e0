from __future__ import annotations

from typing import List, Protocol, Sequence

import numpy as np

from ..detection.types import BoundingBox


class TrackerSet(Protocol):
    """Interface to allow swapping OpenCV trackers, motpy, or a static holder."""

    @property
    def initialized(self) -> bool:
        ...

    def seed(self, frame: np.ndarray, boxes: Sequence[BoundingBox]) -> None:
        """Replace all tracked objects with `boxes` on `frame`."""
        ...

    def update(self, frame: np.ndarray) -> List[BoundingBox]:
        """Advance every tracked object one frame and return their new boxes."""
        ...
