from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Sequence

import cv2
import numpy as np

from ..detection.types import BoundingBox, to_box


# algorithm name -> factory attribute, looked up in cv2 then cv2.legacy
_FACTORY_NAMES = {
    "medianflow": "TrackerMedianFlow_create",
    "csrt": "TrackerCSRT_create",
    "kcf": "TrackerKCF_create",
    "mil": "TrackerMIL_create",
    "mosse": "TrackerMOSSE_create",
    "boosting": "TrackerBoosting_create",
    "tld": "TrackerTLD_create",
}


@dataclass
class OpenCvTrackerConfig:
    """Config for the per-object OpenCV tracker backend.

    One single-object tracker is created per seeded box. Most algorithms
    live in opencv-contrib; older ones (MedianFlow, MOSSE, TLD, Boosting)
    are only exposed under `cv2.legacy` in OpenCV >= 4.5.
    """

    algorithm: str = "medianflow"        # medianflow | csrt | kcf | mil | mosse | boosting | tld


def resolve_tracker_factory(algorithm: str) -> Callable[[], Any]:
    name = str(algorithm).strip().lower()
    if name not in _FACTORY_NAMES:
        raise ValueError(f"Unknown OpenCV tracker algorithm: {algorithm!r} (expected one of {sorted(_FACTORY_NAMES)})")

    modules = [cv2]
    legacy = getattr(cv2, "legacy", None)
    if legacy is not None:
        modules.append(legacy)

    attr = _FACTORY_NAMES[name]
    for mod in modules:
        factory = getattr(mod, attr, None)
        if factory is not None:
            return factory

    raise RuntimeError(
        f"OpenCV tracker '{name}' is not available in this cv2 build. "
        "Install opencv-contrib-python."
    )


class _ObjectTracker:
    __slots__ = ("tracker", "box")

    def __init__(self, tracker: Any, box: BoundingBox) -> None:
        self.tracker = tracker
        self.box = box


class OpenCvTrackerSet:
    """Per-object OpenCV trackers behind the TrackerSet interface.

    A tracker that reports failure keeps its position with zero size, so the
    redetection policy sees zero overlap and triggers a fresh detection.
    """

    def __init__(self, cfg: OpenCvTrackerConfig):
        self._cfg = cfg
        self._factory = resolve_tracker_factory(cfg.algorithm)
        self._objects: List[_ObjectTracker] = []
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def seed(self, frame: np.ndarray, boxes: Sequence[BoundingBox]) -> None:
        objects: List[_ObjectTracker] = []
        for box in boxes:
            x, y, w, h = (int(v) for v in box)
            tracker = self._factory()
            tracker.init(frame, (x, y, w, h))
            objects.append(_ObjectTracker(tracker, (x, y, w, h)))
        self._objects = objects
        self._initialized = True

    def update(self, frame: np.ndarray) -> List[BoundingBox]:
        out: List[BoundingBox] = []
        for obj in self._objects:
            ok, rect = obj.tracker.update(frame)
            if ok:
                obj.box = to_box(rect)
            else:
                x, y, _, _ = obj.box
                obj.box = (x, y, 0, 0)
            out.append(obj.box)
        return out
