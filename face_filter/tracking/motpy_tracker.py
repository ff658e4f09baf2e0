from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from ..detection.types import BoundingBox, xywh_to_xyxy, xyxy_to_xywh


@dataclass
class MotpyConfig:
    order_pos: int = 1
    dim_pos: int = 2
    order_size: int = 0
    dim_size: int = 2
    q_var_pos: float = 5000.0
    r_var_pos: float = 0.1
    max_staleness: int = 30
    fps: float = 30.0


class MotpyTrackerSet:
    """motpy wrapper: seeds Kalman tracks from detections, then coasts on prediction."""

    def __init__(self, cfg: MotpyConfig):
        try:
            from motpy import MultiObjectTracker  # type: ignore
        except Exception as e:
            raise RuntimeError("motpy is not installed. `pip install motpy`") from e

        self._cfg = cfg
        self._mot_cls = MultiObjectTracker
        self._tracker = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _new_tracker(self):
        model_spec = {
            "order_pos": self._cfg.order_pos,
            "dim_pos": self._cfg.dim_pos,
            "order_size": self._cfg.order_size,
            "dim_size": self._cfg.dim_size,
            "q_var_pos": self._cfg.q_var_pos,
            "r_var_pos": self._cfg.r_var_pos,
        }
        return self._mot_cls(
            dt=1.0 / float(self._cfg.fps),
            model_spec=model_spec,
            tracker_kwargs={"max_staleness": float(self._cfg.max_staleness)},
        )

    def seed(self, frame: np.ndarray, boxes: Sequence[BoundingBox]) -> None:
        from motpy import Detection as MotpyDet  # type: ignore

        self._tracker = self._new_tracker()
        dets = [MotpyDet(box=np.array(xywh_to_xyxy(b), dtype=float), score=1.0, class_id=0) for b in boxes]
        self._tracker.step(detections=dets)
        self._initialized = True

    def update(self, frame: np.ndarray) -> List[BoundingBox]:
        if self._tracker is None:
            return []

        self._tracker.step(detections=[])
        tracks = self._tracker.active_tracks(
            max_staleness_to_positive_ratio=float("inf"),
            max_staleness=float(self._cfg.max_staleness),
            min_steps_alive=1,
        )
        return [xyxy_to_xywh(np.asarray(t.box, dtype=float)) for t in tracks]
