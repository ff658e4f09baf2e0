from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

import cv2
import numpy as np

from .types import BoundingBox, boxes_as_list


@dataclass
class CascadeConfig:
    model_path: str = "models/haarcascade_frontalface_default.xml"
    scale_factor: float = 1.1
    min_neighbors: int = 3
    min_size: Tuple[int, int] = (100, 100)
    equalize_hist: bool = True


def resolve_cascade_path(model_path: str | Path) -> Path:
    """Return an existing cascade file, falling back to the XMLs bundled with OpenCV."""
    p = Path(model_path)
    if p.is_file():
        return p

    bundled_dir = getattr(getattr(cv2, "data", None), "haarcascades", None)
    if bundled_dir:
        bundled = Path(bundled_dir) / p.name
        if bundled.is_file():
            return bundled

    raise RuntimeError(f"Cascade model not found: {p}")


class HaarFaceDetector:
    """Haar-cascade face detector. Returns (x, y, w, h) boxes, possibly none."""

    def __init__(self, cfg: CascadeConfig):
        self._cfg = cfg
        self.model_path = resolve_cascade_path(cfg.model_path)
        self._classifier = cv2.CascadeClassifier()
        if not self._classifier.load(str(self.model_path)):
            raise RuntimeError(f"Could not load face cascade: {self.model_path}")

    def detect(self, frame_bgr: np.ndarray) -> List[BoundingBox]:
        if frame_bgr.ndim == 3:
            gray = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2GRAY)
        else:
            gray = frame_bgr
        if self._cfg.equalize_hist:
            gray = cv2.equalizeHist(gray)

        faces = self._classifier.detectMultiScale(
            gray,
            scaleFactor=float(self._cfg.scale_factor),
            minNeighbors=int(self._cfg.min_neighbors),
            flags=cv2.CASCADE_SCALE_IMAGE,
            minSize=(int(self._cfg.min_size[0]), int(self._cfg.min_size[1])),
        )
        return boxes_as_list(faces)


def build_detector(det_cfg: Dict[str, Any]) -> HaarFaceDetector:
    min_size = det_cfg.get("min_size", [100, 100])
    cfg = CascadeConfig(
        model_path=str(det_cfg.get("model_path", CascadeConfig.model_path)),
        scale_factor=float(det_cfg.get("scale_factor", 1.1)),
        min_neighbors=int(det_cfg.get("min_neighbors", 3)),
        min_size=(int(min_size[0]), int(min_size[1])),
        equalize_hist=bool(det_cfg.get("equalize_hist", True)),
    )
    if cfg.scale_factor <= 1.0:
        raise ValueError(f"detection.scale_factor must be > 1.0: got {cfg.scale_factor!r}")
    return HaarFaceDetector(cfg)
