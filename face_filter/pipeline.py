from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Protocol

import numpy as np

from .detection.types import BoundingBox, frame_size_of
from .overlay import OverlayAssets, apply_glasses, apply_mustache
from .tracking.base import TrackerSet
from .tracking.motpy_tracker import MotpyConfig, MotpyTrackerSet
from .tracking.opencv_tracker import OpenCvTrackerConfig, OpenCvTrackerSet
from .tracking.policy import should_redetect
from .tracking.static_tracker import StaticTrackerSet


class FaceDetector(Protocol):
    def detect(self, frame_bgr: np.ndarray) -> List[BoundingBox]:
        ...


@dataclass(frozen=True)
class FrameResult:
    boxes: List[BoundingBox]
    redetected: bool
    n_detections: int
    trackers_initialized: bool
    frames_since_detection: int


@dataclass
class FilterSettings:
    """Every tunable the options window exposes. Trackbar callbacks write here."""

    source: int = 0
    glasses: int = 0
    reflection_contrast: int = 0
    glasses_alpha: int = 0
    effect: int = 0
    effect_intensity: int = 0
    mustache: int = 0

    @classmethod
    def from_config(cls, filters_cfg: Dict[str, Any]) -> "FilterSettings":
        return cls(**{k: int(filters_cfg.get(k, 0)) for k in cls.__dataclass_fields__})


def normalize_device_arg(dev: Any) -> Any:
    if isinstance(dev, str) and dev.isdigit():
        return int(dev)
    return dev


def build_tracker_set(track_cfg: Dict[str, Any]) -> TrackerSet:
    backend = str(track_cfg.get("backend", "opencv")).lower()
    if backend == "static":
        return StaticTrackerSet()

    if backend == "opencv":
        ocv = track_cfg.get("opencv", {})
        return OpenCvTrackerSet(OpenCvTrackerConfig(algorithm=str(ocv.get("algorithm", "medianflow"))))

    if backend == "motpy":
        mot = track_cfg.get("motpy", {})
        cfg = MotpyConfig(
            order_pos=int(mot.get("order_pos", 1)),
            dim_pos=int(mot.get("dim_pos", 2)),
            order_size=int(mot.get("order_size", 0)),
            dim_size=int(mot.get("dim_size", 2)),
            q_var_pos=float(mot.get("q_var_pos", 5000.0)),
            r_var_pos=float(mot.get("r_var_pos", 0.1)),
            max_staleness=int(mot.get("max_staleness", 30)),
            fps=float(mot.get("fps", 30.0)),
        )
        return MotpyTrackerSet(cfg)

    raise ValueError(f"Unknown tracking backend: {backend}")


@dataclass
class FaceTrackingLoop:
    """Per-frame detect-or-track loop.

    Owns the frame counter, the "ever seeded" flag and the tracker set.
    A detection pass that finds nothing keeps whatever trackers exist; if
    none were ever seeded the next frame detects again.
    """

    detector: FaceDetector
    tracker_factory: Callable[[], TrackerSet]
    redetect_interval: int = 20
    min_visible_fraction: float = 0.0
    frames_since_detection: int = 0
    trackers_initialized: bool = False
    tracker: TrackerSet | None = None
    boxes: List[BoundingBox] = field(default_factory=list)

    def reset(self) -> None:
        self.frames_since_detection = 0
        self.trackers_initialized = False
        self.tracker = None
        self.boxes = []

    def step(self, frame: np.ndarray) -> FrameResult:
        self.frames_since_detection += 1

        redetect = should_redetect(
            self.frames_since_detection,
            self.redetect_interval,
            self.trackers_initialized,
            self.boxes,
            frame_size_of(frame),
            min_visible_fraction=self.min_visible_fraction,
        )

        n_detections = 0
        if redetect:
            detections = self.detector.detect(frame)
            n_detections = len(detections)
            if detections:
                tracker = self.tracker_factory()
                tracker.seed(frame, detections)
                self.tracker = tracker
                self.trackers_initialized = True
            self.frames_since_detection = 0

        self.boxes = self.tracker.update(frame) if self.tracker is not None else []

        return FrameResult(
            boxes=list(self.boxes),
            redetected=redetect,
            n_detections=n_detections,
            trackers_initialized=self.trackers_initialized,
            frames_since_detection=self.frames_since_detection,
        )

    def detect_only(self, frame: np.ndarray) -> FrameResult:
        """Still-image path: detect every call, leave the tracker state alone."""
        detections = self.detector.detect(frame)
        return FrameResult(
            boxes=list(detections),
            redetected=True,
            n_detections=len(detections),
            trackers_initialized=self.trackers_initialized,
            frames_since_detection=self.frames_since_detection,
        )


def build_tracking_loop(detector: FaceDetector, track_cfg: Dict[str, Any]) -> FaceTrackingLoop:
    # fail at startup rather than on the first detection
    build_tracker_set(track_cfg)
    return FaceTrackingLoop(
        detector=detector,
        tracker_factory=lambda: build_tracker_set(track_cfg),
        redetect_interval=int(track_cfg.get("redetect_interval", 20)),
        min_visible_fraction=float(track_cfg.get("min_visible_fraction", 0.0)),
    )


def apply_filters(
    frame: np.ndarray,
    boxes: List[BoundingBox],
    settings: FilterSettings,
    assets: OverlayAssets,
) -> None:
    """Draw the overlays selected in `settings` on every face box, in place."""
    if not boxes:
        return

    reflection = assets.reflection(settings.glasses)
    if reflection is not None and assets.glasses is not None:
        apply_glasses(
            frame,
            assets.glasses,
            reflection,
            boxes,
            reflection_contrast=settings.reflection_contrast,
            glasses_alpha=settings.glasses_alpha,
            effect_bgr=assets.effect(settings.effect),
            effect_intensity=settings.effect_intensity,
        )

    mustache = assets.mustache(settings.mustache)
    if mustache is not None:
        apply_mustache(frame, mustache, boxes)


def process_frame(
    frame: np.ndarray,
    loop: FaceTrackingLoop,
    settings: FilterSettings,
    assets: OverlayAssets,
    *,
    live: bool,
    tracking_enabled: bool = True,
) -> FrameResult:
    if live and tracking_enabled:
        result = loop.step(frame)
    else:
        result = loop.detect_only(frame)
    apply_filters(frame, result.boxes, settings, assets)
    return result
