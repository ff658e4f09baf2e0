from __future__ import annotations

from typing import Any, Dict

import cv2

from .pipeline import FrameResult
from .ui.draw import draw_boxes, draw_fps, draw_mode
from .utils.detection_logger import DetectionLogger, default_detection_log_path

ESC_KEY = 27


def create_detection_logger(logging_cfg: Dict[str, Any]) -> DetectionLogger | None:
    if not logging_cfg.get("enabled", False):
        return None

    log_path = logging_cfg.get("path") or default_detection_log_path()
    flush_every = int(logging_cfg.get("flush_every", 60))
    detection_logger = DetectionLogger(str(log_path), flush_every=flush_every)
    print(f"[INFO] detection log enabled: {detection_logger.path}")
    return detection_logger


def log_detection_sample(
    detection_logger: DetectionLogger | None,
    frame_idx: int,
    now: float,
    dt: float,
    source: str,
    result: FrameResult,
) -> None:
    if detection_logger is None:
        return

    detection_logger.log(
        frame_idx=frame_idx,
        t_sec=now,
        dt_sec=dt,
        source=source,
        redetected=result.redetected,
        n_detections=result.n_detections,
        n_tracks=len(result.boxes),
        initialized=result.trackers_initialized,
    )


def mode_text(result: FrameResult, *, live: bool, tracking_enabled: bool) -> str:
    if not live:
        return f"IMAGE faces={len(result.boxes)}"
    if not tracking_enabled:
        return f"DETECT faces={len(result.boxes)}"
    state = "DETECT" if result.redetected else "TRACK"
    return f"{state} faces={len(result.boxes)} since_det={result.frames_since_detection}"


def annotate_frame(
    frame,
    *,
    result: FrameResult,
    live: bool,
    tracking_enabled: bool,
    fps: float,
) -> None:
    draw_boxes(frame, result.boxes, from_detection=result.redetected)
    draw_mode(frame, mode_text(result, live=live, tracking_enabled=tracking_enabled))
    draw_fps(frame, fps)


def show_frame(frame, *, win_name: str, wait_ms: int) -> bool:
    """Show the frame and return True when the user asked to quit (ESC or q)."""
    cv2.imshow(win_name, frame)
    key = cv2.waitKey(max(1, int(wait_ms))) & 0xFF
    return key in (ESC_KEY, ord("q"))


def close_detection_logger(detection_logger: DetectionLogger | None) -> None:
    if detection_logger is None:
        return
    try:
        detection_logger.close()
        print(
            f"[INFO] detection log saved: {detection_logger.path} ({detection_logger.summary_text()})"
        )
    except Exception as e:
        print(f"[WARN] detection logger close failed: {e}")
