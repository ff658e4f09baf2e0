from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import cv2
import numpy as np


def _is_camera_device(device: Any) -> bool:
    if isinstance(device, int):
        return True
    if isinstance(device, str) and device.startswith("/dev/video"):
        return True
    return False


def open_capture(device: Any, capture_cfg: Dict[str, Any]) -> Optional[cv2.VideoCapture]:
    """Open a webcam, device path or video file. Returns None if it cannot be opened."""
    cap = cv2.VideoCapture(device)
    if not cap.isOpened():
        cap.release()
        return None

    if _is_camera_device(device):
        width = int(capture_cfg.get("width", 1280))
        height = int(capture_cfg.get("height", 720))
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

    try:
        backend = cap.getBackendName()
    except Exception:
        backend = "UNKNOWN"
    actual_w = cap.get(cv2.CAP_PROP_FRAME_WIDTH)
    actual_h = cap.get(cv2.CAP_PROP_FRAME_HEIGHT)
    actual_fps = cap.get(cv2.CAP_PROP_FPS)
    print(
        "[INFO] capture open: "
        f"source={device!r} backend={backend} "
        f"actual={int(actual_w)}x{int(actual_h)}@{actual_fps:.1f}"
    )
    return cap


def load_still_images(paths: List[str]) -> List[Optional[np.ndarray]]:
    images: List[Optional[np.ndarray]] = []
    for p in paths:
        img = cv2.imread(p, cv2.IMREAD_COLOR)
        if img is None:
            print(f"[WARN] could not preload source image: {p}")
        images.append(img)
    return images


def open_video_writer(path: str, fps: float, size: Tuple[int, int], fourcc: str = "mp4v") -> cv2.VideoWriter:
    writer = cv2.VideoWriter(path, cv2.VideoWriter_fourcc(*fourcc), float(fps), size)
    if not writer.isOpened():
        raise RuntimeError(f"Failed to open video writer: {path} (fourcc={fourcc})")
    print(f"[INFO] writing annotated video: {path} fourcc={fourcc} size={size[0]}x{size[1]}@{fps:.1f}")
    return writer
