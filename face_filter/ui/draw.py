from __future__ import annotations

from typing import List, Tuple

import cv2

from ..detection.types import BoundingBox, box_area


def put_text(img, text: str, org: Tuple[int, int], scale=0.6, color=(255, 255, 255), thickness=1) -> None:
    cv2.putText(img, text, org, cv2.FONT_HERSHEY_SIMPLEX, scale, color, thickness, cv2.LINE_AA)


def draw_boxes(img, boxes: List[BoundingBox], from_detection: bool) -> None:
    col = (0, 255, 0) if from_detection else (0, 255, 255)
    for i, box in enumerate(boxes):
        if box_area(box) <= 0:
            continue
        x, y, w, h = box
        cv2.rectangle(img, (x, y), (x + w, y + h), col, 2)
        put_text(img, f"face {i + 1}", (x, max(0, y - 8)), 0.5, col, 1)


def draw_fps(img, fps: float) -> None:
    text = f"FPS: {fps:.1f}"
    (tw, _), _2 = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, 0.7, 2)
    x_right = img.shape[1] - tw - 10
    y_top = 30
    put_text(img, text, (x_right, y_top), 0.7, (255, 255, 255), 2)


def draw_mode(img, mode: str) -> None:
    put_text(img, mode, (10, 30), 0.6, (200, 200, 200), 1)
