from __future__ import annotations

from typing import Iterable, List, Tuple

BoundingBox = Tuple[int, int, int, int]  # (x, y, w, h) in frame pixels
FrameSize = Tuple[int, int]  # (width, height)


def to_box(rect: Iterable[float]) -> BoundingBox:
    """Convert any 4-sequence (cv2 Rect, Rect2d, ndarray row) to an int (x, y, w, h), rounding to nearest."""
    x, y, w, h = [float(v) for v in rect]
    return int(round(x)), int(round(y)), int(round(w)), int(round(h))


def box_area(box: BoundingBox) -> int:
    _, _, w, h = box
    if w <= 0 or h <= 0:
        return 0
    return int(w) * int(h)


def intersection_area(box: BoundingBox, frame_size: FrameSize) -> int:
    """Area of `box` that lies inside the rectangle (0, 0, width, height)."""
    x, y, w, h = box
    fw, fh = frame_size
    if w <= 0 or h <= 0 or fw <= 0 or fh <= 0:
        return 0
    ix1, iy1 = max(x, 0), max(y, 0)
    ix2, iy2 = min(x + w, fw), min(y + h, fh)
    return max(0, ix2 - ix1) * max(0, iy2 - iy1)


def visible_fraction(box: BoundingBox, frame_size: FrameSize) -> float:
    area = box_area(box)
    if area <= 0:
        return 0.0
    return intersection_area(box, frame_size) / float(area)


def frame_size_of(frame) -> FrameSize:
    return int(frame.shape[1]), int(frame.shape[0])


def xywh_to_xyxy(box: BoundingBox) -> Tuple[float, float, float, float]:
    x, y, w, h = box
    return float(x), float(y), float(x + w), float(y + h)


def xyxy_to_xywh(box_xyxy: Iterable[float]) -> BoundingBox:
    x1, y1, x2, y2 = [float(v) for v in box_xyxy]
    return int(round(x1)), int(round(y1)), int(round(x2 - x1)), int(round(y2 - y1))


def clamp_offset(offset: int, size: int, limit: int) -> int:
    """Clamp a top-left offset so that [offset, offset + size) stays within [0, limit)."""
    return max(0, min(int(offset), int(limit) - int(size)))


def boxes_as_list(rects) -> List[BoundingBox]:
    if rects is None:
        return []
    return [to_box(r) for r in rects]
