from __future__ import annotations

from typing import Sequence

from ..detection.types import BoundingBox, FrameSize, intersection_area, visible_fraction


def should_redetect(
    frames_since_last_detection: int,
    detection_interval: int,
    trackers_initialized: bool,
    tracked_boxes: Sequence[BoundingBox],
    frame_size: FrameSize,
    *,
    min_visible_fraction: float = 0.0,
) -> bool:
    """Decide whether this frame needs a full cascade detection.

    Checked in order, first hit wins:
      1. trackers were never seeded
      2. `detection_interval` frames have passed since the last detection
      3. some tracked box has no overlap with the frame (or, when
         `min_visible_fraction` > 0, less than that share of it is visible)

    Pure function: the caller owns the counter and the tracker set.
    """
    if not trackers_initialized:
        return True

    if frames_since_last_detection >= detection_interval:
        return True

    for box in tracked_boxes:
        if intersection_area(box, frame_size) == 0:
            return True
        if min_visible_fraction > 0.0 and visible_fraction(box, frame_size) < min_visible_fraction:
            return True

    return False
