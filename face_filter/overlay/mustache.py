from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import cv2
import numpy as np

from ..detection.types import BoundingBox, clamp_offset

MUSTACHE_WIDTH_RATIO = 0.6
# vertical position of the upper lip, as a fraction of face height
LIP_LINE_RATIO = 0.65


@dataclass(frozen=True)
class MustacheTemplate:
    image: np.ndarray   # BGR uint8, anchor dot erased
    mask: np.ndarray    # 255 where the mustache is
    anchor: Tuple[int, int]  # (x, y) point placed on the lip line

    @property
    def aspect(self) -> float:
        h, w = self.image.shape[:2]
        return w / float(h)


def prepare_mustache(mustache_bgr: np.ndarray) -> MustacheTemplate:
    """Build mask and anchor from a dark mustache drawn on a light background.

    A small red dot in the picture marks the point that goes under the nose.
    It is located, erased, and used as the anchor. Without a dot the picture
    center is used.
    """
    image = mustache_bgr.copy()
    mask = cv2.inRange(image, (0, 0, 0), (100, 100, 100))
    red = cv2.inRange(image, (0, 0, 100), (80, 80, 255))

    m = cv2.moments(red, True)
    if m["m00"] > 0:
        anchor = (int(m["m10"] / m["m00"]), int(m["m01"] / m["m00"]))
        cv2.circle(image, anchor, 2, (0, 0, 0), -1)
        cv2.circle(mask, anchor, 2, 255, -1)
    else:
        anchor = (image.shape[1] // 2, image.shape[0] // 2)

    return MustacheTemplate(image=image, mask=mask, anchor=anchor)


def apply_mustache(frame: np.ndarray, mustache: MustacheTemplate, boxes: Sequence[BoundingBox]) -> int:
    """Draw the mustache on every face box in place. Returns the number of faces drawn."""
    frame_h, frame_w = frame.shape[:2]
    src_h = mustache.image.shape[0]

    drawn = 0
    for box in boxes:
        fx, fy, fw, fh = (int(v) for v in box)
        out_w = int(fw * MUSTACHE_WIDTH_RATIO)
        out_h = int(out_w / mustache.aspect)
        if out_w <= 0 or out_h <= 0 or out_w > frame_w or out_h > frame_h:
            continue

        img = cv2.resize(mustache.image, (out_w, out_h), interpolation=cv2.INTER_LINEAR)
        mask = cv2.resize(mustache.mask, (out_w, out_h), interpolation=cv2.INTER_NEAREST)

        anchor_y = int(mustache.anchor[1] * (out_h / float(src_h)))

        x_off = clamp_offset(fx + (fw - out_w) // 2, out_w, frame_w)
        y_off = clamp_offset(fy + int(fh * LIP_LINE_RATIO) - anchor_y, out_h, frame_h)
        roi = frame[y_off:y_off + out_h, x_off:x_off + out_w]

        mask_f = cv2.cvtColor(mask, cv2.COLOR_GRAY2BGR).astype(np.float32) / 255.0
        img_f = img.astype(np.float32) / 255.0
        roi_f = roi.astype(np.float32) / 255.0
        blended = img_f * mask_f + roi_f * (1.0 - mask_f)

        roi[:] = np.clip(np.rint(blended * 255.0), 0, 255).astype(np.uint8)
        drawn += 1
    return drawn
