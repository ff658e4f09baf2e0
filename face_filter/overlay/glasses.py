from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import cv2
import numpy as np

from ..detection.types import BoundingBox, clamp_offset

# vertical position of the eye line, as a fraction of face height
EYE_LINE_RATIO = 0.41


@dataclass(frozen=True)
class GlassesTemplate:
    image: np.ndarray       # BGR uint8
    frame_mask: np.ndarray  # 255 on the opaque frame
    whole_mask: np.ndarray  # 255 on frame + lenses

    @property
    def aspect(self) -> float:
        h, w = self.image.shape[:2]
        return w / float(h)


def prepare_glasses(glasses_bgr: np.ndarray) -> GlassesTemplate:
    """Split a sunglasses picture on white background into frame and lens masks."""
    whole = cv2.inRange(glasses_bgr, (0, 0, 0), (254, 254, 254))
    frame = cv2.inRange(glasses_bgr, (0, 0, 55), (255, 255, 254))
    return GlassesTemplate(image=glasses_bgr, frame_mask=frame, whole_mask=whole)


def adjust_reflection(reflection_bgr: np.ndarray, contrast: int) -> np.ndarray:
    """Contrast stretch driven by a 0..100 slider (gain 0.5..2.5, matching negative bias)."""
    c = float(contrast) / 100.0
    gain = 0.5 + c * 2.0
    bias = -c * 128.0
    out = reflection_bgr.astype(np.float32) * gain + bias
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def reflection_texture(reflection_bgr: np.ndarray, size: tuple[int, int]) -> np.ndarray:
    """Left 3/4 next to right 3/4 of the picture, so each lens shows a shifted view."""
    cols = reflection_bgr.shape[1]
    left = reflection_bgr[:, : int(cols * 0.75)]
    right = reflection_bgr[:, int(cols * 0.25):]
    concat = np.hstack([left, right])
    return cv2.resize(concat, size, interpolation=cv2.INTER_LINEAR)


def edge_effect_mask(effect_bgr: np.ndarray, size: tuple[int, int]) -> np.ndarray:
    """Sobel gradient magnitude of the effect picture, normalized to float [0, 1]."""
    gray = cv2.cvtColor(effect_bgr, cv2.COLOR_BGR2GRAY)
    sobel_x = cv2.Sobel(gray, cv2.CV_32F, 1, 0, ksize=3)
    sobel_y = cv2.Sobel(gray, cv2.CV_32F, 0, 1, ksize=3)
    magnitude = cv2.magnitude(sobel_x, sobel_y)
    norm = cv2.normalize(magnitude, None, 0.0, 255.0, cv2.NORM_MINMAX, cv2.CV_8U)
    resized = cv2.resize(norm, size)
    return resized.astype(np.float32) / 255.0


def _apply_effect(blended: np.ndarray, mask: np.ndarray, intensity: int) -> np.ndarray:
    hsv = cv2.cvtColor(blended, cv2.COLOR_BGR2HSV)  # float: H in [0, 360), S,V in [0, 1]
    h_chan, s_chan, v_chan = cv2.split(hsv)

    coef_s = 1.0 - float(intensity) / 100.0
    coef_v = 20.0 * float(intensity) / 100.0

    s_mod = s_chan * (1.0 - mask) + s_chan * coef_s * mask
    v_mod = v_chan * (1.0 - mask) + v_chan * coef_v * mask
    s_mod = np.clip(s_mod, 0.0, 1.0).astype(np.float32)
    v_mod = np.clip(v_mod, 0.0, 1.0).astype(np.float32)

    return cv2.cvtColor(cv2.merge([h_chan, s_mod, v_mod]), cv2.COLOR_HSV2BGR)


def apply_glasses(
    frame: np.ndarray,
    glasses: GlassesTemplate,
    reflection_bgr: np.ndarray,
    boxes: Sequence[BoundingBox],
    *,
    reflection_contrast: int = 0,
    glasses_alpha: int = 0,
    effect_bgr: np.ndarray | None = None,
    effect_intensity: int = 0,
) -> int:
    """Draw sunglasses on every face box in place. Returns the number of faces drawn."""
    frame_h, frame_w = frame.shape[:2]
    reflection = adjust_reflection(reflection_bgr, reflection_contrast)
    lens_alpha = int(255.0 * float(glasses_alpha) / 100.0)

    drawn = 0
    for box in boxes:
        fx, fy, fw, fh = (int(v) for v in box)
        gw = fw
        gh = int(fw / glasses.aspect)
        if gw <= 0 or gh <= 0 or gw > frame_w or gh > frame_h:
            continue

        g_img = cv2.resize(glasses.image, (gw, gh), interpolation=cv2.INTER_LINEAR)
        m_frame = cv2.resize(glasses.frame_mask, (gw, gh), interpolation=cv2.INTER_NEAREST)
        m_whole = cv2.resize(glasses.whole_mask, (gw, gh), interpolation=cv2.INTER_NEAREST)
        m_lens = cv2.subtract(m_whole, m_frame)

        texture = reflection_texture(reflection, (gw, gh))
        lens_px = m_lens > 0
        g_img = g_img.copy()
        g_img[lens_px] = texture[lens_px]

        alpha = np.zeros((gh, gw), dtype=np.uint8)
        alpha[lens_px] = lens_alpha
        alpha[m_frame > 0] = 255

        x_off = clamp_offset(int(fx + (fw - gw) / 2.0), gw, frame_w)
        y_off = clamp_offset(int(fy + fh * EYE_LINE_RATIO - gh / 2.0), gh, frame_h)
        roi = frame[y_off:y_off + gh, x_off:x_off + gw]

        alpha_f = alpha.astype(np.float32) / 255.0
        alpha3 = cv2.merge([alpha_f, alpha_f, alpha_f])
        g_f = g_img.astype(np.float32) / 255.0
        roi_f = roi.astype(np.float32) / 255.0
        blended = g_f * alpha3 + roi_f * (1.0 - alpha3)

        if effect_bgr is not None:
            mask = edge_effect_mask(effect_bgr, (gw, gh)) * alpha_f
            mask = np.minimum(mask, 1.0)
            blended = _apply_effect(blended.astype(np.float32), mask, effect_intensity)

        roi[:] = np.clip(np.rint(blended * 255.0), 0, 255).astype(np.uint8)
        drawn += 1
    return drawn
