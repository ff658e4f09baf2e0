from __future__ import annotations

from typing import Callable, Dict

import cv2

from ..pipeline import FilterSettings


# trackbar label -> FilterSettings field
TRACKBARS = (
    ("Source", "source"),
    ("Glasses Image", "glasses"),
    ("Reflection Contrast", "reflection_contrast"),
    ("Glasses Alpha", "glasses_alpha"),
    ("Glasses Effect", "effect"),
    ("Effect Intensity", "effect_intensity"),
    ("Mustache Option", "mustache"),
)

PERCENT_FIELDS = ("reflection_contrast", "glasses_alpha", "effect_intensity")


def trackbar_setter(settings: FilterSettings, name: str) -> Callable[[int], None]:
    def _f(v: int) -> None:
        setattr(settings, name, int(v))
    return _f


def create_options_gui(win_name: str, settings: FilterSettings, counts: Dict[str, int]) -> None:
    """Create OpenCV trackbars writing into `settings`.

    `counts` gives the number of choices for the index fields
    (source, glasses, effect, mustache); percentages run 0..100.
    """
    for label, name in TRACKBARS:
        if name in PERCENT_FIELDS:
            max_v = 100
        else:
            max_v = max(0, int(counts.get(name, 1)) - 1)
        initial = min(int(getattr(settings, name)), max_v)
        setattr(settings, name, initial)
        cv2.createTrackbar(label, win_name, initial, max_v, trackbar_setter(settings, name))
