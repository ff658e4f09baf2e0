from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import cv2
import numpy as np

from .glasses import GlassesTemplate, prepare_glasses
from .mustache import MustacheTemplate, prepare_mustache


@dataclass
class OverlayAssets:
    """Pre-loaded overlay pictures. Index 0 of every list means "none"."""

    glasses: Optional[GlassesTemplate] = None
    reflections: List[Optional[np.ndarray]] = field(default_factory=lambda: [None])
    effects: List[Optional[np.ndarray]] = field(default_factory=lambda: [None])
    mustaches: List[Optional[MustacheTemplate]] = field(default_factory=lambda: [None])

    def reflection(self, idx: int) -> Optional[np.ndarray]:
        return _pick(self.reflections, idx)

    def effect(self, idx: int) -> Optional[np.ndarray]:
        return _pick(self.effects, idx)

    def mustache(self, idx: int) -> Optional[MustacheTemplate]:
        return _pick(self.mustaches, idx)


def _pick(items: Sequence[Any], idx: int) -> Any:
    if idx <= 0 or idx >= len(items):
        return None
    return items[idx]


def load_image(path: str | Path, *, label: str) -> Optional[np.ndarray]:
    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None:
        print(f"[WARN] could not preload {label} image: {path}")
        return None
    return img


def _load_list(data_dir: Path, names: Sequence[str], *, label: str) -> List[Optional[np.ndarray]]:
    out: List[Optional[np.ndarray]] = [None]
    for name in names:
        out.append(load_image(data_dir / name, label=label))
    return out


def load_overlay_assets(assets_cfg: Dict[str, Any]) -> OverlayAssets:
    data_dir = Path(str(assets_cfg.get("data_dir", "data")))

    glasses_img = None
    glasses_name = assets_cfg.get("glasses")
    if glasses_name:
        glasses_img = load_image(data_dir / str(glasses_name), label="glasses")

    mustache_imgs = _load_list(data_dir, assets_cfg.get("mustaches", []), label="mustache")

    assets = OverlayAssets(
        glasses=prepare_glasses(glasses_img) if glasses_img is not None else None,
        reflections=_load_list(data_dir, assets_cfg.get("reflections", []), label="reflection"),
        effects=_load_list(data_dir, assets_cfg.get("effects", []), label="effect"),
        mustaches=[prepare_mustache(m) if m is not None else None for m in mustache_imgs],
    )
    n_ok = sum(1 for x in assets.reflections[1:] + assets.effects[1:] + assets.mustaches[1:] if x is not None)
    print(f"[INFO] overlay assets loaded from {data_dir}: {n_ok} pictures, glasses={'yes' if assets.glasses is not None else 'no'}")
    return assets
