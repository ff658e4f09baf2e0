from .assets import OverlayAssets, load_overlay_assets
from .glasses import GlassesTemplate, apply_glasses, prepare_glasses
from .mustache import MustacheTemplate, apply_mustache, prepare_mustache

__all__ = [
    "GlassesTemplate",
    "MustacheTemplate",
    "OverlayAssets",
    "apply_glasses",
    "apply_mustache",
    "load_overlay_assets",
    "prepare_glasses",
    "prepare_mustache",
]
