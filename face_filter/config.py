from __future__ import annotations

from typing import Any, Dict
import copy
import json
from pathlib import Path

VALID_BACKENDS = ("opencv", "motpy", "static")


def _deep_update(dst: Dict[str, Any], src: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge src into dst (in place) and return dst."""
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            _deep_update(dst[k], v)
        else:
            dst[k] = v
    return dst


def load_config(path: str | Path | None) -> Dict[str, Any]:
    """Load config from YAML or JSON.

    - YAML requires PyYAML (`pip install pyyaml`)
    - JSON works with standard library.

    If path is None, returns an empty dict (caller merges defaults).
    """
    if path is None:
        return {}

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")

    suffix = p.suffix.lower()
    if suffix in (".yaml", ".yml"):
        try:
            import yaml  # type: ignore
        except Exception as e:
            raise RuntimeError(
                "YAML config requires PyYAML. Install with `pip install pyyaml` "
            ) from e
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    elif suffix == ".json":
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    else:
        raise ValueError(f"Unsupported config extension: {p.suffix}")

    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping/object.")
    return data


def build_effective_config(defaults: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return merged config = defaults <- override."""
    merged = copy.deepcopy(defaults)
    _deep_update(merged, override)
    return merged


def validate_config(cfg: Dict[str, Any]) -> None:
    """Normalize numeric fields in place and raise ValueError on values the loop cannot run with."""
    trk = cfg["tracking"]
    trk["redetect_interval"] = int(trk["redetect_interval"])
    if trk["redetect_interval"] <= 0:
        raise ValueError(f"tracking.redetect_interval must be a positive integer: got {trk['redetect_interval']!r}")

    trk["min_visible_fraction"] = float(trk.get("min_visible_fraction", 0.0))
    if not 0.0 <= trk["min_visible_fraction"] <= 1.0:
        raise ValueError(f"tracking.min_visible_fraction must be within [0, 1]: got {trk['min_visible_fraction']!r}")

    trk["backend"] = str(trk.get("backend", "opencv")).strip().lower()
    if trk["backend"] not in VALID_BACKENDS:
        raise ValueError(f"tracking.backend must be one of {VALID_BACKENDS}: got {trk['backend']!r}")

    flush_every = int(cfg["logging"].get("flush_every", 60))
    if flush_every <= 0:
        raise ValueError(f"logging.flush_every must be positive: got {flush_every!r}")
    cfg["logging"]["flush_every"] = flush_every

    images = cfg["sources"].get("images") or []
    if not isinstance(images, list):
        raise ValueError("sources.images must be a list of image paths")
    cfg["sources"]["images"] = [str(x) for x in images]
