from __future__ import annotations

from typing import Any, Dict


DEFAULTS: Dict[str, Any] = {
    "camera": {
        "device": 0,
        "capture": {"width": 1280, "height": 720},
    },
    "sources": {
        # source index 0 is the camera; these follow as 1, 2, ...
        "images": [],
    },
    "detection": {
        "model_path": "models/haarcascade_frontalface_default.xml",
        "scale_factor": 1.1,
        "min_neighbors": 3,
        "min_size": [100, 100],
        "equalize_hist": True,
    },
    "tracking": {
        "enabled": True,
        "backend": "opencv",  # opencv | motpy | static
        "redetect_interval": 20,
        "min_visible_fraction": 0.0,
        "opencv": {
            "algorithm": "medianflow",  # medianflow | csrt | kcf | mil | mosse | boosting | tld
        },
        "motpy": {
            "order_pos": 1,
            "dim_pos": 2,
            "order_size": 0,
            "dim_size": 2,
            "q_var_pos": 5000.0,
            "r_var_pos": 0.1,
            "max_staleness": 30,
            "fps": 30.0,
        },
    },
    "assets": {
        "data_dir": "data",
        "glasses": "sunglassRGB.png",
        "reflections": [
            "glasses1.png", "glasses2.png", "glasses5.png", "glasses4.png",
            "glasses3.png", "glasses6.png", "glasses7.png",
        ],
        "effects": ["effect1.png", "effect2.png", "effect3.png", "effect4.png"],
        "mustaches": [
            "mustache1.jpg", "mustache2.jpg", "mustache3.jpg", "mustache4.jpg",
            "mustache5.jpg", "mustache6.jpg", "mustache7.jpg", "mustache8.jpg",
            "mustache9.jpg", "mustache10.jpg", "mustache11.jpg", "mustache12.jpg",
            "mustache13.jpg", "mustache14.jpg",
        ],
    },
    "filters": {
        "source": 0,
        "glasses": 0,
        "reflection_contrast": 0,
        "glasses_alpha": 0,
        "effect": 0,
        "effect_intensity": 0,
        "mustache": 0,
    },
    "ui": {
        "window_name": "Input",
        "options_window_name": "Options",
        "window_size": [600, 400],
        "show_boxes": False,
        "fps_ema_alpha": 0.2,
        "wait_ms": 30,
    },
    "logging": {
        "enabled": False,
        "path": None,
        "flush_every": 60,
    },
    "output": {
        "path": None,
        "fps": 30.0,
        "fourcc": "mp4v",
    },
}
