"""Utility helpers (small, dependency-light).

- detection_logger: CSV logging of per-frame detect/track decisions.
"""

from .detection_logger import DetectionLogger, default_detection_log_path

__all__ = [
    "DetectionLogger",
    "default_detection_log_path",
]
