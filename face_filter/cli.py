from __future__ import annotations

import argparse
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import cv2
import numpy as np

from .camera.capture import load_still_images, open_capture, open_video_writer
from .config import build_effective_config, load_config, validate_config
from .defaults import DEFAULTS
from .detection.cascade import build_detector
from .overlay import load_overlay_assets
from .pipeline import FilterSettings, build_tracking_loop, normalize_device_arg, process_frame
from .runtime import (
    annotate_frame,
    close_detection_logger,
    create_detection_logger,
    log_detection_sample,
    show_frame,
)
from .ui.gui import create_options_gui

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".bmp", ".webp")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Face filter: sunglasses / mustache overlays on tracked faces")
    ap.add_argument("-n", "--no-display", action="store_true", help="do not open windows (GUI disabled too)")
    ap.add_argument("-s", "--setting", action="store_true", help="show the options window with trackbars")
    ap.add_argument("-d", "--device", default=None, help="capture device index, device path or video file (e.g. 0, /dev/video0, clip.mp4)")
    ap.add_argument("-i", "--image", action="append", default=None, help="still image source, repeatable; selected with the Source trackbar")
    ap.add_argument("--no-track", action="store_true", help="run cascade detection on every frame instead of tracking")
    ap.add_argument("--backend", default=None, help="tracker backend (opencv|motpy|static)")
    ap.add_argument("--algorithm", default=None, help="OpenCV tracker algorithm (medianflow|csrt|kcf|mil|...)")
    ap.add_argument("--interval", default=None, type=int, help="force a full detection every N frames")
    ap.add_argument("--boxes", action="store_true", help="draw face boxes and detect/track state")
    ap.add_argument("-l", "--log", action="store_true", help="record per-frame detect/track decisions to CSV")
    ap.add_argument("--log-path", default=None, help="CSV path (default logs/detection_log_YYYYmmdd_HHMMSS.csv)")
    ap.add_argument("--log-flush-every", default=None, type=int, help="flush the CSV every N frames (default 60)")
    ap.add_argument("-o", "--output", default=None, help="write annotated frames to a video (or an image for still sources)")
    ap.add_argument("--max-frames", default=None, type=int, help="stop after N frames")
    ap.add_argument("--config", default=None, help="config file (YAML/JSON)")
    return ap.parse_args(argv)


def _apply_cli_overrides(cfg: Dict[str, Any], args: argparse.Namespace) -> None:
    if args.device is not None:
        cfg["camera"]["device"] = args.device
    if args.image:
        cfg["sources"]["images"] = list(cfg["sources"].get("images") or []) + list(args.image)

    if args.no_track:
        cfg["tracking"]["enabled"] = False
    if args.backend is not None:
        cfg["tracking"]["backend"] = str(args.backend)
    if args.algorithm is not None:
        cfg["tracking"]["opencv"]["algorithm"] = str(args.algorithm)
    if args.interval is not None:
        cfg["tracking"]["redetect_interval"] = int(args.interval)

    cfg["ui"]["show_boxes"] = bool(args.boxes or cfg["ui"].get("show_boxes", False))
    cfg["logging"]["enabled"] = bool(args.log or cfg["logging"].get("enabled", False))
    if args.log_path is not None:
        cfg["logging"]["path"] = str(args.log_path)
    if args.log_flush_every is not None:
        cfg["logging"]["flush_every"] = int(args.log_flush_every)

    if args.output is not None:
        cfg["output"]["path"] = str(args.output)

    validate_config(cfg)


def _choice_counts(n_images: int, assets) -> Dict[str, int]:
    return {
        "source": 1 + n_images,
        "glasses": len(assets.reflections),
        "effect": len(assets.effects),
        "mustache": len(assets.mustaches),
    }


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        override = load_config(args.config) if args.config else {}
        cfg = build_effective_config(DEFAULTS, override)
        _apply_cli_overrides(cfg, args)
    except (OSError, RuntimeError, ValueError) as e:
        print(f"[ERROR] {e}")
        return 2

    do_display = not bool(args.no_display)
    use_gui = bool(args.setting) and do_display
    tracking_enabled = bool(cfg["tracking"]["enabled"])
    show_boxes = bool(cfg["ui"]["show_boxes"])
    output_path: Optional[str] = cfg["output"].get("path")
    max_frames = args.max_frames

    image_paths: List[str] = cfg["sources"]["images"]
    images = load_still_images(image_paths)

    device = normalize_device_arg(cfg["camera"]["device"])
    cap = open_capture(device, cfg["camera"]["capture"])
    if cap is None:
        if not any(img is not None for img in images):
            print(f"[ERROR] could not open capture source {device!r} and no still image is available")
            return 2
        print(f"[WARN] could not open capture source {device!r}, using still images only")

    try:
        detector = build_detector(cfg["detection"])
        loop = build_tracking_loop(detector, cfg["tracking"])
    except (RuntimeError, ValueError) as e:
        print(f"[ERROR] {e}")
        if cap is not None:
            cap.release()
        return 2
    print(f"[INFO] face cascade: {detector.model_path}")
    if tracking_enabled:
        print(
            f"[INFO] tracking: backend={cfg['tracking']['backend']} "
            f"redetect_interval={loop.redetect_interval}"
        )
    else:
        print("[INFO] tracking disabled: detecting every frame")

    assets = load_overlay_assets(cfg["assets"])
    settings = FilterSettings.from_config(cfg["filters"])
    if cap is None and settings.source == 0:
        settings.source = next(i + 1 for i, img in enumerate(images) if img is not None)
    if settings.source > 0 and (settings.source > len(images) or images[settings.source - 1] is None):
        print(f"[ERROR] selected source {settings.source} is not a loaded image")
        if cap is not None:
            cap.release()
        return 2

    ui_cfg = cfg["ui"]
    win_name = str(ui_cfg["window_name"])
    options_name = str(ui_cfg["options_window_name"])
    win_w, win_h = (int(v) for v in ui_cfg["window_size"])
    if do_display:
        cv2.namedWindow(win_name, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(win_name, win_w, win_h)
    if use_gui:
        cv2.namedWindow(options_name, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(options_name, win_w, win_h)
        create_options_gui(options_name, settings, _choice_counts(len(images), assets))

    detection_logger = None
    writer: Optional[cv2.VideoWriter] = None

    try:
        detection_logger = create_detection_logger(cfg["logging"])

        last_t = time.time()
        fps = 0.0
        alpha = float(ui_cfg.get("fps_ema_alpha", 0.2))
        frame_idx = 0
        prev_source = -1

        while True:
            source = max(0, min(int(settings.source), len(images)))
            if source != prev_source:
                loop.reset()
                prev_source = source
                print(f"[INFO] source -> {'capture' if source == 0 else image_paths[source - 1]}")

            live = source == 0 and cap is not None
            frame: Optional[np.ndarray]
            if live:
                ok, frame = cap.read()
                if not ok or frame is None:
                    print("[INFO] capture returned no frame, stopping")
                    break
            else:
                img = images[source - 1] if source > 0 else None
                if img is None:
                    print(f"[ERROR] source image at index {source} is not loaded")
                    return 2
                frame = img.copy()

            frame_idx += 1
            now = time.time()
            dt = max(1e-6, now - last_t)
            last_t = now
            fps = alpha * (1.0 / dt) + (1.0 - alpha) * fps

            result = process_frame(
                frame,
                loop,
                settings,
                assets,
                live=live,
                tracking_enabled=tracking_enabled,
            )

            log_detection_sample(
                detection_logger,
                frame_idx=frame_idx,
                now=now,
                dt=dt,
                source="capture" if live else "image",
                result=result,
            )

            if show_boxes:
                annotate_frame(frame, result=result, live=live, tracking_enabled=tracking_enabled, fps=fps)

            if output_path:
                if not live and Path(output_path).suffix.lower() in IMAGE_SUFFIXES:
                    if not cv2.imwrite(output_path, frame):
                        print(f"[ERROR] could not save image: {output_path}")
                        return 2
                else:
                    if writer is None:
                        size = (int(frame.shape[1]), int(frame.shape[0]))
                        try:
                            writer = open_video_writer(
                                output_path,
                                float(cfg["output"].get("fps", 30.0)),
                                size,
                                str(cfg["output"].get("fourcc", "mp4v")),
                            )
                        except RuntimeError as e:
                            print(f"[ERROR] {e}")
                            return 2
                    writer.write(frame)

            if max_frames is not None and frame_idx >= int(max_frames):
                break

            if do_display:
                if show_frame(frame, win_name=win_name, wait_ms=int(ui_cfg.get("wait_ms", 30))):
                    break
            elif not live:
                # nothing can change the selection without a window
                break

    finally:
        close_detection_logger(detection_logger)
        if writer is not None:
            writer.release()
        if cap is not None:
            cap.release()
        if do_display:
            cv2.destroyAllWindows()

    return 0
