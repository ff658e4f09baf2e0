# test/test_cli.py
import json

import cv2
import numpy as np

from face_filter.cli import main


def test_headless_still_image_run(tmp_path):
    src = tmp_path / "blank.png"
    cv2.imwrite(str(src), np.full((240, 320, 3), 127, dtype=np.uint8))
    out = tmp_path / "out.png"
    log = tmp_path / "det.csv"

    code = main([
        "-n",
        "-d", str(tmp_path / "no_such_clip.mp4"),
        "-i", str(src),
        "--backend", "static",
        "--boxes",
        "-l", "--log-path", str(log),
        "-o", str(out),
    ])

    assert code == 0
    assert out.is_file()
    assert cv2.imread(str(out)).shape == (240, 320, 3)
    assert log.is_file()


def test_no_source_at_all_fails(tmp_path):
    code = main(["-n", "-d", str(tmp_path / "no_such_clip.mp4"), "--backend", "static"])
    assert code == 2


def test_bad_config_file_fails(tmp_path):
    assert main(["-n", "--config", str(tmp_path / "missing.yaml")]) == 2


def test_selected_image_that_failed_to_load_fails(tmp_path):
    good = tmp_path / "good.png"
    cv2.imwrite(str(good), np.full((120, 160, 3), 90, dtype=np.uint8))
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"filters": {"source": 2}}), encoding="utf-8")

    code = main([
        "-n",
        "--config", str(cfg),
        "-d", str(tmp_path / "no_such_clip.mp4"),
        "-i", str(good),
        "-i", str(tmp_path / "missing.png"),
        "--backend", "static",
    ])
    assert code == 2
