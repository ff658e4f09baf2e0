# test/test_policy.py
import itertools

from face_filter.detection.types import to_box
from face_filter.tracking.policy import should_redetect

FRAME = (640, 480)


def test_first_detection_is_never_skipped():
    assert should_redetect(0, 20, False, [], FRAME) is True


def test_uninitialized_wins_over_everything():
    for count, boxes in itertools.product([0, 5, 19, 20, 100], [[], [(10, 10, 50, 50)], [(-100, -100, 50, 50)]]):
        assert should_redetect(count, 20, False, boxes, FRAME) is True


def test_keeps_tracking_inside_interval():
    assert should_redetect(5, 20, True, [(10, 10, 50, 50)], FRAME) is False


def test_interval_reached_forces_detection():
    assert should_redetect(20, 20, True, [(10, 10, 50, 50)], FRAME) is True
    assert should_redetect(35, 20, True, [(10, 10, 50, 50)], FRAME) is True
    assert should_redetect(19, 20, True, [(10, 10, 50, 50)], FRAME) is False


def test_box_fully_outside_forces_detection():
    assert should_redetect(2, 20, True, [(-100, -100, 50, 50)], FRAME) is True


def test_one_lost_box_invalidates_the_set():
    boxes = [(10, 10, 50, 50), (300, 200, 80, 80), (700, 10, 40, 40)]
    assert should_redetect(1, 20, True, boxes, FRAME) is True


def test_partially_visible_boxes_keep_tracking():
    boxes = [(-25, -25, 50, 50), (620, 460, 50, 50)]
    assert should_redetect(3, 20, True, boxes, FRAME) is False


def test_box_touching_edge_has_no_overlap():
    # right edge of the box sits exactly on x=0
    assert should_redetect(3, 20, True, [(-50, 10, 50, 50)], FRAME) is True
    assert should_redetect(3, 20, True, [(640, 10, 50, 50)], FRAME) is True


def test_degenerate_box_forces_detection():
    assert should_redetect(3, 20, True, [(100, 100, 0, 40)], FRAME) is True
    assert should_redetect(3, 20, True, [(100, 100, 40, 0)], FRAME) is True


def test_initialized_with_no_boxes_keeps_tracking():
    assert should_redetect(3, 20, True, [], FRAME) is False


def test_min_visible_fraction_catches_partial_drift():
    box = [(-40, 10, 50, 50)]  # 20% visible
    assert should_redetect(3, 20, True, box, FRAME) is False
    assert should_redetect(3, 20, True, box, FRAME, min_visible_fraction=0.5) is True
    assert should_redetect(3, 20, True, box, FRAME, min_visible_fraction=0.1) is False


def test_is_idempotent():
    args = (7, 20, True, [(10, 10, 50, 50), (600, 400, 100, 100)], FRAME)
    assert should_redetect(*args) == should_redetect(*args)


def test_subpixel_tracker_rect_at_edge_rounds_to_no_overlap():
    # a float rect ending at x=0.4 rounds onto the left edge
    box = to_box((-49.6, 10.0, 50.0, 50.0))
    assert box == (-50, 10, 50, 50)
    assert should_redetect(3, 20, True, [box], FRAME) is True
