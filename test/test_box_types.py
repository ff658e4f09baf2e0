# test/test_box_types.py
import numpy as np

from face_filter.detection.types import (
    boxes_as_list,
    clamp_offset,
    intersection_area,
    visible_fraction,
    xywh_to_xyxy,
    xyxy_to_xywh,
)


def test_intersection_area_inside_partial_outside():
    assert intersection_area((10, 10, 50, 50), (640, 480)) == 2500
    assert intersection_area((-25, -25, 50, 50), (640, 480)) == 625
    assert intersection_area((-100, -100, 50, 50), (640, 480)) == 0


def test_visible_fraction_of_degenerate_box_is_zero():
    assert visible_fraction((5, 5, 0, 10), (640, 480)) == 0.0
    assert visible_fraction((-25, 0, 50, 50), (640, 480)) == 0.5


def test_boxes_as_list_accepts_empty_tuple_and_arrays():
    assert boxes_as_list(()) == []
    assert boxes_as_list(None) == []
    arr = np.array([[1, 2, 3, 4], [5, 6, 7, 8]], dtype=np.int32)
    assert boxes_as_list(arr) == [(1, 2, 3, 4), (5, 6, 7, 8)]
    assert boxes_as_list([(1.9, 2.2, 30.7, 40.0)]) == [(2, 2, 31, 40)]


def test_xyxy_conversions():
    assert xywh_to_xyxy((10, 20, 30, 40)) == (10.0, 20.0, 40.0, 60.0)
    assert xyxy_to_xywh([10.2, 19.8, 40.1, 60.0]) == (10, 20, 30, 40)


def test_clamp_offset_keeps_patch_inside():
    assert clamp_offset(-5, 10, 100) == 0
    assert clamp_offset(95, 10, 100) == 90
    assert clamp_offset(40, 10, 100) == 40
