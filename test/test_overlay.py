# test/test_overlay.py
import numpy as np

from face_filter.overlay import (
    OverlayAssets,
    apply_glasses,
    apply_mustache,
    prepare_glasses,
    prepare_mustache,
)
from face_filter.overlay.glasses import adjust_reflection, edge_effect_mask, reflection_texture
from face_filter.pipeline import FilterSettings, apply_filters


def _glasses_picture():
    """White 40x100 picture: black frame band on top, grey lenses below."""
    img = np.full((40, 100, 3), 255, dtype=np.uint8)
    img[0:10, :] = (0, 0, 200)      # frame: red channel >= 55
    img[10:40, 10:45] = (30, 30, 30)  # left lens: dark, red < 55
    img[10:40, 55:90] = (30, 30, 30)  # right lens
    return img


def _mustache_picture(with_dot=True):
    img = np.full((20, 60, 3), 255, dtype=np.uint8)
    img[10:20, 5:55] = (20, 20, 20)
    if with_dot:
        img[2:5, 29:32] = (0, 0, 255)
    return img


def test_glasses_masks_split_frame_and_lens():
    g = prepare_glasses(_glasses_picture())
    assert g.whole_mask[5, 50] == 255 and g.frame_mask[5, 50] == 255
    assert g.whole_mask[20, 20] == 255 and g.frame_mask[20, 20] == 0
    assert g.whole_mask[20, 50] == 0
    assert abs(g.aspect - 2.5) < 1e-9


def test_adjust_reflection_range():
    img = np.full((4, 4, 3), 100, dtype=np.uint8)
    assert (adjust_reflection(img, 0) == 50).all()
    assert (adjust_reflection(img, 100) == 122).all()


def test_reflection_texture_size():
    refl = np.random.default_rng(0).integers(0, 255, (30, 40, 3), dtype=np.uint8)
    assert reflection_texture(refl, (50, 20)).shape == (20, 50, 3)


def test_glasses_placed_on_eye_line():
    frame = np.full((480, 640, 3), 128, dtype=np.uint8)
    refl = np.full((30, 40, 3), 200, dtype=np.uint8)
    drawn = apply_glasses(frame, prepare_glasses(_glasses_picture()), refl, [(100, 100, 200, 200)], glasses_alpha=100)
    assert drawn == 1
    # glasses are 200x80, centered on y = 100 + 0.41*200 = 182 -> rows 142..221
    assert (frame[150, 200] == (0, 0, 200)).all()           # frame band, fully opaque
    assert (frame[100, 200] == 128).all()                   # above the glasses untouched
    assert (frame[230, 200] == 128).all()                   # below untouched


def test_glasses_lens_alpha_zero_keeps_background():
    frame = np.full((480, 640, 3), 128, dtype=np.uint8)
    refl = np.full((30, 40, 3), 200, dtype=np.uint8)
    apply_glasses(frame, prepare_glasses(_glasses_picture()), refl, [(100, 100, 200, 200)], glasses_alpha=0)
    # a lens pixel: x in 100 + [20, 90), y in 142 + [20, 80)
    assert (frame[200, 140] == 128).all()


def test_glasses_clamped_at_frame_border():
    frame = np.full((200, 300, 3), 128, dtype=np.uint8)
    refl = np.full((30, 40, 3), 200, dtype=np.uint8)
    drawn = apply_glasses(frame, prepare_glasses(_glasses_picture()), refl, [(250, -60, 100, 100)], glasses_alpha=100)
    assert drawn == 1
    assert frame.shape == (200, 300, 3)
    assert (frame[0:5, 200:300] == (0, 0, 200)).all(axis=-1).any()


def test_glasses_skip_degenerate_and_oversized_boxes():
    frame = np.full((100, 100, 3), 128, dtype=np.uint8)
    refl = np.full((30, 40, 3), 200, dtype=np.uint8)
    g = prepare_glasses(_glasses_picture())
    assert apply_glasses(frame, g, refl, [(10, 10, 0, 0), (0, 0, 500, 500)]) == 0
    assert (frame == 128).all()


def test_glasses_with_effect_keeps_shape_and_dtype():
    frame = np.full((480, 640, 3), 128, dtype=np.uint8)
    refl = np.full((30, 40, 3), 200, dtype=np.uint8)
    effect = np.zeros((50, 50, 3), dtype=np.uint8)
    effect[:, 25:] = 255
    apply_glasses(
        frame, prepare_glasses(_glasses_picture()), refl, [(100, 100, 200, 200)],
        glasses_alpha=50, effect_bgr=effect, effect_intensity=50,
    )
    assert frame.dtype == np.uint8
    assert frame.shape == (480, 640, 3)


def test_edge_effect_mask_is_normalized():
    effect = np.zeros((50, 50, 3), dtype=np.uint8)
    effect[:, 25:] = 255
    m = edge_effect_mask(effect, (40, 20))
    assert m.shape == (20, 40)
    assert m.min() >= 0.0 and m.max() <= 1.0
    assert m.max() > 0.5


def test_mustache_anchor_from_red_dot():
    m = prepare_mustache(_mustache_picture())
    assert m.anchor == (30, 3)
    # dot erased from the picture and counted as mustache
    assert (m.image[3, 30] == 0).all()
    assert m.mask[3, 30] == 255


def test_mustache_anchor_defaults_to_center():
    m = prepare_mustache(_mustache_picture(with_dot=False))
    assert m.anchor == (30, 10)


def test_mustache_drawn_under_nose():
    frame = np.full((480, 640, 3), 200, dtype=np.uint8)
    m = prepare_mustache(_mustache_picture())
    assert apply_mustache(frame, m, [(100, 100, 200, 200)]) == 1
    # 120x40 mustache, x from 140; dot row scaled 3 -> 6, top at 100 + 130 - 6 = 224
    assert (frame[250, 200] == 20).all()
    assert (frame[226, 150] == 200).all()
    assert (frame[250, 100] == 200).all()


def test_apply_filters_follows_settings():
    frame = np.full((480, 640, 3), 200, dtype=np.uint8)
    assets = OverlayAssets(
        glasses=prepare_glasses(_glasses_picture()),
        reflections=[None, np.full((30, 40, 3), 90, dtype=np.uint8)],
        effects=[None],
        mustaches=[None, prepare_mustache(_mustache_picture())],
    )
    untouched = frame.copy()
    apply_filters(frame, [(100, 100, 200, 200)], FilterSettings(), assets)
    assert (frame == untouched).all()

    apply_filters(frame, [(100, 100, 200, 200)], FilterSettings(glasses=1, glasses_alpha=100, mustache=1), assets)
    assert (frame[150, 200] == (0, 0, 200)).all()
    assert (frame[250, 200] == 20).all()


def test_asset_index_out_of_range_is_none():
    assets = OverlayAssets()
    assert assets.reflection(0) is None
    assert assets.reflection(3) is None
    assert assets.mustache(-1) is None
