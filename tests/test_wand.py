import numpy as np
import pytest

from rpimocap.wand import SimMarker, VirtualFloorWand, VirtualWand


def _transform(angle=0.0, translation=(0.0, 0.0, 0.0)):
    c, s = np.cos(angle), np.sin(angle)
    matrix = np.eye(4)
    matrix[:3, :3] = [[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]]
    matrix[:3, 3] = translation
    return matrix


def test_sim_marker_defaults():
    marker = SimMarker()
    assert marker.id == 0
    assert marker.size_mm == 0
    assert np.array_equal(marker.translation, np.zeros(3))


def test_wand_identity_positions():
    size, offset = 50.0, 10.0
    markers = VirtualWand(size, offset).markers(np.eye(4))
    assert len(markers) == VirtualWand.wand_point_count
    assert np.allclose(markers[0].translation, [-size / 2.0, 0.0, 0.0])
    assert np.allclose(markers[1].translation, [offset, 0.0, 0.0])
    assert np.allclose(markers[2].translation, [size / 2.0, 0.0, 0.0])


def test_wand_translation_shifts_every_marker():
    translation = np.array([5.0, -7.0, 120.0])
    wand = VirtualWand(50.0, 10.0)
    base = wand.markers(np.eye(4))
    moved = wand.markers(_transform(translation=translation))
    for before, after in zip(base, moved):
        assert np.allclose(after.translation - before.translation, translation)


def test_wand_rotation_preserves_length():
    size = 50.0
    markers = VirtualWand(size, 10.0).markers(_transform(angle=0.7, translation=(1.0, 2.0, 3.0)))
    assert np.isclose(np.linalg.norm(markers[2].translation - markers[0].translation), size)


def test_wand_accepts_3x4_matrix():
    wand = VirtualWand(50.0, 10.0)
    full = _transform(angle=1.1, translation=(3.0, 4.0, 5.0))
    for a, b in zip(wand.markers(full), wand.markers(full[:3])):
        assert np.allclose(a.translation, b.translation)


def test_floor_wand_identity_positions():
    size = 30.0
    markers = VirtualFloorWand(size).markers(np.eye(4))
    expected = [
        [0.0, 0.0, 0.0],
        [size, 0.0, 0.0],
        [-size, 0.0, 0.0],
        [0.0, 0.0, -size],
        [0.0, 0.0, size],
    ]
    assert len(markers) == len(expected)
    for marker, point in zip(markers, expected):
        assert np.allclose(marker.translation, point)


def test_floor_wand_center_follows_translation():
    translation = (10.0, 0.0, -4.0)
    markers = VirtualFloorWand(30.0).markers(_transform(angle=0.3, translation=translation))
    assert np.allclose(markers[0].translation, translation)
    for marker in markers[1:]:
        assert np.isclose(np.linalg.norm(marker.translation - markers[0].translation), 30.0)


@pytest.mark.parametrize("shape", [(3, 3), (4, 3), (2, 2)])
def test_invalid_transform_shape(shape):
    with pytest.raises(ValueError):
        VirtualWand(50.0, 10.0).markers(np.zeros(shape))