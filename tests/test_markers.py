import numpy as np
import pytest

from rpimocap.markers import DetectorParams, MarkerDetector


def _image(height=40, width=60):
    return np.zeros((height, width), dtype=np.uint8)


def test_default_params():
    params = DetectorParams()
    assert params.image_threshold == 220
    assert params.min_contour_size == 5
    assert params.max_contour_size == 500


def test_detector_uses_defaults_without_params():
    assert MarkerDetector().params == DetectorParams()


def test_empty_image_has_no_markers():
    assert MarkerDetector().detect_markers(_image()) == []


def test_zero_size_image_has_no_markers():
    assert MarkerDetector().detect_markers(np.zeros((0, 0), dtype=np.uint8)) == []


def test_threshold_is_strict():
    image = _image()
    image[5:10, 5:10] = 220
    assert MarkerDetector().detect_markers(image) == []


def test_single_pixel_marker():
    image = _image()
    image[3, 7] = 255
    assert MarkerDetector().detect_markers(image) == [(7.0, 3.0)]


def test_square_blob_centre():
    image = _image()
    image[10:21, 30:41] = 255
    markers = MarkerDetector().detect_markers(image)
    assert len(markers) == 1
    assert markers[0] == pytest.approx((35.0, 15.0))


def test_two_blobs_are_found():
    image = _image()
    image[2, 4] = 255
    image[30, 50] = 255
    markers = MarkerDetector().detect_markers(image)
    assert sorted(markers) == [(4.0, 2.0), (50.0, 30.0)]


def test_ring_yields_outer_and_hole_contours():
    image = _image()
    image[10:15, 20:25] = 255
    image[11:14, 21:24] = 0
    markers = MarkerDetector().detect_markers(image)
    assert len(markers) == 2
    for marker in markers:
        assert marker == pytest.approx((22.0, 12.0))


def test_blob_at_image_edge():
    image = _image()
    image[0:3, 0:3] = 255
    markers = MarkerDetector().detect_markers(image)
    assert markers == [pytest.approx((1.0, 1.0))]


def test_custom_threshold():
    image = _image()
    image[4, 4] = 100
    params = DetectorParams(image_threshold=50)
    assert MarkerDetector(params).detect_markers(image) == [(4.0, 4.0)]


def test_rejects_colour_image():
    with pytest.raises(ValueError):
        MarkerDetector().detect_markers(np.zeros((4, 4, 3), dtype=np.uint8))


def test_find_point_mean():
    assert MarkerDetector.find_point([(0, 0), (2, 0), (2, 2), (0, 2)]) == (1.0, 1.0)


def test_find_point_empty_contour():
    with pytest.raises(ValueError):
        MarkerDetector.find_point([])