import numpy as np
import pytest

from skinsage.core.common.exceptions import ImageDecodeError
from skinsage.features.quality.domain.models import QualityThresholds
from skinsage.features.quality.service.analyzer import QualityAnalyzer, laplacian_variance, light_score

from conftest import checkerboard

# --- Metric sanity ---

def test_flat_image_has_zero_blur_score(flat_png):
    result = QualityAnalyzer().analyze(flat_png)
    assert result.blur_score == 0.0
    assert result.light_score == pytest.approx(128.0)

def test_checkerboard_is_much_sharper_than_flat_of_same_mean():
    board = checkerboard(32, 0, 254)          # mean 127
    flat = np.full((32, 32), 127, dtype=np.uint8)

    board_score = laplacian_variance(board)
    assert laplacian_variance(flat) == 0.0
    assert board_score > 1000 * 120
    assert light_score(board) == pytest.approx(light_score(flat))

def test_laplacian_matches_hand_computed_value():
    """
    One bright pixel in a 3-row x 4-column image gives two interior
    samples: L = -36 at the pixel and +9 beside it -> variance 506.25.
    """
    img = np.zeros((3, 4), dtype=np.uint8)
    img[1, 1] = 9
    # interior pixels (1,1) and (1,2): L = -36 and L = 9
    assert laplacian_variance(img) == pytest.approx(((-36 - (-13.5)) ** 2 + (9 - (-13.5)) ** 2) / 2)

def test_images_without_interior_score_zero():
    assert laplacian_variance(np.full((2, 50), 200, dtype=np.uint8)) == 0.0
    assert laplacian_variance(np.zeros((1, 1), dtype=np.uint8)) == 0.0

def test_analysis_is_deterministic(sharp_png):
    analyzer = QualityAnalyzer()
    first = analyzer.analyze(sharp_png)
    second = analyzer.analyze(sharp_png)
    assert first.blur_score == second.blur_score
    assert first.light_score == second.light_score

# --- Pose verdict (threshold-derived) ---

def test_pose_ok_requires_both_thresholds(sharp_png, flat_png, dark_png):
    analyzer = QualityAnalyzer(QualityThresholds(blur=120, light=55))

    assert analyzer.analyze(sharp_png).pose_ok is True
    assert analyzer.analyze(flat_png).pose_ok is False   # blurry
    assert analyzer.analyze(dark_png).pose_ok is False   # underlit

def test_thresholds_are_configurable(flat_png):
    lenient = QualityAnalyzer(QualityThresholds(blur=0, light=0))
    result = lenient.analyze(flat_png)
    assert result.pose_ok is True
    assert not lenient.is_blurry(result)

def test_default_thresholds_come_from_settings():
    thresholds = QualityThresholds()
    assert thresholds.blur == 120
    assert thresholds.light == 55

# --- Landmarks placeholder ---

def test_landmarks_are_proportional_placeholders():
    result = QualityAnalyzer().analyze_array(np.zeros((200, 100), dtype=np.uint8))
    data = result.landmarks.to_dict()

    assert data["estimated"] is True
    points = {p["name"]: (p["x"], p["y"]) for p in data["points"]}
    assert list(points) == ["leftEye", "rightEye", "nose", "mouthLeft", "mouthRight"]
    assert points["leftEye"] == pytest.approx((35.0, 80.0))
    assert points["nose"] == pytest.approx((50.0, 110.0))
    assert points["mouthRight"] == pytest.approx((58.0, 140.0))

# --- Decode failures ---

def test_malformed_bytes_raise_decode_error():
    with pytest.raises(ImageDecodeError):
        QualityAnalyzer().analyze(b"definitely not an image")
