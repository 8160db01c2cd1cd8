# File: skinsage/features/quality/service/analyzer.py
import logging
from typing import Optional

import numpy as np

from ..data.pillow_decoder import PillowDecoder
from ..domain.interfaces import IImageDecoder
from ..domain.models import QualityThresholds, QualityResult, LandmarkEstimate, LandmarkPoint

logger = logging.getLogger(__name__)

# (name, fraction of width, fraction of height)
LANDMARK_LAYOUT = (
    ("leftEye", 0.35, 0.40),
    ("rightEye", 0.65, 0.40),
    ("nose", 0.50, 0.55),
    ("mouthLeft", 0.42, 0.70),
    ("mouthRight", 0.58, 0.70),
)


def light_score(gray: np.ndarray) -> float:
    """Mean intensity over every pixel."""
    if gray.size == 0:
        return 0.0
    return float(gray.mean(dtype=np.float64))


def laplacian_variance(gray: np.ndarray) -> float:
    """
    Population variance of the 4-neighbour Laplacian over interior pixels:
        L = -4*I(x,y) + I(x-1,y) + I(x+1,y) + I(x,y-1) + I(x,y+1)
    Images without an interior (either side < 3 px) score 0.
    """
    img = gray.astype(np.float64)
    if img.ndim != 2 or img.shape[0] < 3 or img.shape[1] < 3:
        return 0.0

    center = img[1:-1, 1:-1]
    lap = (
        -4.0 * center
        + img[1:-1, :-2]   # left
        + img[1:-1, 2:]    # right
        + img[:-2, 1:-1]   # up
        + img[2:, 1:-1]    # down
    )

    mean = lap.mean()
    variance = (lap * lap).mean() - mean * mean
    # E[L^2] - E[L]^2 can dip a hair below zero from rounding.
    return float(max(variance, 0.0))


def estimate_landmarks(width: int, height: int) -> LandmarkEstimate:
    return LandmarkEstimate(points=[
        LandmarkPoint(name=name, x=width * fx, y=height * fy)
        for name, fx, fy in LANDMARK_LAYOUT
    ])


class QualityAnalyzer:
    """
    Scores a photograph for sharpness (blur) and illumination (light).

    pose_ok is derived from those two thresholds only; no facial
    orientation is measured here.
    """

    def __init__(self,
                 thresholds: Optional[QualityThresholds] = None,
                 decoder: Optional[IImageDecoder] = None):
        self.thresholds = thresholds or QualityThresholds()
        self.decoder = decoder or PillowDecoder()

    def analyze(self, data: bytes) -> QualityResult:
        gray = self.decoder.to_grayscale(data)
        return self.analyze_array(gray)

    def analyze_array(self, gray: np.ndarray) -> QualityResult:
        height, width = gray.shape[:2]

        light = light_score(gray)
        blur = laplacian_variance(gray)
        pose_ok = blur >= self.thresholds.blur and light >= self.thresholds.light

        logger.debug(f"Quality {width}x{height}: blur={blur:.2f} light={light:.2f} pose_ok={pose_ok}")

        return QualityResult(
            blur_score=blur,
            light_score=light,
            pose_ok=pose_ok,
            landmarks=estimate_landmarks(width, height),
            width=width,
            height=height
        )

    def is_blurry(self, result: QualityResult) -> bool:
        return result.blur_score < self.thresholds.blur

    def is_underlit(self, result: QualityResult) -> bool:
        return result.light_score < self.thresholds.light
