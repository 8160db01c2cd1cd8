# File: skinsage/features/quality/domain/models.py
from dataclasses import dataclass, field
from typing import Any, Dict, List

from skinsage.core.config.settings import settings

@dataclass(frozen=True)
class QualityThresholds:
    """
    Cut-offs below which an image is flagged.
    Defaults come from BLUR_THRESHOLD / LIGHT_THRESHOLD.
    """
    blur: float = field(default_factory=lambda: settings.BLUR_THRESHOLD)
    light: float = field(default_factory=lambda: settings.LIGHT_THRESHOLD)

@dataclass(frozen=True)
class LandmarkPoint:
    name: str
    x: float
    y: float

@dataclass(frozen=True)
class LandmarkEstimate:
    """
    Placeholder face landmarks at fixed proportions of the frame.
    Not a detection: the coordinates carry no geometric meaning.
    """
    points: List[LandmarkPoint]
    estimated: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "estimated": self.estimated,
            "points": [{"name": p.name, "x": p.x, "y": p.y} for p in self.points],
        }

@dataclass(frozen=True)
class QualityResult:
    blur_score: float
    light_score: float
    # Threshold-derived; not a facial orientation measurement.
    pose_ok: bool
    landmarks: LandmarkEstimate
    width: int = 0
    height: int = 0
