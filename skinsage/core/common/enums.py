# File: skinsage/core/common/enums.py

from enum import Enum, unique

@unique
class ScanAngle(str, Enum):
    FRONT = "front"
    LEFT = "left"
    RIGHT = "right"
    LEFT45 = "left45"
    RIGHT45 = "right45"

@unique
class ScanStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETE = "complete"
    REJECTED = "rejected"

# Every scan needs exactly these five angles, in this order.
REQUIRED_ANGLES = (
    ScanAngle.FRONT,
    ScanAngle.LEFT,
    ScanAngle.RIGHT,
    ScanAngle.LEFT45,
    ScanAngle.RIGHT45,
)
