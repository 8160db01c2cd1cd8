# File: skinsage/features/quality/domain/interfaces.py
from abc import ABC, abstractmethod
import numpy as np

class IImageDecoder(ABC):
    """
    Abstracts image decoding so the scoring math
    doesn't depend on a specific imaging library.
    """
    @abstractmethod
    def to_grayscale(self, data: bytes) -> np.ndarray:
        """
        Returns a 2-D (height, width) array of 0-255 intensities.
        Raises ImageDecodeError for bytes that are not an image.
        """
        pass
