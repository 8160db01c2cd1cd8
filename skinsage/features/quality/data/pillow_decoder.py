# File: skinsage/features/quality/data/pillow_decoder.py
import io
import numpy as np
from PIL import Image, UnidentifiedImageError

from skinsage.core.common.exceptions import ImageDecodeError
from ..domain.interfaces import IImageDecoder

class PillowDecoder(IImageDecoder):
    def to_grayscale(self, data: bytes) -> np.ndarray:
        try:
            with Image.open(io.BytesIO(data)) as img:
                gray = img.convert("L")
            return np.asarray(gray, dtype=np.uint8)
        except (UnidentifiedImageError, OSError) as e:
            raise ImageDecodeError(f"Could not decode image ({len(data)} bytes): {e}") from e
