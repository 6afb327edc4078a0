"""
Binary source image.

Foreground (stroke) pixels are True, background pixels False. Lookups outside
the image are answered as background by get_pixel_at_safe.
"""

import cv2
import numpy as np


class BinaryImage:

    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width), dtype=bool)

    @classmethod
    def from_array(cls, array):
        """Wrap a 2D array; any non-zero value counts as foreground."""
        array = np.asarray(array)
        if array.ndim != 2:
            raise ValueError(f"Binary image must be 2D, got shape {array.shape}")
        image = cls(array.shape[1], array.shape[0])
        image.pixels = array > 0
        return image

    @classmethod
    def from_rgb(cls, rgb_img, method="otsu", block_size=11, c=2):
        """
        Binarize an RGB drawing (dark strokes on light paper).

        method is "otsu" or "adaptive".
        """
        gray = cv2.cvtColor(rgb_img, cv2.COLOR_RGB2GRAY)
        if method == "adaptive":
            binary = cv2.adaptiveThreshold(
                gray,
                255,
                cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
                cv2.THRESH_BINARY_INV,
                block_size,
                c,
            )
        else:
            _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY_INV + cv2.THRESH_OTSU)
        return cls.from_array(binary)

    def get_pixel(self, x, y):
        return bool(self.pixels[y, x])

    def set_pixel(self, x, y, value):
        self.pixels[y, x] = bool(value)

    def get_pixel_at_safe(self, point):
        """Pixel value at point, False for coordinates outside the image."""
        if point.x < 0 or point.y < 0 or point.x >= self.width or point.y >= self.height:
            return False
        return bool(self.pixels[point.y, point.x])

    def copy(self):
        return BinaryImage.from_array(self.pixels.copy())

    def to_array(self):
        """uint8 copy with 255 for foreground."""
        return self.pixels.astype(np.uint8) * 255
