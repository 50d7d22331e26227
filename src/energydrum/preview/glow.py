"""Bloom for preview frames."""

import numpy as np
from PIL import Image, ImageFilter


def add_glow(
    frame: np.ndarray,
    intensity: float = 0.3,
    radius: int = 15,
) -> np.ndarray:
    """
    Screen-blend a gaussian-blurred copy so lit panels bleed light.

    Args:
        frame: (H, W, 3) uint8 RGB array.
        intensity: Glow opacity (0-1).
        radius: Blur radius in pixels.

    Returns:
        (H, W, 3) uint8 RGB array.
    """
    if intensity <= 0:
        return frame

    blurred = Image.fromarray(frame).filter(ImageFilter.GaussianBlur(radius=radius))
    a = frame.astype(np.float32) / 255.0
    b = np.asarray(blurred, dtype=np.float32) / 255.0 * intensity

    # Screen blend: 1 - (1-a)(1-b)
    return ((1.0 - (1.0 - a) * (1.0 - b)) * 255).astype(np.uint8)
