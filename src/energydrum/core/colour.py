"""
Integer colour-space helpers.

HSV values are kept in the integer units the panel firmware uses:
hue in degrees [0, 360), saturation and value in percent. RGB channels
may exceed 255 on input and output; callers clamp before display.
"""

import colorsys

Colour = tuple[int, int, int]


def rgb_to_hsv(rgb: Colour) -> tuple[int, int, int]:
    """Convert an RGB triple to integer (hue degrees, sat %, value %)."""
    r, g, b = rgb
    h, s, v = colorsys.rgb_to_hsv(r / 255.0, g / 255.0, b / 255.0)
    return round(h * 360) % 360, round(s * 100), round(v * 100)


def hsv_to_rgb(hsv: tuple[int, int, int]) -> Colour:
    """Convert integer (hue degrees, sat %, value %) back to RGB, truncating."""
    h, s, v = hsv
    r, g, b = colorsys.hsv_to_rgb((h % 360) / 360.0, s / 100.0, v / 100.0)
    return int(r * 255), int(g * 255), int(b * 255)


def rotate_hue(rgb: Colour, degrees: int, value_boost: int = 10) -> Colour:
    """
    Shift the hue of a colour and brighten it.

    The value channel is wrapped modulo 360 like the hue. Value never
    reaches 360 for channels in the displayable range, so in practice
    the boost only brightens; keep the wrap if the conversion changes.
    """
    h, s, v = rgb_to_hsv(rgb)
    h = (h + degrees) % 360
    v = (v + value_boost) % 360
    return hsv_to_rgb((h, s, v))


def clamp_colour(rgb, maximum: int = 255) -> Colour:
    """Truncate channels to int and cap them at ``maximum``."""
    return tuple(min(int(c), maximum) for c in rgb)


def scale_colour(rgb: Colour, factor: float) -> Colour:
    """Multiply each channel by ``factor`` and truncate; may exceed 255."""
    return tuple(int(c * factor) for c in rgb)
