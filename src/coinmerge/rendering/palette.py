from typing import Optional, Tuple

from coinmerge.constants import DEFAULT_FILL, VALUE_COLORS

RGB = Tuple[int, int, int]


def color_for(value: Optional[int]) -> RGB:
    if value is None:
        return DEFAULT_FILL
    return VALUE_COLORS.get(value, DEFAULT_FILL)


def text_color_for(bg: RGB) -> RGB:
    """Black on light backgrounds, white on dark ones (perceived brightness)."""
    r, g, b = bg
    brightness = (r * 299 + g * 587 + b * 114) / 1000
    return (0, 0, 0) if brightness > 160 else (255, 255, 255)
