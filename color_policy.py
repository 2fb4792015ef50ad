import colorsys
import logging

from constants import HUE_STEP, HUE_JITTER, RAINBOW_SATURATION, RAINBOW_LIGHTNESS

logger = logging.getLogger("flow_sand")


def hsl_to_rgb(hue, saturation, lightness):
    """Convert an HSL color (hue in degrees) to integer RGB channels in [0, 255]."""
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360.0, lightness, saturation)
    # Round half up, matching the usual web color conversion
    return int(r * 255 + 0.5), int(g * 255 + 0.5), int(b * 255 + 0.5)


def hex_to_rgb(hex_color):
    """Parse '#rgb' or '#rrggbb' into an (r, g, b) tuple."""
    clean = hex_color.strip().lstrip("#")
    if len(clean) == 3:
        clean = "".join(c + c for c in clean)
    if len(clean) != 6:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    try:
        value = int(clean, 16)
    except ValueError:
        raise ValueError(f"Invalid hex color: {hex_color!r}") from None
    return (value >> 16) & 255, (value >> 8) & 255, value & 255


def validate_color(color):
    """Return color as an (r, g, b) tuple of ints, rejecting out of range channels."""
    if len(color) != 3:
        raise ValueError(f"Expected an (r, g, b) color, got {color!r}")
    channels = tuple(int(c) for c in color)
    if any(c < 0 or c > 255 for c in channels):
        raise ValueError(f"Color channels must be in [0, 255], got {color!r}")
    return channels


class ColorPolicy:
    """Picks colors for spawned sand: a rotating rainbow hue or one fixed color."""
    def __init__(self, fixed_color=None):
        self.hue = 0.0
        self.fixed_color = None
        self.set_fixed_color(fixed_color)

    @property
    def is_rainbow(self):
        return self.fixed_color is None

    def set_fixed_color(self, color):
        """Select a fixed color, or None to go back to rainbow mode."""
        self.fixed_color = None if color is None else validate_color(color)
        logger.debug("Color mode set to %s", "rainbow" if self.is_rainbow else self.fixed_color)

    def color_for_cell(self, rng):
        """Color for one newly spawned cell."""
        if self.fixed_color is not None:
            return self.fixed_color
        hue = (self.hue + rng.random() * HUE_JITTER) % 360
        return hsl_to_rgb(hue, RAINBOW_SATURATION, RAINBOW_LIGHTNESS)

    def advance(self):
        """Rotate the rainbow hue after a spawn pass. Fixed mode leaves it untouched."""
        if self.is_rainbow:
            self.hue = (self.hue + HUE_STEP) % 360
