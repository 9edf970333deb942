"""Colors for highlighted notes.

Each of the twelve intervals above the root has its own hue; higher
octaves of the same interval get paler, lighter and more transparent.
"""

from __future__ import annotations

import colorsys
from dataclasses import dataclass
from typing import Tuple

from fretlab import constants


@dataclass(frozen=True)
class Color:
    """An RGB color with opacity."""

    red: int
    """Red channel (0-255)."""
    green: int
    """Green channel (0-255)."""
    blue: int
    """Blue channel (0-255)."""
    alpha: float = 1.0
    """Opacity (0.0-1.0)."""

    @classmethod
    def from_hsl(
        cls, hue: float, saturation: float, lightness: float, alpha: float = 1.0
    ) -> Color:
        """Create a color from hue in degrees and saturation/lightness in 0..1."""
        r, g, b = colorsys.hls_to_rgb((hue % 360.0) / 360.0, lightness, saturation)
        return cls(round(r * 255), round(g * 255), round(b * 255), alpha)

    def to_rgb(self) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    def to_hex(self) -> str:
        """Hex code such as ``"#3fbf5f"``, ignoring opacity."""
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    @property
    def luminance(self) -> float:
        """Relative luminance (0.0-1.0) following the sRGB definition."""

        def linear(channel: int) -> float:
            c = channel / 255.0
            return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

        return (
            0.2126 * linear(self.red)
            + 0.7152 * linear(self.green)
            + 0.0722 * linear(self.blue)
        )

    def contrasting_text(self) -> Color:
        """Black or white, whichever reads better on this color."""
        return BLACK if self.luminance > 0.5 else WHITE


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)

# Hue of each simple interval above the root, R through 7
_BASE_HUES: Tuple[int, ...] = (114, 55, 150, 34, 174, 185, 18, 210, 6, 224, 318, 241)
_BASE_SATURATION = 0.5

# Indexed by octave above the root, 0 through 8
_OCTAVE_SATURATIONS = (0.95, 0.90, 0.85, 0.80, 0.75, 0.70, 0.65, 0.60, 0.55)
_OCTAVE_LIGHTNESSES = (0.40, 0.45, 0.50, 0.55, 0.60, 0.65, 0.70, 0.75, 0.80)
_OCTAVE_ALPHAS = (1.00, 0.95, 0.90, 0.85, 0.80, 0.75, 0.70, 0.65, 0.60)

# Indexed by absolute octave, 0 through 8
_CHORD_OCTAVE_HSL: Tuple[Tuple[int, float, float], ...] = (
    (0, 0.8, 0.5),
    (30, 0.8, 0.5),
    (60, 0.8, 0.5),
    (120, 0.8, 0.5),
    (240, 0.8, 0.5),
    (280, 0.8, 0.5),
    (320, 0.8, 0.5),
    (180, 0.9, 0.4),
    (45, 0.9, 0.3),
)


def _clamp_octave(octave: int) -> int:
    return max(constants.MIN_OCTAVE, min(constants.MAX_OCTAVE, octave))


def color_for_degree(extended_interval: int) -> Color:
    """Color for a note given its extended interval above the root.

    Args:
        extended_interval: Semitones above the root in the lowest selected
            octave, as found in ``HighlightInfo.color_key``.

    Returns:
        The interval's hue, paler and lighter for each octave up (clamped to
        octaves 0-8).
    """
    octave = _clamp_octave(extended_interval // constants.MAX_NOTES)
    hue = _BASE_HUES[extended_interval % constants.MAX_NOTES]
    return Color.from_hsl(
        hue,
        _BASE_SATURATION * _OCTAVE_SATURATIONS[octave],
        _OCTAVE_LIGHTNESSES[octave],
        _OCTAVE_ALPHAS[octave],
    )


def color_for_chord_octave(
    octave: int, is_root: bool = False, is_bass: bool = False
) -> Color:
    """Single color per octave for monochrome chord display.

    Roots are drawn fully saturated and darker, bass notes darker still.
    """
    hue, saturation, lightness = _CHORD_OCTAVE_HSL[_clamp_octave(octave)]
    if is_root:
        saturation, lightness = 1.0, 0.4
    elif is_bass:
        lightness = 0.3
    return Color.from_hsl(hue, saturation, lightness)
