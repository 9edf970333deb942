import pytest

from fretlab.color import (
    BLACK,
    WHITE,
    Color,
    color_for_chord_octave,
    color_for_degree,
)


def test_from_hsl() -> None:
    assert Color.from_hsl(0, 1.0, 0.5) == Color(255, 0, 0)
    assert Color.from_hsl(120, 1.0, 0.5).to_rgb() == (0, 255, 0)
    assert Color.from_hsl(480, 1.0, 0.5).to_rgb() == (0, 255, 0)
    assert Color.from_hsl(0, 0.0, 1.0, 0.5) == Color(255, 255, 255, 0.5)


def test_hex_and_contrast() -> None:
    assert Color(63, 191, 95).to_hex() == "#3fbf5f"
    assert WHITE.luminance == pytest.approx(1.0)
    assert BLACK.luminance == pytest.approx(0.0)
    assert WHITE.contrasting_text() == BLACK
    assert BLACK.contrasting_text() == WHITE


def test_degree_colors() -> None:
    """Each interval has its own hue; octaves fade the same hue."""
    roots = [color_for_degree(12 * octave) for octave in range(9)]
    assert len({c.to_rgb() for c in roots}) == 9
    assert [c.alpha for c in roots] == sorted((c.alpha for c in roots), reverse=True)
    assert roots[0].alpha == 1.0
    assert len({color_for_degree(i).to_rgb() for i in range(12)}) == 12


def test_degree_colors_clamp() -> None:
    assert color_for_degree(12 * 20 + 7) == color_for_degree(12 * 8 + 7)


def test_chord_octave_colors() -> None:
    plain = color_for_chord_octave(3)
    root = color_for_chord_octave(3, is_root=True)
    bass = color_for_chord_octave(3, is_bass=True)
    assert len({plain, root, bass}) == 3
    assert root == Color.from_hsl(120, 1.0, 0.4)
    assert color_for_chord_octave(-2) == color_for_chord_octave(0)
    assert bass.luminance < plain.luminance
