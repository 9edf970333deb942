from dataclasses import replace

from fretlab.component import FretboardView, HighlightConfig, HighlightView
from fretlab.config import Layout, ViewMode, init_config, toggle_interval
from fretlab.fretboard import compute_highlight_map


def test_highlight_config_ignores_layout() -> None:
    config = init_config()
    flipped = replace(config, layout=Layout.LeftHandedBassTop)
    assert HighlightConfig.extract(config) == HighlightConfig.extract(flipped)
    assert HighlightConfig.extract(config) != HighlightConfig.extract(
        toggle_interval(config, 7)
    )


def test_highlight_view_memoizes() -> None:
    """The map is recomputed only when a relevant field changes."""
    config = init_config()
    view = HighlightView.construct(config)
    original = view.highlight_map
    assert original == compute_highlight_map(config)
    assert view.handle_config(config, False) is None
    flipped = replace(config, layout=Layout.LeftHandedBassTop)
    assert view.handle_config(flipped, False) is None
    assert view.highlight_map is original
    updated = toggle_interval(config, 7)
    result = view.handle_config(updated, False)
    assert result is not None
    assert result == compute_highlight_map(updated)
    assert view.highlight_map is result
    assert view.handle_config(updated, True) == result


def test_fretboard_view() -> None:
    """Layout changes re-place cells without recomputing highlights."""
    config = init_config()
    view = FretboardView(config)
    assert view.handle_config(config, False) is None
    assert set(view.placement) == {(0, 8), (1, 3)}

    original = view.highlight_map
    flipped = replace(config, layout=Layout.RightHandedBassBottom)
    placement = view.handle_config(flipped, False)
    assert placement is not None
    assert set(placement) == {(5, 8), (4, 3)}
    assert view.highlight_map is original

    scales = replace(flipped, view_mode=ViewMode.Scales)
    placement = view.handle_config(scales, False)
    assert placement is not None
    assert len(placement) == 19
    assert view.highlight_map is not original
    assert view.handle_config(scales, True) == placement
