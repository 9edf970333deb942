"""Components that react to fretboard configuration changes.

A component extracts the part of a ``FretboardConfig`` it depends on and only
does work when that part changes. ``HighlightView`` memoizes the highlight
map this way; ``FretboardView`` adds layout placement on top of it, so a
layout change re-places cells without recomputing highlights.
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Dict, Generic, Optional, Tuple, Type, TypeVar, override

from fretlab.config import FretboardConfig, Layout
from fretlab.fretboard import HighlightInfo, HighlightMap, compute_highlight_map

C = TypeVar("C")
"""Type variable for the root configuration type."""
X = TypeVar("X", bound="MappedComponentConfig[Any]")
"""Type variable for mapped component configuration types."""
R = TypeVar("R")
"""Type variable for component result types."""
K = TypeVar("K", bound="Component[Any, Any]")
"""Type variable for component types."""

Placement = Dict[Tuple[int, int], HighlightInfo]
"""Highlights keyed by screen (row, column)."""


class MappedComponentConfig(Generic[C], metaclass=ABCMeta):
    """Abstract base for configuration objects that can be extracted from a root config."""

    @classmethod
    @abstractmethod
    def extract(cls: Type[X], root_config: C) -> X:
        """Extract this configuration type from a root configuration.

        Args:
            root_config: The root configuration object to extract from.

        Returns:
            The extracted configuration of this type.
        """
        raise NotImplementedError()


class Component(Generic[C, R], metaclass=ABCMeta):
    """Abstract base class for components that handle configuration changes."""

    @abstractmethod
    def handle_config(self, config: C, reset: bool) -> Optional[R]:
        """Handle a configuration update.

        Args:
            config: The new configuration to apply.
            reset: Whether to process the configuration even if unchanged.

        Returns:
            Optional result from handling the configuration change.
        """
        raise NotImplementedError()


class MappedComponent(Generic[C, X, R], Component[C, R]):
    """Component that extracts its specific config from a root configuration.

    Only changes to the extracted configuration are processed.
    """

    @classmethod
    @abstractmethod
    def extract_config(cls: Type[K], root_config: C) -> X:
        """Extract this component's configuration from the root config."""
        raise NotImplementedError()

    def __init__(self, config: X) -> None:
        self._config = config

    @abstractmethod
    def handle_mapped_config(self, config: X) -> R:
        """Handle a change in the component's mapped configuration.

        Args:
            config: The new component-specific configuration.

        Returns:
            Result from handling the configuration change.
        """
        raise NotImplementedError()

    @override
    def handle_config(self, config: C, reset: bool) -> Optional[R]:
        """Handle a root configuration update by extracting relevant changes.

        Args:
            config: The new root configuration.
            reset: Whether to force processing even if config hasn't changed.

        Returns:
            The result of ``handle_mapped_config``, or None if the mapped
            configuration did not change.
        """
        sub_config = type(self).extract_config(config)
        if sub_config != self._config or reset:
            return self.handle_mapped_config(sub_config)
        else:
            return None


@dataclass(frozen=True)
class HighlightConfig(MappedComponentConfig[FretboardConfig]):
    """The part of a fretboard configuration that determines highlights.

    This is the full configuration with the layout normalized away, since
    the layout only affects where cells are drawn.
    """

    fretboard: FretboardConfig
    """The source configuration with a fixed layout."""

    @classmethod
    def extract(cls, root_config: FretboardConfig) -> HighlightConfig:
        return cls(fretboard=replace(root_config, layout=Layout.RightHandedBassTop))


class HighlightView(MappedComponent[FretboardConfig, HighlightConfig, HighlightMap]):
    """Holds the highlight map of the current configuration.

    The map is recomputed only when a highlight-relevant field changes.
    """

    @classmethod
    def construct(cls, root_config: FretboardConfig) -> HighlightView:
        return cls(cls.extract_config(root_config))

    @classmethod
    def extract_config(cls, root_config: FretboardConfig) -> HighlightConfig:
        return HighlightConfig.extract(root_config)

    def __init__(self, config: HighlightConfig) -> None:
        super().__init__(config)
        self._highlight_map = compute_highlight_map(config.fretboard)

    @property
    def highlight_map(self) -> HighlightMap:
        return self._highlight_map

    @override
    def handle_mapped_config(self, config: HighlightConfig) -> HighlightMap:
        self._config = config
        self._highlight_map = compute_highlight_map(config.fretboard)
        return self._highlight_map


class FretboardView(Component[FretboardConfig, Placement]):
    """Highlights of the current configuration, placed on screen."""

    def __init__(self, config: FretboardConfig) -> None:
        self._config = config
        self._highlights = HighlightView.construct(config)

    @property
    def highlight_map(self) -> HighlightMap:
        return self._highlights.highlight_map

    @property
    def placement(self) -> Placement:
        return self._highlights.highlight_map.placed(self._config)

    @override
    def handle_config(self, config: FretboardConfig, reset: bool) -> Optional[Placement]:
        """Apply a new configuration.

        Returns:
            The new placement, or None if nothing visible changed.
        """
        recomputed = self._highlights.handle_config(config, reset)
        if recomputed is None and config.layout == self._config.layout and not reset:
            self._config = config
            return None
        self._config = config
        return self.placement
