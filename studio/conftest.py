"""Shared fixtures for lvgl-studio unit tests."""

from __future__ import annotations

from typing import Callable

import pytest

from studio.model import ButtonProps, Layer, Project, Screen, Widget

# =============================================================================
# Document Builders
# =============================================================================


@pytest.fixture
def button() -> Callable[..., Widget]:
    """Factory for button widgets: ``button("a", x=10, group_id="g")``."""

    def _make(widget_id: str, layer_id: str = "layer_1", **kwargs) -> Widget:
        return Widget(
            id=widget_id,
            name=kwargs.pop("name", widget_id),
            layer_id=layer_id,
            props=ButtonProps(),
            **kwargs,
        )

    return _make


@pytest.fixture
def screen_with() -> Callable[..., Screen]:
    """Factory for screens: ``screen_with(w1, w2, layers=("a", "b"))``.

    Layers are given by id and named after it; the default is ``layer_1``.
    """

    def _make(*widgets: Widget, layers: tuple[str, ...] = ("layer_1",), **kwargs) -> Screen:
        return Screen(
            id=kwargs.pop("screen_id", "screen_1"),
            name=kwargs.pop("name", "Main Screen"),
            layers=tuple(Layer(id=lid, name=lid) for lid in layers),
            widgets=tuple(widgets),
            **kwargs,
        )

    return _make


@pytest.fixture
def project_with() -> Callable[..., Project]:
    """Wrap screens into a project with default settings."""

    def _make(*screens: Screen) -> Project:
        return Project.create().model_copy(update={"screens": tuple(screens)})

    return _make
