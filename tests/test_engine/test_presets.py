"""Tests for the preset provider."""

from __future__ import annotations

import pytest

from blobtone.engine.errors import InvalidParameters
from blobtone.engine.presets import DEFAULT_PRESETS, Preset, PresetProvider
from blobtone.engine.types import ShapeParams


def test_default_presets():
    provider = PresetProvider()
    assert len(provider) == 5
    assert provider.names() == ["landscape", "portrait", "jagged", "tall", "banner"]
    shapes = [(p.shape.width, p.shape.height, p.shape.point_count, p.shape.randomness) for p in provider.list()]
    assert shapes == [
        (800, 600, 6, 0.5),
        (600, 800, 8, 0.4),
        (700, 500, 10, 0.7),
        (500, 700, 7, 0.45),
        (900, 400, 9, 0.35),
    ]


def test_get_by_name():
    provider = PresetProvider()
    assert provider.get("jagged") is DEFAULT_PRESETS[2]
    with pytest.raises(KeyError):
        provider.get("missing")


def test_custom_presets_keep_order():
    custom = [
        Preset("b", ShapeParams(width=10, height=10)),
        Preset("a", ShapeParams(width=20, height=20)),
    ]
    assert PresetProvider(custom).names() == ["b", "a"]


def test_empty_provider_allowed():
    assert len(PresetProvider([])) == 0


def test_invalid_template_rejected():
    with pytest.raises(InvalidParameters, match="bad"):
        PresetProvider([Preset("bad", ShapeParams(width=10, height=10, point_count=2))])


def test_duplicate_names_rejected():
    shape = ShapeParams(width=10, height=10)
    with pytest.raises(InvalidParameters):
        PresetProvider([Preset("x", shape), Preset("x", shape)])
