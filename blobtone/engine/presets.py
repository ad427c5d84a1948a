"""PresetProvider — named ShapeParams templates the compositor samples from."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from blobtone.engine.errors import InvalidParameters
from blobtone.engine.types import ShapeParams


@dataclass(frozen=True)
class Preset:
    name: str
    shape: ShapeParams


DEFAULT_PRESETS: tuple[Preset, ...] = (
    Preset("landscape", ShapeParams(width=800, height=600, point_count=6, randomness=0.5)),
    Preset("portrait", ShapeParams(width=600, height=800, point_count=8, randomness=0.4)),
    Preset("jagged", ShapeParams(width=700, height=500, point_count=10, randomness=0.7)),
    Preset("tall", ShapeParams(width=500, height=700, point_count=7, randomness=0.45)),
    Preset("banner", ShapeParams(width=900, height=400, point_count=9, randomness=0.35)),
)


class PresetProvider:
    """Ordered, bounds-checked preset list."""

    def __init__(self, presets: Iterable[Preset] | None = None) -> None:
        items = tuple(DEFAULT_PRESETS if presets is None else presets)
        names: set[str] = set()
        for preset in items:
            if preset.name in names:
                raise InvalidParameters(f"Duplicate preset name: {preset.name}")
            names.add(preset.name)
            try:
                preset.shape.validate()
            except InvalidParameters as e:
                raise InvalidParameters(f"Preset {preset.name!r}: {e}") from e
        self._presets = items

    def list(self) -> tuple[Preset, ...]:
        return self._presets

    def names(self) -> list[str]:
        return [p.name for p in self._presets]

    def get(self, name: str) -> Preset:
        for preset in self._presets:
            if preset.name == name:
                return preset
        raise KeyError(name)

    def __len__(self) -> int:
        return len(self._presets)
