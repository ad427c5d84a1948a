"""Engine error taxonomy.

InvalidParameters   — precondition violations, raised before any generation work.
MalformedBoundary   — a path that cannot be parsed or flattened.
LayerGenerationFailure — wraps either of the above, scoped to one compositor layer.
"""

from __future__ import annotations


class BlobtoneError(Exception):
    """Base class for all engine errors."""


class InvalidParameters(BlobtoneError, ValueError):
    """Malformed ShapeParams / HalftoneParams / compositor configuration."""


class MalformedBoundary(BlobtoneError, ValueError):
    """A produced or supplied boundary path cannot be parsed or flattened."""


class LayerGenerationFailure(BlobtoneError):
    """Generation of a single compositor layer failed."""

    def __init__(self, layer_id: str, cause: BlobtoneError) -> None:
        self.layer_id = layer_id
        self.cause = cause
        super().__init__(f"{layer_id}: {type(cause).__name__}: {cause}")
