"""Transient, non-destructive previews of spans about to be edited."""

from .projector import (
    PreviewHandle,
    PreviewLeakError,
    PreviewLimitError,
    PreviewProjector,
    PreviewSurface,
)

__all__ = [
    "PreviewHandle",
    "PreviewLeakError",
    "PreviewLimitError",
    "PreviewProjector",
    "PreviewSurface",
]
