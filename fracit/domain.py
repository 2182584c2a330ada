"""Sampling grids over a window of the complex plane."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Protocol

import numpy as np

from .errors import DomainAccessFault


class Domain(Protocol):
    """A rectangular set of sample points addressed by column and row."""

    def dimensions(self) -> tuple[int, int]:
        """Return ``(rows, cols)``."""
        ...

    def at(self, col: int, row: int) -> complex:
        ...


@dataclass(frozen=True)
class RenderParameters:
    """Window of the complex plane to sample and the sampling resolution."""

    x_res: int
    y_res: int
    x_center: float
    y_center: float
    x_width: float
    y_width: float


@dataclass(frozen=True)
class SamplingMetadata:
    """Metadata describing the sampling grid of a window.

    Row 0 lies on the top edge of the window, so ``y`` decreases with the row
    index the same way image rows run downwards.
    """

    x_min: float
    y_max: float
    x_step: float
    y_step: float
    x_res: int
    y_res: int


def locked_aspect(params: RenderParameters) -> RenderParameters:
    """Rescale the window height so that pixels are square."""

    if params.x_res <= 0:
        return params
    aspect = np.float64(params.y_res) / np.float64(params.x_res)
    return replace(params, y_width=float(np.float64(params.x_width) * aspect))


def compute_metadata(params: RenderParameters) -> SamplingMetadata:
    x_res = int(params.x_res)
    y_res = int(params.y_res)

    x_width = np.float64(params.x_width)
    y_width = np.float64(params.y_width)
    x_center = np.float64(params.x_center)
    y_center = np.float64(params.y_center)

    x_min = x_center - x_width / 2.0
    y_max = y_center + y_width / 2.0

    x_step = np.float64(x_width / (x_res - 1)) if x_res > 1 else np.float64(0.0)
    y_step = np.float64(y_width / (y_res - 1)) if y_res > 1 else np.float64(0.0)

    return SamplingMetadata(
        x_min=float(x_min),
        y_max=float(y_max),
        x_step=float(x_step),
        y_step=float(y_step),
        x_res=x_res,
        y_res=y_res,
    )


def pixel_to_complex(metadata: SamplingMetadata, row: int, col: int) -> complex:
    x = np.float64(metadata.x_min) + np.float64(col) * np.float64(metadata.x_step)
    y = np.float64(metadata.y_max) - np.float64(row) * np.float64(metadata.y_step)
    return complex(float(x), float(y))


class Grid:
    """Evenly spaced samples of a window, ``x_res`` columns by ``y_res`` rows."""

    def __init__(self, params: RenderParameters) -> None:
        self.params = params
        self.metadata = compute_metadata(params)

    @classmethod
    def from_window(
        cls,
        x_center: float,
        y_center: float,
        x_width: float,
        y_width: float,
        x_res: int,
        y_res: int,
    ) -> "Grid":
        return cls(
            RenderParameters(
                x_res=x_res,
                y_res=y_res,
                x_center=x_center,
                y_center=y_center,
                x_width=x_width,
                y_width=y_width,
            )
        )

    def dimensions(self) -> tuple[int, int]:
        return self.metadata.y_res, self.metadata.x_res

    def at(self, col: int, row: int) -> complex:
        rows, cols = self.dimensions()
        if not (0 <= col < cols and 0 <= row < rows):
            raise DomainAccessFault(col, row, f"sample ({col}, {row}) is outside a {cols}x{rows} grid")
        return pixel_to_complex(self.metadata, row, col)

    def points(self) -> np.ndarray:
        """Return every sample as a ``(rows, cols)`` complex array."""

        rows, cols = self.dimensions()
        cols_idx = np.arange(max(cols, 0), dtype=np.float64)
        rows_idx = np.arange(max(rows, 0), dtype=np.float64)
        x = np.float64(self.metadata.x_min) + cols_idx * np.float64(self.metadata.x_step)
        y = np.float64(self.metadata.y_max) - rows_idx * np.float64(self.metadata.y_step)
        X, Y = np.meshgrid(x, y)
        return X + 1j * Y
