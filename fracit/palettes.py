"""Palettes mapping shading values to colors.

Palettes are plain callables taking an array of values and returning RGBA
floats in ``[0, 1]``, the same contract as a matplotlib colormap, so any
registered matplotlib colormap can be used wherever a palette is expected.
Nothing is built at import time; use the factory functions or
:func:`get_palette`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np
from matplotlib import colormaps
from matplotlib.colors import Colormap, LinearSegmentedColormap, ListedColormap, hsv_to_rgb

from .shading import Shading

RGB = tuple[float, float, float]
Palette = Callable[[np.ndarray], np.ndarray]


def hsv(hue: float, saturation: float, value: float) -> RGB:
    """Convert a hue in degrees and saturation/value in ``[0, 1]`` to RGB."""

    r, g, b = hsv_to_rgb((hue % 360.0 / 360.0, saturation, value))
    return float(r), float(g), float(b)


@dataclass(frozen=True)
class SpectralPalette:
    """Sweep the hue circle, starting at red, over ``sweep`` degrees."""

    sweep: float = 360.0

    def __call__(self, values: np.ndarray) -> np.ndarray:
        values = np.asarray(values, dtype=np.float64)
        hues = (values * self.sweep / 360.0) % 1.0
        ones = np.ones_like(hues)
        rgb = hsv_to_rgb(np.stack((hues, ones, ones), axis=-1))
        return np.concatenate((rgb, ones[..., None]), axis=-1)


@dataclass(frozen=True)
class BandedPalette:
    """Discrete bands of color spread evenly over ``[0, 1]``."""

    colors: tuple[RGB, ...]
    name: str = "bands"

    @property
    def colormap(self) -> Colormap:
        return ListedColormap(list(self.colors), name=self.name)

    def __call__(self, values: np.ndarray) -> np.ndarray:
        return np.asarray(self.colormap(np.asarray(values, dtype=np.float64)))


def uniform_bands(*colors: RGB, name: str = "bands") -> BandedPalette:
    if not colors:
        raise ValueError("a banded palette needs at least one color")
    return BandedPalette(colors=tuple(colors), name=name)


def blended(bands: BandedPalette) -> Colormap:
    """Interpolate linearly between the bands of ``bands``."""

    colors = list(bands.colors)
    if len(colors) == 1:
        colors = colors * 2
    return LinearSegmentedColormap.from_list(f"{bands.name}_blend", colors)


@dataclass(frozen=True)
class PeriodicPalette:
    """Blend through ``bands`` once every ``period`` iterations.

    Periodic palettes read raw smooth iteration counts, so :func:`colorize`
    skips percentile normalization for them.
    """

    period: float
    bands: BandedPalette
    periodic: bool = True

    def __call__(self, values: np.ndarray) -> np.ndarray:
        values = np.asarray(values, dtype=np.float64)
        phase = np.mod(values / self.period, 1.0)
        return np.asarray(blended(self.bands)(phase))


def spectrum() -> SpectralPalette:
    return SpectralPalette(sweep=360.0)


def pretty_bands() -> BandedPalette:
    """Bands of blue, brown, and cream hues."""

    return uniform_bands(
        hsv(24.0, 0.38, 0.33),
        hsv(158.0, 0.48, 0.73),
        hsv(58.0, 0.72, 0.83),
        hsv(58.0, 0.32, 0.95),
        hsv(24.0, 0.86, 0.97),
        name="pretty_bands",
    )


def pretty_bands2() -> BandedPalette:
    """Like :func:`pretty_bands` with some extra orange tones."""

    return uniform_bands(
        hsv(27.0, 0.75, 0.25),
        hsv(188.0, 0.35, 0.82),
        hsv(175.0, 0.13, 0.91),
        hsv(35.0, 0.17, 0.85),
        hsv(52.0, 0.06, 1.00),
        name="pretty_bands2",
    )


def bw_bands() -> BandedPalette:
    return uniform_bands(hsv(0.0, 0.0, 0.0), hsv(0.0, 0.0, 1.0), name="bw_bands")


def pretty_blends() -> Colormap:
    return blended(pretty_bands())


def pretty_blends2() -> Colormap:
    return blended(pretty_bands2())


def bw_blends() -> Colormap:
    return blended(bw_bands())


def pretty_periodic() -> PeriodicPalette:
    return PeriodicPalette(period=1.0, bands=pretty_bands())


def pretty_periodic2() -> PeriodicPalette:
    return PeriodicPalette(period=10.0, bands=pretty_bands2())


def bw_stripes() -> PeriodicPalette:
    """Black and white stripes, one per iteration."""

    return PeriodicPalette(period=1.0, bands=bw_bands())


PALETTES: dict[str, Callable[[], Palette]] = {
    "spectrum": spectrum,
    "pretty_bands": pretty_bands,
    "pretty_bands2": pretty_bands2,
    "bw_bands": bw_bands,
    "pretty_blends": pretty_blends,
    "pretty_blends2": pretty_blends2,
    "bw_blends": bw_blends,
    "pretty_periodic": pretty_periodic,
    "pretty_periodic2": pretty_periodic2,
    "bw_stripes": bw_stripes,
}


def get_palette(name: str) -> Palette:
    """Build the named palette, falling back to matplotlib's colormaps."""

    factory = PALETTES.get(name)
    if factory is not None:
        return factory()
    try:
        return colormaps[name]
    except KeyError as exc:
        raise ValueError(f"unknown palette or colormap '{name}'") from exc


def parse_hex_color(hex_color: str) -> RGB:
    """Parse ``#RRGGBB`` into RGB floats in ``[0, 1]``."""

    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError('colors must be in the form #RRGGBB.')
    try:
        r, g, b = (int(hex_color[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
    except ValueError as exc:
        raise ValueError('colors must contain only hexadecimal digits.') from exc
    return r, g, b


def colorize(
    shading: Shading,
    palette: Palette,
    *,
    normalize: str = "outside",
    gamma: float = 0.85,
    clip_low: float = 0.5,
    clip_high: float = 99.5,
    invert: bool = False,
    inside_color: RGB = (0.0, 0.0, 0.0),
) -> np.ndarray:
    """Map ``shading`` through ``palette`` into an RGBA ``uint8`` image.

    Values are clipped to the ``clip_low``/``clip_high`` percentiles of the
    escaped samples (``normalize="outside"``) or of every sample
    (``normalize="all"``), rescaled to ``[0, 1]`` and gamma corrected. Inside
    samples are painted ``inside_color``.
    """

    if normalize not in ("outside", "all"):
        raise ValueError(f"unknown normalization '{normalize}'")

    inside = shading.inside
    v = shading.smooth.astype(np.float64, copy=True)
    eps = 1e-12

    if not getattr(palette, "periodic", False):
        selection = v[~inside] if normalize == "outside" else v
        if selection.size:
            lo = np.percentile(selection, clip_low)
            hi = np.percentile(selection, clip_high)
            hi = max(hi, lo + eps)
            v = (np.clip(v, lo, hi) - lo) / (hi - lo)
        else:
            v.fill(0.0)
        v = np.clip(v, 0.0, 1.0) ** gamma

    palette_input = 1.0 - v if invert else v
    rgba = np.array(palette(palette_input), dtype=np.float64, copy=True)

    for k in (0, 1, 2):
        rgba[..., k] = np.where(inside, inside_color[k], rgba[..., k])
    rgba[..., 3] = 1.0
    return np.uint8(np.clip(rgba * 255, 0, 255))
