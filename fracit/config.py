"""Iteration settings and per-point records shared by every fractal."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .errors import ConfigurationError


@dataclass
class IterationConfig:
    """Settings read by a fractal while it iterates a point.

    ``radius`` is the bailout radius and ``max_iterations`` the count at which
    an orbit that has not escaped (or converged) is given up on. ``degree`` is
    the degree of the iterated map; its inverse logarithm is cached in
    ``inv_log_degree`` for smooth-coloring normalization.
    """

    radius: float = math.inf
    max_iterations: int = 1
    degree: float = 2.0
    inv_log_degree: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.set_max_iterations(self.max_iterations)
        self.set_degree(self.degree)

    def set_radius(self, radius: float) -> None:
        self.radius = radius

    def set_max_iterations(self, n: int) -> None:
        if n < 1:
            raise ConfigurationError("the maximum iteration count must be greater than zero")
        self.max_iterations = n

    def set_degree(self, degree: float) -> None:
        self.degree = degree
        self.inv_log_degree = 1.0 / math.log(degree)


@dataclass(frozen=True)
class Result:
    """Outcome of iterating a single sample point."""

    z: complex
    c: complex
    iterations: int
    smooth_factor: float = 0.0
