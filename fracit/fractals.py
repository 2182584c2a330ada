"""Iteration rules that map a point of the complex plane to a :class:`Result`."""

from __future__ import annotations

from typing import Callable, Protocol

import numpy as np

from .config import IterationConfig, Result

CCMap = Callable[[complex], complex]


class Fractal(Protocol):
    """Anything the dispatcher can evaluate over a domain."""

    @property
    def config(self) -> IterationConfig:
        ...

    def set_max_iterations(self, n: int) -> None:
        ...

    def evaluate(self, point: complex) -> Result:
        ...


def _mod2(z: complex) -> float:
    return z.real * z.real + z.imag * z.imag


def quadratic_orbit(z: complex, c: complex, config: IterationConfig) -> Result:
    """Iterate ``z -> z**2 + c`` until ``z`` leaves the bailout disc.

    The squared modulus is tested before every step, and at most
    ``config.max_iterations - 1`` steps are applied, so the returned count is
    both the number of steps taken and within ``[0, max_iterations - 1]``.
    """

    r2 = config.radius * config.radius
    max_it = config.max_iterations - 1
    count = 0
    while _mod2(z) <= r2 and count < max_it:
        z = z * z + c
        count += 1
    return Result(z=z, c=c, iterations=count)


def is_cardioid_or_p2_bulb(c: complex) -> bool:
    """Detect points in the main cardioid or the period-2 bulb of the Mandelbrot set."""

    re = c.real
    im2 = c.imag * c.imag

    p = re - 0.25
    q = p * p + im2
    if q * (q + p) <= 0.25 * im2:
        return True

    return (re + 1.0) * (re + 1.0) + im2 <= 0.0625


class _Configured:
    """Owns the iteration settings of one fractal instance."""

    def __init__(self, radius: float = np.inf, degree: float = 2.0) -> None:
        self._config = IterationConfig(radius=radius, degree=degree)

    @property
    def config(self) -> IterationConfig:
        return self._config

    def set_max_iterations(self, n: int) -> None:
        self._config.set_max_iterations(n)


class Mandelbrot(_Configured):
    """The Mandelbrot set: iterate ``z**2 + c`` from ``z = 0`` for every ``c``."""

    def __init__(self, radius: float) -> None:
        super().__init__(radius=radius, degree=2.0)

    def evaluate(self, point: complex) -> Result:
        point = complex(point)
        if is_cardioid_or_p2_bulb(point):
            return Result(z=point, c=0j, iterations=self._config.max_iterations - 1)
        return quadratic_orbit(0j, point, self._config)


class QuadraticJulia(_Configured):
    """The quadratic Julia set of ``z**2 + c`` for a fixed parameter ``c``."""

    def __init__(self, radius: float, c: complex) -> None:
        super().__init__(radius=radius, degree=2.0)
        self.c = complex(c)

    def evaluate(self, point: complex) -> Result:
        return quadratic_orbit(complex(point), self.c, self._config)


class RationalJulia(_Configured):
    """Julia set of the rational map ``p(z) / q(z) + c``.

    A vanishing denominator or an overflowing orbit yields an infinite or NaN
    iterate, which the modulus test treats as escaped.
    """

    def __init__(self, radius: float, p: CCMap, q: CCMap, c: complex, degree: float = 2.0) -> None:
        super().__init__(radius=radius, degree=degree)
        self.p = p
        self.q = q
        self.c = complex(c)

    def evaluate(self, point: complex) -> Result:
        radius = self._config.radius
        max_it = self._config.max_iterations - 1
        c = np.complex128(self.c)
        z = np.complex128(point)
        count = 0
        with np.errstate(all="ignore"):
            while np.abs(z) <= radius and count < max_it:
                z = np.complex128(self.p(z)) / np.complex128(self.q(z)) + c
                count += 1
        return Result(z=complex(z), c=self.c, iterations=count)


class Polynomiograph(_Configured):
    """Root-finding iteration visualized by its basins of convergence.

    ``b`` is a root-finding map of the Newton/Halley family, ``f`` maps the
    sample point to the initial shift and ``g`` advances the shift after each
    step::

        z_{n+1} = b(z_n) - c_n
        c_{n+1} = g(c_n)

    Iteration stops once two successive iterates are closer than ``eps``.
    See Kalantari et al., https://www.tandfonline.com/doi/full/10.1080/17513472.2019.1600959
    """

    def __init__(self, eps: float, b: CCMap, f: CCMap, g: CCMap) -> None:
        super().__init__()
        self.eps = eps
        self.b = b
        self.f = f
        self.g = g

    def evaluate(self, point: complex) -> Result:
        max_it = self._config.max_iterations - 1
        z = np.complex128(point)
        count = 0
        with np.errstate(all="ignore"):
            c = np.complex128(self.f(z))
            while count < max_it:
                z_next = np.complex128(self.b(z)) - c
                if np.abs(z_next - z) < self.eps:
                    break
                c = np.complex128(self.g(c))
                z = z_next
                count += 1
        return Result(z=complex(z), c=complex(c), iterations=count)
