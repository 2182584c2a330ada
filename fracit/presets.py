"""Ready-made fractals."""

from __future__ import annotations

from .fractals import CCMap, Fractal, Mandelbrot, Polynomiograph, QuadraticJulia, RationalJulia

FRACTALS = ("mandelbrot", "julia", "rational-julia", "newton", "halley", "mandel-newton")


def _identity(c: complex) -> complex:
    return c


def _zero(loc: complex) -> complex:
    return 0j


def newton_map(order: int) -> CCMap:
    """Newton's method for the roots of ``z**order - 1``."""

    def b(z: complex) -> complex:
        return z - (z ** order - 1) / (order * z ** (order - 1))

    return b


def halley_map(order: int) -> CCMap:
    """Halley's method for the roots of ``z**order - 1``."""

    def b(z: complex) -> complex:
        p = z ** order - 1
        dp = order * z ** (order - 1)
        ddp = order * (order - 1) * z ** (order - 2)
        return z - 2 * p * dp / (2 * dp * dp - p * ddp)

    return b


def newton(order: int = 3, eps: float = 1e-6) -> Polynomiograph:
    return Polynomiograph(eps, newton_map(order), _zero, _identity)


def halley(order: int = 3, eps: float = 1e-6) -> Polynomiograph:
    return Polynomiograph(eps, halley_map(order), _zero, _identity)


def mandel_newton(order: int = 3, eps: float = 1e-6) -> Polynomiograph:
    """Newton's method shifted by the sample point, the shift halving every step."""

    return Polynomiograph(eps, newton_map(order), _identity, lambda c: c / 2)


def mcmullen(lam: complex) -> tuple[CCMap, CCMap]:
    """Numerator and denominator of ``z**2 + lam / z**2``."""

    def p(z: complex) -> complex:
        return z ** 4 + lam

    def q(z: complex) -> complex:
        return z ** 2

    return p, q


def build_fractal(
    name: str,
    *,
    radius: float = 4.0,
    c: complex = 0j,
    eps: float = 1e-6,
    order: int = 3,
    lam: complex = 0.01,
) -> Fractal:
    if name == "mandelbrot":
        return Mandelbrot(radius)
    if name == "julia":
        return QuadraticJulia(radius, c)
    if name == "rational-julia":
        p, q = mcmullen(lam)
        return RationalJulia(radius, p, q, c)
    if name == "newton":
        return newton(order, eps)
    if name == "halley":
        return halley(order, eps)
    if name == "mandel-newton":
        return mandel_newton(order, eps)
    raise ValueError(f"unknown fractal '{name}'. Valid choices: {', '.join(FRACTALS)}.")


def is_escape_time(fractal: Fractal) -> bool:
    """Whether ``fractal`` counts steps to divergence rather than to convergence."""

    return not isinstance(fractal, Polynomiograph)
