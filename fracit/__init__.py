"""Public API for parallel fractal iteration."""

from .config import IterationConfig, Result
from .dispatch import run
from .domain import Domain, Grid, RenderParameters, SamplingMetadata, locked_aspect
from .errors import ConfigurationError, DomainAccessFault, DomainShapeError, FracError, RunAborted
from .fractals import (
    Fractal,
    Mandelbrot,
    Polynomiograph,
    QuadraticJulia,
    RationalJulia,
    quadratic_orbit,
)
from .results import Results

__all__ = [
    "ConfigurationError",
    "Domain",
    "DomainAccessFault",
    "DomainShapeError",
    "FracError",
    "Fractal",
    "Grid",
    "IterationConfig",
    "Mandelbrot",
    "Polynomiograph",
    "QuadraticJulia",
    "RationalJulia",
    "RenderParameters",
    "Result",
    "Results",
    "RunAborted",
    "SamplingMetadata",
    "locked_aspect",
    "quadratic_orbit",
    "run",
]
