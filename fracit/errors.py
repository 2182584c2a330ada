"""Exceptions raised by the fractal engine."""

from __future__ import annotations


class FracError(Exception):
    """Base class for every error raised by :mod:`fracit`."""


class ConfigurationError(FracError, ValueError):
    """An iteration setting is out of range."""


class DomainShapeError(FracError, ValueError):
    """The sampled domain or the result store has an unusable shape."""


class DomainAccessFault(FracError, LookupError):
    """A sample point could not be obtained from the domain."""

    def __init__(self, col: int, row: int, message: str | None = None) -> None:
        self.col = col
        self.row = row
        super().__init__(message or f"no sample at column {col}, row {row}")


class RunAborted(FracError):
    """One or more workers failed and the run was cancelled.

    ``faults`` holds every fault captured before the workers stopped, in the
    order they were recorded.
    """

    def __init__(self, faults: list[DomainAccessFault]) -> None:
        self.faults = list(faults)
        first = self.faults[0] if self.faults else None
        detail = f": {first}" if first is not None else ""
        super().__init__(f"run aborted after {len(self.faults)} fault(s){detail}")
