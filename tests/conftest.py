"""Shared fixtures for the fracit test suite."""

import pytest

from fracit import DomainAccessFault, Grid


class FaultyDomain:
    """Grid wrapper that fails to produce samples on some rows."""

    def __init__(self, grid, bad_rows, exc_type=DomainAccessFault):
        self.grid = grid
        self.bad_rows = set(bad_rows)
        self.exc_type = exc_type
        self.calls = 0

    def dimensions(self):
        return self.grid.dimensions()

    def at(self, col, row):
        self.calls += 1
        if row in self.bad_rows:
            if self.exc_type is DomainAccessFault:
                raise DomainAccessFault(col, row)
            raise self.exc_type(f"row {row} is unavailable")
        return self.grid.at(col, row)


@pytest.fixture
def small_grid():
    """A 9x7 window over the Mandelbrot set."""
    return Grid.from_window(-0.75, 0.0, 2.5, 2.5, x_res=9, y_res=7)


@pytest.fixture
def faulty_domain(small_grid):
    def make(bad_rows, exc_type=DomainAccessFault):
        return FaultyDomain(small_grid, bad_rows, exc_type)

    return make
