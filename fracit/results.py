"""Pre-sized storage for the records produced by a run."""

from __future__ import annotations

from typing import Iterator

import numpy as np

from .config import Result


class Results:
    """Per-sample records of a run, addressed by ``(row, col)``.

    Workers writing disjoint coordinates may call :meth:`set_result`
    concurrently. :meth:`done` seals the store; the arrays are read-only
    afterwards.
    """

    def __init__(self, rows: int, cols: int, capacity: int) -> None:
        self.rows = rows
        self.cols = cols
        self.capacity = capacity
        self.z = np.zeros((rows, cols), dtype=np.complex128)
        self.c = np.zeros((rows, cols), dtype=np.complex128)
        self.iterations = np.zeros((rows, cols), dtype=np.int32)
        self.smooth_factor = np.zeros((rows, cols), dtype=np.float64)
        self.written = np.zeros((rows, cols), dtype=bool)
        self.sealed = False

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.cols

    @property
    def complete(self) -> bool:
        return bool(self.written.all())

    def set_result(self, row: int, col: int, result: Result) -> None:
        if self.sealed:
            raise RuntimeError("results are sealed")
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"({row}, {col}) is outside a {self.rows}x{self.cols} result store")
        self.z[row, col] = result.z
        self.c[row, col] = result.c
        self.iterations[row, col] = result.iterations
        self.smooth_factor[row, col] = result.smooth_factor
        self.written[row, col] = True

    def result(self, row: int, col: int) -> Result:
        return Result(
            z=complex(self.z[row, col]),
            c=complex(self.c[row, col]),
            iterations=int(self.iterations[row, col]),
            smooth_factor=float(self.smooth_factor[row, col]),
        )

    def __iter__(self) -> Iterator[Result]:
        for row in range(self.rows):
            for col in range(self.cols):
                yield self.result(row, col)

    def __len__(self) -> int:
        return self.rows * self.cols

    def done(self) -> None:
        for array in (self.z, self.c, self.iterations, self.smooth_factor, self.written):
            array.flags.writeable = False
        self.sealed = True
