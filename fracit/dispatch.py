"""Parallel evaluation of a fractal over every sample of a domain."""

from __future__ import annotations

import logging
import os
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from .domain import Domain
from .errors import ConfigurationError, DomainAccessFault, DomainShapeError, RunAborted
from .fractals import Fractal
from .results import Results

logger = logging.getLogger(__name__)


def default_workers() -> int:
    return os.cpu_count() or 1


def run(
    domain: Domain,
    fractal: Fractal,
    max_iterations: int,
    *,
    workers: Optional[int] = None,
    results: Optional[Results] = None,
) -> Results:
    """Evaluate ``fractal`` at every sample of ``domain``.

    Rows are the unit of work. Every row is queued before a fixed pool of
    ``workers`` threads (the CPU count by default) starts draining the queue,
    and each worker writes the records of its rows into ``results``. The
    fractal is configured before any worker starts and is only read
    afterwards.

    If a sample cannot be fetched the remaining workers stop at their next
    row boundary and a single :class:`RunAborted` carrying every captured
    fault is raised once all of them have finished.
    The result store is sealed whether or not the run succeeds.
    """

    if max_iterations < 1:
        raise ConfigurationError("the maximum iteration count must be greater than zero")

    rows, cols = domain.dimensions()
    if cols < 1 or rows < 1:
        raise DomainShapeError("the domain must be sampled at least once along each axis")

    if results is None:
        results = Results(rows, cols, max_iterations)
    elif results.shape != (rows, cols):
        raise DomainShapeError(f"result store of shape {results.shape} cannot hold a {rows}x{cols} domain")
    elif results.capacity != max_iterations:
        raise DomainShapeError(
            f"result store sized for {results.capacity} iterations cannot hold a run of {max_iterations}"
        )

    fractal.set_max_iterations(max_iterations)

    row_jobs: queue.Queue[int] = queue.Queue()
    for row in range(rows):
        row_jobs.put(row)

    cancel = threading.Event()
    faults: list[DomainAccessFault] = []
    faults_lock = threading.Lock()

    def drain_rows() -> None:
        while not cancel.is_set():
            try:
                row = row_jobs.get_nowait()
            except queue.Empty:
                return
            for col in range(cols):
                try:
                    loc = domain.at(col, row)
                except DomainAccessFault as exc:
                    fault = exc
                except LookupError as exc:
                    fault = DomainAccessFault(col, row, str(exc))
                    fault.__cause__ = exc
                else:
                    results.set_result(row, col, fractal.evaluate(loc))
                    continue
                logger.error("Sample (%d, %d) unavailable: %s", col, row, fault)
                with faults_lock:
                    faults.append(fault)
                cancel.set()
                return

    def work() -> None:
        try:
            drain_rows()
        except Exception:
            cancel.set()
            raise

    num_workers = max(1, min(workers or default_workers(), rows))
    logger.debug("Evaluating %dx%d samples on %d workers", cols, rows, num_workers)

    try:
        with ThreadPoolExecutor(max_workers=num_workers, thread_name_prefix="fracit") as executor:
            futures = [executor.submit(work) for _ in range(num_workers)]
        for future in futures:
            # Re-raises anything other than a sample fault, e.g. a bug in the fractal maps.
            future.result()

        if faults:
            raise RunAborted(faults) from faults[0]
    finally:
        results.done()

    logger.debug("Evaluated %d samples", rows * cols)
    return results
