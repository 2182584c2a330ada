"""Continuous shading values derived from the records of a run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import tensorflow as tf

from .config import IterationConfig
from .results import Results


@dataclass(frozen=True)
class Shading:
    """Per-sample values consumed by palettes."""

    smooth: np.ndarray
    inside: np.ndarray
    edges: np.ndarray


@tf.function
def _renormalize(zs: tf.Tensor, ns: tf.Tensor, inside: tf.Tensor, inv_log_degree: tf.Tensor, capacity: tf.Tensor) -> tf.Tensor:
    """Renormalized escape count ``n + 1 - ln(ln|z|) / ln(degree)``."""

    az = tf.abs(zs)
    eps = tf.constant(1e-12, dtype=az.dtype)
    az_safe = tf.maximum(az, tf.constant(1.0, dtype=az.dtype) + eps)
    log_az = tf.math.log(az_safe)
    log_log_az = tf.math.log(tf.maximum(log_az, eps))
    ns_float = tf.cast(ns, tf.float64)
    smooth_escape = ns_float + tf.constant(1.0, dtype=ns_float.dtype) - log_log_az * inv_log_degree
    # Orbits that overflowed to inf/NaN renormalize to NaN; fall back to the raw count.
    smooth_escape = tf.where(tf.math.is_finite(smooth_escape), smooth_escape, ns_float)
    return tf.where(inside, tf.fill(tf.shape(ns_float), capacity), smooth_escape)


@tf.function
def _edges(inside: tf.Tensor) -> tf.Tensor:
    return tf.math.logical_xor(tf.roll(inside, 1, axis=0), inside)


def shade(
    results: Results,
    config: IterationConfig,
    *,
    escape_time: bool = True,
    device: Optional[str] = None,
) -> Shading:
    """Compute smooth iteration counts, the inside mask and an edge map.

    Escape-time fractals are renormalized with ``config.inv_log_degree``.
    Convergent fractals keep their integer iteration counts.
    """

    capacity = np.float64(results.capacity)

    with tf.device(device if device is not None else "/CPU:0"):
        ns = tf.convert_to_tensor(results.iterations, dtype=tf.int32)
        inside = tf.greater_equal(ns, tf.constant(results.capacity - 1, dtype=tf.int32))

        if escape_time:
            zs = tf.convert_to_tensor(results.z, dtype=tf.complex128)
            smooth = _renormalize(
                zs,
                ns,
                inside,
                tf.constant(config.inv_log_degree, dtype=tf.float64),
                tf.constant(capacity, dtype=tf.float64),
            )
        else:
            smooth = tf.cast(ns, tf.float64)

        edges = _edges(inside)

    return Shading(
        smooth=smooth.numpy(),
        inside=inside.numpy(),
        edges=edges.numpy(),
    )
