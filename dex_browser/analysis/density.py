"""
One-dimensional kernel density estimation.

Pure functions only: a shared evaluation grid is built once per chart from the
global extent of the dimension, every per-category sample is evaluated on that
same grid, and callers normalise each curve to its own peak.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]

MIN_OBSERVATIONS = 2

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


# -----------------------------------------------------------------------------
# Kernel
# -----------------------------------------------------------------------------
def epanechnikov(u: np.ndarray, bandwidth: float) -> np.ndarray:
    """
    Epanechnikov kernel with compact support: 0.75 * (1 - t^2) / h for |t| <= 1,
    where t = u / h; zero elsewhere.
    """
    t = np.asarray(u, dtype=float) / bandwidth
    return np.where(np.abs(t) <= 1.0, 0.75 * (1.0 - t * t) / bandwidth, 0.0)


def estimate(sample: Sequence[float], grid: Sequence[float], bandwidth: float) -> List[Point]:
    """
    Evaluate the kernel density estimate of `sample` at every point of `grid`.

    Non-finite observations are ignored. With fewer than two valid observations
    the density is undefined and the empty list is returned (not zeros);
    callers must branch on emptiness.

    :param sample: scalar observations
    :param grid: evaluation points, shared by all curves of a chart
    :param bandwidth: kernel smoothing width, must be positive
    :return: list of (x, density) pairs, same length as `grid`
    :raises ValueError: if bandwidth is not positive
    """
    if not bandwidth or bandwidth <= 0 or not math.isfinite(bandwidth):
        raise ValueError(f"bandwidth must be a positive number, got {bandwidth!r}")

    values = np.asarray(list(sample), dtype=float)
    values = values[np.isfinite(values)]
    if values.size < MIN_OBSERVATIONS:
        return []

    xs = np.asarray(list(grid), dtype=float)
    if xs.size == 0:
        return []

    # rows: grid points, cols: observations
    densities = epanechnikov(xs[:, None] - values[None, :], bandwidth).mean(axis=1)
    return [(float(x), float(d)) for x, d in zip(xs, densities)]


def normalize_curve(points: Sequence[Point]) -> Tuple[List[Point], float]:
    """
    Rescale a curve by its own maximum.

    Returns the normalised points and the peak used. A peak of 0 or NaN means
    there is no visible curve: ([], 0.0) is returned instead of dividing by zero.
    """
    if not points:
        return [], 0.0
    peak = max(d for _, d in points)
    if not math.isfinite(peak) or peak <= 0:
        return [], 0.0
    return [(x, d / peak) for x, d in points], float(peak)


# -----------------------------------------------------------------------------
# Grid (d3-style "nice" ticks)
# -----------------------------------------------------------------------------
def tick_increment(start: float, stop: float, count: int) -> float:
    """Step from the {1, 2, 5} x 10^k family giving roughly `count` ticks."""
    step = (stop - start) / max(1, count)
    if step <= 0:
        return 0.0
    power = math.floor(math.log10(step))
    error = step / (10 ** power)
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1
    return factor * (10 ** power)


def ticks(start: float, stop: float, count: int) -> List[float]:
    """Evenly spaced round values inside [start, stop]."""
    if start == stop:
        return [float(start)]
    if stop < start:
        start, stop = stop, start
    inc = tick_increment(start, stop, count)
    if inc <= 0:
        return [float(start)]
    i1 = math.ceil(round(start / inc, 9))
    i2 = math.floor(round(stop / inc, 9))
    # round() keeps 0.1 * 3 style products tidy
    return [round(i * inc, 10) for i in range(i1, i2 + 1)]


def nice_extent(lo: float, hi: float, count: int = 10) -> Tuple[float, float]:
    """Extend [lo, hi] outward to round tick boundaries."""
    if lo == hi:
        return float(lo), float(hi)
    prev_step = None
    for _ in range(10):
        step = tick_increment(lo, hi, count)
        if step <= 0 or step == prev_step:
            break
        lo = math.floor(lo / step) * step
        hi = math.ceil(hi / step) * step
        prev_step = step
    return float(lo), float(hi)


def data_extent(values: Sequence[float]) -> Tuple[float, float] | None:
    """(min, max) over finite values, or None when there are none."""
    arr = np.asarray(list(values), dtype=float)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return None
    return float(arr.min()), float(arr.max())


def evaluation_grid(values: Sequence[float], count: int = 80) -> List[float]:
    """
    Build the shared evaluation grid from the global extent of a dimension.

    The extent is niced first so the grid covers the whole data range; a
    degenerate extent gives the single point [value].
    """
    extent = data_extent(values)
    if extent is None:
        return []
    lo, hi = nice_extent(*extent)
    return ticks(lo, hi, count)
