"""Affine subspaces and small geometric helpers built on numpy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np
from scipy.optimize import least_squares

EPS = 1e-9


def _as_points(points: Iterable[np.ndarray]) -> np.ndarray:
    arr = np.asarray([np.asarray(p, dtype=float) for p in points], dtype=float)
    if arr.ndim != 2:
        raise ValueError("points must form a 2D array")
    return arr


@dataclass(frozen=True, eq=False)
class Subspace:
    """Affine span of a point set.

    ``basis`` holds orthonormal rows; the subspace is ``offset + span(basis)``.
    """

    offset: np.ndarray
    basis: np.ndarray

    @classmethod
    def from_points(cls, points: Iterable[np.ndarray]) -> "Subspace":
        arr = _as_points(points)
        if len(arr) == 0:
            raise ValueError("a subspace needs at least one point")
        offset = arr[0]
        diffs = arr[1:] - offset
        dim = arr.shape[1]
        if len(diffs) == 0:
            return cls(offset=offset, basis=np.zeros((0, dim)))
        _, singular, vt = np.linalg.svd(diffs, full_matrices=False)
        rank = int(np.sum(singular > EPS))
        return cls(offset=offset, basis=vt[:rank])

    @property
    def dim(self) -> int:
        return int(self.offset.shape[0])

    @property
    def rank(self) -> int:
        return int(self.basis.shape[0])

    def is_hyperplane(self) -> bool:
        return self.rank == self.dim - 1

    def project(self, point: np.ndarray) -> np.ndarray:
        rel = np.asarray(point, dtype=float) - self.offset
        return self.offset + self.basis.T @ (self.basis @ rel)

    def distance(self, point: np.ndarray) -> float:
        rel = np.asarray(point, dtype=float) - self.offset
        residual = rel - self.basis.T @ (self.basis @ rel)
        return float(np.linalg.norm(residual))

    def distances(self, points: np.ndarray) -> np.ndarray:
        rel = np.asarray(points, dtype=float) - self.offset
        residual = rel - (rel @ self.basis.T) @ self.basis
        return np.linalg.norm(residual, axis=1)

    def incident(self, points: np.ndarray) -> Tuple[int, ...]:
        """Sorted indices of the points lying on the subspace within ``EPS``."""

        return tuple(int(i) for i in np.nonzero(self.distances(points) < EPS)[0])

    def flatten(self, point: np.ndarray) -> np.ndarray:
        """Coordinates of ``point`` in the subspace's own basis."""

        return self.basis @ (np.asarray(point, dtype=float) - self.offset)

    def flatten_all(self, points: np.ndarray) -> np.ndarray:
        arr = np.asarray(points, dtype=float)
        return (arr - self.offset) @ self.basis.T


def distance(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))


def within_window(value: float, lower: Optional[float], upper: Optional[float]) -> bool:
    """Inclusive window check with ``EPS`` slack on both ends."""

    if lower is not None and value < lower - EPS:
        return False
    if upper is not None and value > upper + EPS:
        return False
    return True


def distinct_edge_lengths(points: np.ndarray, representatives: Iterable[int]) -> List[float]:
    """Sorted distances from each representative to every later vertex, merged within ``EPS``."""

    arr = np.asarray(points, dtype=float)
    lengths = []
    for rep in representatives:
        for idx in range(rep + 1, len(arr)):
            lengths.append(distance(arr[rep], arr[idx]))
    lengths.sort()

    out: List[float] = []
    for length in lengths:
        if not out or length - out[-1] > EPS:
            out.append(length)
    return out


def circumsphere(points: np.ndarray) -> Optional[Tuple[np.ndarray, float]]:
    """Centre and radius of the sphere through all points, or ``None``.

    The centre is searched within the affine span of the points.
    """

    arr = np.asarray(points, dtype=float)
    if len(arr) == 0:
        return None
    span = Subspace.from_points(arr)
    flat = span.flatten_all(arr)
    if span.rank == 0:
        return arr[0].copy(), 0.0

    def residuals(x: np.ndarray) -> np.ndarray:
        return np.linalg.norm(flat - x, axis=1) - np.linalg.norm(flat[0] - x)

    start = flat.mean(axis=0)
    result = least_squares(residuals, start, xtol=1e-14, ftol=1e-14, gtol=1e-14)
    if not result.success or np.max(np.abs(result.fun)) > 1e-6:
        return None
    center = span.offset + span.basis.T @ result.x
    radius = float(np.linalg.norm(arr[0] - center))
    return center, radius


__all__ = [
    "EPS",
    "Subspace",
    "distance",
    "within_window",
    "distinct_edge_lengths",
    "circumsphere",
]
