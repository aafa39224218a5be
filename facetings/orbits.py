"""Orbits of vertices, pairs and tuples under a vertex map."""

from __future__ import annotations

import logging
from typing import Callable, Hashable, Iterable, List, Optional, Sequence, Tuple, TypeVar

import numpy as np
from scipy.spatial import cKDTree

from .geometry import EPS, distance, within_window
from .types import VertexMap

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


def partition(items: Iterable[T], vertex_map: VertexMap, act: Callable[[Sequence[int], T], T]) -> List[List[T]]:
    """Split ``items`` into orbits; ``act(row, item)`` applies one row."""

    visited = set()
    orbits: List[List[T]] = []
    for item in items:
        if item in visited:
            continue
        orbit: List[T] = []
        for row in vertex_map:
            image = act(row, item)
            if image not in visited:
                visited.add(image)
                orbit.append(image)
        orbits.append(orbit)
    return orbits


def _act_on_vertex(row: Sequence[int], v: int) -> int:
    return row[v]


def _act_on_pair(row: Sequence[int], pair: Tuple[int, int]) -> Tuple[int, int]:
    a, b = row[pair[0]], row[pair[1]]
    return (a, b) if a < b else (b, a)


def act_on_set(row: Sequence[int], items: Tuple[int, ...]) -> Tuple[int, ...]:
    return tuple(sorted(row[v] for v in items))


def vertex_orbits(vertex_count: int, vertex_map: VertexMap) -> List[List[int]]:
    return partition(range(vertex_count), vertex_map, _act_on_vertex)


def pair_orbits(
    points: np.ndarray,
    vertex_map: VertexMap,
    orbits: List[List[int]],
    min_edge_length: Optional[float] = None,
    max_edge_length: Optional[float] = None,
) -> List[List[Tuple[int, int]]]:
    """Orbits of pairs starting at a vertex-orbit representative.

    Pairs outside the edge-length window are skipped; images are stored as
    ``(low, high)``.
    """

    checked = set()
    out: List[List[Tuple[int, int]]] = []
    n = len(points)
    for orbit in orbits:
        rep = orbit[0]
        for vertex in range(rep + 1, n):
            if (rep, vertex) in checked:
                continue
            if not within_window(distance(points[rep], points[vertex]), min_edge_length, max_edge_length):
                continue
            new_orbit = []
            for row in vertex_map:
                image = _act_on_pair(row, (rep, vertex))
                if image not in checked:
                    checked.add(image)
                    new_orbit.append(image)
            out.append(new_orbit)
    return out


def set_orbit(items: Sequence[int], vertex_map: VertexMap) -> List[Tuple[int, ...]]:
    """Distinct images of a vertex set, each sorted."""

    seen = {}
    for row in vertex_map:
        seen.setdefault(act_on_set(row, tuple(items)), None)
    return list(seen)


def stabilizer(vertex_map: VertexMap, vertices: Sequence[int]) -> VertexMap:
    """Local vertex map of the rows fixing the sorted set ``vertices``.

    Local index ``k`` stands for ``vertices[k]`` when row 0 is the identity.
    """

    target = list(vertices)
    rows = []
    for row in vertex_map:
        image = [row[v] for v in target]
        if sorted(image) == target:
            rows.append(image)

    local = {v: idx for idx, v in enumerate(rows[0])}
    return [[local[v] for v in row] for row in rows]


def normalize_vertex_map(vertex_map: Sequence[Sequence[int]], vertex_count: int) -> VertexMap:
    """Validate the rows and move the identity to the front."""

    identity = list(range(vertex_count))
    rows = [list(row) for row in vertex_map]
    for idx, row in enumerate(rows):
        if sorted(row) != identity:
            raise ValueError(f"vertex map row {idx} is not a permutation of {vertex_count} vertices")
    try:
        pos = rows.index(identity)
    except ValueError:
        raise ValueError("vertex map must contain the identity") from None
    if pos:
        rows.insert(0, rows.pop(pos))
    return rows


def vertex_map_from_matrices(vertices: np.ndarray, matrices: Iterable[np.ndarray]) -> VertexMap:
    """Realize every group matrix as a permutation of ``vertices``."""

    pts = np.asarray(vertices, dtype=float)
    tree = cKDTree(pts)
    rows = []
    for idx, matrix in enumerate(matrices):
        moved = pts @ np.asarray(matrix, dtype=float).T
        dists, images = tree.query(moved)
        if np.max(dists) > max(EPS, 1e-6) or len(set(images.tolist())) != len(pts):
            raise ValueError(f"matrix {idx} does not permute the vertex set")
        rows.append([int(i) for i in images])
    logger.debug("Realized %d group elements on %d vertices", len(rows), len(pts))
    return rows


__all__ = [
    "partition",
    "act_on_set",
    "vertex_orbits",
    "pair_orbits",
    "set_orbit",
    "stabilizer",
    "normalize_vertex_map",
    "vertex_map_from_matrices",
]
