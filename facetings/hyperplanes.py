"""Hyperplane enumeration grouped by orbit.

Three strategies share the orbit bookkeeping:

* :func:`enumerate_general` grows tuples from pair orbits until they span a
  hyperplane (top level).
* :func:`enumerate_below_vertex` slices the vertex set by its dot product with
  each orbit representative (top level).
* :func:`enumerate_in_subspace` walks vertex combinations with an update
  pointer (inner levels), optionally with the noble multiplicity filter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

import numpy as np

from .config import FacetingOptions
from .geometry import EPS, Subspace, distance, within_window
from .orbits import act_on_set, pair_orbits, vertex_orbits
from .progress import RateLimitedProgress
from .types import VertexMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class HyperplaneOrbit:
    """Representative hyperplane, its sorted vertex indices and orbit size."""

    hyperplane: Subspace
    vertices: Tuple[int, ...]
    count: int


@dataclass(frozen=True)
class NoblePackage:
    """Context for the noble filter of an inner level.

    ``global_vertices[k]`` is the global index of local vertex ``k``; ``count``
    is the orbit size of the enclosing hyperplane.
    """

    vertex_map: VertexMap
    global_vertices: Tuple[int, ...]
    count: int


class _OrbitRecorder:
    """Keeps hyperplane vertex sets seen so far and the orbits found."""

    def __init__(self, points: np.ndarray, vertex_map: VertexMap):
        self.points = points
        self.vertex_map = vertex_map
        self.checked: Set[Tuple[int, ...]] = set()
        self.found: List[HyperplaneOrbit] = []

    def record(self, vertices: Tuple[int, ...]) -> bool:
        images = set()
        for row in self.vertex_map:
            image = act_on_set(row, vertices)
            if image in self.checked:
                return False
            images.add(image)
        self.checked.add(vertices)
        hyperplane = Subspace.from_points(self.points[list(vertices)])
        self.found.append(HyperplaneOrbit(hyperplane=hyperplane, vertices=vertices, count=len(images)))
        return True


def _inradius_ok(hyperplane: Subspace, options: FacetingOptions) -> bool:
    inradius = hyperplane.distance(np.zeros(hyperplane.dim))
    if not within_window(inradius, options.min_inradius, options.max_inradius):
        return False
    if options.exclude_hemis and abs(inradius) < EPS:
        return False
    return True


def _edge_ok(points: np.ndarray, a: int, b: int, options_min: Optional[float], options_max: Optional[float]) -> bool:
    return within_window(distance(points[a], points[b]), options_min, options_max)


def enumerate_general(
    points: np.ndarray,
    vertex_map: VertexMap,
    rank: int,
    options: FacetingOptions,
    progress: Optional[RateLimitedProgress] = None,
) -> List[HyperplaneOrbit]:
    n = len(points)
    lo, hi = options.min_edge_length, options.max_edge_length
    v_orbits = vertex_orbits(n, vertex_map)

    seeds: List[Tuple[int, ...]]
    if rank > 3:
        pairs = pair_orbits(points, vertex_map, v_orbits, lo, hi)
        logger.info("%d edge orbit%s", len(pairs), "" if len(pairs) == 1 else "s")
        seeds = [orbit[0] for orbit in pairs]
    else:
        seeds = [(orbit[0],) for orbit in v_orbits]

    # Subspaces between lines and hyperplanes.
    for number in range(3, rank - 1):
        checked: Set[Tuple[int, ...]] = set()
        grown: List[Tuple[int, ...]] = []
        for tup in seeds:
            for new_vertex in range(tup[-1] + 1, n):
                if progress is not None:
                    progress.tick(lambda: f"{len(grown)} {number - 1}-plane orbits, verts {tup}")
                if not _edge_ok(points, tup[0], new_vertex, lo, hi):
                    continue
                new_tuple = tup + (new_vertex,)
                if any(act_on_set(row, new_tuple) in checked for row in vertex_map):
                    continue
                if Subspace.from_points(points[list(new_tuple)]).rank == number - 1:
                    grown.append(new_tuple)
                checked.add(new_tuple)
        logger.info("%d %d-plane orbit%s", len(grown), number - 1, "" if len(grown) == 1 else "s")
        seeds = grown

    recorder = _OrbitRecorder(points, vertex_map)
    for rep in seeds:
        for new_vertex in range(rep[-1] + 1, n):
            if progress is not None:
                progress.tick(lambda: f"{len(recorder.found)} hyperplane orbits, verts {rep + (new_vertex,)}")
            if not _edge_ok(points, rep[0], new_vertex, lo, hi):
                continue
            hyperplane = Subspace.from_points(points[list(rep + (new_vertex,))])
            if not hyperplane.is_hyperplane() or not _inradius_ok(hyperplane, options):
                continue
            recorder.record(hyperplane.incident(points))
    return recorder.found


def _dot_layers(points: np.ndarray, rep: int) -> List[List[int]]:
    dots = points @ points[rep]
    order = np.argsort(dots, kind="stable")
    layers: List[List[int]] = []
    last = None
    for idx in order:
        value = float(dots[idx])
        if last is None or value - last > EPS:
            layers.append([])
        layers[-1].append(int(idx))
        last = value
    return [sorted(layer) for layer in layers]


def enumerate_below_vertex(
    points: np.ndarray,
    vertex_map: VertexMap,
    options: FacetingOptions,
    progress: Optional[RateLimitedProgress] = None,
) -> List[HyperplaneOrbit]:
    """Hyperplanes perpendicular to a vertex direction."""

    lo, hi = options.min_edge_length, options.max_edge_length
    recorder = _OrbitRecorder(points, vertex_map)
    for orbit in vertex_orbits(len(points), vertex_map):
        for count, layer in enumerate(_dot_layers(points, orbit[0])):
            if progress is not None:
                progress.tick(lambda: f"loop {count}, verts {layer}")
            if not all(_edge_ok(points, layer[0], v, lo, hi) for v in layer[1:]):
                continue
            hyperplane = Subspace.from_points(points[layer])
            if not hyperplane.is_hyperplane() or not _inradius_ok(hyperplane, options):
                continue
            recorder.record(hyperplane.incident(points))
    return recorder.found


def _next_combination(chosen: List[int], update: int, n: int, rank: int) -> Optional[int]:
    """Advance ``chosen`` in place starting at position ``update``.

    Returns the new update pointer, or ``None`` once every combination is used.
    """

    while True:
        if chosen[update] == n + update - rank + 3:
            if update < 1:
                return None
            update -= 1
        else:
            chosen[update] += 1
            for i in range(update + 1, rank - 3):
                chosen[i] = chosen[i - 1] + 1
            return rank - 4


def enumerate_in_subspace(
    points: np.ndarray,
    vertex_map: VertexMap,
    rank: int,
    min_edge_length: Optional[float] = None,
    max_edge_length: Optional[float] = None,
    noble: Optional[NoblePackage] = None,
) -> List[HyperplaneOrbit]:
    """Hyperplane orbits of flattened ``points`` for a level of rank ``rank``."""

    n = len(points)
    lo, hi = min_edge_length, max_edge_length
    pairs = pair_orbits(points, vertex_map, vertex_orbits(n, vertex_map), lo, hi)

    checked: Set[Tuple[int, ...]] = set()
    found: List[Tuple[Tuple[int, ...], int]] = []
    noble_map: Dict[Tuple[int, ...], int] = {}
    noble_counts: List[int] = []
    noble_muls: List[int] = []

    for pair_orbit in pairs:
        a, b = pair_orbit[0]
        if b + rank - 2 > n:
            continue
        chosen = list(range(b + 1, b + rank - 2))
        update: Optional[int] = rank - 4 if rank > 3 else 0

        while update is not None:
            failed = next(
                (pos for pos, v in enumerate(chosen) if not _edge_ok(points, v, a, lo, hi)),
                None,
            )
            if failed is not None:
                update = failed
            else:
                hyperplane = Subspace.from_points(points[[a, b] + chosen])
                if hyperplane.is_hyperplane():
                    vertices = hyperplane.incident(points)
                    if vertices not in checked:
                        size = 0
                        for row in vertex_map:
                            image = act_on_set(row, vertices)
                            if image not in checked:
                                checked.add(image)
                                size += 1
                        if noble is not None:
                            _account_noble(noble, vertices, size, noble_map, noble_counts, noble_muls)
                        found.append((vertices, size))
            if rank <= 3:
                break
            update = _next_combination(chosen, update, n, rank)

    if noble is not None:
        kept = []
        for vertices, size in found:
            key = tuple(sorted(noble.global_vertices[v] for v in vertices))
            if noble_muls[noble_map[key]] >= 2:
                kept.append((vertices, size))
        logger.debug("Noble filter kept %d of %d hyperplane orbits", len(kept), len(found))
        found = kept

    return [
        HyperplaneOrbit(hyperplane=Subspace.from_points(points[list(vertices)]), vertices=vertices, count=size)
        for vertices, size in found
    ]


def _account_noble(
    noble: NoblePackage,
    vertices: Sequence[int],
    size: int,
    noble_map: Dict[Tuple[int, ...], int],
    noble_counts: List[int],
    noble_muls: List[int],
) -> None:
    key = tuple(sorted(noble.global_vertices[v] for v in vertices))
    idx = noble_map.get(key)
    if idx is not None:
        noble_muls[idx] += noble.count * size // noble_counts[idx]
        return

    images = set()
    for row in noble.vertex_map:
        image = tuple(sorted(row[noble.global_vertices[v]] for v in vertices))
        images.add(image)
        noble_map[image] = len(noble_counts)
    noble_counts.append(len(images))
    noble_muls.append(noble.count * size // len(images))


__all__ = [
    "HyperplaneOrbit",
    "NoblePackage",
    "enumerate_general",
    "enumerate_below_vertex",
    "enumerate_in_subspace",
]
