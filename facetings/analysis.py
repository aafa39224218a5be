"""Connectivity and symmetry checks on assembled polytopes."""

from __future__ import annotations

import logging
from typing import Dict, Hashable, Iterable, List, Sequence, Set, Tuple

import numpy as np
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components

from .polytope import Polytope
from .ranks import Ranks

logger = logging.getLogger(__name__)

TYPE_TOLERANCE = 1e-6


def _components(ranks: Ranks, facets: Sequence[int], ridges: Iterable[int]) -> List[List[int]]:
    """Group ``facets`` into classes connected through shared ``ridges``."""

    facets = list(facets)
    ridge_nodes: Dict[int, int] = {ridge: len(facets) + k for k, ridge in enumerate(sorted(set(ridges)))}
    rows, cols = [], []
    top = ranks.rank - 1
    for node, facet in enumerate(facets):
        for ridge in ranks[top][facet]:
            other = ridge_nodes.get(ridge)
            if other is not None:
                rows.append(node)
                cols.append(other)

    size = len(facets) + len(ridge_nodes)
    graph = coo_matrix((np.ones(len(rows)), (rows, cols)), shape=(size, size))
    count, labels = connected_components(graph, directed=False)

    groups: List[List[int]] = [[] for _ in range(count)]
    for node, facet in enumerate(facets):
        groups[labels[node]].append(facet)
    return [group for group in groups if group]


def components(polytope: Polytope) -> List[List[int]]:
    """Facet indices of each connected component."""

    ranks = polytope.ranks
    top = ranks.rank - 1
    return _components(ranks, range(len(ranks[top])), range(len(ranks[top - 1])))


def is_compound(polytope: Polytope) -> bool:
    return len(components(polytope)) > 1


def _above(ranks: Ranks) -> List[List[Set[Tuple[int, int]]]]:
    """For every element, the ``(rank, index)`` pairs of the proper elements above it."""

    top = ranks.rank - 1
    above: List[List[Set[Tuple[int, int]]]] = [[set() for _ in ranks[r]] for r in range(top + 1)]
    for r in range(top, 1, -1):
        for idx, el in enumerate(ranks[r]):
            carried = above[r][idx] | {(r, idx)}
            for sub in el:
                above[r - 1][sub] |= carried
    return above


def is_fissary(polytope: Polytope) -> bool:
    """Whether the figure of some element is a compound.

    Elements of stored rank 1 (vertices) up to ``top - 2`` are checked, where
    ``top`` is the stored rank of the facets. The figure of a ridge is always
    a pair of facets, so ridges are skipped.
    """

    ranks = polytope.ranks
    top = ranks.rank - 1
    if top < 3:
        return False
    above = _above(ranks)
    for r in range(1, top - 1):
        for idx in range(len(ranks[r])):
            facets = sorted(i for rr, i in above[r][idx] if rr == top)
            ridges = [i for rr, i in above[r][idx] if rr == top - 1]
            if len(_components(ranks, facets, ridges)) > 1:
                logger.debug("Element %d of rank %d has a compound figure", idx, r)
                return True
    return False


def _cluster(values: Sequence[float], tolerance: float) -> List[int]:
    """Class index of each value; sorted neighbours closer than ``tolerance`` share one."""

    order = sorted(range(len(values)), key=lambda i: values[i])
    labels = [0] * len(values)
    label = -1
    last = None
    for i in order:
        if last is None or values[i] - last > tolerance:
            label += 1
        labels[i] = label
        last = values[i]
    return labels


def _compress(keys: Sequence[Hashable]) -> List[int]:
    index: Dict[Hashable, int] = {}
    return [index.setdefault(key, len(index)) for key in keys]


def element_types(polytope: Polytope, tolerance: float = TYPE_TOLERANCE) -> List[List[int]]:
    """Type index of every element, for stored ranks 1 up to the facets.

    Vertices start typed by their distance from the centroid and edges by
    their length. Types are then refined by the multisets of subelement and
    superelement types until the number of types stops growing. Elements of
    one type are indistinguishable by these invariants.
    """

    ranks = polytope.ranks
    top = ranks.rank - 1
    vertices = polytope.vertices
    center = vertices.mean(axis=0)

    supers: List[List[List[int]]] = [[[] for _ in ranks[r]] for r in range(top + 1)]
    for r in range(2, top + 1):
        for idx, el in enumerate(ranks[r]):
            for sub in el:
                supers[r - 1][sub].append(idx)

    types: List[List[int]] = [[0]]
    types.append(_cluster([float(np.linalg.norm(v - center)) for v in vertices], tolerance))
    types.append(_cluster([float(np.linalg.norm(vertices[a] - vertices[b])) for a, b in ranks[2]], tolerance))
    for r in range(3, top + 1):
        types.append(_compress([len(el) for el in ranks[r]]))

    total = sum(len(set(t)) for t in types)
    while True:
        refined: List[List[int]] = [[0]]
        for r in range(1, top + 1):
            keys = []
            for idx in range(len(ranks[r])):
                below = tuple(sorted(types[r - 1][s] for s in ranks[r][idx])) if r >= 2 else ()
                above = tuple(sorted(types[r + 1][s] for s in supers[r][idx])) if r < top else ()
                keys.append((types[r][idx], below, above))
            refined.append(_compress(keys))
        new_total = sum(len(set(t)) for t in refined)
        types = refined
        if new_total == total:
            return types
        total = new_total


def _vertex_type_count(polytope: Polytope) -> int:
    return len(set(element_types(polytope)[1]))


def is_isogonal(polytope: Polytope) -> bool:
    """Whether all vertices share one type, or do so within each component."""

    if _vertex_type_count(polytope) <= 1:
        return True

    parts = components(polytope)
    if len(parts) <= 1:
        return False
    return all(_vertex_type_count(polytope.restricted(part)) <= 1 for part in parts)


__all__ = ["components", "element_types", "is_compound", "is_fissary", "is_isogonal"]
