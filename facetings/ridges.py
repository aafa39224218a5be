"""Ridge canonicalization, orbit registry and multiplicity tables."""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from .hyperplanes import HyperplaneOrbit
from .model import LevelTables, SubFaceting
from .ranks import Ranks
from .types import FacetId, RidgeMultiplicityError, VertexMap

logger = logging.getLogger(__name__)


class RidgeOrbitIndexer:
    """Assigns orbit ids to ridges, registering every image of a new ridge."""

    def __init__(self, vertex_map: VertexMap):
        self.vertex_map = vertex_map
        self._orbits: Dict[tuple, int] = {}
        self.counts: List[int] = []

    def __len__(self) -> int:
        return len(self.counts)

    def orbit_of(self, ridge: Ranks) -> int:
        canonical = ridge.strong_sort()
        key = canonical.skeleton_key()
        idx = self._orbits.get(key)
        if idx is not None:
            return idx

        idx = len(self.counts)
        count = 0
        for row in self.vertex_map:
            image = canonical.relabel_vertices(row).strong_sort().skeleton_key()
            if image not in self._orbits:
                self._orbits[image] = idx
                count += 1
        self.counts.append(count)
        return idx


def ridge_multiplicity(facet_count: int, local_count: int, orbit_total: int) -> int:
    """Facets of one orbit meeting at each ridge of one ridge orbit."""

    mul, rem = divmod(facet_count * local_count, orbit_total)
    if rem:
        raise RidgeMultiplicityError(
            f"ridge multiplicity {facet_count} * {local_count} / {orbit_total} is not an integer"
        )
    return mul


def index_level(
    hyperplanes: Sequence[HyperplaneOrbit],
    subfacetings: Sequence[SubFaceting],
    vertex_map: VertexMap,
) -> LevelTables:
    """Build the read-only tables the combiner and assembler work from."""

    global_facets = [
        [facet.ranks.relabel_vertices(hp.vertices) for facet in sub.facets]
        for hp, sub in zip(hyperplanes, subfacetings)
    ]

    indexer = RidgeOrbitIndexer(vertex_map)
    ridge_orbits = [
        [[indexer.orbit_of(ridge.relabel_vertices(hp.vertices)) for ridge in row] for row in sub.ridges]
        for hp, sub in zip(hyperplanes, subfacetings)
    ]
    logger.debug("Indexed %d ridge orbits over %d hyperplane orbits", len(indexer), len(hyperplanes))

    multiplicities: List[List[Dict[int, int]]] = []
    ones: List[List[FacetId]] = [[] for _ in range(len(indexer))]
    for hp_idx, (hp, sub) in enumerate(zip(hyperplanes, subfacetings)):
        row = []
        for f_idx, facet in enumerate(sub.facets):
            muls: Dict[int, int] = {}
            for i, j in facet.ridges:
                orbit = ridge_orbits[hp_idx][i][j]
                mul = ridge_multiplicity(hp.count, sub.orbit_counts[i], indexer.counts[orbit])
                muls[orbit] = muls.get(orbit, 0) + mul
            for orbit, mul in muls.items():
                if mul == 1:
                    ones[orbit].append((hp_idx, f_idx))
            row.append(muls)
        multiplicities.append(row)

    return LevelTables(
        facets=[list(sub.facets) for sub in subfacetings],
        global_facets=global_facets,
        compounds=[dict(sub.compounds) for sub in subfacetings],
        orbit_sizes=[hp.count for hp in hyperplanes],
        ridge_orbits=ridge_orbits,
        ridge_counts=list(indexer.counts),
        multiplicities=multiplicities,
        ones=ones,
    )


__all__ = ["RidgeOrbitIndexer", "ridge_multiplicity", "index_level"]
