"""Faceting of a single hyperplane, one rank at a time.

Facetings of a hyperplane of rank ``r`` are built from the facetings of its
own hyperplanes of rank ``r - 1``; segments end the descent.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np

from .analysis import is_isogonal
from .assembler import Assembly, assemble
from .combiner import FacetCombiner, label_compounds
from .config import FacetingOptions
from .geometry import Subspace
from .hyperplanes import NoblePackage, enumerate_in_subspace
from .model import PossibleFacet, SubFaceting
from .orbits import stabilizer
from .polytope import Polytope
from .progress import RateLimitedProgress
from .ranks import Ranks
from .ridges import index_level
from .types import FacetSet, VertexMap

logger = logging.getLogger(__name__)


def _facet_segment(vertex_map: VertexMap) -> SubFaceting:
    """A segment has one faceting; it is snub when no row swaps its ends."""

    snub = not any(row[0] == 1 for row in vertex_map)
    if snub:
        return SubFaceting(
            facets=[PossibleFacet(Ranks.dyad(), ((0, 0), (1, 0)))],
            orbit_counts=[1, 1],
            ridges=[[Ranks.point(0)], [Ranks.point(1)]],
        )
    return SubFaceting(
        facets=[PossibleFacet(Ranks.dyad(), ((0, 0),))],
        orbit_counts=[2],
        ridges=[[Ranks.point(0)]],
    )


def _uniform(assembly: Assembly, points: np.ndarray) -> bool:
    return is_isogonal(Polytope(vertices=points[list(assembly.retained)], ranks=assembly.ranks))


def facet_hyperplane(
    rank: int,
    hyperplane: Subspace,
    points: np.ndarray,
    vertex_map: VertexMap,
    options: FacetingOptions,
    noble: Optional[NoblePackage] = None,
    progress: Optional[RateLimitedProgress] = None,
) -> SubFaceting:
    """Facetings of the rank-``rank`` section of ``points`` lying on ``hyperplane``.

    ``points`` are the hyperplane's vertices and ``vertex_map`` its stabilizer,
    both in local numbering. Returned ranks use the same numbering.
    """

    if rank == 2:
        return _facet_segment(vertex_map)

    flat = hyperplane.flatten_all(points)
    inner = enumerate_in_subspace(
        flat,
        vertex_map,
        rank,
        options.min_edge_length,
        options.max_edge_length,
        noble,
    )

    subfacetings = []
    for orbit in inner:
        local_map = stabilizer(vertex_map, orbit.vertices)
        subfacetings.append(
            facet_hyperplane(rank - 1, orbit.hyperplane, flat[list(orbit.vertices)], local_map, options)
        )
    tables = index_level(inner, subfacetings, vertex_map)

    combiner = FacetCombiner(tables, explore_compounds=noble is None, progress=progress)
    accepted: List[Tuple[FacetSet, Ranks]] = []
    skipped = 0
    for facets in combiner.search():
        assembly = assemble(tables, facets, vertex_map, rank)
        if options.uniform and not _uniform(assembly, flat):
            skipped += 1
        else:
            accepted.append((facets, assembly.ranks.relabel_vertices(assembly.retained, vertex_count=len(points))))
        if options.max_per_hyperplane is not None and len(accepted) + skipped >= options.max_per_hyperplane:
            break

    accepted.sort(key=lambda item: item[0])
    if skipped:
        logger.debug("Skipped %d non-uniform facetings of rank %d", skipped, rank)

    return SubFaceting(
        facets=[PossibleFacet(ranks=ranks, ridges=tuple(facets)) for facets, ranks in accepted],
        orbit_counts=[orbit.count for orbit in inner],
        ridges=tables.global_facets,
        compounds=label_compounds([facets for facets, _ in accepted]),
    )


__all__ = ["facet_hyperplane"]
