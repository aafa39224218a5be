"""Build rank structures from sets of facet orbits."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .logging_utils import apply_debug_logging
from .model import LevelTables
from .ranks import Element, Ranks
from .types import FacetId, VertexMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Assembly:
    """An assembled faceting.

    ``retained[k]`` is the caller's index of dense vertex ``k``;
    ``first_facet`` maps every facet orbit to the index of its first instance
    in the facet rank.
    """

    ranks: Ranks
    retained: Tuple[int, ...]
    first_facet: Dict[FacetId, int]


def expand_facets(
    tables: LevelTables, facet_orbits: Sequence[FacetId], vertex_map: VertexMap
) -> Tuple[List[Ranks], Dict[FacetId, int]]:
    """All distinct images of the given facet orbits, strong-sorted."""

    seen = set()
    instances: List[Ranks] = []
    first: Dict[FacetId, int] = {}
    for facet_id in facet_orbits:
        hp, f = facet_id
        facet = tables.global_facets[hp][f]
        for row in vertex_map:
            image = facet.relabel_vertices(row).strong_sort()
            key = image.skeleton_key()
            if key in seen:
                continue
            seen.add(key)
            first.setdefault(facet_id, len(instances))
            instances.append(image)
    return instances, first


def assemble(
    tables: LevelTables,
    facet_orbits: Sequence[FacetId],
    vertex_map: VertexMap,
    rank: int,
) -> Assembly:
    instances, first_instance = expand_facets(tables, facet_orbits, vertex_map)

    dense: Dict[int, int] = {}
    for facet in instances:
        for edge in facet[2]:
            for v in edge:
                dense.setdefault(v, len(dense))

    # Each instance as mutable rank lists, edges already in dense vertex numbering.
    working: List[List[List[Element]]] = []
    for facet in instances:
        ranks = [list(r) for r in facet.ranks]
        ranks[2] = [tuple(sorted(dense[v] for v in edge)) for edge in ranks[2]]
        working.append(ranks)

    out: List[Tuple[Element, ...]] = [((),), ((0,),) * len(dense)]

    for r in range(2, rank - 1):
        index: Dict[Element, int] = {}
        for facet in working:
            for el in facet[r]:
                index.setdefault(tuple(sorted(el)), len(index))
        for facet in working:
            below = facet[r]
            facet[r + 1] = [tuple(sorted(index[tuple(sorted(below[s]))] for s in el)) for el in facet[r + 1]]
        out.append(tuple(index))

    facet_index: Dict[Element, int] = {}
    instance_to_facet: List[int] = []
    for facet in working:
        top = facet[rank - 1]
        key = tuple(sorted(top[0]))
        instance_to_facet.append(facet_index.setdefault(key, len(facet_index)))
    out.append(tuple(facet_index))
    out.append((tuple(range(len(facet_index))),))

    result = Ranks.validated(out).unwrap(facet_orbits)
    first_facet = {facet_id: instance_to_facet[idx] for facet_id, idx in first_instance.items()}
    logger.debug("Assembled %s from %d facet instances", result.counts(), len(instances))
    return Assembly(ranks=result, retained=tuple(dense), first_facet=first_facet)


apply_debug_logging(globals(), logger=logger)


__all__ = ["Assembly", "expand_facets", "assemble"]
