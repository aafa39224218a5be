"""Core data structures passed between the faceting stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .hyperplanes import HyperplaneOrbit
from .ranks import Ranks
from .types import CompoundMap, FacetId, FacetSet


@dataclass(frozen=True)
class PossibleFacet:
    """A faceting of one hyperplane, usable as a facet one rank up.

    ``ridges`` lists ``(sub-hyperplane orbit, local facet)`` pairs naming the
    ridge orbit of each boundary piece.
    """

    ranks: Ranks
    ridges: Tuple[FacetId, ...]


@dataclass
class SubFaceting:
    """Result of faceting one hyperplane.

    ``ridges[i][j]`` is facet ``j`` of sub-hyperplane orbit ``i`` in the
    vertex numbering of the hyperplane; ``orbit_counts[i]`` is the size of
    sub-hyperplane orbit ``i``.
    """

    facets: List[PossibleFacet]
    orbit_counts: List[int]
    ridges: List[List[Ranks]]
    compounds: CompoundMap = field(default_factory=dict)


@dataclass(frozen=True)
class LevelTables:
    """Read-only tables for one recursion level.

    Indexed by hyperplane orbit ``hp`` and facet ``f``; multiplicities map a
    ridge orbit to the number of facets of the orbit ``(hp, f)`` meeting at
    each ridge of that orbit.
    """

    facets: List[List[PossibleFacet]]
    global_facets: List[List[Ranks]]
    compounds: List[CompoundMap]
    orbit_sizes: List[int]
    ridge_orbits: List[List[List[int]]]
    ridge_counts: List[int]
    multiplicities: List[List[Dict[int, int]]]
    ones: List[List[FacetId]]

    @property
    def facet_count(self) -> int:
        return sum(len(row) for row in self.facets)


@dataclass
class FacetingRun:
    """Facet-orbit combinations found for one edge-length window."""

    edge_length: Optional[float]
    hyperplanes: List[HyperplaneOrbit]
    tables: LevelTables
    facet_sets: List[FacetSet]
    compounds: CompoundMap = field(default_factory=dict)


__all__ = ["PossibleFacet", "SubFaceting", "LevelTables", "FacetingRun"]
