from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np

VertexMap = List[List[int]]
FacetId = Tuple[int, int]
FacetSet = List[FacetId]
CompoundMap = Dict[int, Tuple[int, int]]
Points = np.ndarray


@dataclass(frozen=True)
class DyadicFailure:
    """Location of the first diamond that does not close."""

    rank: int
    element: int
    subelement: int
    count: int

    def __str__(self) -> str:
        return (
            f"element {self.element} of rank {self.rank} covers element {self.subelement} "
            f"of rank {self.rank - 2} through {self.count} elements (expected 2)"
        )


class FacetingError(RuntimeError):
    """Raised when the orbit bookkeeping of a faceting run is inconsistent."""


class NotDyadicError(FacetingError):
    """Raised when an assembled faceting fails dyadic closure."""

    def __init__(self, failure: DyadicFailure, facets: Sequence[FacetId] = ()):
        self.failure = failure
        self.facets = list(facets)
        suffix = f" (facets {self.facets})" if self.facets else ""
        super().__init__(f"assembled polytope is not dyadic: {failure}{suffix}")


class RidgeMultiplicityError(FacetingError):
    """Raised when a ridge multiplicity is not an integer."""


__all__ = [
    "VertexMap",
    "FacetId",
    "FacetSet",
    "CompoundMap",
    "Points",
    "DyadicFailure",
    "FacetingError",
    "NotDyadicError",
    "RidgeMultiplicityError",
]
