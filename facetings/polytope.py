"""Concrete polytopes: coordinates plus a rank structure."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple

import numpy as np

from .geometry import Subspace, circumsphere
from .ranks import Ranks


@dataclass(frozen=True, eq=False)
class Polytope:
    vertices: np.ndarray
    ranks: Ranks

    @property
    def rank(self) -> int:
        return self.ranks.rank

    @property
    def dim(self) -> int:
        return int(self.vertices.shape[1])

    def element_counts(self) -> List[int]:
        """Number of elements of each rank, vertices first."""

        return self.ranks.counts()[1:-1]

    def _below(self, rank: int, indices: Iterable[int]) -> "Polytope":
        """Elements under ``indices`` of stored rank ``rank``, closed by a new body."""

        selected: List[Set[int]] = [set() for _ in range(rank + 1)]
        selected[rank] = set(indices)
        for r in range(rank, 1, -1):
            for el in selected[r]:
                selected[r - 1].update(self.ranks[r][el])

        renumber: List[Dict[int, int]] = [{old: new for new, old in enumerate(sorted(sel))} for sel in selected]
        ranks: List[Tuple[Tuple[int, ...], ...]] = [((),), ((0,),) * len(renumber[1])]
        for r in range(2, rank + 1):
            ranks.append(
                tuple(
                    tuple(sorted(renumber[r - 1][s] for s in self.ranks[r][old]))
                    for old in sorted(selected[r])
                )
            )
        ranks.append((tuple(range(len(selected[rank]))),))
        vertices = self.vertices[sorted(selected[1])]
        return Polytope(vertices=vertices, ranks=Ranks.from_lists(ranks))

    def facet(self, idx: int) -> "Polytope":
        """The facet ``idx`` as a polytope of its own, on this polytope's coordinates."""

        top = self.rank - 1
        return self._below(top - 1, self.ranks[top][idx])

    def restricted(self, facets: Iterable[int]) -> "Polytope":
        """The polytope made of the given facets only, such as one component."""

        return self._below(self.rank - 1, facets)

    def flatten(self) -> "Polytope":
        """Express the vertices in an orthonormal basis of their affine span."""

        span = Subspace.from_points(self.vertices)
        return Polytope(vertices=span.flatten_all(self.vertices), ranks=self.ranks)

    def recentered(self, center: np.ndarray) -> "Polytope":
        return Polytope(vertices=self.vertices - np.asarray(center, dtype=float), ranks=self.ranks)

    def centroid(self) -> np.ndarray:
        return self.vertices.mean(axis=0)

    def circumsphere(self) -> Optional[Tuple[np.ndarray, float]]:
        return circumsphere(self.vertices)


__all__ = ["Polytope"]
