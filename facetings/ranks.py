"""Immutable rank structures for abstract polytopes.

``Ranks`` stores one tuple of elements per rank; every element is the tuple of
indices of its subelements one rank down. Rank 0 is the nullitope, rank 1
holds vertex placeholders and rank 2 holds edges whose subelements are vertex
indices. Relabelling always returns a new structure.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .types import DyadicFailure, NotDyadicError

Element = Tuple[int, ...]
RankList = Tuple[Element, ...]


@dataclass(frozen=True)
class Ranks:
    ranks: Tuple[RankList, ...]

    @classmethod
    def from_lists(cls, ranks: Iterable[Iterable[Iterable[int]]]) -> "Ranks":
        return cls(tuple(tuple(tuple(el) for el in rank) for rank in ranks))

    @classmethod
    def dyad(cls) -> "Ranks":
        return cls((((),), ((0,), (0,)), ((0, 1),)))

    @classmethod
    def point(cls, vertex: int) -> "Ranks":
        """A single vertex stored the way ridges of a segment are stored."""

        return cls(((), ((0,),), ((vertex,),)))

    def __len__(self) -> int:
        return len(self.ranks)

    def __getitem__(self, rank: int) -> RankList:
        return self.ranks[rank]

    @property
    def rank(self) -> int:
        return len(self.ranks) - 1

    def counts(self) -> List[int]:
        return [len(rank) for rank in self.ranks]

    def vertex_indices(self) -> List[int]:
        """Vertices referenced by rank 2, in order of first appearance."""

        seen: Dict[int, None] = {}
        for el in self.ranks[2]:
            for v in el:
                seen.setdefault(v, None)
        return list(seen)

    def relabel_vertices(self, mapping: Union[Sequence[int], Mapping[int, int]], vertex_count: Optional[int] = None) -> "Ranks":
        """Return a copy whose rank-2 subelements go through ``mapping``."""

        edges = tuple(tuple(mapping[v] for v in el) for el in self.ranks[2])
        ranks = list(self.ranks)
        ranks[2] = edges
        if vertex_count is not None:
            ranks[1] = ((0,),) * vertex_count
        return Ranks(tuple(ranks))

    def edge_key(self) -> Tuple[Element, ...]:
        return tuple(sorted(tuple(sorted(el)) for el in self.ranks[2]))

    def skeleton_key(self) -> Tuple[RankList, ...]:
        """Ranks from the edges up; vertex placeholders carry no identity."""

        return self.ranks[2:]

    def strong_sort(self) -> "Ranks":
        """Canonical element order.

        Rank-2 subelements are sorted first; then each rank is sorted by its
        subelement tuples and the rank above is rewritten through the induced
        permutation.
        """

        ranks: List[List[Element]] = [list(rank) for rank in self.ranks]
        if len(ranks) <= 2:
            return self
        ranks[2] = [tuple(sorted(el)) for el in ranks[2]]

        for r in range(2, len(ranks) - 1):
            current = ranks[r]
            ordered = sorted(current)
            position: Dict[Element, int] = {}
            for idx, subs in enumerate(ordered):
                position.setdefault(subs, idx)
            perm = [position[subs] for subs in current]
            ranks[r] = ordered
            ranks[r + 1] = [tuple(sorted(perm[s] for s in el)) for el in ranks[r + 1]]

        return Ranks(tuple(tuple(rank) for rank in ranks))

    def check_dyadic(self) -> Optional[DyadicFailure]:
        for r in range(2, len(self.ranks)):
            below = self.ranks[r - 1]
            for idx, el in enumerate(self.ranks[r]):
                counts: Counter = Counter()
                for sub in el:
                    counts.update(set(below[sub]))
                for subsub in sorted(counts):
                    if counts[subsub] != 2:
                        return DyadicFailure(rank=r, element=idx, subelement=subsub, count=counts[subsub])
        return None

    def is_dyadic(self) -> bool:
        return self.check_dyadic() is None

    @classmethod
    def validated(cls, ranks: Iterable[Iterable[Iterable[int]]]) -> "RanksResult":
        built = ranks if isinstance(ranks, Ranks) else cls.from_lists(ranks)
        failure = built.check_dyadic()
        if failure is not None:
            return RanksResult(ranks=None, failure=failure)
        return RanksResult(ranks=built, failure=None)


@dataclass(frozen=True)
class RanksResult:
    """Either a validated structure or the reason it is not one."""

    ranks: Optional[Ranks]
    failure: Optional[DyadicFailure]

    @property
    def ok(self) -> bool:
        return self.ranks is not None

    def unwrap(self, facets: Sequence[Tuple[int, int]] = ()) -> Ranks:
        if self.ranks is None:
            assert self.failure is not None
            raise NotDyadicError(self.failure, facets)
        return self.ranks


__all__ = ["Element", "RankList", "Ranks", "RanksResult"]
