"""Backtracking search over facet-orbit combinations.

A combination is a sequence of ``(hyperplane orbit, facet)`` pairs together
with the multiplicity it has accumulated on every ridge orbit. Combinations
whose ridges all reach multiplicity 2 are closed facetings; any ridge above 2
kills the branch; a ridge stuck at 1 is completed with one of the facets known
to contribute exactly 1 to it.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from collections import deque
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .model import LevelTables
from .progress import RateLimitedProgress
from .types import CompoundMap, FacetId, FacetSet

logger = logging.getLogger(__name__)

_StackItem = Tuple[Tuple[FacetId, ...], int, Dict[int, int]]


class FacetCombiner:
    """Depth-first search on an explicit stack.

    ``explore_compounds`` keeps extending closed combinations with unused
    hyperplane orbits; ``max_facets`` stops extension at that many facets.
    """

    def __init__(
        self,
        tables: LevelTables,
        *,
        explore_compounds: bool,
        max_facets: Optional[int] = None,
        progress: Optional[RateLimitedProgress] = None,
    ):
        self.tables = tables
        self.explore_compounds = explore_compounds
        self.max_facets = max_facets
        self.progress = progress
        self.found = 0

    def _seed(self) -> List[_StackItem]:
        stack: List[_StackItem] = []
        for hp, row in enumerate(self.tables.facets):
            for f in range(len(row)):
                stack.append((((hp, f),), hp, {}))
        return stack

    def search(self) -> Iterator[FacetSet]:
        """Yield every closed combination with compound facets split."""

        tables = self.tables
        stack = self._seed()

        while stack:
            facets, min_hp, cached = stack.pop()
            if self.progress is not None:
                self.progress.tick(lambda: f"{self.found} facetings, {list(facets)}")

            muls = dict(cached)
            hp, f = facets[-1]
            exotic = False
            for orbit, mul in tables.multiplicities[hp][f].items():
                total = muls.get(orbit, 0) + mul
                muls[orbit] = total
                if total > 2:
                    exotic = True
                    break
            if exotic:
                continue

            open_orbits = [orbit for orbit, mul in muls.items() if mul == 1]
            at_cap = self.max_facets is not None and len(facets) == self.max_facets
            used = {facet[0] for facet in facets[1:]}

            if not open_orbits:
                self.found += 1
                yield self.split_compounds(facets)
                if at_cap or not self.explore_compounds:
                    continue
                for next_hp in range(min_hp + 1, len(tables.facets)):
                    if next_hp in used:
                        continue
                    for next_f in range(len(tables.facets[next_hp])):
                        stack.append((facets + ((next_hp, next_f),), next_hp, muls))
            else:
                if at_cap:
                    continue
                candidates = tables.ones[min(open_orbits)]
                start = bisect_right(candidates, (min_hp, float("inf")))
                for candidate in candidates[start:]:
                    if candidate[0] not in used:
                        stack.append((facets + (candidate,), min_hp, muls))

    def split_compounds(self, facets: Sequence[FacetId]) -> FacetSet:
        """Replace compound facets by their leaf components, sorted."""

        out: FacetSet = []
        for hp, idx in facets:
            queue = deque([idx])
            while queue:
                nxt = queue.popleft()
                parts = self.tables.compounds[hp].get(nxt)
                if parts is not None:
                    queue.extend(parts)
                else:
                    out.append((hp, nxt))
        out.sort()
        return out


def _is_sorted_subset(sub: Sequence[FacetId], base: Sequence[FacetId]) -> bool:
    i = 0
    for item in base:
        if sub[i] > item:
            continue
        if sub[i] < item:
            return False
        i += 1
        if i >= len(sub):
            return True
    return False


def label_compounds(sets: Sequence[FacetSet]) -> CompoundMap:
    """Map the index of each compound to the indices of two components.

    ``sets`` must be sorted lists in sorted order.
    """

    out: CompoundMap = {}
    for a, base in enumerate(sets):
        for b, sub in enumerate(sets):
            if len(sub) >= len(base):
                continue
            if sub[0] > base[0]:
                break
            if not _is_sorted_subset(sub, base):
                continue
            members = set(sub)
            complement = [item for item in base if item not in members]
            match = next((c for c in range(b + 1, len(sets)) if sets[c] == complement), None)
            if match is not None:
                out[a] = (b, match)
                break
    return out


def filter_compounds(sets: Sequence[FacetSet]) -> List[int]:
    """Indices of the sets that contain no other set of ``sets``."""

    out = []
    for a, base in enumerate(sets):
        compound = False
        for b, sub in enumerate(sets):
            if a == b or len(sub) > len(base):
                continue
            if sub[0] > base[0]:
                break
            if _is_sorted_subset(sub, base):
                compound = True
                break
        if not compound:
            out.append(a)
    return out


__all__ = ["FacetCombiner", "label_compounds", "filter_compounds"]
