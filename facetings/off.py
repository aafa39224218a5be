"""OFF export.

Faces (rank-3 elements, or the body of a polygon) are written as vertex
cycles; higher elements as lists of indices one rank down. A face whose edges
form several cycles, such as a compound polygon, is written as one OFF face
per cycle, and the elements above it list every one of them.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Sequence, Union

from .polytope import Polytope
from .ranks import Ranks

logger = logging.getLogger(__name__)


def _face_cycles(ranks: Ranks, face: Sequence[int]) -> List[List[int]]:
    """Vertex cycles of a face in boundary order."""

    neighbours: Dict[int, List[int]] = {}
    for edge_idx in face:
        a, b = ranks[2][edge_idx]
        neighbours.setdefault(a, []).append(b)
        neighbours.setdefault(b, []).append(a)

    cycles: List[List[int]] = []
    visited = set()
    for start in sorted(neighbours):
        if start in visited:
            continue
        cycle: List[int] = []
        prev, current = None, start
        while current not in visited:
            visited.add(current)
            cycle.append(current)
            nxt = [v for v in neighbours[current] if v != prev and v not in visited]
            if not nxt:
                break
            prev, current = current, nxt[0]
        cycles.append(cycle)
    return cycles


def _format_number(value: float) -> str:
    return repr(float(value))


def to_off(polytope: Polytope) -> str:
    ranks = polytope.ranks
    top = ranks.rank
    dim = polytope.dim

    face_lines: List[List[int]] = []
    # OFF face indices written for each rank-3 element.
    face_index: List[List[int]] = []
    if top >= 3:
        for face in ranks[3]:
            written = []
            for cycle in _face_cycles(ranks, face):
                written.append(len(face_lines))
                face_lines.append(cycle)
            face_index.append(written)

    lines = ["OFF" if dim == 3 else f"{dim}OFF"]
    counts = [len(ranks[1])]
    if top >= 3:
        counts.append(len(face_lines))
    if top > 3:
        counts.append(len(ranks[2]))
        counts.extend(len(ranks[r]) for r in range(4, top))
    lines.append(" ".join(str(c) for c in counts))

    for vertex in polytope.vertices:
        lines.append(" ".join(_format_number(x) for x in vertex))

    for cycle in face_lines:
        lines.append(" ".join(str(v) for v in [len(cycle)] + cycle))
    for r in range(4, top):
        for el in ranks[r]:
            subs = sorted(i for s in el for i in face_index[s]) if r == 4 else list(el)
            lines.append(" ".join(str(v) for v in [len(subs)] + subs))
    return "\n".join(lines) + "\n"


def write_off(polytope: Polytope, path: Union[str, Path]) -> Path:
    target = Path(path)
    target.write_text(to_off(polytope), encoding="utf-8")
    logger.info("Wrote %s", target)
    return target


__all__ = ["to_off", "write_off"]
