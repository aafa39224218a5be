"""Entry points: enumerate facet-orbit combinations and build polytopes from them."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from .analysis import is_compound, is_fissary
from .assembler import assemble
from .combiner import FacetCombiner, filter_compounds, label_compounds
from .config import FacetingOptions, get_default_options
from .geometry import Subspace, distinct_edge_lengths
from .hyperplanes import HyperplaneOrbit, NoblePackage, enumerate_below_vertex, enumerate_general
from .logging_utils import apply_debug_logging
from .model import FacetingRun
from .off import write_off
from .orbits import normalize_vertex_map, stabilizer, vertex_map_from_matrices, vertex_orbits
from .polytope import Polytope
from .progress import ProgressObserver, rate_limited
from .recursion import facet_hyperplane
from .ridges import index_level
from .types import FacetId, FacetSet, VertexMap

logger = logging.getLogger(__name__)

MIN_RANK = 3


class SymmetrySource(Protocol):
    def vertex_map(self, vertices: np.ndarray, chiral: bool) -> VertexMap:
        ...


class MatrixSymmetry:
    """Symmetry given by the full list of its orthogonal matrices."""

    def __init__(self, matrices: Iterable[Sequence[Sequence[float]]]):
        self.matrices = [np.asarray(m, dtype=float) for m in matrices]

    def vertex_map(self, vertices: np.ndarray, chiral: bool) -> VertexMap:
        matrices = self.matrices
        if chiral:
            matrices = [m for m in matrices if np.linalg.det(m) > 0]
        return vertex_map_from_matrices(vertices, matrices)


def _as_points(vertices) -> np.ndarray:
    points = np.asarray(vertices, dtype=float)
    if points.ndim != 2 or len(points) == 0:
        raise ValueError("vertices must be a non-empty (N, d) array")
    return points


def _working_points(points: np.ndarray, rank: Optional[int]) -> Tuple[np.ndarray, int]:
    """Coordinates in the affine span of ``points`` and the rank to facet at."""

    span = Subspace.from_points(points)
    if rank is None:
        rank = span.rank + 1
    if span.rank == points.shape[1]:
        return points, rank
    origin = span.project(np.zeros(points.shape[1]))
    return Subspace(offset=origin, basis=span.basis).flatten_all(points), rank


def _edge_windows(points: np.ndarray, vertex_map: VertexMap, options: FacetingOptions):
    if not options.any_single_edge_length:
        return [(None, options.min_edge_length, options.max_edge_length)]
    reps = [orbit[0] for orbit in vertex_orbits(len(points), vertex_map)]
    lengths = distinct_edge_lengths(points, reps)
    logger.info("%d possible edge lengths", len(lengths))
    return [(length, length, length) for length in lengths]


def enumerate_facetings(
    vertices,
    vertex_map: Sequence[Sequence[int]],
    rank: Optional[int] = None,
    options: Optional[FacetingOptions] = None,
    progress: Optional[ProgressObserver] = None,
) -> List[FacetingRun]:
    """Facet-orbit combinations of the polytope, one run per edge-length window."""

    options = options or get_default_options()
    points = _as_points(vertices)
    vertex_map = normalize_vertex_map(vertex_map, len(points))
    points, rank = _working_points(points, rank)
    if rank < MIN_RANK:
        logger.warning("Faceting needs rank at least %d, got %d", MIN_RANK, rank)
        return []
    if rank > points.shape[1] + 1:
        raise ValueError(f"rank {rank} exceeds the dimension of the vertex set")

    observer = rate_limited(progress)
    runs: List[FacetingRun] = []
    for edge_length, lo, hi in _edge_windows(points, vertex_map, options):
        window = dataclasses.replace(options, min_edge_length=lo, max_edge_length=hi)
        if edge_length is not None:
            logger.info("Edge length %.6g", edge_length)

        hyperplanes: List[HyperplaneOrbit]
        if options.only_below_vertex:
            hyperplanes = enumerate_below_vertex(points, vertex_map, window, observer)
        else:
            hyperplanes = enumerate_general(points, vertex_map, rank, window, observer)
        logger.info("%d hyperplane orbit%s", len(hyperplanes), "" if len(hyperplanes) == 1 else "s")

        subfacetings = []
        for idx, hp in enumerate(hyperplanes):
            noble = NoblePackage(vertex_map, hp.vertices, hp.count) if options.noble == 1 else None
            sub = facet_hyperplane(
                rank - 1,
                hp.hyperplane,
                points[list(hp.vertices)],
                stabilizer(vertex_map, hp.vertices),
                window,
                noble=noble,
                progress=observer,
            )
            logger.info("%d: %d facets, %d verts, %d copies", idx, len(sub.facets), len(hp.vertices), hp.count)
            subfacetings.append(sub)

        tables = index_level(hyperplanes, subfacetings, vertex_map)
        combiner = FacetCombiner(
            tables,
            explore_compounds=options.include_compounds,
            max_facets=options.noble,
            progress=observer,
        )
        facet_sets: List[FacetSet] = [list(s) for s in sorted({tuple(s) for s in combiner.search()})]
        logger.info("%d facetings", len(facet_sets))

        compounds = {}
        if options.include_compounds:
            compounds = label_compounds(facet_sets)
        else:
            facet_sets = [facet_sets[i] for i in filter_compounds(facet_sets)]

        runs.append(
            FacetingRun(
                edge_length=edge_length,
                hyperplanes=hyperplanes,
                tables=tables,
                facet_sets=facet_sets,
                compounds=compounds,
            )
        )
    return runs


def _facet_label(facets: Sequence[FacetId]) -> str:
    return "".join(f" ({hp},{f})" for hp, f in facets)


def _emit(output: List[Tuple[Polytope, Optional[str]]], polytope: Polytope, name: str, options: FacetingOptions) -> None:
    if options.save_to_file:
        write_off(polytope, Path(options.file_path) / f"{name}.off")
    else:
        output.append((polytope, name))


def faceting(
    vertices,
    vertex_map: Optional[Sequence[Sequence[int]]] = None,
    *,
    rank: Optional[int] = None,
    options: Optional[FacetingOptions] = None,
    symmetry: Optional[SymmetrySource] = None,
    progress: Optional[ProgressObserver] = None,
) -> List[Tuple[Polytope, Optional[str]]]:
    """Enumerate the facetings of a polytope and build each one.

    Facetings are returned as ``(polytope, name)`` pairs, or written as OFF
    files when ``options.save_to_file`` is set.
    """

    options = options or get_default_options()
    points = _as_points(vertices)
    if vertex_map is None:
        if symmetry is None:
            raise ValueError("either a vertex map or a symmetry source is required")
        vertex_map = symmetry.vertex_map(points, options.chiral)
    vertex_map = normalize_vertex_map(vertex_map, len(points))
    _, rank = _working_points(points, rank)

    runs = enumerate_facetings(points, vertex_map, rank, options, progress)
    output: List[Tuple[Polytope, Optional[str]]] = []

    for edge_idx, run in enumerate(runs):
        used_facets = {}
        logger.info("Found %d facetings", len(run.facet_sets))
        for idx, facets in enumerate(run.facet_sets):
            label = _facet_label(facets)
            if not options.save and not options.save_facets:
                logger.info("Faceting %d:%s", idx, label)
                continue
            if not options.save and all(facet in used_facets for facet in facets):
                logger.info("Faceting %d:%s", idx, label)
                continue

            assembly = assemble(run.tables, facets, vertex_map, rank)
            polytope = Polytope(vertices=points[list(assembly.retained)], ranks=assembly.ranks)

            status = ""
            if options.mark_fissary:
                if is_compound(polytope):
                    status = " [C]"
                elif is_fissary(polytope):
                    status = " [F]"

            if options.save:
                name = "faceting {}{}{}{}".format(
                    f"{edge_idx}." if options.any_single_edge_length else "",
                    idx,
                    f" -{label}" if options.label_facets else "",
                    status,
                )
                _emit(output, polytope, name, options)

            if options.save_facets:
                for facet_id, facet_idx in assembly.first_facet.items():
                    if facet_id not in used_facets:
                        used_facets[facet_id] = polytope.facet(facet_idx)

            logger.info("Faceting %d:%s%s", idx, label, status)

        for facet_id in sorted(used_facets):
            facet = used_facets[facet_id].flatten()
            sphere = facet.circumsphere()
            facet = facet.recentered(sphere[0] if sphere is not None else facet.centroid())
            _emit(output, facet, "facet ({},{})".format(*facet_id), options)

    logger.info("Faceting complete")
    return output


apply_debug_logging(globals(), logger=logger)


__all__ = ["MIN_RANK", "SymmetrySource", "MatrixSymmetry", "enumerate_facetings", "faceting"]
