import logging

import numpy as np
import pytest

from facetings import (
    FacetingOptions,
    MatrixSymmetry,
    enumerate_facetings,
    faceting,
)
from facetings.analysis import is_compound
from facetings.assembler import assemble
from facetings.polytope import Polytope

from conftest import SQUARE_MAP, octahedral_matrices


def test_square_facets_to_itself(square):
    points, vertex_map = square
    results = faceting(points, vertex_map)
    assert [name for _, name in results] == ["faceting 0 - (0,0)"]
    polytope = results[0][0]
    assert polytope.ranks.counts() == [1, 4, 4, 1]
    assert polytope.ranks.is_dyadic()
    assert polytope.vertices.shape == (4, 2)


def test_square_with_side_length_window(square):
    points, vertex_map = square
    options = FacetingOptions(min_edge_length=2.0, max_edge_length=2.0)
    assert [name for _, name in faceting(points, vertex_map, options=options)] == ["faceting 0 - (0,0)"]


def test_any_single_edge_length_iterates_both_lengths(square):
    points, vertex_map = square
    options = FacetingOptions(any_single_edge_length=True)
    runs = enumerate_facetings(points, vertex_map, options=options)
    assert [run.edge_length for run in runs] == pytest.approx([2.0, 2.0 * np.sqrt(2.0)])
    assert runs[0].facet_sets == [[(0, 0)]]
    # Diagonals alone cover every vertex once, so nothing closes at that length.
    assert [hp.vertices for hp in runs[1].hyperplanes] == [(0, 2)]
    assert runs[1].tables.multiplicities == [[{0: 1}]]
    assert runs[1].facet_sets == []

    results = faceting(points, vertex_map, options=options)
    assert [name for _, name in results] == ["faceting 0.0 - (0,0)"]
    for polytope, _ in results:
        assert polytope.ranks.is_dyadic()


def test_unlabelled_names(square):
    points, vertex_map = square
    options = FacetingOptions(label_facets=False)
    assert [name for _, name in faceting(points, vertex_map, options=options)] == ["faceting 0"]


def test_nothing_saved_only_logs(square, caplog):
    points, vertex_map = square
    caplog.set_level(logging.INFO, logger="facetings.driver")
    assert faceting(points, vertex_map, options=FacetingOptions(save=False)) == []
    assert "Faceting 0: (0,0)" in caplog.text


def test_save_facets_recentres_each_facet(square):
    points, vertex_map = square
    results = faceting(points, vertex_map, options=FacetingOptions(save_facets=True))
    names = [name for _, name in results]
    assert names == ["faceting 0 - (0,0)", "facet (0,0)"]
    edge = results[1][0]
    assert edge.vertices.shape == (2, 1)
    assert sorted(edge.vertices[:, 0]) == pytest.approx([-1.0, 1.0])
    assert edge.ranks.counts() == [1, 2, 1]


def test_save_to_file(square, tmp_path):
    points, vertex_map = square
    options = FacetingOptions(save_to_file=True, file_path=str(tmp_path))
    assert faceting(points, vertex_map, options=options) == []
    written = tmp_path / "faceting 0 - (0,0).off"
    assert written.read_text(encoding="utf-8").startswith("2OFF\n4 1\n")


def test_rank_below_three_is_rejected(square, caplog):
    points, vertex_map = square
    with caplog.at_level(logging.WARNING):
        assert faceting(points, vertex_map, rank=2) == []
    assert "rank at least 3" in caplog.text


def test_vertex_map_or_symmetry_required(square):
    points, _ = square
    with pytest.raises(ValueError):
        faceting(points)


def test_symmetry_source_is_consulted(square):
    points, _ = square
    calls = []

    class Source:
        def vertex_map(self, vertices, chiral):
            calls.append((len(vertices), chiral))
            return SQUARE_MAP

    results = faceting(points, symmetry=Source(), options=FacetingOptions(chiral=True))
    assert calls == [(4, True)]
    assert len(results) == 1


def test_cube_facetings(cube):
    points, vertex_map = cube
    results = faceting(points, vertex_map, options=FacetingOptions(mark_fissary=True))
    assert [name for _, name in results] == ["faceting 0 - (0,0)", "faceting 1 - (2,0) [C]"]
    assert [polytope.element_counts() for polytope, _ in results] == [[8, 12, 6], [8, 12, 8]]
    for polytope, _ in results:
        assert polytope.ranks.is_dyadic()


def test_cube_runs_are_closed(cube):
    points, vertex_map = cube
    [run] = enumerate_facetings(points, vertex_map, options=FacetingOptions(include_compounds=True))
    for facets in run.facet_sets:
        assembly = assemble(run.tables, facets, vertex_map, 4)
        assert assembly.ranks.is_dyadic()
        used = {}
        for hp, f in facets:
            for orbit, mul in run.tables.multiplicities[hp][f].items():
                used[orbit] = used.get(orbit, 0) + mul
        assert set(used.values()) == {2}


def test_cube_from_matrices_and_chiral_group():
    points = np.array([(x, y, z) for x in (-1.0, 1.0) for y in (-1.0, 1.0) for z in (-1.0, 1.0)])
    symmetry = MatrixSymmetry(octahedral_matrices())
    full = faceting(points, symmetry=symmetry)
    assert len(full) == 2
    chiral = faceting(points, symmetry=symmetry, options=FacetingOptions(chiral=True))
    assert len(chiral) >= 2
    for polytope, _ in chiral:
        assert polytope.ranks.is_dyadic()


def test_cube_save_facets(cube):
    points, vertex_map = cube
    results = faceting(points, vertex_map, options=FacetingOptions(save=False, save_facets=True))
    names = [name for _, name in results]
    assert names == ["facet (0,0)", "facet (2,0)"]
    square, triangle = results[0][0], results[1][0]
    assert square.vertices.shape == (4, 2)
    assert np.allclose(np.linalg.norm(square.vertices, axis=1), np.sqrt(2.0))
    assert np.allclose(triangle.vertices.mean(axis=0), 0.0, atol=1e-6)


def test_cube_compound_labels_round_trip(cube):
    points, vertex_map = cube
    [run] = enumerate_facetings(points, vertex_map, options=FacetingOptions(include_compounds=True))
    assert run.facet_sets == [[(0, 0)], [(0, 0), (2, 0)], [(2, 0)]]
    assert run.compounds == {1: (0, 2)}

    for whole, (first, second) in run.compounds.items():
        assert sorted(run.facet_sets[first] + run.facet_sets[second]) == run.facet_sets[whole]
        for part in (first, second):
            assert assemble(run.tables, run.facet_sets[part], vertex_map, 4).ranks.is_dyadic()
        assembly = assemble(run.tables, run.facet_sets[whole], vertex_map, 4)
        assert is_compound(Polytope(vertices=points[list(assembly.retained)], ranks=assembly.ranks))


def test_compounds_are_dropped_by_default(cube):
    points, vertex_map = cube
    [run] = enumerate_facetings(points, vertex_map)
    assert run.facet_sets == [[(0, 0)], [(2, 0)]]
    assert run.compounds == {}


def test_tesseract_facetings(tesseract):
    points, vertex_map = tesseract
    options = FacetingOptions(min_edge_length=2.0, max_edge_length=2.0 * np.sqrt(2.0))
    results = faceting(points, vertex_map, options=options)
    assert len(results) == 7
    for polytope, _ in results:
        assert polytope.rank == 5
        assert polytope.ranks.is_dyadic()
    assert [16, 32, 24, 8] in [polytope.element_counts() for polytope, _ in results]
