from facetings.combiner import FacetCombiner, filter_compounds, label_compounds
from facetings.model import LevelTables, PossibleFacet
from facetings.ranks import Ranks


def _tables(multiplicities, compounds=None):
    """Tables with one ridge orbit per key; facets carry no geometry."""

    ridge_count = 1 + max((orbit for row in multiplicities for muls in row for orbit in muls), default=0)
    ones = [[] for _ in range(ridge_count)]
    for hp, row in enumerate(multiplicities):
        for f, muls in enumerate(row):
            for orbit, mul in muls.items():
                if mul == 1:
                    ones[orbit].append((hp, f))
    facets = [[PossibleFacet(Ranks.dyad(), ()) for _ in row] for row in multiplicities]
    return LevelTables(
        facets=facets,
        global_facets=[[facet.ranks for facet in row] for row in facets],
        compounds=compounds or [{} for _ in multiplicities],
        orbit_sizes=[1] * len(multiplicities),
        ridge_orbits=[[] for _ in multiplicities],
        ridge_counts=[1] * ridge_count,
        multiplicities=multiplicities,
        ones=ones,
    )


def test_single_closed_facet_is_emitted():
    tables = _tables([[{0: 2}], [{0: 1}]])
    found = list(FacetCombiner(tables, explore_compounds=False).search())
    assert found == [[(0, 0)]]


def test_two_halves_close_a_ridge():
    tables = _tables([[{0: 1}], [{0: 1}], [{0: 1}]])
    found = sorted(FacetCombiner(tables, explore_compounds=False).search())
    assert found == [[(0, 0), (1, 0)], [(0, 0), (2, 0)], [(1, 0), (2, 0)]]


def test_exotic_combinations_are_dropped():
    tables = _tables([[{0: 2, 1: 1}], [{0: 1, 1: 1}]])
    found = list(FacetCombiner(tables, explore_compounds=True).search())
    assert found == []


def test_compounds_are_explored_on_request():
    tables = _tables([[{0: 2}], [{1: 2}]])
    plain = sorted(FacetCombiner(tables, explore_compounds=False).search())
    assert plain == [[(0, 0)], [(1, 0)]]
    explored = sorted(FacetCombiner(tables, explore_compounds=True).search())
    assert explored == [[(0, 0)], [(0, 0), (1, 0)], [(1, 0)]]


def test_max_facets_stops_extension():
    tables = _tables([[{0: 2}], [{1: 2}]])
    found = sorted(FacetCombiner(tables, explore_compounds=True, max_facets=1).search())
    assert found == [[(0, 0)], [(1, 0)]]


def test_compound_facets_are_split():
    tables = _tables([[{0: 2}, {0: 2}, {0: 2}]], compounds=[{2: (0, 1)}])
    combiner = FacetCombiner(tables, explore_compounds=False)
    assert combiner.split_compounds([(0, 2)]) == [(0, 0), (0, 1)]


def test_label_compounds_finds_complement():
    sets = [[(0, 0)], [(0, 0), (1, 0)], [(1, 0)]]
    assert label_compounds(sets) == {1: (0, 2)}


def test_label_compounds_keeps_searching_other_subsets():
    sets = [[(0, 0)], [(0, 0), (1, 0)], [(0, 0), (1, 0), (2, 0)], [(2, 0)]]
    assert label_compounds(sets) == {2: (1, 3)}


def test_filter_compounds_drops_supersets():
    sets = [[(0, 0)], [(0, 0), (1, 0)], [(1, 0), (2, 0)]]
    assert filter_compounds(sets) == [0, 2]
