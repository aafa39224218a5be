import numpy as np
import pytest

from facetings.orbits import (
    act_on_set,
    normalize_vertex_map,
    pair_orbits,
    set_orbit,
    stabilizer,
    vertex_map_from_matrices,
    vertex_orbits,
)


def test_vertex_orbits_partition_every_vertex_once(cube):
    vertices, vertex_map = cube
    orbits = vertex_orbits(len(vertices), vertex_map)
    flat = sorted(v for orbit in orbits for v in orbit)
    assert flat == list(range(len(vertices)))
    assert len(orbits) == 1


def test_vertex_orbits_with_trivial_group_are_singletons():
    orbits = vertex_orbits(3, [[0, 1, 2]])
    assert orbits == [[0], [1], [2]]


def test_pair_orbits_of_square(square):
    points, vertex_map = square
    orbits = pair_orbits(points, vertex_map, vertex_orbits(4, vertex_map))
    assert [orbit[0] for orbit in orbits] == [(0, 1), (0, 2)]
    assert sorted(orbits[0]) == [(0, 1), (0, 3), (1, 2), (2, 3)]
    assert sorted(orbits[1]) == [(0, 2), (1, 3)]


def test_pair_orbits_respect_edge_window(square):
    points, vertex_map = square
    orbits = pair_orbits(points, vertex_map, vertex_orbits(4, vertex_map), 2.5, None)
    assert [orbit[0] for orbit in orbits] == [(0, 2)]


def test_set_orbit_and_act_on_set(square):
    _, vertex_map = square
    assert act_on_set([1, 2, 3, 0], (0, 3)) == (0, 1)
    assert sorted(set_orbit((0, 2), vertex_map)) == [(0, 2), (1, 3)]


def test_stabilizer_is_local_and_starts_with_identity(square):
    _, vertex_map = square
    local = stabilizer(vertex_map, (0, 2))
    assert local[0] == [0, 1]
    assert len(local) == 4
    assert sorted(map(tuple, local)) == [(0, 1), (0, 1), (1, 0), (1, 0)]


def test_normalize_moves_identity_first():
    rows = normalize_vertex_map([[1, 0], [0, 1]], 2)
    assert rows == [[0, 1], [1, 0]]


@pytest.mark.parametrize(
    "rows",
    [
        [[1, 0]],
        [[0, 1], [0, 0]],
        [[0, 1, 2]],
    ],
)
def test_normalize_rejects_bad_maps(rows):
    with pytest.raises(ValueError):
        normalize_vertex_map(rows, 2)


def test_vertex_map_from_matrices_realizes_the_cube_group(cube):
    vertices, vertex_map = cube
    assert len(vertex_map) == 48
    assert len({tuple(row) for row in vertex_map}) == 48
    for row in vertex_map:
        assert sorted(row) == list(range(8))


def test_vertex_map_from_matrices_rejects_non_symmetries():
    vertices = np.array([(1.0, 0.0), (-1.0, 0.0)])
    stretch = np.diag([2.0, 1.0])
    with pytest.raises(ValueError):
        vertex_map_from_matrices(vertices, [np.eye(2), stretch])
