import numpy as np

from facetings.analysis import components, element_types, is_compound, is_fissary, is_isogonal
from facetings.polytope import Polytope
from facetings.ranks import Ranks


def _polygon_compound(cycles):
    vertex_count = sum(len(cycle) for cycle in cycles)
    edges = []
    for cycle in cycles:
        for a, b in zip(cycle, cycle[1:] + cycle[:1]):
            edges.append(tuple(sorted((a, b))))
    ranks = Ranks.from_lists([[()], [(0,)] * vertex_count, edges, [tuple(range(len(edges)))]])
    return Polytope(vertices=np.zeros((vertex_count, 2)), ranks=ranks)


def _polyhedron(vertex_count, faces):
    edges = []
    index = {}
    face_elements = []
    for face in faces:
        element = []
        for a, b in zip(face, face[1:] + face[:1]):
            key = tuple(sorted((a, b)))
            if key not in index:
                index[key] = len(edges)
                edges.append(key)
            element.append(index[key])
        face_elements.append(tuple(sorted(element)))
    ranks = Ranks.from_lists(
        [[()], [(0,)] * vertex_count, edges, face_elements, [tuple(range(len(face_elements)))]]
    )
    return Polytope(vertices=np.zeros((vertex_count, 3)), ranks=ranks)


# Two square cones sharing their apex 0, with their bases joined by a band of quads.
PINCHED = _polyhedron(
    9,
    [
        [0, 1, 2], [0, 2, 3], [0, 3, 4], [0, 4, 1],
        [0, 5, 6], [0, 6, 7], [0, 7, 8], [0, 8, 5],
        [1, 2, 6, 5], [2, 3, 7, 6], [3, 4, 8, 7], [4, 1, 5, 8],
    ],
)

TETRAHEDRON_FACES = [[0, 1, 2], [0, 1, 3], [0, 2, 3], [1, 2, 3]]


def test_hexagram_is_a_compound():
    hexagram = _polygon_compound([[0, 1, 2], [3, 4, 5]])
    assert hexagram.ranks.is_dyadic()
    assert sorted(map(sorted, components(hexagram))) == [[0, 1, 2], [3, 4, 5]]
    assert is_compound(hexagram)


def test_single_polygon_is_not_a_compound():
    square = _polygon_compound([[0, 1, 2, 3]])
    assert not is_compound(square)
    assert not is_fissary(square)


def test_pinched_torus_is_fissary_but_connected():
    assert PINCHED.ranks.is_dyadic()
    assert not is_compound(PINCHED)
    assert is_fissary(PINCHED)


def test_tetrahedron_is_neither():
    tetrahedron = _polyhedron(4, TETRAHEDRON_FACES)
    assert not is_compound(tetrahedron)
    assert not is_fissary(tetrahedron)


def _on_circle(count, radius=1.0, phase=0.0):
    angles = phase + 2.0 * np.pi * np.arange(count) / count
    return np.stack([radius * np.cos(angles), radius * np.sin(angles)], axis=1)


def _with_vertices(polytope, vertices):
    return Polytope(vertices=np.asarray(vertices, dtype=float), ranks=polytope.ranks)


def test_element_types_of_a_rectangle():
    rectangle = _with_vertices(
        _polygon_compound([[0, 1, 2, 3]]), [(2.0, 1.0), (-2.0, 1.0), (-2.0, -1.0), (2.0, -1.0)]
    )
    types = element_types(rectangle)
    assert len(set(types[1])) == 1
    assert len(set(types[2])) == 2
    assert types[2][0] == types[2][2] != types[2][1]


def test_regular_polygon_is_isogonal():
    square = _with_vertices(_polygon_compound([[0, 1, 2, 3]]), _on_circle(4))
    assert is_isogonal(square)


def test_isosceles_triangle_is_not_isogonal():
    triangle = _with_vertices(_polygon_compound([[0, 1, 2]]), [(0.0, 0.0), (1.0, 0.0), (0.5, 2.0)])
    assert not is_isogonal(triangle)


def test_vertices_at_two_radii_are_not_isogonal():
    # Equal edges, but alternate vertices sit at different distances from the centre.
    points = np.empty((8, 2))
    points[0::2] = _on_circle(4, radius=3.0)
    points[1::2] = _on_circle(4, radius=np.sqrt(2.0), phase=np.pi / 4)
    octagon = _with_vertices(_polygon_compound([list(range(8))]), points)
    assert not is_isogonal(octagon)


def test_hexagram_is_isogonal_without_any_group():
    points = _on_circle(6)
    hexagram = _with_vertices(_polygon_compound([[0, 1, 2], [3, 4, 5]]), points[[0, 2, 4, 1, 3, 5]])
    assert is_isogonal(hexagram)


def test_compound_of_different_squares_is_isogonal_per_component():
    points = np.concatenate([_on_circle(4), _on_circle(4, radius=2.0, phase=np.pi / 4)])
    compound = _with_vertices(_polygon_compound([[0, 1, 2, 3], [4, 5, 6, 7]]), points)
    assert len(set(element_types(compound)[1])) == 2
    assert is_isogonal(compound)


def test_restricted_to_one_component():
    hexagram = _polygon_compound([[0, 1, 2], [3, 4, 5]])
    triangle = hexagram.restricted(components(hexagram)[0])
    assert triangle.ranks.counts() == [1, 3, 3, 1]
    assert triangle.ranks.is_dyadic()
