import itertools

import numpy as np
import pytest

from facetings import normalize_vertex_map, vertex_map_from_matrices
from facetings.config import FacetingOptions
from facetings.hyperplanes import enumerate_general
from facetings.orbits import stabilizer
from facetings.recursion import facet_hyperplane
from facetings.ridges import index_level

SQUARE = np.array([(1.0, 1.0), (-1.0, 1.0), (-1.0, -1.0), (1.0, -1.0)])

SQUARE_MAP = [
    [0, 1, 2, 3],
    [1, 2, 3, 0],
    [2, 3, 0, 1],
    [3, 0, 1, 2],
    [1, 0, 3, 2],
    [3, 2, 1, 0],
    [0, 3, 2, 1],
    [2, 1, 0, 3],
]


def signed_permutations(dim):
    """Every signed permutation matrix of size ``dim``: the symmetries of the ``dim``-cube."""

    out = []
    for perm in itertools.permutations(range(dim)):
        for signs in itertools.product((-1.0, 1.0), repeat=dim):
            matrix = np.zeros((dim, dim))
            for row, (col, sign) in enumerate(zip(perm, signs)):
                matrix[row, col] = sign
            out.append(matrix)
    return out


def octahedral_matrices():
    return signed_permutations(3)


def rotations(matrices):
    return [matrix for matrix in matrices if np.linalg.det(matrix) > 0]


def symmetric_vertex_map(vertices, matrices):
    return normalize_vertex_map(vertex_map_from_matrices(vertices, matrices), len(vertices))


@pytest.fixture
def square():
    return SQUARE.copy(), [list(row) for row in SQUARE_MAP]


@pytest.fixture
def square_tables(square):
    points, vertex_map = square
    hyperplanes = enumerate_general(points, vertex_map, 3, FacetingOptions())
    subs = [
        facet_hyperplane(2, hp.hyperplane, points[list(hp.vertices)], stabilizer(vertex_map, hp.vertices), FacetingOptions())
        for hp in hyperplanes
    ]
    return index_level(hyperplanes, subs, vertex_map)


@pytest.fixture
def cube():
    vertices = np.array(list(itertools.product((-1.0, 1.0), repeat=3)))
    return vertices, symmetric_vertex_map(vertices, octahedral_matrices())


@pytest.fixture
def chiral_cuboctahedron():
    """Cuboctahedron with the rotation group of the cube."""

    vertices = []
    for zero in range(3):
        for a, b in itertools.product((-1.0, 1.0), repeat=2):
            vertex = [a, b]
            vertex.insert(zero, 0.0)
            vertices.append(vertex)
    vertices = np.array(vertices)
    return vertices, symmetric_vertex_map(vertices, rotations(octahedral_matrices()))


@pytest.fixture
def tesseract():
    vertices = np.array(list(itertools.product((-1.0, 1.0), repeat=4)))
    return vertices, symmetric_vertex_map(vertices, signed_permutations(4))
