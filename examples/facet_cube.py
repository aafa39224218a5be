"""Example: enumerate the facetings of the cube from its 48 symmetry matrices."""

import itertools

import numpy as np

from facetings import FacetingOptions, MatrixSymmetry, faceting, to_off

VERTICES = [tuple(p) for p in itertools.product((-1.0, 1.0), repeat=3)]


def octahedral_matrices():
    for perm in itertools.permutations(range(3)):
        for signs in itertools.product((-1.0, 1.0), repeat=3):
            matrix = np.zeros((3, 3))
            for row, (col, sign) in enumerate(zip(perm, signs)):
                matrix[row, col] = sign
            yield matrix


def main() -> None:
    options = FacetingOptions(mark_fissary=True, save_facets=True)
    results = faceting(VERTICES, symmetry=MatrixSymmetry(octahedral_matrices()), options=options)
    print(f"{len(results)} results")
    for polytope, name in results:
        print(f"{name}: {polytope.element_counts()}")
    if results:
        print(to_off(results[0][0]))


if __name__ == "__main__":
    main()
