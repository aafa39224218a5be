"""Example: facet a square under its dihedral symmetry, once per edge length."""

from facetings import FacetingOptions, faceting

VERTICES = [(1.0, 1.0), (-1.0, 1.0), (-1.0, -1.0), (1.0, -1.0)]

# Rotations and reflections of the square as vertex permutations.
VERTEX_MAP = [
    [0, 1, 2, 3],
    [1, 2, 3, 0],
    [2, 3, 0, 1],
    [3, 0, 1, 2],
    [1, 0, 3, 2],
    [3, 2, 1, 0],
    [0, 3, 2, 1],
    [2, 1, 0, 3],
]


def main() -> None:
    options = FacetingOptions(any_single_edge_length=True, mark_fissary=True)
    for polytope, name in faceting(VERTICES, VERTEX_MAP, options=options):
        print(name)
        print(f"  element counts: {polytope.element_counts()}")
        for idx, edge in enumerate(polytope.ranks[2]):
            print(f"  edge {idx}: {edge}")


if __name__ == "__main__":
    main()
