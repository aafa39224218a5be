from .analysis import components, element_types, is_compound, is_fissary, is_isogonal
from .assembler import Assembly, assemble
from .combiner import FacetCombiner, filter_compounds, label_compounds
from .config import FacetingOptions, get_default_options, set_default_options
from .driver import MIN_RANK, MatrixSymmetry, SymmetrySource, enumerate_facetings, faceting
from .geometry import EPS, Subspace
from .hyperplanes import (
    HyperplaneOrbit,
    NoblePackage,
    enumerate_below_vertex,
    enumerate_general,
    enumerate_in_subspace,
)
from .model import FacetingRun, LevelTables, PossibleFacet, SubFaceting
from .off import to_off, write_off
from .orbits import (
    normalize_vertex_map,
    pair_orbits,
    partition,
    stabilizer,
    vertex_map_from_matrices,
    vertex_orbits,
)
from .polytope import Polytope
from .progress import LoggingProgress, ProgressObserver, RateLimitedProgress
from .ranks import Ranks, RanksResult
from .recursion import facet_hyperplane
from .ridges import RidgeOrbitIndexer, index_level
from .types import (
    DyadicFailure,
    FacetingError,
    NotDyadicError,
    RidgeMultiplicityError,
    VertexMap,
)

__all__ = [
    "components",
    "element_types",
    "is_compound",
    "is_fissary",
    "is_isogonal",
    "Assembly",
    "assemble",
    "FacetCombiner",
    "filter_compounds",
    "label_compounds",
    "FacetingOptions",
    "get_default_options",
    "set_default_options",
    "MIN_RANK",
    "MatrixSymmetry",
    "SymmetrySource",
    "enumerate_facetings",
    "faceting",
    "EPS",
    "Subspace",
    "HyperplaneOrbit",
    "NoblePackage",
    "enumerate_below_vertex",
    "enumerate_general",
    "enumerate_in_subspace",
    "FacetingRun",
    "LevelTables",
    "PossibleFacet",
    "SubFaceting",
    "to_off",
    "write_off",
    "normalize_vertex_map",
    "pair_orbits",
    "partition",
    "stabilizer",
    "vertex_map_from_matrices",
    "vertex_orbits",
    "Polytope",
    "LoggingProgress",
    "ProgressObserver",
    "RateLimitedProgress",
    "Ranks",
    "RanksResult",
    "facet_hyperplane",
    "RidgeOrbitIndexer",
    "index_level",
    "DyadicFailure",
    "FacetingError",
    "NotDyadicError",
    "RidgeMultiplicityError",
    "VertexMap",
]
