"""Options for faceting runs and their process-wide defaults."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Optional


@dataclass
class FacetingOptions:
    """Filters and output switches for :func:`facetings.faceting`.

    Edge-length and inradius windows are inclusive within ``EPS``. ``noble``
    caps the number of facet orbits per combination; a value of 1 also
    pre-filters hyperplanes by their global multiplicity.
    ``max_per_hyperplane`` caps the facetings kept for each hyperplane.
    """

    any_single_edge_length: bool = False
    min_edge_length: Optional[float] = None
    max_edge_length: Optional[float] = None
    min_inradius: Optional[float] = None
    max_inradius: Optional[float] = None
    exclude_hemis: bool = False
    only_below_vertex: bool = False
    noble: Optional[int] = None
    max_per_hyperplane: Optional[int] = None
    uniform: bool = False
    include_compounds: bool = False
    mark_fissary: bool = False
    label_facets: bool = True
    save: bool = True
    save_facets: bool = False
    save_to_file: bool = False
    file_path: str = "."
    chiral: bool = False


_DEFAULT_OPTIONS = FacetingOptions()


def get_default_options() -> FacetingOptions:
    return copy.deepcopy(_DEFAULT_OPTIONS)


def set_default_options(options: FacetingOptions) -> None:
    global _DEFAULT_OPTIONS
    _DEFAULT_OPTIONS = copy.deepcopy(options)


__all__ = ["FacetingOptions", "get_default_options", "set_default_options"]
