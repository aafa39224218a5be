import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from facetings import FacetingOptions, LoggingProgress, MatrixSymmetry, faceting, write_off

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _options_from_args(args: argparse.Namespace) -> FacetingOptions:
    return FacetingOptions(
        any_single_edge_length=args.any_single_edge_length,
        min_edge_length=args.min_edge_length,
        max_edge_length=args.max_edge_length,
        min_inradius=args.min_inradius,
        max_inradius=args.max_inradius,
        exclude_hemis=args.exclude_hemis,
        only_below_vertex=args.only_below_vertex,
        noble=args.noble,
        max_per_hyperplane=args.max_per_hyperplane,
        uniform=args.uniform,
        include_compounds=args.include_compounds,
        mark_fissary=args.mark_fissary,
        label_facets=not args.no_label_facets,
        save=not args.no_save,
        save_facets=args.save_facets,
        save_to_file=False,
        chiral=args.chiral,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Enumerate the facetings of a polytope")
    parser.add_argument(
        "path",
        help="JSON file with 'vertices' and either 'vertex_map' or 'matrices'",
    )
    parser.add_argument("--rank", type=int, help="Rank to facet at (default: dimension + 1)")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument("--output-dir", help="Write every result as an OFF file into this directory")
    parser.add_argument("--any-single-edge-length", action="store_true", help="Facet once per distinct edge length")
    parser.add_argument("--min-edge-length", type=float)
    parser.add_argument("--max-edge-length", type=float)
    parser.add_argument("--min-inradius", type=float)
    parser.add_argument("--max-inradius", type=float)
    parser.add_argument("--exclude-hemis", action="store_true", help="Skip hyperplanes through the centre")
    parser.add_argument("--only-below-vertex", action="store_true", help="Only use hyperplanes orthogonal to a vertex")
    parser.add_argument("--noble", type=int, help="Maximum number of facet orbits")
    parser.add_argument("--max-per-hyperplane", type=int, help="Cap on the facetings kept per hyperplane")
    parser.add_argument("--uniform", action="store_true", help="Only keep isogonal facets")
    parser.add_argument("--include-compounds", action="store_true")
    parser.add_argument("--mark-fissary", action="store_true")
    parser.add_argument("--no-label-facets", action="store_true", help="Leave facet orbits out of result names")
    parser.add_argument("--no-save", action="store_true", help="Only log the facet orbits of each faceting")
    parser.add_argument("--save-facets", action="store_true")
    parser.add_argument("--chiral", action="store_true", help="Use the rotation subgroup of 'matrices'")
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    with open(args.path) as fin:
        data = json.load(fin)

    vertices = data["vertices"]
    vertex_map = data.get("vertex_map")
    symmetry = None
    if vertex_map is None:
        if "matrices" not in data:
            logger.error("Input needs either 'vertex_map' or 'matrices'")
            raise SystemExit(1)
        symmetry = MatrixSymmetry(data["matrices"])

    logger.info("Loaded %d vertices from %s", len(vertices), args.path)
    results = faceting(
        vertices,
        vertex_map,
        rank=args.rank,
        options=_options_from_args(args),
        symmetry=symmetry,
        progress=LoggingProgress(),
    )
    logger.info("Produced %d result(s)", len(results))

    if args.output_dir:
        out_dir = Path(args.output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        for polytope, name in results:
            write_off(polytope, out_dir / f"{name}.off")
    else:
        for _, name in results:
            print(name)


if __name__ == "__main__":
    main()
