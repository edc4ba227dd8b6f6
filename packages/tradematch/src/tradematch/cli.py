"""CLI tool for matching intake descriptions against the service catalogue."""

from __future__ import annotations

import argparse
import sys

import pandas as pd
import structlog

from tradematch.config import MatchConfig
from tradematch.errors import MalformedCatalogue
from tradematch.io import filter_results, load_catalogue, read_intakes, results_frame, write_results
from tradematch.logging import configure_logging
from tradematch.matcher import ServiceMatcher
from tradematch.types import MatchResult


def _build_config(args: argparse.Namespace) -> MatchConfig:
    config = MatchConfig()
    if args.lenient:
        config.catalogue.strict = False
    return config


def _build_matcher(args: argparse.Namespace) -> ServiceMatcher:
    log = structlog.get_logger()
    log.info("build_matcher_start", catalogue=args.catalogue or "default", lenient=args.lenient)
    matcher = ServiceMatcher(_build_config(args))
    matcher.load(load_catalogue(args.catalogue))
    return matcher


def _show_results(results: list[MatchResult]) -> None:
    if not results:
        print("\n=== No matching services ===")
        return
    df = results_frame(results)
    print(f"\n=== Results ({len(results)}) ===")
    print(df[["position", "shortName", "unit", "score", "why"]].to_string(index=False))


def cmd_match(args: argparse.Namespace) -> None:
    matcher = _build_matcher(args)
    results = matcher.match(args.description, args.difficult_access, args.top)
    shown = filter_results(results, args.filter or "", descending=not args.asc)

    _show_results(shown)
    if args.filter:
        print(f"\n{len(shown)} of {len(results)} items")

    if args.output:
        write_results(shown, args.output)
        print(f"\nSaved to: {args.output}")


def cmd_batch(args: argparse.Namespace) -> None:
    log = structlog.get_logger()
    queries = read_intakes(args.input)
    log.info("intakes_loaded", count=len(queries), path=args.input)

    matcher = _build_matcher(args)
    for query in queries:
        query.top_n = args.top
    all_results = matcher.match_all(queries)

    rows = []
    for i, (query, results) in enumerate(zip(queries, all_results)):
        frame = results_frame(results)
        frame.insert(0, "intake", i)
        frame.insert(1, "description", query.description)
        frame.insert(2, "difficult_access", query.difficult_access)
        rows.append(frame)
    df_out = pd.concat(rows, ignore_index=True) if rows else pd.DataFrame()

    s = matcher.stats
    print(f"Intakes: {s.queries} (empty: {s.empty_queries})")
    print(f"Results: {s.results_returned}")

    if args.output.endswith(".xlsx"):
        df_out.to_excel(args.output, index=False)
    else:
        df_out.to_csv(args.output, index=False)
    print(f"\nSaved to: {args.output}")


def cmd_catalogue(args: argparse.Namespace) -> None:
    matcher = _build_matcher(args)
    df = pd.DataFrame([
        {
            "position": item.position,
            "shortName": item.short_name,
            "unit": item.unit,
            "category": item.category,
            "categoryName": item.category_name,
            "hero": item.hero,
        }
        for item in matcher.items
    ])
    if args.filter and not df.empty:
        needle = args.filter.lower()
        mask = df.apply(lambda row: any(needle in str(v).lower() for v in row), axis=1)
        df = df[mask]

    if df.empty:
        print("No catalogue items.")
        return
    print(df.to_string(index=False))
    print(f"\n{len(df)} of {len(matcher.items)} items")


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from tradematch.server import create_app

    log = structlog.get_logger()
    log.info("server_start", host=args.host, port=args.port)
    app = create_app(catalogue_path=args.catalogue, config=_build_config(args))
    uvicorn.run(app, host=args.host, port=args.port, log_level="warning")


def _global_options(suppress_defaults: bool) -> argparse.ArgumentParser:
    """Options accepted both before and after the subcommand.

    Subcommand copies use SUPPRESS defaults so they never overwrite a value
    given before the subcommand.
    """

    def default(value):
        return argparse.SUPPRESS if suppress_defaults else value

    options = argparse.ArgumentParser(add_help=False)
    options.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=default("WARNING"),
        help="Set logging level (default: WARNING)",
    )
    options.add_argument(
        "--catalogue",
        default=default(None),
        help="Catalogue JSON file (default: $TRADEMATCH_CATALOGUE or bundled sample)",
    )
    options.add_argument(
        "--lenient",
        action="store_true",
        default=default(False),
        help="Skip malformed trades/positions instead of failing",
    )
    return options


def build_parser() -> argparse.ArgumentParser:
    parent_parser = _global_options(suppress_defaults=True)

    parser = argparse.ArgumentParser(
        description="Match problem descriptions to trade service positions",
        parents=[_global_options(suppress_defaults=False)],
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    match_parser = subparsers.add_parser("match", parents=[parent_parser], help="Match one description")
    match_parser.add_argument("description", help="Free-text problem description (German or English)")
    match_parser.add_argument("--difficult-access", action="store_true", help="Site is difficult to access")
    match_parser.add_argument("--top", type=int, default=None, help="Number of results (default: 15)")
    match_parser.add_argument("--filter", "-f", help="Only show results containing this string")
    match_parser.add_argument("--asc", action="store_true", help="Sort by score ascending")
    match_parser.add_argument("--output", "-o", help="Write results to .json, .csv or .xlsx")
    match_parser.set_defaults(func=cmd_match)

    batch_parser = subparsers.add_parser("batch", parents=[parent_parser], help="Match a file of intakes")
    batch_parser.add_argument("input", help="CSV or JSONL with description[,difficult_access]")
    batch_parser.add_argument("--top", type=int, default=None, help="Results per intake (default: 15)")
    batch_parser.add_argument("--output", "-o", default="matching_results.csv", help="Output .csv or .xlsx")
    batch_parser.set_defaults(func=cmd_batch)

    catalogue_parser = subparsers.add_parser("catalogue", parents=[parent_parser], help="List catalogue items")
    catalogue_parser.add_argument("--filter", "-f", help="Filter items (case-insensitive)")
    catalogue_parser.set_defaults(func=cmd_catalogue)

    serve_parser = subparsers.add_parser("serve", parents=[parent_parser], help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8765, help="Server port (default: 8765)")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        args.func(args)
    except MalformedCatalogue as e:
        print(f"Malformed catalogue: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"Cannot read file: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
