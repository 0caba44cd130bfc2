"""CLI entry point for the candidate directory search."""

import argparse
import logging
import sys
from pathlib import Path

from src.core.candidates import load_candidates
from src.core.config import SUPPORTED_LOCALES, Settings
from src.core.db import get_search_logs_by_user, init_db
from src.core.schemas import CareSetting
from src.pipeline.orchestrator import care_setting_sections, export_results_json, run_search
from src.pipeline.query_parser import parse_search_query

DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to settings YAML file (default: {DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def _add_candidate_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--candidates",
        default=None,
        help="Path to candidates YAML/JSON file (default: candidates.path from settings)",
    )
    parser.add_argument(
        "--locale",
        choices=list(SUPPORTED_LOCALES),
        default=None,
        help="Profile locale (default: candidates.locale from settings)",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Candidate directory search - filter candidates with a free-text query",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- search ---
    search_parser = subparsers.add_parser("search", help="Filter candidates with a query")
    search_parser.add_argument("query", nargs="?", default="", help="Free-text search query")
    _add_candidate_arguments(search_parser)
    search_parser.add_argument(
        "--section",
        choices=[s.value for s in CareSetting],
        help="Only candidates with experience in this care setting",
    )
    search_parser.add_argument(
        "--name",
        action="append",
        default=[],
        dest="names",
        help="Show exactly these candidates (repeatable); overrides the query filter",
    )
    search_parser.add_argument(
        "--employer",
        help="Record the search in the search log under this employer username",
    )
    search_parser.add_argument(
        "--export",
        choices=["json"],
        help="Export results to format (json)",
    )
    _add_common_arguments(search_parser)

    # --- explain ---
    explain_parser = subparsers.add_parser(
        "explain",
        help="Show how a query is parsed into search criteria",
    )
    explain_parser.add_argument("query", help="Free-text search query")
    _add_common_arguments(explain_parser)

    # --- sections ---
    sections_parser = subparsers.add_parser(
        "sections",
        help="Count candidates per care setting",
    )
    _add_candidate_arguments(sections_parser)
    _add_common_arguments(sections_parser)

    # --- search-log ---
    log_parser = subparsers.add_parser("search-log", help="List recorded searches by employer")
    log_parser.add_argument("--employer", help="Only show this employer's searches")
    _add_common_arguments(log_parser)

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_settings(path: str | None) -> Settings:
    """Load settings from an explicit path, the default path, or built-in defaults."""
    if path is not None:
        return Settings.from_yaml(path)
    if DEFAULT_CONFIG_PATH.exists():
        return Settings.from_yaml(DEFAULT_CONFIG_PATH)
    return Settings()


def cmd_search(args: argparse.Namespace, settings: Settings) -> None:
    """Handle search subcommand."""
    candidates = load_candidates(
        args.candidates or settings.candidates.path,
        args.locale or settings.candidates.locale,
    )
    conn = init_db(settings.database.path) if args.employer else None
    try:
        result = run_search(
            args.query,
            candidates,
            section=CareSetting(args.section) if args.section else None,
            candidate_names=args.names,
            conn=conn,
            employer=args.employer,
            vocabulary=settings.vocabulary,
        )
    finally:
        if conn is not None:
            conn.close()

    if args.export == "json":
        print(export_results_json(result))
        return

    print(f"{len(result.matched)} of {result.total_count} candidates match '{result.query}'")
    for c in result.matched:
        settings_text = ", ".join(sorted(s.value for s in c.care_settings)) or "-"
        print(f"  {c.full_name} ({c.profession or 'n/a'}) [{settings_text}]")


def cmd_explain(args: argparse.Namespace, settings: Settings) -> None:
    """Handle explain subcommand."""
    criteria = parse_search_query(args.query, settings.vocabulary)
    print(f"Query: {criteria.raw_query!r}")
    print(f"  Keywords: {sorted(criteria.keywords)}")
    print(f"  Care settings: {sorted(s.value for s in criteria.required_care_settings)}")
    print(f"  Age less than: {criteria.age_less_than}")
    print(f"  Age greater than: {criteria.age_greater_than}")
    if criteria.is_empty:
        print("  (matches every candidate)")


def cmd_sections(args: argparse.Namespace, settings: Settings) -> None:
    """Handle sections subcommand."""
    candidates = load_candidates(
        args.candidates or settings.candidates.path,
        args.locale or settings.candidates.locale,
    )
    print(f"{len(candidates)} candidates")
    for setting, count in care_setting_sections(candidates):
        print(f"  {setting.value}: {count}")


def cmd_search_log(args: argparse.Namespace, settings: Settings) -> None:
    """Handle search-log subcommand."""
    conn = init_db(settings.database.path)
    try:
        grouped = get_search_logs_by_user(conn)
    finally:
        conn.close()

    if args.employer:
        grouped = {args.employer: grouped.get(args.employer, [])}
    if not any(grouped.values()):
        print("No searches recorded.")
        return
    for employer, logs in grouped.items():
        print(f"{employer}: {len(logs)} searches")
        for log in logs:
            names = ", ".join(log.candidate_names) or "-"
            print(f"  {log.searched_at:%Y-%m-%d %H:%M} '{log.query}' -> {names}")


COMMANDS = {
    "search": cmd_search,
    "explain": cmd_explain,
    "sections": cmd_sections,
    "search-log": cmd_search_log,
}


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        COMMANDS[args.command](args, settings)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
