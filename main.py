#!/usr/bin/env python3
"""
Deployments Explorer — Entry Point
===================================

Loads the deployments markdown, applies search/filters and prints the
matching sections as cards or as one flat table.

Usage:
    python main.py                                   # ./deployments.md, card view
    python main.py --network mainnet --view table
    python main.py --source https://example.org/deployments.md --fallback ./deployments.md
    DEPLOYMENTS_SOURCE=... python main.py --search token
"""

from __future__ import annotations

import argparse
import logging
import sys

from deployments_explorer.config import Settings
from deployments_explorer.exceptions import DocumentLoadError
from deployments_explorer.explorer import DeploymentsExplorer
from deployments_explorer.models import Entry, ViewMode
from deployments_explorer.search import entry_networks


# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72


# ─── Pretty Printer Helpers ─────────────────────────────────────────


def _plural(count: int) -> str:
    return f"{count} entr{'y' if count == 1 else 'ies'}"


def _print_cards(entries: list[Entry]) -> None:
    """One block per section: title, category badge, network and row chips."""
    for entry in entries:
        print(f"  {_BOLD}{entry.title}{_RESET}  {_CYAN}[{entry.category}]{_RESET}")
        print(f"    {_DIM}{', '.join(entry_networks(entry))}  ·  {_plural(len(entry.rows))}{_RESET}")
        for row in entry.rows:
            link = row.explorer_url or ""
            print(f"    {row.network:<12} {row.address}  {_DIM}{link}{_RESET}")
        print()


def _print_table(entries: list[Entry]) -> None:
    """Every visible row on its own line, prefixed by its section."""
    print(f"  {_BOLD}Category | Title | Network | Address | Explorer | Constructor Args | Salt{_RESET}")
    for entry in entries:
        for row in entry.rows:
            print(
                f"  {entry.category} | {entry.title} | {row.network} | {row.address} | "
                f"{row.explorer_url or ''} | {row.args} | {row.salt}"
            )
    print()


# ─── Pretty Printer ─────────────────────────────────────────────────


def print_report(explorer: DeploymentsExplorer) -> int:
    """Print the filtered view. Returns 0."""
    entries = explorer.visible_entries()
    filters = explorer.filters

    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  DEPLOYMENTS{_RESET}")
    print(f"{'=' * _WIDTH}")
    if explorer.document:
        print(f"  Source:      {explorer.document.origin}")
    print(f"  Status:      {explorer.loaded_text()}")
    print(f"  Network:     {filters.network or 'All'}")
    print(f"  Category:    {filters.category or 'All'}")
    if filters.search:
        print(f"  Search:      {filters.search}")
    print(f"{'─' * _WIDTH}")

    if filters.view == ViewMode.TABLE:
        _print_table(entries)
    else:
        _print_cards(entries)

    print(f"{'=' * _WIDTH}")
    color = _GREEN if entries else _YELLOW
    print(f"  {color}{_BOLD}{explorer.status_text()}{_RESET}")
    print(f"{'=' * _WIDTH}\n")
    return 0


# ─── Main ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search and filter contract deployments.")
    parser.add_argument("--source", help="URL or path of the deployments markdown")
    parser.add_argument("--fallback", help="path (or URL) to use if --source cannot be loaded")
    parser.add_argument("--search", default="", help="case-insensitive text to match")
    parser.add_argument("--network", default="", help="only rows on this network")
    parser.add_argument("--category", default="", help="only sections in this category")
    parser.add_argument(
        "--view", choices=[m.value for m in ViewMode], default=ViewMode.CARDS.value
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log parser activity")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Load, filter and print. Exit code 1 if the document cannot be loaded."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    explorer = DeploymentsExplorer(Settings())
    try:
        explorer.load(args.source, args.fallback)
    except DocumentLoadError as e:
        print(f"\n  {_RED}{_BOLD}Could not load {e.source}{_RESET}: {e.reason}", file=sys.stderr)
        print("  Pass --fallback <path> (or --source <path>) to load it from disk.\n", file=sys.stderr)
        return 1

    explorer.update_filters(
        search=args.search, network=args.network, category=args.category, view=args.view
    )
    return print_report(explorer)


if __name__ == "__main__":
    sys.exit(main())
