"""
Search and filtering over parsed entries.

These are pure functions: they take a parse result (or its entries) plus
the current FilterParams and derive the visible subset. Nothing is cached
and nothing is mutated, so a presentation layer simply calls them again
whenever a parameter changes.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import Entry, FilterParams, Row


def searchable_text(entry: Entry, row: Row) -> str:
    """Lower-cased haystack for free-text search over one row."""
    return (
        f"{entry.title} {entry.category} {row.network} {row.address} "
        f"{row.explorer} {row.args} {row.salt}"
    ).lower()


def row_matches(entry: Entry, row: Row, params: FilterParams) -> bool:
    """True if a row passes the network filter and the search query."""
    if params.network and row.network != params.network:
        return False
    if not params.search:
        return True
    return params.search.lower() in searchable_text(entry, row)


def filter_entries(entries: Iterable[Entry], params: FilterParams) -> list[Entry]:
    """Apply category, network and search filters.

    Entries outside the selected category are removed, rows that fail the
    network filter or the query are removed, and entries left without any
    row are dropped from the view.
    """
    visible: list[Entry] = []
    for entry in entries:
        if params.category and entry.category != params.category:
            continue
        rows = tuple(row for row in entry.rows if row_matches(entry, row, params))
        if rows:
            visible.append(entry.model_copy(update={"rows": rows}))
    return visible


def facet_options(values: Iterable[str]) -> list[str]:
    """Filter choices for a facet: "" (All) followed by the sorted values."""
    return ["", *sorted(values)]


def entry_networks(entry: Entry) -> list[str]:
    """Sorted distinct networks an entry is deployed on."""
    return sorted({row.network for row in entry.rows})
