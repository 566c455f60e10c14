"""
Line-scanning parser for the deployments markdown document.

Recognizes exactly two block shapes and nothing else:

    ## <Category>
    ### <Title>
    | Network | Address | Explorer | Constructor Args | Salt |
    |---|---|---|---|---|
    | <network> | <address> | [label](<url>) | <args> | <salt> |

Philosophy: Tolerate, don't validate.
              A heading without a recognizable table is skipped, a short row
              is dropped, and parsing carries on. Nothing here ever raises.

Header labels only gate table detection. Rows are mapped by position to
(network, address, explorer, args, salt) whatever order the header lists.
"""

from __future__ import annotations

import logging
import re

from .models import Entry, ParseResult, Row

logger = logging.getLogger(__name__)


# ─── Patterns & Constants ────────────────────────────────────────────

UNCATEGORIZED = "Uncategorized"

MIN_ROW_CELLS = 5
EXPLORER_COLUMN = 2

_LINE_SPLIT = re.compile(r"\r?\n")
_H2 = re.compile(r"^##\s+(\S.*?)\s*$")
_H3 = re.compile(r"^###\s+(\S.*?)\s*$")
_BLANK = re.compile(r"^\s*$")
_TABLE_HEADER = re.compile(r"\|\s*Network\s*\|\s*Address\s*\|", re.IGNORECASE)
_LINK_TARGET = re.compile(r"\(([^)]+)\)")


# ─── Public API ──────────────────────────────────────────────────────


def parse_markdown(text: str) -> ParseResult:
    """Parse a deployments document into entries.

    Args:
        text: The full markdown document.

    Returns:
        ParseResult with one Entry per `###` heading that is followed
        (blank lines aside) by a Network/Address table. Facet sets are
        derived from the entries.
    """
    lines = _LINE_SPLIT.split(text)
    entries: list[Entry] = []

    i = 0
    while i < len(lines):
        heading = _H3.match(lines[i])
        if heading is None:
            i += 1
            continue

        title = heading.group(1).strip()
        category = find_nearest_category(lines, i)

        j = i + 1
        while j < len(lines) and _BLANK.match(lines[j]):
            j += 1

        if j >= len(lines) or not _TABLE_HEADER.search(lines[j]):
            logger.debug("Heading %r on line %d has no table; skipped", title, i + 1)
            i += 1
            continue

        # Header and separator; the separator is not checked.
        j += 2
        rows: list[Row] = []
        while j < len(lines) and lines[j].startswith("|"):
            row = _to_row(split_markdown_row(lines[j]))
            if row is None:
                logger.debug("Dropped short row on line %d under %r", j + 1, title)
            else:
                rows.append(row)
            j += 1

        entries.append(Entry(category=category, title=title, rows=tuple(rows)))
        i = j

    result = ParseResult(entries=tuple(entries))
    logger.info(
        "Parsed %d section(s) across %d network(s)",
        len(result.entries),
        len(result.networks),
    )
    return result


def find_nearest_category(lines: list[str], index: int) -> str:
    """Return the text of the closest `##` heading above `lines[index]`."""
    for k in range(index - 1, -1, -1):
        match = _H2.match(lines[k])
        if match:
            return match.group(1).strip()
    return UNCATEGORIZED


def split_markdown_row(line: str) -> list[str]:
    """Split one table line into trimmed cells.

    One leading pipe and one trailing pipe (trailing whitespace allowed) are
    removed before splitting. The Explorer cell is reduced to the target of
    its first `(...)` group, so `[Etherscan](https://...)` becomes the URL.
    """
    inner = re.sub(r"^\|", "", line)
    inner = re.sub(r"\|\s*$", "", inner)
    cells = [cell.strip() for cell in inner.split("|")]

    if len(cells) > EXPLORER_COLUMN:
        link = _LINK_TARGET.search(cells[EXPLORER_COLUMN])
        if link:
            cells[EXPLORER_COLUMN] = link.group(1)
    return cells


# ─── Helpers ─────────────────────────────────────────────────────────


def _to_row(cells: list[str]) -> Row | None:
    """Map cells positionally onto a Row; None if there are too few."""
    if len(cells) < MIN_ROW_CELLS:
        return None
    network, address, explorer, args, salt = cells[:MIN_ROW_CELLS]
    return Row(network=network, address=address, explorer=explorer, args=args, salt=salt)
