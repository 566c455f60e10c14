"""
Test suite for the deployments markdown parser.

Pure text in, frozen models out. No files, no network.

Run: pytest tests/ -v
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from deployments_explorer.models import ParseResult, Row
from deployments_explorer.parser import (
    UNCATEGORIZED,
    find_nearest_category,
    parse_markdown,
    split_markdown_row,
)


# ─── Test Data ───────────────────────────────────────────────────────

HEADER = "| Network | Address | Explorer | Constructor Args | Salt |"
SEPARATOR = "|---|---|---|---|---|"

SAMPLE = """\
## Tokens
### MyToken
| Network | Address | Explorer | Constructor Args | Salt |
|---|---|---|---|---|
| mainnet | 0x1 | [x](http://e/1) | () | 0x0 |
| testnet | 0x2 | none | (1,2) | 0x1 |
"""


def _doc(*lines: str) -> str:
    return "\n".join(lines)


# ═══════════════════════════════════════════════════════════════════════
# FULL DOCUMENT
# ═══════════════════════════════════════════════════════════════════════


class TestParseMarkdown:
    def test_sample_document(self):
        result = parse_markdown(SAMPLE)
        assert len(result.entries) == 1
        entry = result.entries[0]
        assert entry.category == "Tokens"
        assert entry.title == "MyToken"
        assert entry.rows == (
            Row(network="mainnet", address="0x1", explorer="http://e/1", args="()", salt="0x0"),
            Row(network="testnet", address="0x2", explorer="none", args="(1,2)", salt="0x1"),
        )
        assert result.networks == {"mainnet", "testnet"}
        assert result.categories == {"Tokens"}

    def test_no_h3_headings_yields_nothing(self):
        result = parse_markdown("# Title\n\n## Tokens\n\nSome text.\n")
        assert result.entries == ()
        assert result.networks == frozenset()
        assert result.categories == frozenset()

    def test_empty_document(self):
        assert parse_markdown("") == ParseResult.empty()

    def test_crlf_line_endings(self):
        result = parse_markdown(SAMPLE.replace("\n", "\r\n"))
        assert len(result.entries) == 1
        assert [r.salt for r in result.entries[0].rows] == ["0x0", "0x1"]

    def test_blank_lines_between_heading_and_table(self):
        doc = _doc("### Vault", "", "   ", HEADER, SEPARATOR, "| base | 0x3 | n/a | () | 0x2 |")
        result = parse_markdown(doc)
        assert result.entries[0].title == "Vault"
        assert len(result.entries[0].rows) == 1

    def test_header_match_is_case_insensitive(self):
        doc = _doc("### Vault", "| network | ADDRESS | explorer | args | salt |", SEPARATOR, "| a | b | c | d | e |")
        assert len(parse_markdown(doc).entries) == 1

    def test_deterministic(self):
        assert parse_markdown(SAMPLE) == parse_markdown(SAMPLE)

    def test_title_is_trimmed(self):
        doc = _doc("###    Spaced Title   ", HEADER, SEPARATOR)
        assert parse_markdown(doc).entries[0].title == "Spaced Title"


# ═══════════════════════════════════════════════════════════════════════
# HEADINGS WITHOUT TABLES
# ═══════════════════════════════════════════════════════════════════════


class TestHeadingWithoutTable:
    def test_paragraph_after_heading_is_skipped(self):
        doc = _doc(
            "### Notes",
            "Just a paragraph.",
            "### Real",
            HEADER,
            SEPARATOR,
            "| mainnet | 0x1 | n/a | () | 0x0 |",
        )
        result = parse_markdown(doc)
        assert [e.title for e in result.entries] == ["Real"]

    def test_heading_at_end_of_document(self):
        assert parse_markdown("## A\n### Lonely\n").entries == ()

    def test_table_without_network_address_header(self):
        doc = _doc("### Other", "| Name | Value |", "|---|---|", "| a | b |")
        assert parse_markdown(doc).entries == ()

    def test_consecutive_headings_resume_at_next_line(self):
        doc = _doc("### First", "### Second", HEADER, SEPARATOR, "| n | a | e | x | s |")
        result = parse_markdown(doc)
        assert [e.title for e in result.entries] == ["Second"]

    def test_hashes_without_text_are_not_headings(self):
        doc = _doc("###", HEADER, SEPARATOR, "| n | a | e | x | s |")
        assert parse_markdown(doc).entries == ()

    def test_whitespace_only_heading_is_not_an_entry(self):
        doc = _doc("## Tokens", "###   ", HEADER, SEPARATOR, "| mainnet | 0x1 | n/a | () | 0x0 |")
        assert parse_markdown(doc).entries == ()


# ═══════════════════════════════════════════════════════════════════════
# TABLE ROWS
# ═══════════════════════════════════════════════════════════════════════


class TestTableRows:
    def test_four_cell_row_dropped_entry_kept(self):
        doc = _doc("### Short", HEADER, SEPARATOR, "| mainnet | 0x1 | n/a | () |")
        result = parse_markdown(doc)
        assert len(result.entries) == 1
        assert result.entries[0].rows == ()

    def test_short_row_does_not_stop_table(self):
        doc = _doc(
            "### Mixed",
            HEADER,
            SEPARATOR,
            "| a | b |",
            "| mainnet | 0x1 | n/a | () | 0x0 |",
        )
        rows = parse_markdown(doc).entries[0].rows
        assert [r.network for r in rows] == ["mainnet"]

    def test_table_ends_at_first_non_pipe_line(self):
        doc = _doc(
            "### T",
            HEADER,
            SEPARATOR,
            "| one | 0x1 | n/a | () | 0x0 |",
            "",
            "| two | 0x2 | n/a | () | 0x0 |",
        )
        rows = parse_markdown(doc).entries[0].rows
        assert [r.network for r in rows] == ["one"]

    def test_indented_row_ends_table(self):
        doc = _doc("### T", HEADER, SEPARATOR, "  | one | 0x1 | n/a | () | 0x0 |")
        assert parse_markdown(doc).entries[0].rows == ()

    def test_separator_is_not_validated(self):
        doc = _doc("### T", HEADER, "this is not a separator", "| one | 0x1 | n/a | () | 0x0 |")
        assert len(parse_markdown(doc).entries[0].rows) == 1

    def test_table_lines_are_not_rescanned_as_headings(self):
        doc = _doc("### T", HEADER, SEPARATOR, "| one | 0x1 | n/a | () | 0x0 |", "### U", HEADER, SEPARATOR)
        assert [e.title for e in parse_markdown(doc).entries] == ["T", "U"]

    def test_extra_cells_are_ignored(self):
        doc = _doc("### T", HEADER, SEPARATOR, "| n | a | e | x | s | extra |")
        row = parse_markdown(doc).entries[0].rows[0]
        assert row.salt == "s"

    def test_columns_mapped_by_position_not_header(self):
        doc = _doc(
            "### Reordered",
            "| Network | Address | Salt | Explorer | Constructor Args |",
            SEPARATOR,
            "| mainnet | 0x1 | 0x0 | [x](http://e/1) | () |",
        )
        row = parse_markdown(doc).entries[0].rows[0]
        assert row.explorer == "0x0"
        assert row.args == "[x](http://e/1)"
        assert row.salt == "()"

    def test_empty_network_excluded_from_facets(self):
        doc = _doc("### T", HEADER, SEPARATOR, "|  | 0x1 | n/a | () | 0x0 |")
        result = parse_markdown(doc)
        assert len(result.entries[0].rows) == 1
        assert result.networks == frozenset()


# ═══════════════════════════════════════════════════════════════════════
# CATEGORY RESOLUTION
# ═══════════════════════════════════════════════════════════════════════


class TestCategoryResolution:
    def test_entries_before_any_h2_are_uncategorized(self):
        doc = _doc("### Early", HEADER, SEPARATOR, "## Later", "### Late", HEADER, SEPARATOR)
        result = parse_markdown(doc)
        assert [e.category for e in result.entries] == [UNCATEGORIZED, "Later"]
        assert result.categories == {UNCATEGORIZED, "Later"}

    def test_nearest_h2_wins(self):
        doc = _doc(
            "## First",
            "### A",
            HEADER,
            SEPARATOR,
            "## Second",
            "",
            "### B",
            HEADER,
            SEPARATOR,
            "### C",
            HEADER,
            SEPARATOR,
        )
        result = parse_markdown(doc)
        assert [(e.title, e.category) for e in result.entries] == [
            ("A", "First"),
            ("B", "Second"),
            ("C", "Second"),
        ]

    def test_h3_is_not_taken_as_category(self):
        lines = ["## Outer", "### Inner", "text"]
        assert find_nearest_category(lines, 2) == "Outer"

    def test_whitespace_only_h2_is_not_a_category(self):
        assert find_nearest_category(["## Real", "##   ", "### X"], 2) == "Real"

    def test_h1_is_not_a_category(self):
        assert find_nearest_category(["# Title", "### X"], 1) == UNCATEGORIZED

    def test_scan_starts_above_index(self):
        assert find_nearest_category(["## Only"], 0) == UNCATEGORIZED

    def test_category_text_trimmed(self):
        assert find_nearest_category(["##   Bridges  ", "### X"], 1) == "Bridges"


# ═══════════════════════════════════════════════════════════════════════
# ROW CELL NORMALIZER
# ═══════════════════════════════════════════════════════════════════════


class TestSplitMarkdownRow:
    def test_basic_split_and_trim(self):
        assert split_markdown_row("| a |  b | c | d | e |") == ["a", "b", "c", "d", "e"]

    def test_explorer_link_extracted(self):
        cells = split_markdown_row(
            "| mainnet | 0xABC | [Etherscan](https://etherscan.io/address/0xABC) | () | 0x0 |"
        )
        assert cells[2] == "https://etherscan.io/address/0xABC"

    def test_explorer_without_parentheses_unchanged(self):
        assert split_markdown_row("| mainnet | 0xABC | n/a | () | 0x0 |")[2] == "n/a"

    def test_parentheses_only_rewritten_in_explorer_column(self):
        cells = split_markdown_row("| mainnet | 0xABC | n/a | (1, 2) | 0x0 |")
        assert cells[3] == "(1, 2)"

    def test_first_parenthesis_group_used(self):
        assert split_markdown_row("| n | a | [x](http://one) (http://two) | () | s |")[2] == "http://one"

    def test_trailing_whitespace_after_last_pipe(self):
        assert split_markdown_row("| a | b | c | d | e |   ") == ["a", "b", "c", "d", "e"]

    def test_missing_trailing_pipe(self):
        assert split_markdown_row("| a | b | c | d | e") == ["a", "b", "c", "d", "e"]

    def test_short_row_returns_fewer_cells(self):
        assert split_markdown_row("| a | b |") == ["a", "b"]

    def test_no_escaping_applied(self):
        assert split_markdown_row("| <b> | & | x | y | z |")[:2] == ["<b>", "&"]


# ═══════════════════════════════════════════════════════════════════════
# MODEL IMMUTABILITY
# ═══════════════════════════════════════════════════════════════════════


class TestImmutability:
    def test_entry_is_frozen(self):
        entry = parse_markdown(SAMPLE).entries[0]
        with pytest.raises(ValidationError):
            entry.title = "Changed"

    def test_reparse_replaces_everything(self):
        first = parse_markdown(SAMPLE)
        second = parse_markdown(_doc("## Other", "### Z", HEADER, SEPARATOR, "| l2 | 0x9 | n/a | () | 0x0 |"))
        assert first.categories == {"Tokens"}
        assert second.categories == {"Other"}
        assert second.networks == {"l2"}

    def test_explorer_url_only_for_http_values(self):
        rows = parse_markdown(SAMPLE).entries[0].rows
        assert rows[0].explorer_url == "http://e/1"
        assert rows[1].explorer_url is None


class TestHeaderRecognition:
    def test_network_must_directly_precede_address(self):
        doc = _doc("### T", "| Address | Network | Explorer | Args | Salt |", SEPARATOR, "| a | b | c | d | e |")
        assert parse_markdown(doc).entries == ()
