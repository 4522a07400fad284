"""
Tests for the catalog search service.

Tests cover:
- Source file snippet derivation
- Search output parsing
- Shell command building and failure handling
- In-memory catalog
"""
import logging
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from accrange.core.errors import ExternalToolError
from accrange.schemas.lookup_schema import AccessionToken, TokenKind
from accrange.services.catalog_search import (
    InMemoryCatalogQuery,
    ShellCatalogQuery,
    derive_source_file,
    parse_search_output,
)
from accrange.services.prefix_index import PrefixIndexCache
from accrange.services.range_resolver import RangeResolver

DEFAULT_COMMAND = "sift {prefix} {root} -w --binary-skip | sort -k2 -n"

# sift prints '<file>:<matched line>'; catalog lines read '<prefix>: <spec>'
SEARCH_OUTPUT = """\
/catalog/gbbct0.seq.txt:AB: 0
/catalog/gbbct1.seq.txt:AB: 100-200
/catalog/gbbct2.seq.txt:AB: 250
/catalog/gbbct3.seq.txt:AB: 300-400
"""


class TestDeriveSourceFile:
    """Tests for derive_source_file."""

    def test_strips_root_and_matched_prefix(self):
        assert derive_source_file("/catalog/gbbct1.seq.txt:AB", "/catalog", "AB") == "gbbct1.seq.txt"

    def test_root_with_trailing_slash(self):
        assert derive_source_file("/catalog/gbbct1.seq.txt:AB", "/catalog/", "AB") == "gbbct1.seq.txt"

    def test_nested_directories(self):
        result = derive_source_file("/catalog/div/gbbct1.seq.txt:AB", "/catalog", "AB")
        assert result == "div/gbbct1.seq.txt"

    def test_prefix_with_underscore(self):
        result = derive_source_file("/catalog/gbbct1.seq.txt:NZ_", "/catalog", "NZ_")
        assert result == "gbbct1.seq.txt"

    def test_other_match_kept(self):
        result = derive_source_file("/catalog/gbbct1.seq.txt:CD", "/catalog", "AB")
        assert result == "gbbct1.seq.txt:CD"

    def test_path_outside_root(self):
        result = derive_source_file("/elsewhere/gbbct1.seq.txt:AB", "/catalog", "AB")
        assert result == "/elsewhere/gbbct1.seq.txt"


class TestParseSearchOutput:
    """Tests for parse_search_output."""

    def test_parses_points_and_ranges(self):
        tokens = parse_search_output(SEARCH_OUTPUT, "AB", "/catalog")

        assert [str(t) for t in tokens] == ["0", "100-200", "250", "300-400"]
        assert [t.kind for t in tokens] == [
            TokenKind.POINT, TokenKind.RANGE, TokenKind.POINT, TokenKind.RANGE,
        ]
        assert tokens[1].source_file == "gbbct1.seq.txt"

    def test_keeps_record_order(self):
        output = "/c/b.seq.txt:AB: 9\n/c/a.seq.txt:AB: 3\n"
        tokens = parse_search_output(output, "AB", "/c")
        assert [t.start for t in tokens] == [9, 3]

    def test_empty_output(self):
        assert parse_search_output("", "AB", "/catalog") == []

    def test_skips_lines_without_separator(self):
        output = "Binary file skipped\n\n/catalog/a.seq.txt:AB: 5\n"
        tokens = parse_search_output(output, "AB", "/catalog")
        assert len(tokens) == 1

    def test_skips_malformed_records(self, caplog):
        output = "/catalog/a.seq.txt:AB: abc\n/catalog/b.seq.txt:AB: 7\n"

        with caplog.at_level(logging.WARNING):
            tokens = parse_search_output(output, "AB", "/catalog")

        assert [t.start for t in tokens] == [7]
        assert "malformed catalog record" in caplog.text


class TestShellCatalogQuery:
    """Tests for ShellCatalogQuery."""

    def test_build_command_quotes_arguments(self):
        query = ShellCatalogQuery("/catalog dir", DEFAULT_COMMAND)
        assert query.build_command("AB") == "sift AB '/catalog dir' -w --binary-skip | sort -k2 -n"

    def test_build_command_quotes_hostile_prefix(self):
        query = ShellCatalogQuery("/catalog", DEFAULT_COMMAND)
        assert "'AB; rm -rf x'" in query.build_command("AB; rm -rf x")

    @patch("accrange.services.catalog_search.subprocess.run")
    def test_successful_search(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout=SEARCH_OUTPUT, stderr="")

        query = ShellCatalogQuery("/catalog", DEFAULT_COMMAND, timeout=30)
        tokens = query.search("AB")

        assert len(tokens) == 4
        mock_run.assert_called_once()
        call_args = mock_run.call_args[0][0]
        assert call_args == ["sh", "-c", "sift AB /catalog -w --binary-skip | sort -k2 -n"]
        assert mock_run.call_args[1]["timeout"] == 30

    @patch("accrange.services.catalog_search.subprocess.run")
    def test_nonzero_exit(self, mock_run, caplog):
        mock_run.return_value = MagicMock(returncode=2, stdout="", stderr="sift: no such directory")

        query = ShellCatalogQuery("/catalog", DEFAULT_COMMAND)
        with caplog.at_level(logging.ERROR):
            with pytest.raises(ExternalToolError) as exc_info:
                query.search("AB")

        err = exc_info.value
        assert err.returncode == 2
        assert err.stderr == "sift: no such directory"
        assert err.prefix == "AB"
        assert err.command.startswith("sift AB")
        # command and stderr are logged
        assert "Command: sift AB" in caplog.text
        assert "no such directory" in caplog.text

    @patch("accrange.services.catalog_search.subprocess.run")
    def test_launch_failure(self, mock_run):
        mock_run.side_effect = FileNotFoundError("sh")

        query = ShellCatalogQuery("/catalog", DEFAULT_COMMAND)
        with pytest.raises(ExternalToolError) as exc_info:
            query.search("AB")

        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    @patch("accrange.services.catalog_search.subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="sh", timeout=5)

        query = ShellCatalogQuery("/catalog", DEFAULT_COMMAND, timeout=5)
        with pytest.raises(ExternalToolError, match="Timed out"):
            query.search("AB")

    def test_real_command(self, temp_dir):
        """Runs a real shell pipeline over saved search tool output."""
        (temp_dir / "listing.txt").write_text(
            f"{temp_dir}/gbbct2.seq.txt:AB: 250\n"
            f"{temp_dir}/gbbct1.seq.txt:AB: 100-200\n"
        )

        query = ShellCatalogQuery(temp_dir, "cat {root}/listing.txt | sort -k2 -n")
        tokens = query.search("AB")

        assert [str(t) for t in tokens] == ["100-200", "250"]
        assert tokens[0].source_file == "gbbct1.seq.txt"

    def test_real_command_resolves_catalog_file(self, temp_dir):
        """The report names the catalog file without the listing extension."""
        (temp_dir / "listing.txt").write_text(
            f"{temp_dir}/gbbct0.seq.txt:AB: 0\n"
            f"{temp_dir}/gbbct1.seq.txt:AB: 100-200\n"
        )
        query = ShellCatalogQuery(temp_dir, "cat {root}/listing.txt")
        resolver = RangeResolver(PrefixIndexCache(query))

        result = resolver.resolve_number("AB", 150)

        assert result.found
        assert result.token.source_file == "gbbct1.seq.txt"
        assert result.source_file == "gbbct1.seq"

    def test_real_command_failure(self, temp_dir):
        query = ShellCatalogQuery(temp_dir, "echo oops >&2; exit 3")

        with pytest.raises(ExternalToolError) as exc_info:
            query.search("AB")

        assert exc_info.value.returncode == 3
        assert "oops" in exc_info.value.stderr


class TestInMemoryCatalogQuery:
    """Tests for InMemoryCatalogQuery."""

    def test_returns_tokens_and_records_calls(self, ab_tokens):
        query = InMemoryCatalogQuery({"AB": ab_tokens})

        assert query.search("AB") == ab_tokens
        assert query.search("CD") == []
        assert query.calls == ["AB", "CD"]

    def test_from_output(self):
        query = InMemoryCatalogQuery.from_output({"AB": SEARCH_OUTPUT}, "/catalog")
        tokens = query.search("AB")

        assert tokens[3] == AccessionToken.range(300, 400, "gbbct3.seq.txt")
