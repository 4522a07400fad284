"""
Pytest fixtures for accrange tests.

Provides in-memory catalogs, resolvers and report sinks. Every catalog
listing starts with a sentinel record (index 0), as the real catalog does.
"""
import io
import logging
import tempfile
from pathlib import Path
from typing import List

import pytest

from accrange.core.errors import ExternalToolError
from accrange.schemas.lookup_schema import AccessionToken
from accrange.services.catalog_search import CatalogQuery, InMemoryCatalogQuery
from accrange.services.lookup_service import LookupService
from accrange.services.prefix_index import PrefixIndexCache
from accrange.services.range_resolver import RangeResolver
from accrange.utils.file_io import OutputSink


class FailingCatalog(CatalogQuery):
    """Catalog whose search always fails, as a broken search tool would."""

    def __init__(self):
        self.calls: List[str] = []

    def search(self, prefix: str) -> List[AccessionToken]:
        self.calls.append(prefix)
        raise ExternalToolError(
            "Error in calling search utility. exit status 2",
            prefix=prefix,
            command=f"sift {prefix} /catalog -w --binary-skip | sort -k2 -n",
            returncode=2,
            stderr="sift: no such directory",
        )


class MemorySink(OutputSink):
    """Report sink that keeps lines in memory and does not echo them."""

    def __init__(self):
        super().__init__(io.StringIO(), mirror_console=False)

    @property
    def lines(self) -> List[str]:
        return self.stream.getvalue().splitlines()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_file(temp_dir):
    """Create a temporary file."""
    def _create_file(name: str, content: str = "") -> Path:
        file_path = temp_dir / name
        file_path.write_text(content)
        return file_path
    return _create_file


@pytest.fixture
def ab_tokens():
    """Catalog for prefix AB: 100-200 in fileA, 250 in fileB, 300-400 in fileC."""
    return [
        AccessionToken.point(0, "sentinel.seq"),
        AccessionToken.range(100, 200, "fileA.seq"),
        AccessionToken.point(250, "fileB.seq"),
        AccessionToken.range(300, 400, "fileC.seq"),
    ]


@pytest.fixture
def xy_tokens():
    """Catalog for prefix XY: 1-10 in fileX, 12 in fileY."""
    return [
        AccessionToken.point(0, "sentinel.seq"),
        AccessionToken.range(1, 10, "fileX.seq"),
        AccessionToken.point(12, "fileY.seq"),
    ]


@pytest.fixture
def catalog(ab_tokens, xy_tokens):
    return InMemoryCatalogQuery({"AB": ab_tokens, "XY": xy_tokens})


@pytest.fixture
def resolver(catalog):
    return RangeResolver(PrefixIndexCache(catalog))


@pytest.fixture
def sink():
    return MemorySink()


@pytest.fixture
def service(resolver, sink):
    return LookupService(resolver, sink)


@pytest.fixture
def failing_catalog():
    return FailingCatalog()


@pytest.fixture
def reset_accrange_logger():
    """Drop handlers the CLI installs on the package logger."""
    yield
    logger = logging.getLogger("accrange")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
