"""
Catalog Search Service - queries the accession catalog for one prefix.

The production query shells out to a line-search tool (sift by default)
over the catalog root and parses its '<file>:<prefix>: <spec>' output.
The search tool is responsible for whole-word prefix matching and for
sorting the records ascending by accession number.
"""
from __future__ import annotations

import logging
import shlex
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from accrange.core.errors import ExternalToolError, ParseError
from accrange.schemas.lookup_schema import AccessionToken

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = ": "
# Separator the search tool puts between file name and matched line
MATCH_SEPARATOR = ":"


class CatalogQuery(ABC):
    """Capability: prefix -> catalog tokens, ascending by ordering key."""

    @abstractmethod
    def search(self, prefix: str) -> List[AccessionToken]:
        ...


def derive_source_file(path: str, catalog_root: Union[str, Path], prefix: str) -> str:
    """
    Turn the location part of a search record into the snippet reported to
    users.

    The search tool prints '<file>:<matched line>', and a catalog line reads
    '<prefix>: <spec>', so the text before the first ': ' is
    '<root>/<file>:<prefix>'. The catalog root and the trailing
    ':<prefix>' are stripped:

        >>> derive_source_file("/cat/gbbct1.seq.txt:AB", "/cat", "AB")
        'gbbct1.seq.txt'
    """
    root = str(catalog_root).rstrip("/")
    rel = path
    if root and path.startswith(root + "/"):
        rel = path[len(root) + 1:]

    match_suffix = MATCH_SEPARATOR + prefix
    if rel.endswith(match_suffix):
        return rel[:-len(match_suffix)]
    return rel


def parse_search_output(
    output: str,
    prefix: str,
    catalog_root: Union[str, Path],
) -> List[AccessionToken]:
    """
    Parse search tool output into tokens.

    Output format: one '<file>:<prefix>: <spec>' record per line, where
    spec is '<int>' or '<int>-<int>'. Lines without ': ' are ignored, as are
    records whose spec does not parse. Record order is kept as-is.
    """
    tokens = []

    for line in output.split("\n"):
        if RECORD_SEPARATOR not in line:
            continue

        path, _, spec = line.partition(RECORD_SEPARATOR)
        source_file = derive_source_file(path, catalog_root, prefix)
        try:
            tokens.append(AccessionToken.from_spec(spec, source_file))
        except ParseError as e:
            logger.warning(f"Skipping malformed catalog record for {prefix}: {line!r} ({e})")
            continue

    return tokens


class ShellCatalogQuery(CatalogQuery):
    """Run the configured search command through `sh -c` and parse its output."""

    def __init__(
        self,
        catalog_root: Union[str, Path],
        command_template: str,
        timeout: Optional[int] = None,
    ):
        self.catalog_root = Path(catalog_root)
        self.command_template = command_template
        self.timeout = timeout

    def build_command(self, prefix: str) -> str:
        return self.command_template.format(
            prefix=shlex.quote(prefix),
            root=shlex.quote(str(self.catalog_root)),
        )

    def search(self, prefix: str) -> List[AccessionToken]:
        cmd = self.build_command(prefix)
        logger.debug(f"Running catalog search: {cmd}")

        try:
            result = subprocess.run(
                ["sh", "-c", cmd],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error(f"Command: {cmd}")
            raise ExternalToolError(
                f"Error in calling search utility. Timed out after {self.timeout}s",
                prefix=prefix,
                command=cmd,
            )
        except OSError as e:
            logger.error(f"Command: {cmd}")
            raise ExternalToolError(
                f"Error in calling search utility. {e}",
                prefix=prefix,
                command=cmd,
            ) from e

        if result.returncode != 0:
            logger.error(f"Command: {cmd}")
            if result.stdout:
                logger.error(result.stdout)
            if result.stderr:
                logger.error(result.stderr)
            raise ExternalToolError(
                f"Error in calling search utility. exit status {result.returncode}",
                prefix=prefix,
                command=cmd,
                returncode=result.returncode,
                stderr=result.stderr,
            )

        tokens = parse_search_output(result.stdout, prefix, self.catalog_root)
        logger.info(f"Catalog search for {prefix} returned {len(tokens)} records")
        return tokens


class InMemoryCatalogQuery(CatalogQuery):
    """
    Catalog query backed by a prefix -> tokens mapping.

    Useful for tests and for replaying a saved search. `calls` records each
    prefix searched, in order.
    """

    def __init__(self, catalog: Optional[Dict[str, Iterable[AccessionToken]]] = None):
        self.catalog = {prefix: list(tokens) for prefix, tokens in (catalog or {}).items()}
        self.calls: List[str] = []

    @classmethod
    def from_output(
        cls,
        outputs: Dict[str, str],
        catalog_root: Union[str, Path],
    ) -> "InMemoryCatalogQuery":
        """Build from raw search tool output, keyed by prefix."""
        return cls({
            prefix: parse_search_output(output, prefix, catalog_root)
            for prefix, output in outputs.items()
        })

    def search(self, prefix: str) -> List[AccessionToken]:
        self.calls.append(prefix)
        return list(self.catalog.get(prefix, []))
