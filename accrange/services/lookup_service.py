"""
Lookup Service - single-value and range lookups, and the batch run.

A range request whose two endpoints resolve to the same catalog range is
reported as one line against that range. Any other range request is
expanded and every value in it is looked up on its own.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from accrange.core.errors import AccessionLookupError
from accrange.core.settings import Settings
from accrange.schemas.lookup_schema import (
    LookupRequest,
    LookupResult,
    parse_int,
    split_range,
)
from accrange.services.catalog_search import CatalogQuery, ShellCatalogQuery
from accrange.services.prefix_index import PrefixIndexCache
from accrange.services.range_resolver import (
    HEADER,
    RangeResolver,
    format_found,
    format_result,
)
from accrange.utils.file_io import OutputSink, RequestReader

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Counts for one batch run."""
    requests: int = 0
    lines_written: int = 0
    errors: int = 0
    prefixes: int = 0


class LookupService:
    """Resolve lookup requests and write one report line per result."""

    def __init__(self, resolver: RangeResolver, sink: OutputSink):
        self.resolver = resolver
        self.sink = sink
        self.errors = 0

    def _report_error(self, operation: str, err: AccessionLookupError) -> None:
        self.errors += 1
        context = ", ".join(f"{k}={v}" for k, v in err.context().items())
        logger.error(f"[{err.kind.value}] in {operation}: {err} ({context})")

    def _lookup_number(self, prefix: str, num: int) -> LookupResult:
        result = self.resolver.resolve_number(prefix, num)
        self.sink.write_line(format_result(result))
        return result

    def lookup_point(self, prefix: str, num_str: str) -> LookupResult:
        """
        Look up one accession number and write its report line.

        Raises:
            ParseError: if num_str is not an integer
            ExternalToolError: if the prefix index cannot be built
        """
        num = parse_int(num_str, prefix)
        return self._lookup_number(prefix, num)

    def _range_piece(self, prefix: str, num_str: str, label: str) -> Tuple[int, LookupResult]:
        try:
            num = parse_int(num_str, prefix)
            return num, self.resolver.resolve_number(prefix, num)
        except AccessionLookupError as e:
            raise e.wrap(f"Error in finding results for {label}") from e

    def lookup_range(self, prefix: str, spec: str) -> List[LookupResult]:
        """
        Look up '<a>-<b>'.

        Writes a single line when both endpoints land in the same catalog
        range; otherwise writes one line per value from a to b. Errors on
        individual values are logged and the expansion carries on.

        Raises:
            ParseError: if the spec or either endpoint is malformed
            ExternalToolError: if the prefix index cannot be built
        """
        start_str, end_str = split_range(spec, prefix)
        start, start_res = self._range_piece(prefix, start_str, "range start")
        end, end_res = self._range_piece(prefix, end_str, "range end")

        if (
            start_res.found
            and end_res.found
            and start_res.token.is_range
            and start_res.token == end_res.token
        ):
            self.sink.write_line(
                format_found(prefix, f"{start}-{end}", start_res.token, start_res.source_file)
            )
            return [start_res]

        if start > end:
            logger.warning(f"Descending range {prefix}: {spec}; nothing to look up")
            return []

        results = []
        for num in range(start, end + 1):
            try:
                results.append(self._lookup_number(prefix, num))
            except AccessionLookupError as e:
                self._report_error("lookup_range", e.wrap("Error in searching for point value"))
        return results

    def process(self, request: LookupRequest) -> List[LookupResult]:
        if request.is_range:
            return self.lookup_range(request.prefix, request.spec)
        return [self.lookup_point(request.prefix, request.spec)]

    def run(self, requests: Iterable[LookupRequest]) -> RunSummary:
        """
        Process requests in order, writing the header first.

        A failed request is logged and skipped.
        """
        summary = RunSummary()
        self.sink.write_line(HEADER)

        for request in requests:
            summary.requests += 1
            try:
                self.process(request)
            except AccessionLookupError as e:
                self._report_error("range lookup" if request.is_range else "point lookup", e)

        summary.lines_written = self.sink.lines_written
        summary.errors = self.errors
        summary.prefixes = len(self.resolver.cache)
        return summary


def build_catalog(settings: Settings) -> CatalogQuery:
    return ShellCatalogQuery(
        settings.catalog_root,
        settings.search_command,
        timeout=settings.search_timeout,
    )


def build_resolver(settings: Settings, catalog: Optional[CatalogQuery] = None) -> RangeResolver:
    cache = PrefixIndexCache(catalog or build_catalog(settings))
    return RangeResolver(cache, require_containment=settings.require_containment)


def run_lookup(settings: Settings, catalog: Optional[CatalogQuery] = None) -> RunSummary:
    """
    Run the batch lookup described by `settings`.

    Raises:
        LookupIOError: if the output file cannot be created or the input
            file cannot be opened
    """
    started = time.monotonic()
    resolver = build_resolver(settings, catalog)

    logger.info(f"Reading requests from {settings.input_path}")
    logger.info(f"Writing report to {settings.output_path}")

    with OutputSink.open(settings.output_path, settings.mirror_console) as sink:
        with RequestReader(settings.input_path) as requests:
            summary = LookupService(resolver, sink).run(requests)
            skipped = requests.skipped

    logger.info(
        f"Processed {summary.requests} requests across {summary.prefixes} prefixes: "
        f"{summary.lines_written} lines written, {summary.errors} errors, "
        f"{skipped} lines skipped"
    )
    logger.info(f"Lookup run took {time.monotonic() - started:.2f}s")
    return summary
