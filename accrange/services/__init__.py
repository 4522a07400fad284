from accrange.services.catalog_search import (
    CatalogQuery,
    InMemoryCatalogQuery,
    ShellCatalogQuery,
)
from accrange.services.prefix_index import PrefixIndex, PrefixIndexCache
from accrange.services.range_resolver import RangeResolver
from accrange.services.lookup_service import LookupService, RunSummary, run_lookup

__all__ = [
    "CatalogQuery",
    "InMemoryCatalogQuery",
    "ShellCatalogQuery",
    "PrefixIndex",
    "PrefixIndexCache",
    "RangeResolver",
    "LookupService",
    "RunSummary",
    "run_lookup",
]
