"""
Per-prefix catalog index and the run-scoped cache that owns it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

from accrange.schemas.lookup_schema import AccessionToken
from accrange.services.catalog_search import CatalogQuery

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrefixIndex:
    """Catalog tokens for one prefix, ascending by ordering key."""

    prefix: str
    tokens: Tuple[AccessionToken, ...] = ()

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, i: int) -> AccessionToken:
        return self.tokens[i]

    @property
    def is_empty(self) -> bool:
        return not self.tokens


class PrefixIndexCache:
    """
    Builds each prefix's index at most once and keeps it for the life of the
    cache (one batch run). Failed builds are not cached, so a later lookup
    for the same prefix queries the catalog again.
    """

    def __init__(self, catalog: CatalogQuery):
        self.catalog = catalog
        self._indexes: Dict[str, PrefixIndex] = {}
        self.query_count = 0

    def __contains__(self, prefix: str) -> bool:
        return prefix in self._indexes

    def __len__(self) -> int:
        return len(self._indexes)

    def resolve_index(self, prefix: str) -> PrefixIndex:
        """
        Get the index for a prefix, querying the catalog on first use.

        Raises:
            ExternalToolError: if the catalog query fails
        """
        index = self._indexes.get(prefix)
        if index is not None:
            return index

        self.query_count += 1
        tokens = self.catalog.search(prefix)

        index = PrefixIndex(prefix=prefix, tokens=tuple(tokens))
        if index.is_empty:
            logger.info(f"No catalog records for prefix {prefix}")
        self._indexes[prefix] = index
        return index
