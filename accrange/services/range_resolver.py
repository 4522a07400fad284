"""
Range Resolver - maps a target accession number to its catalog token.

Tokens are ordered by key (a point's value, a range's end). A binary search
finds the lowest index whose key is >= target; that token either contains
the target or is the next catalog entry after it.

Index 0 is never reported: the first record of every catalog listing is a
sentinel, so a search converging there means the target is below the
catalog.
"""
from __future__ import annotations

import logging
from typing import Sequence

from accrange.schemas.lookup_schema import AccessionToken, LookupResult
from accrange.services.prefix_index import PrefixIndexCache

logger = logging.getLogger(__name__)

# Listing file extension trimmed from source snippets, e.g. ".txt"
EXTENSION_LENGTH = 4

TARGET_WIDTH = 13
TOKEN_WIDTH = 13
HEADER = f"{'Target':<15} | {'Found in range':>13} | In file"


def search_tokens(tokens: Sequence[AccessionToken], target: int) -> int:
    """Return the lowest index whose key is >= target (len(tokens) if none)."""
    low, high = 0, len(tokens)
    while low < high:
        mid = low + (high - low) // 2
        if tokens[mid].key < target:
            low = mid + 1
        else:
            high = mid
    return low


def trim_extension(source_file: str) -> str:
    return source_file[:-EXTENSION_LENGTH] if len(source_file) > EXTENSION_LENGTH else ""


def format_found(prefix: str, target: str, token: AccessionToken, source_file: str) -> str:
    """'<prefix><target> | <token> | <file>' with fixed-width columns."""
    return f"{prefix}{target:<{TARGET_WIDTH}} | {str(token):<{TOKEN_WIDTH}} | {source_file}"


def format_not_found(prefix: str, target: int) -> str:
    return f"{prefix}{target} not found."


def format_result(result: LookupResult) -> str:
    if result.found:
        return format_found(result.prefix, str(result.target), result.token, result.source_file)
    return format_not_found(result.prefix, result.target)


class RangeResolver:
    """Resolve target numbers against cached per-prefix indexes."""

    def __init__(self, cache: PrefixIndexCache, require_containment: bool = False):
        self.cache = cache
        self.require_containment = require_containment

    def resolve_number(self, prefix: str, target: int) -> LookupResult:
        """
        Find the token containing or following `target`.

        Raises:
            ExternalToolError: if the prefix index cannot be built
        """
        index = self.cache.resolve_index(prefix)
        i = search_tokens(index.tokens, target)

        if i == 0 or i >= len(index):
            return LookupResult.miss(prefix, target)

        token = index[i]
        if self.require_containment and not token.contains(target):
            logger.debug(f"{prefix}{target} falls in the gap before {token}")
            return LookupResult.miss(prefix, target)

        return LookupResult.hit(prefix, target, token, trim_extension(token.source_file))
