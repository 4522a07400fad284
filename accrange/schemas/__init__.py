from accrange.schemas.lookup_schema import (
    AccessionToken,
    LookupRequest,
    LookupResult,
    TokenKind,
)

__all__ = [
    "AccessionToken",
    "LookupRequest",
    "LookupResult",
    "TokenKind",
]
