"""
Accession Lookup Schemas.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from accrange.core.errors import ParseError

# ASCII digits with an optional sign; no underscores or other Unicode digits
INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def parse_int(value: str, prefix: Optional[str] = None) -> int:
    """Parse an accession number, raising ParseError on malformed input."""
    text = value.strip()
    if not INTEGER_RE.fullmatch(text):
        raise ParseError(
            f"Error in converting to int. invalid literal {value!r}",
            prefix=prefix,
            target=value,
        )
    return int(text)


def split_range(spec: str, prefix: Optional[str] = None) -> tuple[str, str]:
    """Split '<a>-<b>' into its two endpoint strings."""
    parts = spec.split("-")
    if len(parts) != 2:
        raise ParseError(
            f"Malformed accession range {spec!r}",
            prefix=prefix,
            target=spec,
        )
    return parts[0], parts[1]


class TokenKind(str, Enum):
    """Catalog entry shape."""
    POINT = "point"
    RANGE = "range"


class AccessionToken(BaseModel):
    """One catalog entry for a prefix: a bare number or a numeric range."""

    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    start: int
    end: int
    source_file: str = Field(
        "",
        description="Catalog file snippet the entry was found in",
    )

    @model_validator(mode="after")
    def _check_bounds(self) -> "AccessionToken":
        if self.start > self.end:
            raise ValueError(f"range start {self.start} is after end {self.end}")
        if self.kind == TokenKind.POINT and self.start != self.end:
            raise ValueError("a point token must have start == end")
        return self

    @classmethod
    def point(cls, value: int, source_file: str = "") -> "AccessionToken":
        return cls(kind=TokenKind.POINT, start=value, end=value, source_file=source_file)

    @classmethod
    def range(cls, start: int, end: int, source_file: str = "") -> "AccessionToken":
        return cls(kind=TokenKind.RANGE, start=start, end=end, source_file=source_file)

    @classmethod
    def from_spec(cls, spec: str, source_file: str = "") -> "AccessionToken":
        """
        Build a token from a catalog spec: '123' or '100-200'.

        Raises:
            ParseError: if either number is malformed or start > end
        """
        spec = spec.strip()
        if "-" not in spec:
            return cls.point(parse_int(spec), source_file)

        start_str, end_str = split_range(spec)
        start, end = parse_int(start_str), parse_int(end_str)
        if start > end:
            raise ParseError(f"Catalog range {spec!r} is descending", target=spec)
        return cls.range(start, end, source_file)

    @property
    def key(self) -> int:
        """Ordering key: a point's value, a range's end."""
        return self.end

    @property
    def is_range(self) -> bool:
        return self.kind == TokenKind.RANGE

    def contains(self, target: int) -> bool:
        return self.start <= target <= self.end

    def __str__(self) -> str:
        if self.is_range:
            return f"{self.start}-{self.end}"
        return str(self.start)


class LookupRequest(BaseModel):
    """A single line of the request file: a point or a range for one prefix."""

    model_config = ConfigDict(frozen=True)

    prefix: str
    spec: str = Field(..., description="Raw '<int>' or '<int>-<int>' text")

    @classmethod
    def from_line(cls, line: str) -> Optional["LookupRequest"]:
        """
        Parse '<prefix>: <spec>'.

        Returns None for lines without ': ' (comments and noise).
        """
        line = line.strip()
        if ": " not in line:
            return None
        prefix, _, spec = line.partition(": ")
        return cls(prefix=prefix.strip(), spec=spec.strip())

    @property
    def is_range(self) -> bool:
        return "-" in self.spec


class LookupResult(BaseModel):
    """Outcome of resolving one target number."""

    model_config = ConfigDict(frozen=True)

    prefix: str
    target: int
    found: bool
    token: Optional[AccessionToken] = None
    source_file: Optional[str] = Field(
        None,
        description="Catalog file snippet with the file extension trimmed",
    )

    @classmethod
    def hit(cls, prefix: str, target: int, token: AccessionToken, source_file: str) -> "LookupResult":
        return cls(prefix=prefix, target=target, found=True, token=token, source_file=source_file)

    @classmethod
    def miss(cls, prefix: str, target: int) -> "LookupResult":
        return cls(prefix=prefix, target=target, found=False)
