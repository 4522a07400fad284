"""
Request and report file I/O.

This module reads lookup requests from the request file, writes report
lines to the output file (mirrored to the console), and parses report lines
back into their parts.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, TextIO

from accrange.core.errors import LookupIOError, ParseError
from accrange.schemas.lookup_schema import AccessionToken, LookupRequest

logger = logging.getLogger(__name__)

# '<prefix><target> | <token> | <file>'; target may be a collapsed range
RESULT_LINE_RE = re.compile(
    r"^(?P<prefix>\D*?)(?P<target>\d+(?:-\d+)?)\s*"
    r"\| (?P<token>\d+(?:-\d+)?)\s*"
    r"\| (?P<source>.*)$"
)


class RequestReader:
    """
    Iterate over the requests in a request file.

    Lines without ': ' are skipped. The file is opened on __enter__ so that
    a missing input file fails before any lookups run.

    Example:
        >>> with RequestReader(Path("requests.txt")) as requests:
        ...     for request in requests:
        ...         print(request.prefix, request.spec)
    """

    def __init__(self, path: Path, encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding
        self._fh: Optional[TextIO] = None
        self.skipped = 0

    def __enter__(self) -> "RequestReader":
        try:
            self._fh = open(self.path, "r", encoding=self.encoding)
        except OSError as e:
            raise LookupIOError(
                f"Error in opening input file. {e}",
                path=str(self.path),
            ) from e
        return self

    def __exit__(self, *exc) -> bool:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
        return False

    def __iter__(self) -> Iterator[LookupRequest]:
        if self._fh is None:
            raise LookupIOError("Request file is not open", path=str(self.path))

        try:
            for line in self._fh:
                request = LookupRequest.from_line(line)
                if request is None:
                    self.skipped += 1
                    continue
                yield request
        except (OSError, UnicodeDecodeError) as e:
            raise LookupIOError(
                f"Error in reading input file. {e}",
                path=str(self.path),
            ) from e


class OutputSink:
    """
    Sequential line sink: appends to a report file and echoes to stdout.

    Either side can be disabled: pass no stream for console-only output, or
    mirror_console=False for file-only output.
    """

    def __init__(self, stream: Optional[TextIO] = None, mirror_console: bool = True):
        self.stream = stream
        self.mirror_console = mirror_console
        self.lines_written = 0
        self._owns_stream = False

    @classmethod
    def open(cls, path: Path, mirror_console: bool = True) -> "OutputSink":
        """Create (truncate) the report file at `path`."""
        try:
            fh = open(path, "w", encoding="utf-8")
        except OSError as e:
            raise LookupIOError(
                f"Error in creating outfile. {e}",
                path=str(path),
            ) from e
        sink = cls(fh, mirror_console)
        sink._owns_stream = True
        return sink

    def write_line(self, line: str) -> None:
        if self.mirror_console:
            print(line)
        if self.stream is not None:
            try:
                self.stream.write(line + "\n")
            except OSError as e:
                raise LookupIOError(f"Error in writing line. {e}") from e
        self.lines_written += 1

    def close(self) -> None:
        if self._owns_stream and self.stream is not None:
            self.stream.close()
            self.stream = None

    def __enter__(self) -> "OutputSink":
        return self

    def __exit__(self, *exc) -> bool:
        self.close()
        return False


@dataclass(frozen=True)
class ResultLine:
    """A parsed report line for a found target or a collapsed range."""
    prefix: str
    target: str
    token: AccessionToken
    source_file: str


def parse_output_line(line: str) -> Optional[ResultLine]:
    """
    Parse a found/collapsed report line.

    Returns None for the header, not-found lines and anything else that is
    not a result line.
    """
    match = RESULT_LINE_RE.match(line.rstrip("\n"))
    if not match:
        return None

    source_file = match.group("source")
    try:
        token = AccessionToken.from_spec(match.group("token"), source_file)
    except ParseError:
        logger.debug(f"Unparseable token in report line: {line!r}")
        return None

    return ResultLine(
        prefix=match.group("prefix"),
        target=match.group("target"),
        token=token,
        source_file=source_file,
    )
