"""
accrange Utility Library.

Modules:
--------
logging_setup
    Logging configuration utilities.
file_io
    Request file reader, report sink and report line parser.
"""

from accrange.utils.logging_setup import setup_logging, get_logger
from accrange.utils.file_io import (
    OutputSink,
    RequestReader,
    ResultLine,
    parse_output_line,
)

__all__ = [
    # logging_setup
    "setup_logging",
    "get_logger",
    # file_io
    "OutputSink",
    "RequestReader",
    "ResultLine",
    "parse_output_line",
]
