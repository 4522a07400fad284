"""Command-line interface for accrange."""
