"""
accrange - Accession Range Resolver

Resolves GenBank-style accession identifiers (a letter prefix plus a numeric
suffix) against a pre-sorted catalog of accession ranges, reporting which
catalog file each accession or accession range came from.

Packages:
- core: Settings and the error taxonomy
- schemas: Pydantic models for tokens, requests and results
- services: Catalog search, per-prefix index, binary-search resolver, lookups
- utils: Request/output file handling and logging setup
- cli: Command-line interface

Usage:
    # Run the batch lookup with configured paths
    accrange run

    # Ad-hoc lookup
    accrange lookup AB 100-200

Environment Variables:
    ACCRANGE_INPUT: Request file path
    ACCRANGE_OUTPUT: Output file path
    CATALOG_ROOT: Root directory of the accession catalog
    LOG_LEVEL: Logging level (default: INFO)
"""

__version__ = "0.1.0"
