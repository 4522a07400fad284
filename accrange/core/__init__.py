"""
accrange Core Package

Modules:
- settings: Paths, search command and logging configuration
- errors: Error kinds raised by lookups

Environment Variables:
    CATALOG_ROOT: Root directory of the accession catalog
    SEARCH_COMMAND: Catalog search command template
    SEARCH_TIMEOUT: Catalog search timeout in seconds
"""
