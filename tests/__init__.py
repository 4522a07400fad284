"""
accrange Tests

Test Organization:
- test_lookup_schema.py: Tokens, requests, results and the error taxonomy
- test_catalog_search_service.py: Search tool invocation and output parsing
- test_prefix_index.py: Per-prefix index caching
- test_range_resolver_service.py: Binary search and result policy
- test_lookup_service.py: Point/range lookups and batch runs
- test_file_io.py: Request reader, report sink and report line parsing
- test_cli_commands.py: Command-line entry point
- test_settings.py: Settings and logging setup

Running Tests:
    # Run all tests
    pytest tests/

    # Run only the resolver tests
    pytest tests/test_range_resolver_service.py
"""
