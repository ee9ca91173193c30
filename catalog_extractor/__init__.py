"""
Storefront Catalog Extractor

Modules:
    models      - Canonical product/variant data models
    common      - Shared utilities (config loader, logging, errors, text helpers)
    fetching    - HTTP fetchers (direct, backend relay, public relay chain)
    platforms   - Per-platform catalog adapters
    extraction  - Run coordinator for a single extraction
    export      - Row flattening and workbook/CSV export
    relay       - Backend relay endpoint
"""
