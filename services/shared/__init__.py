"""
Shared utilities for the outline ledger services.

- observability: JSON logging, optional tracing and privacy helpers
"""
