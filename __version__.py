# ============================================================================
# VERSION - POSTGRESQL SQL EXPORTER
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# ============================================================================
"""
Version information for the PostgreSQL SQL exporter.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch
__version__ = "1.2.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-19"

# Banner written at the top of every generated script
TOOL_NAME = "pgsql-exporter"
EPOCH = 1
