# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core - Configuration
# PURPOSE: Centralized configuration for export runs
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides typed export options parsed from a key/value property source.
"""

from core.config.options import (
    DatabaseOptions,
    EmailOptions,
    ExportOptions,
    parse_bool,
)

__all__ = [
    "DatabaseOptions",
    "EmailOptions",
    "ExportOptions",
    "parse_bool",
]
