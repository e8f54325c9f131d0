# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core - Database read layer
# PURPOSE: Catalog enumeration and table row access
# CREATED: 19 OCT 2026
# ============================================================================
"""
Repositories Module

Read-only access to the database being exported.

Usage:
    from repositories import CatalogRepository, SnapshotFetchStrategy

    catalog = CatalogRepository(conn, helper)
    for table in catalog.list_tables():
        batch = SnapshotFetchStrategy().fetch(conn, table)
"""

from .catalog_repo import CatalogRepository, SYSTEM_SCHEMAS
from .row_repo import (
    RowFetchStrategy,
    SnapshotFetchStrategy,
    ServerCursorFetchStrategy,
    build_fetch_strategy,
)

__all__ = [
    "CatalogRepository",
    "SYSTEM_SCHEMAS",
    "RowFetchStrategy",
    "SnapshotFetchStrategy",
    "ServerCursorFetchStrategy",
    "build_fetch_strategy",
]
