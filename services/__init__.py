# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core - Export logic layer
# PURPOSE: Orchestration, data serialization, artifact lifecycle
# CREATED: 19 OCT 2026
# ============================================================================
"""
Services Module

Export logic for the SQL exporter.
Services coordinate repositories, renderers and infrastructure collaborators.

Usage:
    from services import PostgresExportService

    service = PostgresExportService(ExportOptions.from_env())
    archive = service.export()
"""

from .data_serializer import DataSerializer
from .artifact_service import ArtifactLifecycle
from .export_service import PostgresExportService, render_banner

__all__ = [
    "DataSerializer",
    "ArtifactLifecycle",
    "PostgresExportService",
    "render_banner",
]
