# ============================================================================
# EXPORT DOCUMENT MODEL
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core model - Assembled SQL script
# PURPOSE: Ordered, immutable sections of one export
# CREATED: 19 OCT 2026
# EXPORTS: DocumentSection, ExportDocument, DocumentBuilder
# DEPENDENCIES: pydantic
# ============================================================================
"""
Export Document Model

The document is an ordered tuple of sections:

    header
    sequence blocks          (enumeration order)
    table_ddl, table_data    (per table, enumeration order)

DocumentBuilder is owned by the orchestrator while a run is in flight;
``build()`` freezes it into an ExportDocument.
"""

from typing import List, Tuple

from pydantic import BaseModel, Field

from core.contracts import SectionKind


class DocumentSection(BaseModel):
    """One rendered block of the script."""

    kind: SectionKind
    name: str = ""
    text: str = ""

    model_config = {"frozen": True}


class ExportDocument(BaseModel):
    """Immutable, ordered export script."""

    sections: Tuple[DocumentSection, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    @property
    def text(self) -> str:
        """Concatenation of every section in order."""
        return "".join(section.text for section in self.sections)

    def names(self, kind: SectionKind) -> List[str]:
        """Object names of the sections of one kind, in document order."""
        return [s.name for s in self.sections if s.kind == kind]


class DocumentBuilder:
    """Accumulates sections in order. Empty text is not recorded."""

    def __init__(self):
        self._sections: List[DocumentSection] = []

    def add(self, kind: SectionKind, name: str, text: str) -> None:
        if text:
            self._sections.append(DocumentSection(kind=kind, name=name, text=text))

    def build(self) -> ExportDocument:
        return ExportDocument(sections=tuple(self._sections))


__all__ = [
    "DocumentSection",
    "ExportDocument",
    "DocumentBuilder",
]
