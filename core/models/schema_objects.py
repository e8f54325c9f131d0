# ============================================================================
# SCHEMA OBJECT MODELS
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Core model - Enumerated catalog objects
# PURPOSE: Tables and sequences as a tagged union
# CREATED: 19 OCT 2026
# EXPORTS: SequenceObject, TableObject, SchemaObject
# DEPENDENCIES: pydantic
# ============================================================================
"""
Schema Object Models

A SchemaObject is either a TableObject or a SequenceObject, discriminated
by ``kind``. Both expose ``name`` (bare object name, used in marker
comments) and ``qualified_name``. Rendering lives in
core.schema.sql_generator and dispatches on ``kind``.

Sequence numeric attributes are Optional: None means "unspecified" and
renders as NO MINVALUE / NO MAXVALUE or an omitted clause, never as zero.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from core.contracts import SchemaObjectKind


class SequenceObject(BaseModel):
    """
    A sequence as reported by information_schema.sequences.

    Invariants:
        increment != 0
        minimum_value <= start_value <= maximum_value (when present)
    """

    kind: Literal[SchemaObjectKind.SEQUENCE] = SchemaObjectKind.SEQUENCE

    schema_name: str = Field(..., min_length=1)
    sequence_name: str = Field(..., min_length=1)
    start_value: Optional[int] = None
    minimum_value: Optional[int] = None
    maximum_value: Optional[int] = None
    increment: Optional[int] = None
    cycle: bool = False

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_bounds(self) -> "SequenceObject":
        if self.increment == 0:
            raise ValueError("sequence increment must be non-zero")
        lo, start, hi = self.minimum_value, self.start_value, self.maximum_value
        if lo is not None and hi is not None and lo > hi:
            raise ValueError(f"sequence minimum {lo} exceeds maximum {hi}")
        if start is not None:
            if lo is not None and start < lo:
                raise ValueError(f"sequence start {start} below minimum {lo}")
            if hi is not None and start > hi:
                raise ValueError(f"sequence start {start} above maximum {hi}")
        return self

    @property
    def name(self) -> str:
        return self.sequence_name

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.sequence_name}"


class TableObject(BaseModel):
    """
    A user table.

    ``ddl`` holds the helper routine's CREATE TABLE text once fetched; it is
    empty for a table that disappeared between listing and rendering.
    """

    kind: Literal[SchemaObjectKind.TABLE] = SchemaObjectKind.TABLE

    schema_name: str = Field(..., min_length=1)
    table_name: str = Field(..., min_length=1)
    ddl: str = ""

    model_config = {"frozen": True}

    @property
    def name(self) -> str:
        return self.table_name

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.table_name}"

    def with_ddl(self, ddl: str) -> "TableObject":
        """Copy of this table carrying the rendered CREATE TABLE text."""
        return self.model_copy(update={"ddl": ddl})


SchemaObject = Annotated[
    Union[TableObject, SequenceObject],
    Field(discriminator="kind"),
]


__all__ = [
    "SequenceObject",
    "TableObject",
    "SchemaObject",
]
