"""Diagnostics: tagged failure records and their rendering."""

from contractkit.core.diagnostics.models import (
    ConflictingBinding,
    Diagnostic,
    DiagnosticKind,
    DuplicateEntryPoint,
    MalformedComponent,
    MemberNameCollision,
    MissingComponentDependency,
    MissingNestedEvent,
    MissingSubstorageMember,
    Severity,
    UnresolvedAlias,
    is_error,
)
from contractkit.core.diagnostics.render import render, render_all

__all__ = [
    # Models
    "Diagnostic",
    "DiagnosticKind",
    "Severity",
    "MalformedComponent",
    "MissingSubstorageMember",
    "MissingNestedEvent",
    "UnresolvedAlias",
    "ConflictingBinding",
    "MissingComponentDependency",
    "MemberNameCollision",
    "DuplicateEntryPoint",
    "is_error",
    # Rendering
    "render",
    "render_all",
]
