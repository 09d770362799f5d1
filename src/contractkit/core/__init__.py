"""Core functionalities: stateless declaration models and primitives.

Architecture Note:
    core/ contains pure declaration records: component definitions, host
    declarations and diagnostics. Nothing here synthesizes code or holds live
    contract state. For those, see synthesis/, runtime/ and contract/.
"""

from contractkit.core.component import (
    CapabilityImpl,
    ComponentDefinition,
    ComponentRegistry,
    EventSchema,
    EventVariant,
    InterfaceDef,
    MalformedComponentError,
    MethodSignature,
    StorageField,
    StorageSchema,
    capability,
    component,
    definition_of,
    embeddable_as,
    get_registry,
    interface,
    mutating,
)
from contractkit.core.diagnostics import (
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
    render,
    render_all,
)
from contractkit.core.host import (
    Binding,
    EventMember,
    ExposureDeclaration,
    HostDeclaration,
    HostSchema,
    StorageMember,
    embed,
    include,
    substorage,
)
from contractkit.core.types import ComponentState, SubstorageType

__all__ = [
    # Types
    "ComponentState",
    "SubstorageType",
    # Component
    "component",
    "interface",
    "capability",
    "embeddable_as",
    "mutating",
    "get_registry",
    "definition_of",
    "ComponentRegistry",
    "ComponentDefinition",
    "StorageSchema",
    "StorageField",
    "EventSchema",
    "EventVariant",
    "InterfaceDef",
    "MethodSignature",
    "CapabilityImpl",
    "MalformedComponentError",
    # Host
    "Binding",
    "HostDeclaration",
    "ExposureDeclaration",
    "HostSchema",
    "StorageMember",
    "EventMember",
    "include",
    "substorage",
    "embed",
    # Diagnostics
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
    "render",
    "render_all",
]
