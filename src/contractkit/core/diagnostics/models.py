"""Diagnostic models: one frozen record per failure kind.

Diagnostics are plain data. Rendering them into user-facing text is a separate,
pure step (see `contractkit.core.diagnostics.render`), so validation can be
tested against structured fields rather than message strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, Literal


class Severity(Enum):
    """How a diagnostic affects compilation."""

    ERROR = auto()  # Blocks the artifact and fails compilation
    WARNING = auto()  # Reported only


class DiagnosticKind(Enum):
    """Tag identifying the diagnostic variant."""

    MALFORMED_COMPONENT = auto()
    MISSING_SUBSTORAGE_MEMBER = auto()
    MISSING_NESTED_EVENT = auto()
    UNRESOLVED_ALIAS = auto()
    CONFLICTING_BINDING = auto()
    MISSING_COMPONENT_DEPENDENCY = auto()
    MEMBER_NAME_COLLISION = auto()
    DUPLICATE_ENTRY_POINT = auto()


@dataclass(frozen=True, slots=True)
class MalformedComponent:
    """A component's own declarations are inconsistent.

    Attributes:
        component: Component name.
        reason: What is wrong, phrased for the component author.
        impl: Offending capability impl name, if the problem is impl-local.
    """

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.MALFORMED_COMPONENT

    component: str
    reason: str
    impl: str | None = None
    severity: Severity = Severity.ERROR


@dataclass(frozen=True, slots=True)
class MissingSubstorageMember:
    """The host storage lacks the member a binding names.

    Attributes:
        component: Component name.
        host: Host (contract) name.
        name: The storage field name the binding declared.
        suggestion: Field declaration that would satisfy the binding.
    """

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.MISSING_SUBSTORAGE_MEMBER

    component: str
    host: str
    name: str
    suggestion: str
    severity: Severity = Severity.ERROR


@dataclass(frozen=True, slots=True)
class MissingNestedEvent:
    """The host event namespace lacks the variant a binding names."""

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.MISSING_NESTED_EVENT

    component: str
    host: str
    name: str
    suggestion: str
    severity: Severity = Severity.ERROR


@dataclass(frozen=True, slots=True)
class UnresolvedAlias:
    """An exposure declaration does not resolve to a generated wrapper."""

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.UNRESOLVED_ALIAS

    host: str
    local_name: str
    path: str
    severity: Severity = Severity.ERROR


@dataclass(frozen=True, slots=True)
class ConflictingBinding:
    """Two bindings on one host claim the same storage member or event variant."""

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.CONFLICTING_BINDING

    component: str
    host: str
    name: str
    slot: Literal["storage", "event"]
    previous_component: str
    severity: Severity = Severity.ERROR


@dataclass(frozen=True, slots=True)
class MissingComponentDependency:
    """A component requires another component the host does not include."""

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.MISSING_COMPONENT_DEPENDENCY

    component: str
    host: str
    dependency: str
    severity: Severity = Severity.ERROR


@dataclass(frozen=True, slots=True)
class MemberNameCollision:
    """A component member name equals an unrelated host-native member name."""

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.MEMBER_NAME_COLLISION

    component: str
    host: str
    name: str
    slot: Literal["storage", "event"]
    severity: Severity = Severity.WARNING


@dataclass(frozen=True, slots=True)
class DuplicateEntryPoint:
    """Two exposed wrappers contribute an entry point with the same name."""

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.DUPLICATE_ENTRY_POINT

    host: str
    name: str
    first_local_name: str
    second_local_name: str
    severity: Severity = Severity.ERROR


type Diagnostic = (
    MalformedComponent
    | MissingSubstorageMember
    | MissingNestedEvent
    | UnresolvedAlias
    | ConflictingBinding
    | MissingComponentDependency
    | MemberNameCollision
    | DuplicateEntryPoint
)


def is_error(diagnostic: Diagnostic) -> bool:
    """Check whether a diagnostic blocks compilation."""
    return diagnostic.severity is Severity.ERROR
