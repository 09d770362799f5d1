"""Render diagnostics to user-facing text.

Pure formatting: no diagnostic is created or filtered here.
"""

from __future__ import annotations

from collections.abc import Iterable

from contractkit.core.diagnostics.models import (
    ConflictingBinding,
    Diagnostic,
    DuplicateEntryPoint,
    MalformedComponent,
    MemberNameCollision,
    MissingComponentDependency,
    MissingNestedEvent,
    MissingSubstorageMember,
    UnresolvedAlias,
)

_SLOT_NAMES = {"storage": "Storage", "event": "Event enum"}


def render(diagnostic: Diagnostic) -> str:
    """Render one diagnostic as its message text.

    Args:
        diagnostic: Any diagnostic variant.

    Returns:
        The message shown to the user.

    Raises:
        TypeError: If the object is not a known diagnostic variant.
    """
    match diagnostic:
        case MissingSubstorageMember(name=name, suggestion=suggestion):
            return (
                f"{name} is not a substorage member in the contract's Storage. "
                f"Consider adding to Storage: {suggestion}"
            )
        case MissingNestedEvent(name=name, suggestion=suggestion):
            return (
                f"{name} is not a nested event in the contract's Event enum. "
                f"Consider adding to the Event enum: {suggestion}"
            )
        case UnresolvedAlias():
            return "Trait not found. Not a trait."
        case MalformedComponent(component=component, reason=reason, impl=impl):
            where = f"{component}.{impl}" if impl else component
            return f"Malformed component {where}: {reason}"
        case ConflictingBinding(
            name=name, slot=slot, component=component, previous_component=previous
        ):
            return (
                f"{name} is already bound to component {previous} in the contract's "
                f"{_SLOT_NAMES[slot]}; component {component} needs its own {slot} member."
            )
        case MissingComponentDependency(component=component, host=host, dependency=dependency):
            return (
                f"Component {component} depends on component {dependency}, "
                f"which is not included in contract {host}."
            )
        case MemberNameCollision(component=component, host=host, name=name, slot=slot):
            return (
                f"Component {component} declares {slot} member {name}, "
                f"which collides with a member of contract {host}."
            )
        case DuplicateEntryPoint(name=name, first_local_name=first, second_local_name=second):
            return f"Entry point {name} is exposed by both {first} and {second}."
    raise TypeError(f"Not a diagnostic: {diagnostic!r}")


def render_all(diagnostics: Iterable[Diagnostic]) -> str:
    """Render diagnostics one per line, in the given order."""
    return "\n".join(render(d) for d in diagnostics)
