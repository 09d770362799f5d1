"""Binding validation against a host's declared storage and event schema.

Every check runs independently and every binding is checked, so one invalid
binding never hides problems (or successes) of the bindings declared after it.
Results come back in declaration order.
"""

from __future__ import annotations

import logging
from typing import Literal

from contractkit.core.component.operations import same_type_text
from contractkit.core.diagnostics import (
    ConflictingBinding,
    Diagnostic,
    MemberNameCollision,
    MissingComponentDependency,
    MissingNestedEvent,
    MissingSubstorageMember,
    Severity,
)
from contractkit.core.host.models import Binding, HostDeclaration, HostSchema

logger = logging.getLogger(__name__)

CollisionPolicy = Literal["error", "warn", "ignore"]


def storage_suggestion(binding: Binding) -> str:
    """Storage member declaration that would satisfy a binding."""
    name = binding.component.name
    return f"{binding.storage_field_name}: ComponentState[{name}] = substorage({name})"


def event_suggestion(binding: Binding) -> str:
    """Event variant declaration that would satisfy a binding."""
    return f"{binding.event_variant_name} = {binding.component.name}.Event"


def check_substorage(binding: Binding, schema: HostSchema) -> MissingSubstorageMember | None:
    """Check the binding's storage member exists with type ``ComponentState[Component]``."""
    member = schema.storage_member(binding.storage_field_name)
    expected = f"ComponentState[{binding.component.name}]"
    if (
        member is not None
        and same_type_text(member.type_text, expected)
        and member.substorage in (None, binding.component.component_type)
    ):
        return None
    return MissingSubstorageMember(
        component=binding.component.name,
        host=schema.host_name,
        name=binding.storage_field_name,
        suggestion=storage_suggestion(binding),
    )


def check_nested_event(binding: Binding, schema: HostSchema) -> MissingNestedEvent | None:
    """Check the binding's event variant exists with the component's event namespace as payload."""
    member = schema.event_member(binding.event_variant_name)
    if member is not None and member.payload is binding.component.events.event_type:
        return None
    return MissingNestedEvent(
        component=binding.component.name,
        host=schema.host_name,
        name=binding.event_variant_name,
        suggestion=event_suggestion(binding),
    )


def check_conflicts(binding: Binding, earlier: list[Binding], host: str) -> list[ConflictingBinding]:
    """Check the binding claims no storage member or event variant an earlier binding claimed."""
    diagnostics = []
    for slot, name, attr in (
        ("storage", binding.storage_field_name, "storage_field_name"),
        ("event", binding.event_variant_name, "event_variant_name"),
    ):
        previous = next((b for b in earlier if getattr(b, attr) == name), None)
        if previous is not None:
            diagnostics.append(
                ConflictingBinding(
                    component=binding.component.name,
                    host=host,
                    name=name,
                    slot=slot,  # type: ignore[arg-type]
                    previous_component=previous.component.name,
                )
            )
    return diagnostics


def check_dependencies(
    binding: Binding, declaration: HostDeclaration
) -> list[MissingComponentDependency]:
    """Check every component the bound component requires is also included."""
    return [
        MissingComponentDependency(
            component=binding.component.name,
            host=declaration.host_name,
            dependency=dependency.__name__,
        )
        for dependency in binding.component.dependencies
        if not declaration.bindings_for(dependency)
    ]


def check_collisions(
    binding: Binding,
    schema: HostSchema,
    nested: frozenset[type],
    policy: CollisionPolicy,
) -> list[MemberNameCollision]:
    """Check component member names against host-native member names.

    Substorage members and nested event variants are not host-native, so
    sibling components never collide with each other here.
    """
    if policy == "ignore":
        return []
    severity = Severity.ERROR if policy == "error" else Severity.WARNING
    native_storage = schema.native_storage_names()
    native_events = schema.native_event_names(nested)
    component = binding.component
    diagnostics = [
        MemberNameCollision(component.name, schema.host_name, name, "storage", severity)
        for name in component.storage.names()
        if name in native_storage
    ]
    diagnostics.extend(
        MemberNameCollision(component.name, schema.host_name, name, "event", severity)
        for name in component.events.names()
        if name in native_events
    )
    return diagnostics


def validate_binding(
    binding: Binding,
    declaration: HostDeclaration,
    schema: HostSchema,
    *,
    earlier: list[Binding] | None = None,
    collision_policy: CollisionPolicy = "warn",
) -> list[Diagnostic]:
    """Run every check for one binding.

    Args:
        binding: Binding to check.
        declaration: Host declaration the binding belongs to.
        schema: Host's declared storage and event schema.
        earlier: Bindings declared before this one.
        collision_policy: How to report component/host member name collisions.

    Returns:
        Diagnostics in check order; empty if the binding is valid.
    """
    nested = frozenset(b.component.events.event_type for b in declaration.bindings)
    diagnostics: list[Diagnostic] = []
    diagnostics.extend(check_conflicts(binding, earlier or [], declaration.host_name))
    if (missing_storage := check_substorage(binding, schema)) is not None:
        diagnostics.append(missing_storage)
    if (missing_event := check_nested_event(binding, schema)) is not None:
        diagnostics.append(missing_event)
    diagnostics.extend(check_dependencies(binding, declaration))
    diagnostics.extend(check_collisions(binding, schema, nested, collision_policy))
    return diagnostics


def validate_host(
    declaration: HostDeclaration,
    schema: HostSchema,
    *,
    collision_policy: CollisionPolicy = "warn",
) -> list[tuple[Binding, list[Diagnostic]]]:
    """Validate every binding of a host, in declaration order.

    Args:
        declaration: Host declaration to validate.
        schema: Host's declared storage and event schema.
        collision_policy: How to report component/host member name collisions.

    Returns:
        (binding, diagnostics) pairs in declaration order.
    """
    results: list[tuple[Binding, list[Diagnostic]]] = []
    earlier: list[Binding] = []
    for binding in declaration.bindings:
        diagnostics = validate_binding(
            binding,
            declaration,
            schema,
            earlier=earlier,
            collision_policy=collision_policy,
        )
        logger.debug(
            "Validated %s in %s: %d diagnostic(s)",
            binding.describe(),
            declaration.host_name,
            len(diagnostics),
        )
        results.append((binding, diagnostics))
        earlier.append(binding)
    return results
