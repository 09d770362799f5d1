"""Component models: schemas, interfaces, capability impls and definitions.

A component definition is immutable once registered. Schemas validate their own
uniqueness invariants on construction, so a definition built programmatically
is held to the same rules as one read from a decorated class.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from contractkit.core.component.operations import type_text
from contractkit.core.diagnostics import MalformedComponent, render


class MalformedComponentError(Exception):
    """Raised when a component's declarations are internally inconsistent."""

    def __init__(self, diagnostic: MalformedComponent) -> None:
        super().__init__(render(diagnostic))
        self.diagnostic = diagnostic


def _duplicates(names: list[str]) -> list[str]:
    seen: set[str] = set()
    dups = []
    for name in names:
        if name in seen and name not in dups:
            dups.append(name)
        seen.add(name)
    return dups


@dataclass(frozen=True, slots=True)
class StorageField:
    """One declared storage field."""

    name: str
    annotation: Any

    @property
    def type_text(self) -> str:
        """Declaration text of the field's type."""
        return type_text(self.annotation)


@dataclass(frozen=True, slots=True)
class StorageSchema:
    """Ordered storage fields of a component."""

    owner: str
    storage_type: type | None
    fields: tuple[StorageField, ...] = ()

    def __post_init__(self) -> None:
        dups = _duplicates([f.name for f in self.fields])
        if dups:
            raise MalformedComponentError(
                MalformedComponent(self.owner, f"duplicate storage field names: {', '.join(dups)}")
            )

    def names(self) -> tuple[str, ...]:
        """Field names in declaration order."""
        return tuple(f.name for f in self.fields)

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self.fields)


@dataclass(frozen=True, slots=True)
class EventVariant:
    """A named event variant and its payload class."""

    name: str
    payload: type


@dataclass(frozen=True, slots=True)
class EventSchema:
    """The component's `Event` namespace and its variants."""

    owner: str
    event_type: type
    variants: tuple[EventVariant, ...] = ()

    def __post_init__(self) -> None:
        dups = _duplicates([v.name for v in self.variants])
        if dups:
            raise MalformedComponentError(
                MalformedComponent(self.owner, f"duplicate event variant names: {', '.join(dups)}")
            )

    def names(self) -> tuple[str, ...]:
        """Variant names in declaration order."""
        return tuple(v.name for v in self.variants)

    def variant_of(self, event: Any) -> EventVariant | None:
        """Find the variant whose payload class the event is an instance of.

        Args:
            event: An event value.

        Returns:
            The matching variant, or None if the value is not one of this schema's events.
        """
        for variant in self.variants:
            if type(event) is variant.payload:
                return variant
        return None


@dataclass(frozen=True, slots=True)
class MethodSignature:
    """Signature of one interface method.

    Attributes:
        name: Method name.
        parameters: Parameter names after the state parameter.
        mutating: True if the method needs mutable component state.
    """

    name: str
    parameters: tuple[str, ...] = ()
    mutating: bool = False


@dataclass(frozen=True, slots=True)
class InterfaceDef:
    """A named set of method signatures."""

    name: str
    interface_type: type
    methods: tuple[MethodSignature, ...] = ()
    generated: bool = False  # Derived from a @capability impl's own methods

    def method(self, name: str) -> MethodSignature | None:
        """Look up a method signature by name."""
        return next((m for m in self.methods if m.name == name), None)


@dataclass(frozen=True, slots=True)
class CapabilityImpl:
    """An implementation of an interface over a component's state.

    Attributes:
        name: Internal impl name (the nested class name).
        impl_type: The nested impl class.
        interface: The implemented interface.
        methods: Implemented interface methods, in the impl's declaration order.
        embeddable: True if marked with @embeddable_as.
        alias_name: Public name of the generated wrapper, if embeddable.
    """

    name: str
    impl_type: type
    interface: InterfaceDef
    methods: tuple[MethodSignature, ...] = ()
    embeddable: bool = False
    alias_name: str | None = None

    def function(self, method: str) -> Callable[..., Any]:
        """Return the plain function implementing a method.

        Raises:
            KeyError: If the impl does not define the method.
        """
        fn = vars(self.impl_type).get(method)
        if fn is None:
            raise KeyError(f"{self.name} does not implement {method}")
        return fn


@dataclass(frozen=True, slots=True)
class ComponentDefinition:
    """Immutable description of a registered component."""

    name: str
    component_type: type
    storage: StorageSchema
    events: EventSchema
    impls: tuple[CapabilityImpl, ...] = ()
    dependencies: tuple[type, ...] = ()

    @property
    def qualified_name(self) -> str:
        """Fully qualified name of the component class."""
        return f"{self.component_type.__module__}.{self.component_type.__qualname__}"

    def impl(self, name: str) -> CapabilityImpl | None:
        """Look up a capability impl by its internal name."""
        return next((i for i in self.impls if i.name == name), None)

    def embeddable_impl(self, alias_name: str) -> CapabilityImpl | None:
        """Look up an embeddable impl by its alias name."""
        return next((i for i in self.impls if i.embeddable and i.alias_name == alias_name), None)

    def embeddable_impls(self) -> tuple[CapabilityImpl, ...]:
        """All embeddable impls, in declaration order."""
        return tuple(i for i in self.impls if i.embeddable)
