"""Host models: bindings, exposure declarations and the host's own schema.

A `HostDeclaration` is a plain record of what a host says it includes and
exposes. It performs no validation; `contractkit.synthesis.validator` checks it
against the `HostSchema` collected from the host class.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from contractkit.core.component.core import definition_of
from contractkit.core.component.models import ComponentDefinition
from contractkit.core.component.operations import (
    is_storage_class,
    namespace_types,
    storage_fields,
    type_text,
)
from contractkit.core.types import SubstorageType


@dataclass(frozen=True, slots=True)
class Binding:
    """Association of one included component instance with host slots.

    Attributes:
        component: The included component.
        storage_field_name: Host storage member holding the component's storage.
        event_variant_name: Host event variant wrapping the component's events.
    """

    component: ComponentDefinition
    storage_field_name: str
    event_variant_name: str

    def describe(self) -> str:
        """Short human-readable form used in logs."""
        return f"{self.component.name}(storage={self.storage_field_name}, event={self.event_variant_name})"


@dataclass(frozen=True, slots=True)
class ExposureDeclaration:
    """Host-side instantiation of a generated wrapper impl.

    Attributes:
        local_name: Name the host gives the instantiated wrapper.
        path: ``componentPath::aliasName<HostType>``.
        abi: True if the wrapper's methods join the host's external interface.
    """

    local_name: str
    path: str
    abi: bool = False


class HostDeclaration:
    """Ordered record of a host's component inclusions and exposures."""

    def __init__(self, host_name: str, host_type: type | None = None) -> None:
        """Initialize an empty declaration.

        Args:
            host_name: Name of the host (contract) type.
            host_type: The host class, when declared from one.
        """
        self.host_name = host_name
        self.host_type = host_type
        self._bindings: list[Binding] = []
        self._exposures: list[ExposureDeclaration] = []

    def include(
        self,
        component: type | ComponentDefinition,
        storage: str,
        event: str,
    ) -> Binding:
        """Record a component inclusion.

        Args:
            component: Decorated component class or its definition.
            storage: Host storage member name for the component's storage.
            event: Host event variant name for the component's events.

        Returns:
            The recorded binding.
        """
        binding = Binding(definition_of(component), storage, event)
        self._bindings.append(binding)
        return binding

    def expose(self, local_name: str, path: str, abi: bool = False) -> ExposureDeclaration:
        """Record an exposure declaration."""
        exposure = ExposureDeclaration(local_name, path, abi)
        self._exposures.append(exposure)
        return exposure

    @property
    def bindings(self) -> tuple[Binding, ...]:
        """All bindings in declaration order."""
        return tuple(self._bindings)

    @property
    def exposures(self) -> tuple[ExposureDeclaration, ...]:
        """All exposure declarations in declaration order."""
        return tuple(self._exposures)

    def bindings_for(self, component: type | ComponentDefinition) -> list[Binding]:
        """Return every binding of a component on this host.

        Args:
            component: Decorated component class or its definition.

        Returns:
            Bindings in declaration order; empty if the component is not included.
        """
        component_type = (
            component.component_type if isinstance(component, ComponentDefinition) else component
        )
        return [b for b in self._bindings if b.component.component_type is component_type]

    def __len__(self) -> int:
        return len(self._bindings)


@dataclass(frozen=True, slots=True)
class StorageMember:
    """One member of a host's storage."""

    name: str
    annotation: Any
    substorage: type | None = None  # Component type, for ComponentState members

    @property
    def type_text(self) -> str:
        """Declaration text of the member's type."""
        return type_text(self.annotation)


@dataclass(frozen=True, slots=True)
class EventMember:
    """One variant of a host's event namespace."""

    name: str
    payload: type


@dataclass(frozen=True, slots=True)
class HostSchema:
    """Storage members and event variants a host declares."""

    host_name: str
    storage_type: type | None = None
    storage: tuple[StorageMember, ...] = ()
    events: tuple[EventMember, ...] = ()

    def storage_member(self, name: str) -> StorageMember | None:
        """Look up a storage member by name."""
        return next((m for m in self.storage if m.name == name), None)

    def event_member(self, name: str) -> EventMember | None:
        """Look up an event variant by name."""
        return next((m for m in self.events if m.name == name), None)

    def native_storage_names(self) -> frozenset[str]:
        """Names of storage members that are not component substorage."""
        return frozenset(m.name for m in self.storage if m.substorage is None)

    def native_event_names(self, nested: frozenset[type]) -> frozenset[str]:
        """Names of event variants whose payload is not a component event namespace."""
        return frozenset(m.name for m in self.events if m.payload not in nested)

    @classmethod
    def from_host(cls, host: type) -> HostSchema:
        """Collect a host's schema from its `Storage` dataclass and `Event` namespace.

        Missing `Storage` or `Event` yields an empty part; the validator reports
        whatever bindings then cannot find.

        Raises:
            TypeError: If `Storage` exists but is neither a dataclass nor a Pydantic model.
        """
        storage_type = vars(host).get("Storage")
        members: tuple[StorageMember, ...] = ()
        if storage_type is not None:
            if not is_storage_class(storage_type):
                raise TypeError(
                    f"{host.__name__}.Storage must be a dataclass or Pydantic model. "
                    f"Did you forget @dataclass decorator?"
                )
            members = tuple(
                StorageMember(name, annotation, _substorage_component(annotation, metadata))
                for name, annotation, metadata in storage_fields(storage_type)
            )

        event_type = vars(host).get("Event")
        events: tuple[EventMember, ...] = ()
        if event_type is not None:
            events = tuple(EventMember(name, payload) for name, payload in namespace_types(event_type))

        return cls(host.__name__, storage_type, members, events)


def _substorage_component(annotation: Any, metadata: dict[str, Any]) -> type | None:
    if "substorage" in metadata:
        return metadata["substorage"]
    if isinstance(annotation, SubstorageType):
        return annotation.component
    return None
