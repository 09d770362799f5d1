"""Live contract state: host storage plus the host's event emission path.

Usage:
    state = Wallet.__contract__.deploy(balance=10)
    state.call("transfer_ownership", "bob")       # external entry point
    state.component("ownable").storage.owner      # read-only component view
    state.events[-1]                              # EmittedEvent(...)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from contractkit.contract.contract import ContractDefinition
    from contractkit.runtime.views import ComponentStateView, ComponentStateViewMut
    from contractkit.synthesis.accessor import AccessorCapability

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EmittedEvent:
    """An event recorded on a contract state.

    Attributes:
        variant: Host event variant name.
        payload: The event value.
        nested_variant: Component event variant name, for events emitted by a
            component through a nested event variant.
    """

    variant: str
    payload: Any
    nested_variant: str | None = None

    @property
    def keys(self) -> tuple[str, ...]:
        """Variant path, outermost first."""
        if self.nested_variant is None:
            return (self.variant,)
        return (self.variant, self.nested_variant)


class ContractState:
    """One host instance: its storage and the events it has emitted."""

    def __init__(
        self,
        host_name: str,
        storage: Any,
        definition: ContractDefinition | None = None,
    ) -> None:
        """Initialize contract state.

        Args:
            host_name: Name of the host type.
            storage: Host storage instance.
            definition: Composed contract definition; required for entry-point
                calls and component lookups by storage member name.
        """
        self._host_name = host_name
        self._storage = storage
        self._definition = definition
        self._events: list[EmittedEvent] = []

    @property
    def host_name(self) -> str:
        """Name of the host type."""
        return self._host_name

    @property
    def storage(self) -> Any:
        """Host storage instance."""
        return self._storage

    @property
    def definition(self) -> ContractDefinition | None:
        """Composed contract definition, if deployed from one."""
        return self._definition

    @property
    def events(self) -> list[EmittedEvent]:
        """Emitted events in emission order (a copy)."""
        return list(self._events)

    def emit(self, event: Any) -> EmittedEvent:
        """Record an event on this contract.

        Args:
            event: A prepared EmittedEvent (the nested-event path used by
                component accessors), or a host-native event value.

        Returns:
            The recorded event.

        Raises:
            TypeError: If the value is not one of the host's event variants.
        """
        if not isinstance(event, EmittedEvent):
            event = EmittedEvent(self._native_variant(event), event)
        self._events.append(event)
        logger.debug("Contract %s emitted %s", self._host_name, "::".join(event.keys))
        return event

    def _native_variant(self, event: Any) -> str:
        if self._definition is None:
            return type(event).__name__
        for member in self._definition.schema.events:
            if type(event) is member.payload:
                return member.name
        raise TypeError(f"{type(event).__name__} is not an event of contract {self._host_name}")

    def _require_definition(self) -> ContractDefinition:
        if self._definition is None:
            raise LookupError(f"Contract state of {self._host_name} has no contract definition")
        return self._definition

    def accessor(self, storage_field_name: str) -> AccessorCapability:
        """Accessor of the binding stored at a storage member.

        Raises:
            LookupError: If no synthesized accessor addresses that member.
        """
        return self._require_definition().accessor(storage_field_name)

    def dependency_accessor(self, component_type: type) -> AccessorCapability:
        """Accessor of the first binding of a component on this contract.

        Raises:
            LookupError: If the contract does not include the component.
        """
        accessors = self._require_definition().result.accessors_for(component_type)
        if not accessors:
            raise LookupError(
                f"Contract {self._host_name} does not include component {component_type.__name__}"
            )
        return accessors[0]

    def component(self, storage_field_name: str) -> ComponentStateView:
        """Read-only view of the component stored at a storage member."""
        return self.accessor(storage_field_name).get_component(self)

    def component_mut(self, storage_field_name: str) -> ComponentStateViewMut:
        """Mutable view of the component stored at a storage member."""
        return self.accessor(storage_field_name).get_component_mut(self)

    def call(self, entry_point: str, /, *args: Any, **kwargs: Any) -> Any:
        """Invoke an external entry point of this contract.

        Raises:
            KeyError: If the contract exposes no such entry point.
        """
        return self._require_definition().interface.invoke(self, entry_point, *args, **kwargs)

    def __repr__(self) -> str:
        return f"ContractState({self._host_name}, {self._storage!r})"
