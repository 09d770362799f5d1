"""Accessor synthesis: the bridge between a contract state and a component state view.

Usage:
    accessor = synthesize_accessor(binding, "Wallet")
    view = accessor.get_component_mut(state)
    assert accessor.get_contract_mut(view) is state
    accessor.emit(view, Ownable.Event.OwnershipTransferred("alice", "bob"))

An accessor is a frozen record of its binding, so synthesizing twice from the
same binding yields equal accessors that behave identically.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from contractkit.core.component.models import ComponentDefinition
from contractkit.core.host.models import Binding
from contractkit.runtime.state import ContractState, EmittedEvent
from contractkit.runtime.views import (
    AccessViolationError,
    ComponentStateView,
    ComponentStateViewMut,
)

logger = logging.getLogger(__name__)


class EventNotBoundError(Exception):
    """Raised when a component emits through a binding without a nested event variant."""

    pass


@dataclass(frozen=True, slots=True)
class AccessorCapability:
    """Navigation between one host's state and one included component's state.

    Attributes:
        component: The included component.
        host_name: Host the accessor is specific to.
        storage_field_name: Host storage member holding the component's storage.
        event_variant_name: Host event variant wrapping component events, or
            None when the host declares no valid nested event for the binding.
        host_type: Host class the accessor is specific to, when known. States
            deployed from another class with the same name are rejected.
    """

    component: ComponentDefinition
    host_name: str
    storage_field_name: str
    event_variant_name: str | None
    host_type: type | None = None

    def _check_state(self, state: Any) -> ContractState:
        if (
            not isinstance(state, ContractState)
            or state.host_name != self.host_name
            or not self._same_host_type(state)
        ):
            raise TypeError(
                f"Accessor for {self.component.name} in {self.host_name} "
                f"cannot use state {state!r}"
            )
        return state

    def _same_host_type(self, state: ContractState) -> bool:
        # States built without a definition can only be checked by name
        definition = state.definition
        if self.host_type is None or definition is None or definition.host_type is None:
            return True
        return definition.host_type is self.host_type

    def _check_view(self, view: Any) -> ComponentStateView:
        if not isinstance(view, ComponentStateView) or view.accessor != self:
            raise TypeError(
                f"Accessor for {self.component.name} at {self.host_name}.{self.storage_field_name} "
                f"cannot use view {view!r}"
            )
        return view

    def get_component(self, state: ContractState) -> ComponentStateView:
        """Read-only view of the component's storage in a contract state."""
        return ComponentStateView(self._check_state(state), self)

    def get_component_mut(self, state: ContractState) -> ComponentStateViewMut:
        """Mutable view of the component's storage in a contract state."""
        return ComponentStateViewMut(self._check_state(state), self)

    def get_contract(self, view: ComponentStateView) -> ContractState:
        """Recover the contract state a component view was derived from.

        Raises:
            ReferenceError: If the contract state no longer exists.
        """
        return self._check_view(view).host

    def get_contract_mut(self, view: ComponentStateViewMut) -> ContractState:
        """Recover the contract state from a mutable component view.

        Raises:
            AccessViolationError: If given a read-only view.
        """
        checked = self._check_view(view)
        if not isinstance(checked, ComponentStateViewMut):
            raise AccessViolationError(
                f"Component '{self.component.name}' view is read-only: "
                f"cannot recover mutable contract state"
            )
        return checked.host

    def emit(self, view: ComponentStateViewMut, event: Any) -> EmittedEvent:
        """Wrap a component event in the host's nested variant and emit it on the host.

        Raises:
            AccessViolationError: If given a read-only view.
            TypeError: If the value is not one of the component's events.
            EventNotBoundError: If the host declares no nested event for this binding.
        """
        state = self.get_contract_mut(view)
        variant = self.component.events.variant_of(event)
        if variant is None:
            raise TypeError(
                f"{type(event).__name__} is not an event of component {self.component.name}"
            )
        if self.event_variant_name is None:
            raise EventNotBoundError(
                f"Component {self.component.name} has no nested event in contract {self.host_name}"
            )
        return state.emit(EmittedEvent(self.event_variant_name, event, variant.name))


def synthesize_accessor(
    binding: Binding, host_name: str, *, emits: bool = True, host_type: type | None = None
) -> AccessorCapability:
    """Synthesize the accessor capability for a validated binding.

    Args:
        binding: Binding whose storage member was validated.
        host_name: Name of the host the binding belongs to.
        emits: False when the binding's nested event variant failed validation;
            the accessor then rejects emission.
        host_type: The host class, when known.

    Returns:
        The accessor capability.
    """
    accessor = AccessorCapability(
        component=binding.component,
        host_name=host_name,
        storage_field_name=binding.storage_field_name,
        event_variant_name=binding.event_variant_name if emits else None,
        host_type=host_type,
    )
    logger.debug("Synthesized accessor for %s in %s", binding.describe(), host_name)
    return accessor
