"""Component state views over a live contract state.

Usage:
    view = accessor.get_component(state)       # read-only
    view.storage.owner                          # reads pass through
    view.storage.owner = "bob"                  # AccessViolationError

    view = accessor.get_component_mut(state)
    view.storage.owner = "bob"
    view.emit(Ownable.Event.OwnershipTransferred("alice", "bob"))

Views never own their contract state: they hold a weak reference taken when
the accessor created them, so a view can neither keep its host alive nor form
a reference cycle with it. Using a view after its host is gone raises
ReferenceError.
"""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from contractkit.core.component.models import ComponentDefinition
    from contractkit.runtime.state import ContractState
    from contractkit.synthesis.accessor import AccessorCapability


class AccessViolationError(Exception):
    """Raised when read-only component state is written."""

    pass


class ContractStateView(Protocol):
    """Read-only view of a contract state, as recovered from a component view."""

    @property
    def host_name(self) -> str:
        """Name of the host this state belongs to."""
        ...

    @property
    def storage(self) -> Any:
        """Host storage instance."""
        ...


class ReadOnlyStorage:
    """Attribute proxy over a component's storage that rejects writes.

    Gotcha: only attribute assignment is blocked. Mutable field values such as
    lists are returned as-is and can still be mutated in place.
    """

    __slots__ = ("_target", "_component")

    def __init__(self, target: Any, component: str) -> None:
        object.__setattr__(self, "_target", target)
        object.__setattr__(self, "_component", component)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._target, name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AccessViolationError(
            f"Component '{self._component}' state is read-only: cannot set {name}"
        )

    def __delattr__(self, name: str) -> None:
        raise AccessViolationError(
            f"Component '{self._component}' state is read-only: cannot delete {name}"
        )

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ReadOnlyStorage):
            return self._target == other._target
        return self._target == other

    def __hash__(self) -> int:
        return hash(self._target)

    def __repr__(self) -> str:
        return f"ReadOnlyStorage({self._target!r})"


class ComponentStateView:
    """Read-only view of one binding's component state inside a contract state."""

    __slots__ = ("_host_ref", "_accessor")

    def __init__(self, host: ContractState, accessor: AccessorCapability) -> None:
        self._host_ref = weakref.ref(host)
        self._accessor = accessor

    @property
    def host(self) -> ContractState:
        """The contract state this view was derived from.

        Raises:
            ReferenceError: If the contract state no longer exists.
        """
        host = self._host_ref()
        if host is None:
            raise ReferenceError(
                f"Component '{self.component.name}' state view outlived its contract state"
            )
        return host

    @property
    def accessor(self) -> AccessorCapability:
        """Accessor that created this view."""
        return self._accessor

    @property
    def component(self) -> ComponentDefinition:
        """Definition of the viewed component."""
        return self._accessor.component

    @property
    def storage_field_name(self) -> str:
        """Host storage member this view addresses."""
        return self._accessor.storage_field_name

    def _raw_storage(self) -> Any:
        return getattr(self.host.storage, self._accessor.storage_field_name)

    @property
    def storage(self) -> Any:
        """Component storage (read-only proxy)."""
        return ReadOnlyStorage(self._raw_storage(), self.component.name)

    @property
    def contract(self) -> ContractState:
        """Enclosing contract state (typed as read-only, see ContractStateView)."""
        return self._accessor.get_contract(self)

    def dependency(self, component_type: type) -> ComponentStateView:
        """Read-only view of another component included in the same contract.

        Resolves to the first binding of that component, in declaration order.

        Raises:
            LookupError: If the contract does not include the component.
        """
        return self.host.dependency_accessor(component_type).get_component(self.host)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            self._host_ref() is other._host_ref()  # type: ignore[attr-defined]
            and self._accessor == other._accessor  # type: ignore[attr-defined]
        )

    def __hash__(self) -> int:
        return hash((type(self), id(self._host_ref()), self._accessor.storage_field_name))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.component.name} at "
            f"{self._accessor.host_name}.{self._accessor.storage_field_name})"
        )


class ComponentStateViewMut(ComponentStateView):
    """Mutable view of one binding's component state; can emit component events."""

    __slots__ = ()

    @property
    def storage(self) -> Any:
        """Component storage (the live instance)."""
        return self._raw_storage()

    @property
    def contract(self) -> ContractState:
        """Enclosing contract state, mutable."""
        return self._accessor.get_contract_mut(self)

    def emit(self, event: Any) -> None:
        """Emit a component event through the host's nested event variant."""
        self._accessor.emit(self, event)

    def dependency_mut(self, component_type: type) -> ComponentStateViewMut:
        """Mutable view of another component included in the same contract.

        Raises:
            LookupError: If the contract does not include the component.
        """
        return self.host.dependency_accessor(component_type).get_component_mut(self.host)
