"""Host declaration helpers used inside contract class bodies.

Usage:
    @contract(include(Ownable, storage="ownable", event="OwnableEvent"))
    class Wallet:
        @dataclass
        class Storage:
            ownable: ComponentState[Ownable] = substorage(Ownable)

        class Event:
            OwnableEvent = Ownable.Event

        OwnableImpl = embed("Ownable::OwnableImpl<Wallet>", abi=True)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from contractkit.core.component.core import definition_of
from contractkit.core.component.models import ComponentDefinition


@dataclass(frozen=True, slots=True)
class Inclusion:
    """Pending component inclusion, turned into a Binding by the contract decorator."""

    component: ComponentDefinition
    storage: str
    event: str


@dataclass(frozen=True, slots=True)
class Embedding:
    """Pending exposure declaration; the class attribute name becomes its local name."""

    path: str
    abi: bool = False


def include(component: type | ComponentDefinition, *, storage: str, event: str) -> Inclusion:
    """Declare that a host includes a component.

    Args:
        component: Decorated component class.
        storage: Host storage member holding the component's storage.
        event: Host event variant wrapping the component's events.

    Returns:
        Inclusion record for `@contract(...)`.
    """
    return Inclusion(definition_of(component), storage, event)


def substorage(component: type) -> Any:
    """Dataclass field for a `ComponentState[...]` storage member.

    Each host instance gets a fresh instance of the component's Storage.
    """
    storage_type = definition_of(component).storage.storage_type
    return dataclasses.field(default_factory=storage_type, metadata={"substorage": component})


def embed(path: str, *, abi: bool = False) -> Embedding:
    """Instantiate a component's generated wrapper impl for this host.

    Args:
        path: ``componentPath::aliasName<HostType>``; the component path is the
            component name (or the host storage member it is bound to).
        abi: Add the wrapper's methods to the host's external interface.

    Note:
        Without ``abi=True`` the wrapper stays internal-only: its methods are
        callable from host code (``Wallet.OwnableImpl.owner(state)``) but are
        NOT external entry points. This is not reported as an error; forgetting
        ``abi=True`` silently leaves the component's entry points unexposed.
    """
    return Embedding(path, abi)
