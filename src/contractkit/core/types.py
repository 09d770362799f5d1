"""Core type markers for contractkit."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SubstorageType:
    """Annotation produced by ``ComponentState[SomeComponent]``."""

    component: type

    def __repr__(self) -> str:
        return f"ComponentState[{self.component.__name__}]"


class ComponentState:
    """Marks a host storage member holding a component's storage.

    `ComponentState[Ownable]` reads as "Ownable's storage schema addressed at this
    member of the host's storage". It is only an annotation; the live state is
    reached through component state views, which never outlive their host.

    Usage:
        @dataclass
        class Storage:
            ownable: ComponentState[Ownable] = substorage(Ownable)
    """

    def __new__(cls, *args: object, **kwargs: object) -> ComponentState:
        raise TypeError("ComponentState is an annotation marker and cannot be instantiated")

    def __class_getitem__(cls, component: type) -> SubstorageType:
        return SubstorageType(component)
