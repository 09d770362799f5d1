"""Component registry, declaration decorators and definition building.

Usage:
    @interface
    class ICounter:
        def value(self) -> int: ...

        @mutating
        def increment(self, by: int = 1) -> None: ...

    @component
    class Counter:
        @dataclass
        class Storage:
            value: int = 0

        class Event:
            @dataclass(frozen=True)
            class Incremented:
                by: int

        @embeddable_as("CounterImpl")
        class CounterCapability(ICounter):
            def value(self) -> int:
                return self.storage.value

            def increment(self, by: int = 1) -> None:
                self.storage.value += by
                self.emit(Counter.Event.Incremented(by))

Capability impl methods receive a component state view as ``self``.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, TypeVar, overload

from contractkit.core.component.models import (
    CapabilityImpl,
    ComponentDefinition,
    EventSchema,
    EventVariant,
    InterfaceDef,
    MalformedComponentError,
    MethodSignature,
    StorageField,
    StorageSchema,
)
from contractkit.core.component.operations import (
    is_storage_class,
    namespace_types,
    storage_fields,
)
from contractkit.core.diagnostics import MalformedComponent

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type)

_RESERVED_MEMBERS = ("Storage", "Event")

# Names the generated wrapper functions use for their own state and globals
RESERVED_PARAMETER_NAMES = frozenset({"self", "_accessor", "_delegate"})

# Public attributes of generated wrappers, which would shadow embedded methods
RESERVED_METHOD_NAMES = frozenset(
    {
        "alias_name",
        "impl",
        "component",
        "accessor",
        "host_name",
        "methods",
        "source",
        "entry_points",
        "method",
    }
)

_STATE_PARAMETER_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def mutating(fn: F) -> F:
    """Mark an interface or capability method as needing mutable component state."""
    fn.__mutating__ = True  # type: ignore[attr-defined]
    return fn


def _is_mutating(fn: Any) -> bool:
    return bool(getattr(fn, "__mutating__", False))


def _public_functions(cls: type) -> list[tuple[str, Any]]:
    return [
        (name, value)
        for name, value in vars(cls).items()
        if not name.startswith("_") and callable(value) and not isinstance(value, type)
    ]


def _signature_of(name: str, fn: Any) -> MethodSignature:
    params = tuple(inspect.signature(fn).parameters)[1:] if inspect.isfunction(fn) else ()
    return MethodSignature(name=name, parameters=params, mutating=_is_mutating(fn))


def _interface_meta(cls: type) -> InterfaceDef | None:
    meta = vars(cls).get("__interface_meta__")
    return meta if isinstance(meta, InterfaceDef) else None


def interface(cls: C) -> C:
    """Declare a class as an interface: the set of its public method signatures.

    Capability impls implement an interface by subclassing it. An interface
    subclassing other interfaces extends them; its own declarations override
    inherited ones of the same name.
    """
    methods: dict[str, MethodSignature] = {}
    for base in reversed(cls.__mro__[1:]):
        meta = _interface_meta(base)
        if meta is not None:
            methods.update((m.name, m) for m in meta.methods)
    methods.update((name, _signature_of(name, fn)) for name, fn in _public_functions(cls))

    cls.__interface_meta__ = InterfaceDef(  # type: ignore[attr-defined]
        name=cls.__name__,
        interface_type=cls,
        methods=tuple(methods.values()),
    )
    return cls


def capability(cls: C) -> C:
    """Declare an internal capability impl whose interface is its own public methods.

    Such impls stay callable on component state views but are never embeddable.
    """
    cls.__capability__ = True  # type: ignore[attr-defined]
    return cls


def embeddable_as(alias_name: str) -> Callable[[C], C]:
    """Mark a capability impl as embeddable under a public alias name.

    The alias is the name hosts reference in exposure declarations, e.g.
    ``embed("Ownable::OwnableImpl<Wallet>", abi=True)``.
    """

    def decorator(cls: C) -> C:
        # Collected rather than overwritten so registration can reject repeats.
        aliases = vars(cls).get("__embeddable_as__", ())
        cls.__embeddable_as__ = (*aliases, alias_name)  # type: ignore[attr-defined]
        return cls

    return decorator


def declared_interfaces(impl: type) -> tuple[InterfaceDef, ...]:
    """Find the interfaces an impl class implements.

    Interfaces that another found interface already extends are left out, so
    an impl of ``IExt(IBase)`` yields only ``IExt``.
    """
    found = [base for base in impl.__mro__[1:] if _interface_meta(base) is not None]
    return tuple(
        vars(base)["__interface_meta__"]
        for base in found
        if not any(other is not base and issubclass(other, base) for other in found)
    )


class ComponentRegistry:
    """Process-local registry mapping component classes to their definitions."""

    def __init__(self) -> None:
        """Initialize empty component registry."""
        self._by_type: dict[type, ComponentDefinition] = {}

    def register(self, cls: type, requires: tuple[type, ...] = ()) -> ComponentDefinition:
        """Build, validate and register a component definition.

        Args:
            cls: Component class declaring `Storage`, optionally `Event`, and
                capability impls as nested classes.
            requires: Components a host must also include for this one to work.

        Returns:
            The component definition (cached per class).

        Raises:
            MalformedComponentError: If the declarations are inconsistent.
        """
        if cls in self._by_type:
            return self._by_type[cls]

        name = cls.__name__
        definition = ComponentDefinition(
            name=name,
            component_type=cls,
            storage=_build_storage(cls),
            events=_build_events(cls),
            impls=_build_impls(cls),
            dependencies=tuple(requires),
        )
        self._by_type[cls] = definition
        return definition

    def get(self, cls: type) -> ComponentDefinition | None:
        """Get the definition of a registered component class.

        Args:
            cls: Component class to look up.

        Returns:
            Component definition if registered, None otherwise.
        """
        return self._by_type.get(cls)

    def is_registered(self, cls: type) -> bool:
        """Check if a class is registered as a component."""
        return cls in self._by_type


def _build_storage(cls: type) -> StorageSchema:
    storage = vars(cls).get("Storage")
    if storage is None:
        raise MalformedComponentError(MalformedComponent(cls.__name__, "missing Storage declaration"))
    if not is_storage_class(storage):
        raise MalformedComponentError(
            MalformedComponent(cls.__name__, "Storage must be a dataclass or Pydantic model")
        )
    return StorageSchema(
        owner=cls.__name__,
        storage_type=storage,
        fields=tuple(StorageField(name, annotation) for name, annotation, _ in storage_fields(storage)),
    )


def _build_events(cls: type) -> EventSchema:
    event = vars(cls).get("Event")
    if event is None:
        # Hosts reference `Component.Event` in their event namespace even when empty
        event = type("Event", (), {"__module__": cls.__module__})
        event.__qualname__ = f"{cls.__qualname__}.Event"
        cls.Event = event  # type: ignore[attr-defined]
    return EventSchema(
        owner=cls.__name__,
        event_type=event,
        variants=tuple(EventVariant(name, payload) for name, payload in namespace_types(event)),
    )


def _build_impls(cls: type) -> tuple[CapabilityImpl, ...]:
    impls: list[CapabilityImpl] = []
    aliases: dict[str, str] = {}
    for name, member in namespace_types(cls):
        if name in _RESERVED_MEMBERS:
            continue
        impl = _build_impl(cls.__name__, name, member)
        if impl is None:
            continue
        if impl.alias_name is not None:
            if impl.alias_name in aliases:
                raise MalformedComponentError(
                    MalformedComponent(
                        cls.__name__,
                        f"alias {impl.alias_name} is already used by {aliases[impl.alias_name]}",
                        impl=name,
                    )
                )
            aliases[impl.alias_name] = name
        impls.append(impl)
    return tuple(impls)


def _build_impl(component: str, name: str, impl: type) -> CapabilityImpl | None:
    aliases = vars(impl).get("__embeddable_as__", ())
    ifaces = declared_interfaces(impl)

    def malformed(reason: str) -> MalformedComponentError:
        return MalformedComponentError(MalformedComponent(component, reason, impl=name))

    if len(ifaces) > 1:
        raise malformed(f"implements more than one interface: {', '.join(i.name for i in ifaces)}")
    iface = ifaces[0] if ifaces else None

    if iface is None and vars(impl).get("__capability__", False):
        iface = InterfaceDef(
            name=name,
            interface_type=impl,
            methods=tuple(_signature_of(n, fn) for n, fn in _public_functions(impl)),
            generated=True,
        )
        if aliases:
            raise malformed("embeddable impls must implement a declared interface")
    elif iface is None:
        if aliases:
            raise malformed("embeddable impls must implement a declared interface")
        return None

    if len(aliases) > 1:
        raise malformed(f"at most one embeddable alias allowed, got {', '.join(aliases)}")

    own = vars(impl)
    methods = []
    for method in iface.methods:
        fn = own.get(method.name)
        if fn is None:
            raise malformed(f"missing implementation of {iface.name}.{method.name}")
        if not inspect.isfunction(fn):
            raise malformed(f"{method.name} must be a plain function taking component state")
        params = list(inspect.signature(fn).parameters.values())
        if not params or params[0].kind not in _STATE_PARAMETER_KINDS:
            raise malformed(f"{method.name} must take component state as its first parameter")
        reserved = RESERVED_PARAMETER_NAMES.intersection(p.name for p in params[1:])
        if reserved:
            raise malformed(f"{method.name} uses reserved parameter names: {', '.join(sorted(reserved))}")
        if aliases and method.name in RESERVED_METHOD_NAMES:
            raise malformed(f"{method.name} is reserved by generated wrappers")
        if _is_mutating(fn) and not method.mutating:
            raise malformed(f"{method.name} is mutating but {iface.name} declares it read-only")
        methods.append(method)

    # Impl declaration order, not interface order
    order = list(own)
    methods.sort(key=lambda m: order.index(m.name))

    return CapabilityImpl(
        name=name,
        impl_type=impl,
        interface=iface,
        methods=tuple(methods),
        embeddable=bool(aliases),
        alias_name=aliases[0] if aliases else None,
    )


# Module-level registry instance
_registry = ComponentRegistry()


def get_registry() -> ComponentRegistry:
    """Access the global component registry.

    Returns:
        The process-local ComponentRegistry instance.
    """
    return _registry


@overload
def component(cls: type) -> type: ...


@overload
def component(cls: None = None, *, requires: tuple[type, ...] = ()) -> Callable[[type], type]: ...


def component(
    cls: type | None = None, *, requires: tuple[type, ...] = ()
) -> type | Callable[[type], type]:
    """Register a class as a component definition.

    Supports three forms:
        @component                          # bare decorator
        @component()                        # parenthesized, no args
        @component(requires=(Ownable,))     # with dependencies

    Args:
        cls: The class to register, or None if called with arguments.
        requires: Components the host must include alongside this one.

    Returns:
        Decorated class or decorator function.

    Raises:
        MalformedComponentError: If the component's declarations are inconsistent.
    """

    def decorator(c: type) -> type:
        definition = _registry.register(c, requires=requires)
        c.__component_definition__ = definition  # type: ignore[attr-defined]
        return c

    if cls is None:
        return decorator
    return decorator(cls)


def definition_of(component_or_definition: type | ComponentDefinition) -> ComponentDefinition:
    """Resolve a decorated component class (or a definition) to its definition.

    Raises:
        TypeError: If the class was never registered as a component.
    """
    if isinstance(component_or_definition, ComponentDefinition):
        return component_or_definition
    definition = vars(component_or_definition).get("__component_definition__")
    if not isinstance(definition, ComponentDefinition):
        raise TypeError(
            f"{component_or_definition.__name__} is not a component. "
            f"Did you forget @component decorator?"
        )
    return definition
