"""Embeddable wrapper synthesis: host-facing impls that forward into a component.

For every method of an embeddable capability impl, Python source is rendered
from the method's signature and compiled, e.g.

    def transfer_ownership(self, new_owner):
        return _delegate(_accessor.get_component_mut(self), new_owner)

``self`` is the contract state. The wrapper fetches the component state view
first (mutable only when the method is mutating), then calls the original
method with the remaining arguments untouched and returns its result. Nothing
is caught, converted or reordered. Default values are bound by name rather
than rendered, so the same impl always yields byte-identical source.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from contractkit.core.component.models import CapabilityImpl, ComponentDefinition
from contractkit.synthesis.accessor import AccessorCapability

logger = logging.getLogger(__name__)

_P = inspect.Parameter

_METHOD_TEMPLATE = """\
def {name}(self{params}):
    return _delegate(_accessor.{getter}(self){args})
"""


@dataclass(frozen=True, slots=True)
class WrapperMethod:
    """One generated wrapper method.

    Attributes:
        name: Entry point name (the original method name).
        mutating: True if the method obtains mutable component state.
        source: Generated Python source of the method.
        function: Compiled function taking the contract state first.
    """

    name: str
    mutating: bool
    source: str
    function: Callable[..., Any] = field(compare=False, repr=False)


class GeneratedWrapperImpl:
    """Synthesized host-facing implementation of an embeddable capability impl.

    Methods are reachable as attributes: ``wrapper.owner(state)``.
    """

    __slots__ = ("_alias_name", "_impl", "_accessor", "_methods")

    def __init__(
        self,
        alias_name: str,
        impl: CapabilityImpl,
        accessor: AccessorCapability,
        methods: tuple[WrapperMethod, ...],
    ) -> None:
        self._alias_name = alias_name
        self._impl = impl
        self._accessor = accessor
        self._methods = methods

    @property
    def alias_name(self) -> str:
        """Public name of the wrapper (the impl's embeddable alias)."""
        return self._alias_name

    @property
    def impl(self) -> CapabilityImpl:
        """The wrapped capability impl."""
        return self._impl

    @property
    def component(self) -> ComponentDefinition:
        """Component the wrapped impl belongs to."""
        return self._accessor.component

    @property
    def accessor(self) -> AccessorCapability:
        """Accessor every method forwards through."""
        return self._accessor

    @property
    def host_name(self) -> str:
        """Host the wrapper is instantiated for."""
        return self._accessor.host_name

    @property
    def methods(self) -> tuple[WrapperMethod, ...]:
        """Generated methods in the impl's declaration order."""
        return self._methods

    @property
    def source(self) -> str:
        """Generated source of all methods."""
        return "\n".join(m.source for m in self._methods)

    def entry_points(self) -> tuple[str, ...]:
        """Method names in declaration order."""
        return tuple(m.name for m in self._methods)

    def method(self, name: str) -> WrapperMethod:
        """Look up a generated method.

        Raises:
            KeyError: If the wrapper has no such method.
        """
        for m in self._methods:
            if m.name == name:
                return m
        raise KeyError(f"{self._alias_name} has no method {name}")

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self.method(name).function
        except KeyError:
            raise AttributeError(f"{self._alias_name} has no method {name}") from None

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *self.entry_points()})

    def __repr__(self) -> str:
        return f"{self._alias_name}<{self.host_name}>"


def _render_parameters(fn: Callable[..., Any]) -> tuple[str, str, dict[str, Any]]:
    """Render a function's parameters (minus the state parameter) for a forwarding wrapper.

    Returns:
        (definition text, call text, default bindings) where both texts are
        empty or start with ", ".
    """
    params = list(inspect.signature(fn).parameters.values())[1:]
    defs: list[str] = []
    calls: list[str] = []
    defaults: dict[str, Any] = {}
    pending_slash = False
    star_written = False

    for p in params:
        text = p.name
        if p.default is not _P.empty:
            key = f"_default_{p.name}"
            defaults[key] = p.default
            text = f"{p.name}={key}"

        if p.kind is _P.POSITIONAL_ONLY:
            defs.append(text)
            calls.append(p.name)
            pending_slash = True
            continue
        if pending_slash:
            defs.append("/")
            pending_slash = False

        if p.kind is _P.POSITIONAL_OR_KEYWORD:
            defs.append(text)
            calls.append(p.name)
        elif p.kind is _P.VAR_POSITIONAL:
            defs.append(f"*{p.name}")
            calls.append(f"*{p.name}")
            star_written = True
        elif p.kind is _P.KEYWORD_ONLY:
            if not star_written:
                defs.append("*")
                star_written = True
            defs.append(text)
            calls.append(f"{p.name}={p.name}")
        else:
            defs.append(f"**{p.name}")
            calls.append(f"**{p.name}")

    if pending_slash:
        defs.append("/")

    def joined(parts: list[str]) -> str:
        return "".join(f", {part}" for part in parts)

    return joined(defs), joined(calls), defaults


def render_method(name: str, fn: Callable[..., Any], mutating: bool) -> tuple[str, dict[str, Any]]:
    """Render the source of one forwarding method.

    Args:
        name: Method name.
        fn: Original impl function (component state first).
        mutating: Whether to fetch mutable component state.

    Returns:
        (source, default bindings the source refers to).
    """
    params, args, defaults = _render_parameters(fn)
    source = _METHOD_TEMPLATE.format(
        name=name,
        params=params,
        getter="get_component_mut" if mutating else "get_component",
        args=args,
    )
    return source, defaults


def _compile_method(
    alias_name: str,
    name: str,
    fn: Callable[..., Any],
    source: str,
    namespace: dict[str, Any],
) -> Callable[..., Any]:
    exec(compile(source, f"<{alias_name}.{name}>", "exec"), namespace)
    wrapper = namespace[name]
    first = next(iter(inspect.signature(fn).parameters))
    wrapper.__doc__ = fn.__doc__
    wrapper.__module__ = fn.__module__
    wrapper.__qualname__ = f"{alias_name}.{name}"
    wrapper.__annotations__ = {k: v for k, v in fn.__annotations__.items() if k != first}
    return wrapper


def synthesize_wrapper(
    impl: CapabilityImpl,
    accessor: AccessorCapability,
    *,
    log_source: bool = False,
) -> GeneratedWrapperImpl:
    """Synthesize the host-facing wrapper of an embeddable capability impl.

    Args:
        impl: Embeddable impl of the accessor's component.
        accessor: Accessor of the binding the wrapper forwards through.
        log_source: Log the generated source at DEBUG level.

    Returns:
        The generated wrapper, named by the impl's alias.

    Raises:
        ValueError: If the impl is not embeddable or belongs to another component.
    """
    if not impl.embeddable or impl.alias_name is None:
        raise ValueError(f"{impl.name} is not embeddable")
    if accessor.component.impl(impl.name) != impl:
        raise ValueError(f"{impl.name} is not an impl of component {accessor.component.name}")

    alias_name = impl.alias_name
    methods = []
    for signature in impl.methods:
        fn = impl.function(signature.name)
        source, defaults = render_method(signature.name, fn, signature.mutating)
        namespace: dict[str, Any] = {"_accessor": accessor, "_delegate": fn, **defaults}
        methods.append(
            WrapperMethod(
                name=signature.name,
                mutating=signature.mutating,
                source=source,
                function=_compile_method(alias_name, signature.name, fn, source, namespace),
            )
        )

    wrapper = GeneratedWrapperImpl(alias_name, impl, accessor, tuple(methods))
    logger.debug(
        "Synthesized wrapper %r with entry points %s", wrapper, ", ".join(wrapper.entry_points())
    )
    if log_source:
        logger.debug("Generated source for %r:\n%s", wrapper, wrapper.source)
    return wrapper
