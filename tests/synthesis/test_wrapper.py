"""Tests for generated wrapper impls.

Critical Invariants:
- Wrappers are transparent: same results, same exceptions, same events as
  calling the impl on the component view directly
- Generated source is byte-identical across syntheses
- Read-only methods never obtain mutable component state
"""

from dataclasses import dataclass

import pytest

from contractkit import (
    AccessViolationError,
    HostDeclaration,
    component,
    definition_of,
    embeddable_as,
    interface,
    mutating,
)
from contractkit.core.component.core import RESERVED_METHOD_NAMES
from contractkit.runtime import ContractState
from contractkit.synthesis import (
    GeneratedWrapperImpl,
    render_method,
    synthesize_accessor,
    synthesize_wrapper,
)


def test_wrapper_exposes_methods_in_declaration_order(wallet_cls):
    wrapper = wallet_cls.OwnableImpl

    assert repr(wrapper) == "OwnableImpl<Wallet>"
    assert wrapper.entry_points() == ("owner", "transfer_ownership")
    assert wrapper.alias_name == "OwnableImpl"
    assert wrapper.host_name == "Wallet"


def test_wrapper_matches_direct_call(wallet_cls, ownable_cls):
    """Calling through the wrapper equals calling the impl on a view."""
    via_wrapper = wallet_cls.__contract__.deploy()
    direct = wallet_cls.__contract__.deploy()

    wallet_cls.OwnableImpl.transfer_ownership(via_wrapper, "alice")
    ownable_cls.OwnableCapability.transfer_ownership(direct.component_mut("ownable"), "alice")

    assert via_wrapper.storage == direct.storage
    assert via_wrapper.events == direct.events
    assert wallet_cls.OwnableImpl.owner(via_wrapper) == "alice"


def test_wrapper_returns_impl_result(wallet, wallet_cls):
    assert wallet_cls.CounterImpl.increment(wallet) == 1
    assert wallet_cls.CounterImpl.increment(wallet, 4) == 5
    assert wallet_cls.CounterImpl.increment(wallet, by=5) == 10
    assert wallet_cls.CounterImpl.value(wallet) == 10


def test_wrapper_propagates_exceptions_unchanged(wallet, wallet_cls):
    with pytest.raises(ValueError, match="by must be positive"):
        wallet_cls.CounterImpl.increment(wallet, 0)

    assert wallet.storage.counter.count == 0
    assert wallet.events == []


def test_source_is_deterministic(wallet_cls):
    wrapper = wallet_cls.CounterImpl
    again = synthesize_wrapper(wrapper.impl, wrapper.accessor)

    assert again.source == wrapper.source
    assert again.methods == wrapper.methods


def test_generated_source_shape(wallet_cls):
    wrapper = wallet_cls.CounterImpl

    assert wrapper.method("increment").source == (
        "def increment(self, by=_default_by):\n"
        "    return _delegate(_accessor.get_component_mut(self), by)\n"
    )
    assert wrapper.method("value").source == (
        "def value(self):\n    return _delegate(_accessor.get_component(self))\n"
    )


def test_render_method_covers_parameter_kinds():
    def impl(state, a, /, b, c=3, *args, d, e=5, **kwargs):
        pass

    source, defaults = render_method("run", impl, mutating=False)

    assert source == (
        "def run(self, a, /, b, c=_default_c, *args, d, e=_default_e, **kwargs):\n"
        "    return _delegate(_accessor.get_component(self), a, b, c, *args, d=d, e=e, **kwargs)\n"
    )
    assert defaults == {"_default_c": 3, "_default_e": 5}


def test_render_method_keyword_only_without_varargs():
    def impl(state, *, flag=False):
        pass

    source, _ = render_method("toggle", impl, mutating=True)

    assert source.splitlines()[0] == "def toggle(self, *, flag=_default_flag):"
    assert "get_component_mut(self), flag=flag)" in source


def test_mutable_default_is_bound_not_copied():
    marker = []

    def impl(state, items=marker):
        return items

    _, defaults = render_method("items", impl, mutating=False)

    assert defaults["_default_items"] is marker


def test_generated_function_carries_metadata(wallet_cls, ownable_cls):
    fn = wallet_cls.OwnableImpl.owner

    assert fn.__doc__ == "Current owner."
    assert fn.__qualname__ == "OwnableImpl.owner"
    assert fn.__annotations__ == {"return": str}


def test_readonly_method_gets_readonly_view():
    @interface
    class IPeek:
        def peek(self) -> int: ...

    @component
    class Peeker:
        @dataclass
        class Storage:
            value: int = 7

        @embeddable_as("PeekImpl")
        class PeekCapability(IPeek):
            def peek(self) -> int:
                self.storage.value = 0
                return self.storage.value

    binding = HostDeclaration("Box").include(Peeker, "peeker", "PeekerEvent")
    accessor = synthesize_accessor(binding, "Box")
    wrapper = synthesize_wrapper(definition_of(Peeker).embeddable_impl("PeekImpl"), accessor)
    storage = type("Storage", (), {"peeker": Peeker.Storage()})()
    state = ContractState("Box", storage)

    with pytest.raises(AccessViolationError, match="read-only"):
        wrapper.peek(state)
    assert storage.peeker.value == 7


def test_non_embeddable_impl_cannot_be_wrapped(ownable_cls):
    binding = HostDeclaration("Wallet").include(ownable_cls, "ownable", "OwnableEvent")
    accessor = synthesize_accessor(binding, "Wallet")

    with pytest.raises(ValueError, match="not embeddable"):
        synthesize_wrapper(definition_of(ownable_cls).impl("InternalImpl"), accessor)


def test_impl_of_other_component_cannot_be_wrapped(ownable_cls, counter_cls):
    binding = HostDeclaration("Wallet").include(ownable_cls, "ownable", "OwnableEvent")
    accessor = synthesize_accessor(binding, "Wallet")

    with pytest.raises(ValueError, match="not an impl of component Ownable"):
        synthesize_wrapper(definition_of(counter_cls).embeddable_impl("CounterImpl"), accessor)


def test_unknown_method_attribute(wallet_cls):
    with pytest.raises(AttributeError, match="OwnableImpl has no method initializer"):
        wallet_cls.OwnableImpl.initializer

    assert "transfer_ownership" in dir(wallet_cls.OwnableImpl)


def test_mutating_keyword_only_impl_round_trips():
    @interface
    class ISetter:
        @mutating
        def set(self, *, value: int, scale: int = 1) -> int: ...

    @component
    class Setter:
        @dataclass
        class Storage:
            value: int = 0

        @embeddable_as("SetterImpl")
        class SetterCapability(ISetter):
            def set(self, *, value: int, scale: int = 1) -> int:
                self.storage.value = value * scale
                return self.storage.value

    binding = HostDeclaration("Box").include(Setter, "setter", "SetterEvent")
    wrapper = synthesize_wrapper(
        definition_of(Setter).embeddable_impl("SetterImpl"),
        synthesize_accessor(binding, "Box"),
    )
    storage = type("Storage", (), {"setter": Setter.Storage()})()
    state = ContractState("Box", storage)

    assert wrapper.set(state, value=3, scale=2) == 6
    with pytest.raises(TypeError):
        wrapper.set(state, 3)


def test_reserved_method_names_cover_wrapper_attributes():
    public = {name for name in dir(GeneratedWrapperImpl) if not name.startswith("_")}

    assert public == RESERVED_METHOD_NAMES
