"""Tests for the composition pipeline and binding state machine."""

import logging
from dataclasses import dataclass

import pytest

from contractkit import (
    BindingState,
    ComponentState,
    CompositionSettings,
    HostDeclaration,
    HostSchema,
    MissingNestedEvent,
    MissingSubstorageMember,
    component,
    compose,
    definition_of,
    substorage,
)
from contractkit.synthesis import BindingOutcome, synthesize
from contractkit.synthesis.models import TRANSITIONS


def _compose(host, *bindings, **settings):
    declaration = HostDeclaration(host.__name__, host)
    for comp, storage, event in bindings:
        declaration.include(comp, storage, event)
    return compose(declaration, HostSchema.from_host(host), CompositionSettings(**settings))


def test_valid_binding_reaches_wrapper_synthesized(wallet_cls, ownable_cls, counter_cls):
    result = _compose(
        wallet_cls,
        (ownable_cls, "ownable", "OwnableEvent"),
        (counter_cls, "counter", "CounterEvent"),
    )

    assert result.ok
    assert [o.state for o in result.outcomes] == [BindingState.WRAPPER_SYNTHESIZED] * 2
    assert list(result.outcome_for("ownable").wrappers) == ["OwnableImpl"]


def test_component_without_embeddable_impls_stops_at_accessor():
    @component
    class Plain:
        @dataclass
        class Storage:
            value: int = 0

    class Host:
        @dataclass
        class Storage:
            plain: ComponentState[Plain] = substorage(Plain)

        class Event:
            PlainEvent = Plain.Event

    result = _compose(Host, (Plain, "plain", "PlainEvent"))
    [outcome] = result.outcomes

    assert outcome.state is BindingState.ACCESSOR_SYNTHESIZED
    assert outcome.accessor is not None
    assert outcome.wrappers == {}


def test_missing_storage_member_is_invalid_and_synthesizes_nothing(ownable_cls):
    class Bare:
        @dataclass
        class Storage:
            balance: int = 0

        class Event:
            OwnableEvent = ownable_cls.Event

    result = _compose(Bare, (ownable_cls, "ownable", "OwnableEvent"))
    [outcome] = result.outcomes

    assert [(type(d), d.name) for d in outcome.diagnostics] == [(MissingSubstorageMember, "ownable")]
    assert outcome.state is BindingState.INVALID
    assert outcome.accessor is None
    assert outcome.wrappers == {}
    assert not result.ok


def test_missing_nested_event_keeps_accessor_without_emission(ownable_cls):
    """The storage and event checks are independent."""

    class NoEvent:
        @dataclass
        class Storage:
            ownable: ComponentState[ownable_cls] = substorage(ownable_cls)

    result = _compose(NoEvent, (ownable_cls, "ownable", "OwnableEvent"))
    [outcome] = result.outcomes

    assert [type(d) for d in outcome.diagnostics] == [MissingNestedEvent]
    assert outcome.state is BindingState.ACCESSOR_SYNTHESIZED
    assert outcome.accessor.event_variant_name is None
    assert outcome.wrappers == {}
    assert not result.ok


def test_collision_warning_does_not_block_synthesis(ownable_cls):
    class Colliding:
        @dataclass
        class Storage:
            owner: str = "host"
            ownable: ComponentState[ownable_cls] = substorage(ownable_cls)

        class Event:
            OwnableEvent = ownable_cls.Event

    result = _compose(Colliding, (ownable_cls, "ownable", "OwnableEvent"))

    assert result.ok
    assert len(result.warnings) == 1
    assert result.outcomes[0].state is BindingState.WRAPPER_SYNTHESIZED


def test_collision_error_policy_blocks_synthesis(ownable_cls):
    class Colliding:
        @dataclass
        class Storage:
            owner: str = "host"
            ownable: ComponentState[ownable_cls] = substorage(ownable_cls)

        class Event:
            OwnableEvent = ownable_cls.Event

    result = _compose(Colliding, (ownable_cls, "ownable", "OwnableEvent"), collision_policy="error")

    assert result.outcomes[0].state is BindingState.INVALID
    assert len(result.errors) == 1


def test_diagnostics_follow_declaration_order(ownable_cls, counter_cls):
    class Empty:
        @dataclass
        class Storage:
            balance: int = 0

    result = _compose(
        Empty,
        (counter_cls, "counter", "CounterEvent"),
        (ownable_cls, "ownable", "OwnableEvent"),
    )

    assert [d.component for d in result.diagnostics] == ["Counter", "Counter", "Ownable", "Ownable"]


def test_accessors_for_component(wallet_cls, ownable_cls, counter_cls):
    result = _compose(wallet_cls, (ownable_cls, "ownable", "OwnableEvent"))

    assert [a.storage_field_name for a in result.accessors_for(ownable_cls)] == ["ownable"]
    assert result.accessors_for(counter_cls) == []


def test_synthesize_rejects_binding_of_other_component(ownable_cls, counter_cls):
    binding = HostDeclaration("Wallet").include(ownable_cls, "ownable", "OwnableEvent")

    with pytest.raises(ValueError, match="is not a binding of Counter"):
        synthesize(definition_of(counter_cls), binding, "Wallet")


def test_illegal_transition_raises(ownable_cls):
    outcome = BindingOutcome(HostDeclaration("Wallet").include(ownable_cls, "ownable", "OwnableEvent"))

    with pytest.raises(RuntimeError, match="DECLARED -> VALID"):
        outcome.advance(BindingState.VALID)


def test_terminal_states_have_no_transitions():
    assert TRANSITIONS[BindingState.INVALID] == frozenset()
    assert TRANSITIONS[BindingState.WRAPPER_SYNTHESIZED] == frozenset()


def test_compose_logs_summary(wallet_cls, ownable_cls, caplog):
    with caplog.at_level(logging.INFO, logger="contractkit.synthesis.pipeline"):
        _compose(wallet_cls, (ownable_cls, "ownable", "OwnableEvent"))

    assert "Composed Wallet: 1 binding(s), 0 error(s), 0 warning(s)" in caplog.text


def test_generated_source_logged_when_enabled(wallet_cls, counter_cls, caplog):
    with caplog.at_level(logging.DEBUG, logger="contractkit.synthesis.wrapper"):
        _compose(wallet_cls, (counter_cls, "counter", "CounterEvent"), log_generated_source=True)

    assert "Generated source for CounterImpl<Wallet>" in caplog.text
    assert "def increment(self, by=_default_by):" in caplog.text
