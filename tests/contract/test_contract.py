"""Tests for the @contract decorator and contract definitions.

Critical Invariants:
- All diagnostics are collected before a strict contract fails
- Internal-only embeds are callable but never become entry points
- An unresolved exposure only loses its own wrapper
"""

import logging
from dataclasses import dataclass

import pytest

from contractkit import (
    ComponentState,
    CompositionError,
    CompositionSettings,
    ContractDefinition,
    DuplicateEntryPoint,
    GeneratedWrapperImpl,
    MissingNestedEvent,
    MissingSubstorageMember,
    UnresolvedAlias,
    component,
    contract,
    contract_of,
    embed,
    embeddable_as,
    include,
    interface,
    substorage,
)


def test_contract_attaches_definition(wallet_cls):
    definition = contract_of(wallet_cls)

    assert isinstance(definition, ContractDefinition)
    assert definition is wallet_cls.__contract__
    assert definition.name == "Wallet"
    assert definition.diagnostics == []
    assert definition.interface.names() == ("owner", "transfer_ownership", "value", "increment")


def test_embed_attributes_are_replaced_by_wrappers(wallet_cls):
    assert isinstance(wallet_cls.OwnableImpl, GeneratedWrapperImpl)
    assert contract_of(wallet_cls).embedded["CounterImpl"] is wallet_cls.CounterImpl


def test_contract_of_undecorated_class():
    class Plain:
        pass

    with pytest.raises(TypeError, match="Did you forget @contract decorator"):
        contract_of(Plain)


def test_strict_contract_reports_every_diagnostic(ownable_cls, counter_cls, strict):
    with pytest.raises(CompositionError) as exc_info:

        @contract(
            include(ownable_cls, storage="ownable", event="OwnableEvent"),
            include(counter_cls, storage="counter", event="CounterEvent"),
            settings=strict,
        )
        class Broken:
            @dataclass
            class Storage:
                counter: ComponentState[counter_cls] = substorage(counter_cls)

            class Event:
                CounterEvent = counter_cls.Event

            OwnableImpl = embed("Ownable::OwnableImpl<Broken>", abi=True)

    error = exc_info.value
    assert error.host_name == "Broken"
    assert [type(d) for d in error.diagnostics] == [
        MissingSubstorageMember,
        MissingNestedEvent,
        UnresolvedAlias,
    ]
    message = str(error)
    assert message.startswith("Contract Broken failed to compose:\n")
    assert "ownable is not a substorage member in the contract's Storage." in message
    assert "Consider adding to the Event enum: OwnableEvent = Ownable.Event" in message
    assert "Trait not found. Not a trait." in message


def test_lenient_contract_keeps_valid_bindings(ownable_cls, counter_cls, lenient, caplog):
    with caplog.at_level(logging.WARNING, logger="contractkit.contract.contract"):

        @contract(
            include(ownable_cls, storage="ownable", event="OwnableEvent"),
            include(counter_cls, storage="counter", event="CounterEvent"),
            settings=lenient,
        )
        class Partial:
            @dataclass
            class Storage:
                counter: ComponentState[counter_cls] = substorage(counter_cls)

            class Event:
                CounterEvent = counter_cls.Event

            OwnableImpl = embed("Ownable::OwnableImpl<Partial>", abi=True)
            CounterImpl = embed("Counter::CounterImpl<Partial>", abi=True)

    definition = contract_of(Partial)
    assert len(definition.diagnostics) == 3
    assert definition.interface.names() == ("value", "increment")
    assert "Partial: ownable is not a substorage member" in caplog.text

    state = definition.deploy()
    assert state.call("increment", 2) == 2


def test_internal_only_embed_is_callable_but_not_exposed(ownable_cls, strict, caplog):
    with caplog.at_level(logging.DEBUG, logger="contractkit.contract.contract"):

        @contract(include(ownable_cls, storage="ownable", event="OwnableEvent"), settings=strict)
        class Quiet:
            @dataclass
            class Storage:
                ownable: ComponentState[ownable_cls] = substorage(ownable_cls)

            class Event:
                OwnableEvent = ownable_cls.Event

            OwnableImpl = embed("Ownable::OwnableImpl<Quiet>")

    definition = contract_of(Quiet)
    state = definition.deploy()

    assert definition.diagnostics == []
    assert len(definition.interface) == 0
    assert "without abi=True" in caplog.text
    Quiet.OwnableImpl.transfer_ownership(state, "dave")
    assert Quiet.OwnableImpl.owner(state) == "dave"
    with pytest.raises(KeyError):
        state.call("owner")


def test_internal_impl_name_does_not_resolve(ownable_cls, lenient):
    @contract(include(ownable_cls, storage="ownable", event="OwnableEvent"), settings=lenient)
    class Misnamed:
        @dataclass
        class Storage:
            ownable: ComponentState[ownable_cls] = substorage(ownable_cls)

        class Event:
            OwnableEvent = ownable_cls.Event

        OwnableImpl = embed("Ownable::OwnableCapability<Misnamed>", abi=True)

    assert contract_of(Misnamed).diagnostics == [
        UnresolvedAlias("Misnamed", "OwnableImpl", "Ownable::OwnableCapability<Misnamed>")
    ]


def test_duplicate_entry_point_is_reported(lenient):
    @interface
    class IName:
        def name(self) -> str: ...

    @component
    class First:
        @dataclass
        class Storage:
            label: str = "first"

        @embeddable_as("FirstImpl")
        class FirstCapability(IName):
            def name(self) -> str:
                return self.storage.label

    @component
    class Second:
        @dataclass
        class Storage:
            label: str = "second"

        @embeddable_as("SecondImpl")
        class SecondCapability(IName):
            def name(self) -> str:
                return self.storage.label

    @contract(
        include(First, storage="first", event="FirstEvent"),
        include(Second, storage="second", event="SecondEvent"),
        settings=lenient,
    )
    class Both:
        @dataclass
        class Storage:
            first: ComponentState[First] = substorage(First)
            second: ComponentState[Second] = substorage(Second)

        class Event:
            FirstEvent = First.Event
            SecondEvent = Second.Event

        FirstImpl = embed("First::FirstImpl<Both>", abi=True)
        SecondImpl = embed("Second::SecondImpl<Both>", abi=True)

    definition = contract_of(Both)
    state = definition.deploy()

    assert definition.diagnostics == [DuplicateEntryPoint("Both", "name", "FirstImpl", "SecondImpl")]
    assert state.call("name") == "first"
    assert Both.SecondImpl.name(state) == "second"


def test_bare_contract_without_components():
    @contract
    class Simple:
        @dataclass
        class Storage:
            value: int = 0

        class Event:
            @dataclass(frozen=True)
            class Changed:
                value: int

    definition = contract_of(Simple)
    state = definition.deploy(value=4)

    assert definition.result.outcomes == []
    assert state.storage.value == 4
    assert state.emit(Simple.Event.Changed(5)).variant == "Changed"


def test_deploy_without_storage():
    @contract
    class Stateless:
        pass

    with pytest.raises(TypeError, match="declares no Storage"):
        contract_of(Stateless).deploy()


def test_strict_setting_from_environment(ownable_cls, monkeypatch):
    monkeypatch.setenv("CONTRACTKIT_STRICT", "false")

    @contract(include(ownable_cls, storage="ownable", event="OwnableEvent"))
    class FromEnv:
        @dataclass
        class Storage:
            balance: int = 0

    assert len(contract_of(FromEnv).diagnostics) == 2


def test_collision_error_policy_fails_strict_contract(ownable_cls):
    settings = CompositionSettings(strict=True, collision_policy="error")

    with pytest.raises(CompositionError, match="collides with a member of contract Clash"):

        @contract(include(ownable_cls, storage="ownable", event="OwnableEvent"), settings=settings)
        class Clash:
            @dataclass
            class Storage:
                owner: str = ""
                ownable: ComponentState[ownable_cls] = substorage(ownable_cls)

            class Event:
                OwnableEvent = ownable_cls.Event


def test_non_inclusion_argument_is_rejected():
    with pytest.raises(TypeError, match="'not-an-inclusion' is not an include"):

        @contract("not-an-inclusion")
        class Plain:
            @dataclass
            class Storage:
                value: int = 0


def test_inherited_interface_methods_become_entry_points():
    @interface
    class IBase:
        def a(self) -> int: ...

    @interface
    class IExt(IBase):
        def b(self) -> int: ...

    @component
    class Pair:
        @dataclass
        class Storage:
            a: int = 1
            b: int = 2

        @embeddable_as("PairImpl")
        class PairCapability(IExt):
            def a(self) -> int:
                return self.storage.a

            def b(self) -> int:
                return self.storage.b

    @contract(include(Pair, storage="pair", event="PairEvent"))
    class Holder:
        @dataclass
        class Storage:
            pair: ComponentState[Pair] = substorage(Pair)

        class Event:
            PairEvent = Pair.Event

        PairImpl = embed("Pair::PairImpl<Holder>", abi=True)

    definition = contract_of(Holder)
    state = definition.deploy()

    assert definition.interface.names() == ("a", "b")
    assert (state.call("a"), state.call("b")) == (1, 2)
