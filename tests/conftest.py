"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from dataclasses import dataclass

from contractkit import (
    ComponentState,
    CompositionSettings,
    capability,
    component,
    contract,
    embed,
    embeddable_as,
    include,
    interface,
    mutating,
    substorage,
)


@interface
class IOwnable:
    def owner(self) -> str: ...

    @mutating
    def transfer_ownership(self, new_owner: str) -> None: ...


@component
class Ownable:
    @dataclass
    class Storage:
        owner: str = ""

    class Event:
        @dataclass(frozen=True)
        class OwnershipTransferred:
            previous_owner: str
            new_owner: str

    @embeddable_as("OwnableImpl")
    class OwnableCapability(IOwnable):
        def owner(self) -> str:
            """Current owner."""
            return self.storage.owner

        def transfer_ownership(self, new_owner: str) -> None:
            if not new_owner:
                raise ValueError("new owner must not be empty")
            previous = self.storage.owner
            self.storage.owner = new_owner
            self.emit(Ownable.Event.OwnershipTransferred(previous, new_owner))

    @capability
    class InternalImpl:
        @mutating
        def initializer(self, owner: str) -> None:
            self.storage.owner = owner


@interface
class ICounter:
    def value(self) -> int: ...

    @mutating
    def increment(self, by: int = 1) -> int: ...


@component
class Counter:
    @dataclass
    class Storage:
        count: int = 0

    class Event:
        @dataclass(frozen=True)
        class Incremented:
            by: int

    @embeddable_as("CounterImpl")
    class CounterCapability(ICounter):
        def value(self) -> int:
            return self.storage.count

        def increment(self, by: int = 1) -> int:
            if by <= 0:
                raise ValueError("by must be positive")
            self.storage.count += by
            self.emit(Counter.Event.Incremented(by))
            return self.storage.count


@contract(
    include(Ownable, storage="ownable", event="OwnableEvent"),
    include(Counter, storage="counter", event="CounterEvent"),
    settings=CompositionSettings(strict=True),
)
class Wallet:
    @dataclass
    class Storage:
        balance: int = 0
        ownable: ComponentState[Ownable] = substorage(Ownable)
        counter: ComponentState[Counter] = substorage(Counter)

    class Event:
        OwnableEvent = Ownable.Event
        CounterEvent = Counter.Event

        @dataclass(frozen=True)
        class Deposited:
            amount: int

    OwnableImpl = embed("Ownable::OwnableImpl<Wallet>", abi=True)
    CounterImpl = embed("Counter::CounterImpl<Wallet>", abi=True)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep CONTRACTKIT_* variables from the outer environment out of tests."""
    for name in ("CONTRACTKIT_STRICT", "CONTRACTKIT_COLLISION_POLICY", "CONTRACTKIT_LOG_GENERATED_SOURCE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def ownable_cls():
    return Ownable


@pytest.fixture
def counter_cls():
    return Counter


@pytest.fixture
def wallet_cls():
    return Wallet


@pytest.fixture
def wallet(wallet_cls):
    """Freshly deployed Wallet contract state."""
    return wallet_cls.__contract__.deploy()


@pytest.fixture
def strict():
    return CompositionSettings(strict=True)


@pytest.fixture
def lenient():
    return CompositionSettings(strict=False)
