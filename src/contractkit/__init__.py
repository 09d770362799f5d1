"""contractkit: reusable contract components with synthesized accessors and wrappers.

Usage:
    from dataclasses import dataclass

    from contractkit import (
        ComponentState, component, contract, embed, embeddable_as,
        include, interface, mutating, substorage,
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
                return self.storage.owner

            def transfer_ownership(self, new_owner: str) -> None:
                previous = self.storage.owner
                self.storage.owner = new_owner
                self.emit(Ownable.Event.OwnershipTransferred(previous, new_owner))

    @contract(include(Ownable, storage="ownable", event="OwnableEvent"))
    class Wallet:
        @dataclass
        class Storage:
            ownable: ComponentState[Ownable] = substorage(Ownable)

        class Event:
            OwnableEvent = Ownable.Event

        OwnableImpl = embed("Ownable::OwnableImpl<Wallet>", abi=True)

    state = Wallet.__contract__.deploy()
    state.call("transfer_ownership", "alice")
    assert Wallet.OwnableImpl.owner(state) == "alice"
"""

__version__ = "0.1.0"

# Configuration
from contractkit.config import CompositionSettings

# Contract assembly
from contractkit.contract import (
    CompositionError,
    ContractDefinition,
    EntryPoint,
    ExposurePath,
    ExternalInterface,
    contract,
    contract_of,
)

# Core declarations and diagnostics
from contractkit.core import (
    Binding,
    ComponentDefinition,
    ComponentState,
    ConflictingBinding,
    Diagnostic,
    DuplicateEntryPoint,
    HostDeclaration,
    HostSchema,
    MalformedComponent,
    MalformedComponentError,
    MemberNameCollision,
    MissingComponentDependency,
    MissingNestedEvent,
    MissingSubstorageMember,
    Severity,
    UnresolvedAlias,
    capability,
    component,
    definition_of,
    embed,
    embeddable_as,
    include,
    interface,
    mutating,
    render,
    render_all,
    substorage,
)

# Runtime
from contractkit.runtime import (
    AccessViolationError,
    ComponentStateView,
    ComponentStateViewMut,
    ContractState,
    EmittedEvent,
)

# Synthesis
from contractkit.synthesis import (
    AccessorCapability,
    BindingState,
    CompositionResult,
    EventNotBoundError,
    GeneratedWrapperImpl,
    compose,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "ComponentState",
    "component",
    "interface",
    "capability",
    "embeddable_as",
    "mutating",
    "definition_of",
    "ComponentDefinition",
    "MalformedComponentError",
    # Host
    "include",
    "substorage",
    "embed",
    "Binding",
    "HostDeclaration",
    "HostSchema",
    # Diagnostics
    "Diagnostic",
    "Severity",
    "MalformedComponent",
    "MissingSubstorageMember",
    "MissingNestedEvent",
    "UnresolvedAlias",
    "ConflictingBinding",
    "MissingComponentDependency",
    "MemberNameCollision",
    "DuplicateEntryPoint",
    "render",
    "render_all",
    # Synthesis
    "AccessorCapability",
    "EventNotBoundError",
    "GeneratedWrapperImpl",
    "BindingState",
    "CompositionResult",
    "compose",
    # Runtime
    "ContractState",
    "EmittedEvent",
    "ComponentStateView",
    "ComponentStateViewMut",
    "AccessViolationError",
    # Contract
    "contract",
    "contract_of",
    "ContractDefinition",
    "CompositionError",
    "ExposurePath",
    "EntryPoint",
    "ExternalInterface",
    # Configuration
    "CompositionSettings",
]
