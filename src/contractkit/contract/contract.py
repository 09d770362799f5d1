"""Contract decorator: declare, compose and assemble a host.

Usage:
    @contract(include(Ownable, storage="ownable", event="OwnableEvent"))
    class Wallet:
        @dataclass
        class Storage:
            balance: int = 0
            ownable: ComponentState[Ownable] = substorage(Ownable)

        class Event:
            OwnableEvent = Ownable.Event

        OwnableImpl = embed("Ownable::OwnableImpl<Wallet>", abi=True)

    state = Wallet.__contract__.deploy()
    state.call("transfer_ownership", "bob")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from contractkit.config.settings import CompositionSettings
from contractkit.contract.interface import ExternalInterface, resolve_exposure
from contractkit.core.component.operations import instantiate_storage
from contractkit.core.diagnostics import Diagnostic, UnresolvedAlias, render, render_all
from contractkit.core.host.core import Embedding, Inclusion
from contractkit.core.host.models import HostDeclaration, HostSchema
from contractkit.runtime.state import ContractState
from contractkit.synthesis.accessor import AccessorCapability
from contractkit.synthesis.models import CompositionResult
from contractkit.synthesis.pipeline import compose
from contractkit.synthesis.wrapper import GeneratedWrapperImpl

logger = logging.getLogger(__name__)


class CompositionError(Exception):
    """Raised when a contract has error diagnostics under strict settings."""

    def __init__(self, host_name: str, diagnostics: list[Diagnostic]) -> None:
        super().__init__(f"Contract {host_name} failed to compose:\n{render_all(diagnostics)}")
        self.host_name = host_name
        self.diagnostics = diagnostics


@dataclass
class ContractDefinition:
    """Everything assembled for one host type."""

    name: str
    host_type: type | None
    declaration: HostDeclaration
    schema: HostSchema
    result: CompositionResult
    interface: ExternalInterface
    embedded: dict[str, GeneratedWrapperImpl] = field(default_factory=dict)
    """Resolved wrappers keyed by the host's local name, exposed or not."""

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """All diagnostics of the contract, in report order."""
        return self.result.diagnostics

    def accessor(self, storage_field_name: str) -> AccessorCapability:
        """Accessor of the binding stored at a storage member.

        Raises:
            LookupError: If no accessor was synthesized for that member.
        """
        outcome = self.result.outcome_for(storage_field_name)
        if outcome is None or outcome.accessor is None:
            raise LookupError(
                f"Contract {self.name} has no component accessor at storage member {storage_field_name}"
            )
        return outcome.accessor

    def deploy(self, **storage_values: Any) -> ContractState:
        """Create a fresh contract state.

        Args:
            **storage_values: Overrides for the host Storage's declared defaults.

        Raises:
            TypeError: If the host declares no Storage.
        """
        if self.schema.storage_type is None:
            raise TypeError(f"Contract {self.name} declares no Storage")
        storage = instantiate_storage(self.schema.storage_type, **storage_values)
        return ContractState(self.name, storage, self)


def assemble(
    declaration: HostDeclaration,
    schema: HostSchema,
    settings: CompositionSettings | None = None,
) -> ContractDefinition:
    """Compose a host and resolve its exposure declarations.

    Every exposure is resolved independently; an unresolved one only loses its
    own wrapper.

    Args:
        declaration: Host declaration with bindings and exposures.
        schema: Host's declared storage and event schema.
        settings: Composition settings.

    Returns:
        The assembled contract definition (check `diagnostics` for failures).
    """
    result = compose(declaration, schema, settings)
    interface = ExternalInterface(declaration.host_name)
    embedded: dict[str, GeneratedWrapperImpl] = {}

    for exposure in declaration.exposures:
        resolved = resolve_exposure(exposure, declaration, result)
        if isinstance(resolved, UnresolvedAlias):
            result.exposure_diagnostics.append(resolved)
            continue
        embedded[exposure.local_name] = resolved
        if exposure.abi:
            result.exposure_diagnostics.extend(interface.add(exposure.local_name, resolved))
        else:
            logger.debug(
                "%s.%s embeds %r without abi=True; its entry points stay internal",
                declaration.host_name,
                exposure.local_name,
                resolved,
            )

    return ContractDefinition(
        name=declaration.host_name,
        host_type=declaration.host_type,
        declaration=declaration,
        schema=schema,
        result=result,
        interface=interface,
        embedded=embedded,
    )


def contract(
    *inclusions: Inclusion | type,
    settings: CompositionSettings | None = None,
) -> Any:
    """Declare a host contract that includes components.

    Supports two forms:
        @contract                                   # no components
        @contract(include(Ownable, storage=..., event=...), ...)

    The decorated class gets ``__contract__`` (a ContractDefinition), and each
    ``embed(...)`` attribute is replaced by its generated wrapper.

    Args:
        *inclusions: Component inclusions, in declaration order.
        settings: Composition settings (defaults from the environment).

    Returns:
        Decorated class or decorator function.

    Raises:
        CompositionError: With strict settings, if any error diagnostic was
            produced. All diagnostics are collected before raising.
    """

    def decorator(cls: type) -> type:
        active = settings or CompositionSettings()
        declaration = HostDeclaration(cls.__name__, cls)
        for inclusion in inclusions:
            if not isinstance(inclusion, Inclusion):
                raise TypeError(f"{inclusion!r} is not an include(...) record")
            declaration.include(inclusion.component, inclusion.storage, inclusion.event)
        for name, value in vars(cls).items():
            if isinstance(value, Embedding):
                declaration.expose(name, value.path, value.abi)

        definition = assemble(declaration, HostSchema.from_host(cls), active)
        for local_name, wrapper in definition.embedded.items():
            setattr(cls, local_name, wrapper)
        cls.__contract__ = definition  # type: ignore[attr-defined]

        for warning in definition.result.warnings:
            logger.warning("%s: %s", cls.__name__, render(warning))
        errors = definition.result.errors
        if errors and active.strict:
            raise CompositionError(cls.__name__, errors)
        for error in errors:
            logger.warning("%s: %s", cls.__name__, render(error))
        return cls

    if len(inclusions) == 1 and isinstance(inclusions[0], type):
        # Called bare: @contract
        host, inclusions = inclusions[0], ()
        return decorator(host)
    return decorator


def contract_of(host: type) -> ContractDefinition:
    """Return the contract definition of a decorated host class.

    Raises:
        TypeError: If the class was never decorated with @contract.
    """
    definition = vars(host).get("__contract__")
    if not isinstance(definition, ContractDefinition):
        raise TypeError(f"{host.__name__} is not a contract. Did you forget @contract decorator?")
    return definition
