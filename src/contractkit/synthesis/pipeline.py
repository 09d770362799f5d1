"""Composition pipeline: validate each binding, then synthesize its artifacts.

Usage:
    declaration = HostDeclaration("Wallet", Wallet)
    declaration.include(Ownable, "ownable", "OwnableEvent")
    result = compose(declaration, HostSchema.from_host(Wallet))

    if result.ok:
        wrapper = result.outcome_for("ownable").wrappers["OwnableImpl"]

Per binding: DECLARED -> VALIDATING -> INVALID, or VALID -> ACCESSOR_SYNTHESIZED
-> WRAPPER_SYNTHESIZED when the component has embeddable impls. Bindings are
processed in declaration order and an invalid binding never stops the rest.
"""

from __future__ import annotations

import logging

from contractkit.config.settings import CompositionSettings
from contractkit.core.component.models import ComponentDefinition
from contractkit.core.diagnostics import Diagnostic
from contractkit.core.host.models import Binding, HostDeclaration, HostSchema
from contractkit.synthesis.accessor import synthesize_accessor
from contractkit.synthesis.models import BindingOutcome, BindingState, CompositionResult
from contractkit.synthesis.validator import validate_host
from contractkit.synthesis.wrapper import synthesize_wrapper

logger = logging.getLogger(__name__)


def synthesize(
    component: ComponentDefinition,
    binding: Binding,
    host_name: str,
    diagnostics: list[Diagnostic] | None = None,
    *,
    log_source: bool = False,
    host_type: type | None = None,
) -> BindingOutcome:
    """Synthesize the artifacts of one binding from its validation diagnostics.

    Args:
        component: Component definition of the binding.
        binding: The binding.
        host_name: Host the binding belongs to.
        diagnostics: Validation diagnostics of the binding (empty if valid).
        log_source: Log generated wrapper source at DEBUG level.
        host_type: The host class, when known; the accessor then also checks it.

    Returns:
        The binding outcome in its terminal state.

    Raises:
        ValueError: If the binding is for another component.
    """
    if binding.component != component:
        raise ValueError(f"Binding {binding.describe()} is not a binding of {component.name}")

    outcome = BindingOutcome(binding)
    outcome.advance(BindingState.VALIDATING)
    outcome.diagnostics.extend(diagnostics or [])
    if outcome.blocks_synthesis:
        outcome.advance(BindingState.INVALID)
        return outcome
    outcome.advance(BindingState.VALID)

    outcome.accessor = synthesize_accessor(
        binding, host_name, emits=outcome.event_bound, host_type=host_type
    )
    outcome.advance(BindingState.ACCESSOR_SYNTHESIZED)

    embeddable = component.embeddable_impls()
    if not embeddable or not outcome.event_bound:
        return outcome
    for impl in embeddable:
        wrapper = synthesize_wrapper(impl, outcome.accessor, log_source=log_source)
        outcome.wrappers[wrapper.alias_name] = wrapper
    outcome.advance(BindingState.WRAPPER_SYNTHESIZED)
    return outcome


def compose(
    declaration: HostDeclaration,
    schema: HostSchema,
    settings: CompositionSettings | None = None,
) -> CompositionResult:
    """Validate and synthesize every binding of a host.

    Args:
        declaration: Host declaration.
        schema: Host's declared storage and event schema.
        settings: Composition settings (defaults from the environment).

    Returns:
        Composition result with one outcome per binding, in declaration order.
    """
    settings = settings or CompositionSettings()
    result = CompositionResult(declaration.host_name)
    validated = validate_host(declaration, schema, collision_policy=settings.collision_policy)
    for binding, diagnostics in validated:
        outcome = synthesize(
            binding.component,
            binding,
            declaration.host_name,
            diagnostics,
            log_source=settings.log_generated_source,
            host_type=declaration.host_type,
        )
        result.outcomes.append(outcome)
        logger.debug("Binding %s ended in %s", binding.describe(), outcome.state.name)

    logger.info(
        "Composed %s: %d binding(s), %d error(s), %d warning(s)",
        declaration.host_name,
        len(result.outcomes),
        len(result.errors),
        len(result.warnings),
    )
    return result
