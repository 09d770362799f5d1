"""Synthesis models: per-binding state machine and composition results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from contractkit.core.diagnostics import Diagnostic, MissingNestedEvent, is_error

if TYPE_CHECKING:
    from contractkit.core.host.models import Binding
    from contractkit.synthesis.accessor import AccessorCapability
    from contractkit.synthesis.wrapper import GeneratedWrapperImpl


class BindingState(Enum):
    """Where a binding is in the validate-then-synthesize pipeline."""

    DECLARED = auto()
    VALIDATING = auto()
    INVALID = auto()  # Terminal: diagnostics emitted, nothing synthesized
    VALID = auto()
    ACCESSOR_SYNTHESIZED = auto()  # Terminal when nothing is embeddable (or no event)
    WRAPPER_SYNTHESIZED = auto()  # Terminal


TRANSITIONS: dict[BindingState, frozenset[BindingState]] = {
    BindingState.DECLARED: frozenset({BindingState.VALIDATING}),
    BindingState.VALIDATING: frozenset({BindingState.INVALID, BindingState.VALID}),
    BindingState.INVALID: frozenset(),
    BindingState.VALID: frozenset({BindingState.ACCESSOR_SYNTHESIZED}),
    BindingState.ACCESSOR_SYNTHESIZED: frozenset({BindingState.WRAPPER_SYNTHESIZED}),
    BindingState.WRAPPER_SYNTHESIZED: frozenset(),
}


@dataclass
class BindingOutcome:
    """Everything composition produced for one binding."""

    binding: Binding
    state: BindingState = BindingState.DECLARED
    diagnostics: list[Diagnostic] = field(default_factory=list)
    accessor: AccessorCapability | None = None
    wrappers: dict[str, GeneratedWrapperImpl] = field(default_factory=dict)
    """Generated wrappers keyed by alias name, in impl declaration order."""

    def advance(self, state: BindingState) -> None:
        """Move to the next pipeline state.

        Raises:
            RuntimeError: If the transition is not allowed.
        """
        if state not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal binding transition {self.state.name} -> {state.name}")
        self.state = state

    @property
    def errors(self) -> list[Diagnostic]:
        """Error-severity diagnostics."""
        return [d for d in self.diagnostics if is_error(d)]

    @property
    def blocks_synthesis(self) -> bool:
        """True if any error other than a missing nested event was found.

        A missing nested event still lets the accessor be synthesized (without
        emission): the storage and event checks are independent.
        """
        return any(not isinstance(d, MissingNestedEvent) for d in self.errors)

    @property
    def event_bound(self) -> bool:
        """True unless the nested event variant failed validation."""
        return not any(isinstance(d, MissingNestedEvent) for d in self.diagnostics)

    @property
    def ok(self) -> bool:
        """True if the binding produced no errors."""
        return not self.errors


@dataclass
class CompositionResult:
    """Outcome of composing one host: per-binding outcomes plus exposure diagnostics."""

    host_name: str
    outcomes: list[BindingOutcome] = field(default_factory=list)
    exposure_diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """All diagnostics: bindings in declaration order, then exposures."""
        result = [d for outcome in self.outcomes for d in outcome.diagnostics]
        result.extend(self.exposure_diagnostics)
        return result

    @property
    def errors(self) -> list[Diagnostic]:
        """Error-severity diagnostics, in report order."""
        return [d for d in self.diagnostics if is_error(d)]

    @property
    def warnings(self) -> list[Diagnostic]:
        """Warning-severity diagnostics, in report order."""
        return [d for d in self.diagnostics if not is_error(d)]

    @property
    def ok(self) -> bool:
        """True if composition produced no errors."""
        return not self.errors

    def outcome_for(self, storage_field_name: str) -> BindingOutcome | None:
        """Outcome of the binding declared with a storage member name."""
        return next(
            (o for o in self.outcomes if o.binding.storage_field_name == storage_field_name),
            None,
        )

    def accessors_for(self, component_type: type) -> list[AccessorCapability]:
        """Synthesized accessors of a component, in declaration order."""
        return [
            o.accessor
            for o in self.outcomes
            if o.accessor is not None and o.binding.component.component_type is component_type
        ]
