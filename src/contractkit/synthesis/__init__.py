"""Synthesis: binding validation, accessor and wrapper generation, composition.

Architecture Note:
    synthesis/ is a deterministic, single-pass computation over core/ records.
    Equal inputs produce equal accessors and byte-identical wrapper source.
"""

from contractkit.synthesis.accessor import (
    AccessorCapability,
    EventNotBoundError,
    synthesize_accessor,
)
from contractkit.synthesis.models import (
    BindingOutcome,
    BindingState,
    CompositionResult,
)
from contractkit.synthesis.pipeline import compose, synthesize
from contractkit.synthesis.validator import (
    CollisionPolicy,
    validate_binding,
    validate_host,
)
from contractkit.synthesis.wrapper import (
    GeneratedWrapperImpl,
    WrapperMethod,
    render_method,
    synthesize_wrapper,
)

__all__ = [
    # Validation
    "validate_host",
    "validate_binding",
    "CollisionPolicy",
    # Accessors
    "AccessorCapability",
    "EventNotBoundError",
    "synthesize_accessor",
    # Wrappers
    "GeneratedWrapperImpl",
    "WrapperMethod",
    "render_method",
    "synthesize_wrapper",
    # Pipeline
    "BindingState",
    "BindingOutcome",
    "CompositionResult",
    "synthesize",
    "compose",
]
