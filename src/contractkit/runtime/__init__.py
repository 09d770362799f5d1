"""Runtime contract state and component state views.

Architecture Note:
    runtime/ holds the only live state in contractkit: a host instance's storage
    and event log, and the views components use to reach it. Views are created
    by synthesized accessors (see synthesis/), never directly.
"""

from contractkit.runtime.state import ContractState, EmittedEvent
from contractkit.runtime.views import (
    AccessViolationError,
    ComponentStateView,
    ComponentStateViewMut,
    ContractStateView,
    ReadOnlyStorage,
)

__all__ = [
    "ContractState",
    "EmittedEvent",
    "ComponentStateView",
    "ComponentStateViewMut",
    "ContractStateView",
    "ReadOnlyStorage",
    "AccessViolationError",
]
