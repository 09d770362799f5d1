"""Component functionality: models, registry, declaration decorators and operations."""

from contractkit.core.component.core import (
    ComponentRegistry,
    capability,
    component,
    declared_interfaces,
    definition_of,
    embeddable_as,
    get_registry,
    interface,
    mutating,
)
from contractkit.core.component.models import (
    CapabilityImpl,
    ComponentDefinition,
    EventSchema,
    EventVariant,
    InterfaceDef,
    MalformedComponentError,
    MethodSignature,
    StorageField,
    StorageSchema,
)

__all__ = [
    # Models
    "ComponentDefinition",
    "StorageSchema",
    "StorageField",
    "EventSchema",
    "EventVariant",
    "InterfaceDef",
    "MethodSignature",
    "CapabilityImpl",
    "MalformedComponentError",
    # Core
    "component",
    "interface",
    "capability",
    "embeddable_as",
    "mutating",
    "get_registry",
    "definition_of",
    "declared_interfaces",
    "ComponentRegistry",
]
