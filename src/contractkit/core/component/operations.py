"""Pure functions for reading storage and event declarations.

These are stateless helpers shared by the component registry and the host
schema collector. They never mutate the classes they inspect.
"""

from __future__ import annotations

import dataclasses
import re
from typing import Any

from contractkit.core.types import SubstorageType

_WHITESPACE = re.compile(r"\s+")


def is_pydantic(cls: type) -> bool:
    """Check if class is a Pydantic model without importing pydantic.

    Args:
        cls: Class to check.

    Returns:
        True if class inherits from pydantic.BaseModel, False otherwise.
    """
    for base in cls.__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def is_storage_class(cls: object) -> bool:
    """Check if an object can serve as a storage schema (dataclass or Pydantic model)."""
    return isinstance(cls, type) and (dataclasses.is_dataclass(cls) or is_pydantic(cls))


def storage_fields(cls: type) -> list[tuple[str, Any, dict[str, Any]]]:
    """Read declared storage fields in declaration order.

    Args:
        cls: A dataclass or Pydantic model.

    Returns:
        List of (name, annotation, metadata) triples. Metadata is the dataclass
        field metadata, or an empty dict for Pydantic models.

    Raises:
        TypeError: If cls is neither a dataclass nor a Pydantic model.
    """
    if dataclasses.is_dataclass(cls):
        return [(f.name, f.type, dict(f.metadata)) for f in dataclasses.fields(cls)]
    if is_pydantic(cls):
        model_fields = cls.model_fields  # type: ignore[attr-defined]
        return [(name, info.annotation, {}) for name, info in model_fields.items()]
    raise TypeError(
        f"Storage {cls.__name__} must be a dataclass or Pydantic model. "
        f"Did you forget @dataclass decorator?"
    )


def namespace_types(cls: type) -> list[tuple[str, type]]:
    """List public class-valued attributes of a namespace class, in definition order.

    Event namespaces declare variants as nested classes (``class Deposit: ...``)
    or as aliases (``OwnableEvent = Ownable.Event``); both are picked up here.
    """
    return [
        (name, value)
        for name, value in vars(cls).items()
        if not name.startswith("_") and isinstance(value, type)
    ]


def type_text(annotation: Any) -> str:
    """Render an annotation as declaration text.

    Args:
        annotation: A type, a `ComponentState[...]` marker, a typing construct,
            or a string annotation (postponed evaluation).

    Returns:
        Source-like text for the annotation, e.g. ``ComponentState[Ownable]``.
    """
    if isinstance(annotation, str):
        return annotation.strip()
    if isinstance(annotation, SubstorageType):
        return repr(annotation)
    if isinstance(annotation, type) and not getattr(annotation, "__args__", None):
        return annotation.__name__
    return repr(annotation).replace("typing.", "")


def same_type_text(a: str, b: str) -> bool:
    """Compare two annotation texts ignoring whitespace."""
    return _WHITESPACE.sub("", a) == _WHITESPACE.sub("", b)


def instantiate_storage(cls: type, **values: Any) -> Any:
    """Create a storage instance, overriding declared defaults with values."""
    return cls(**values)
