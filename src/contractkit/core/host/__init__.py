"""Host functionality: declaration records, host schema and declaration helpers."""

from contractkit.core.host.core import Embedding, Inclusion, embed, include, substorage
from contractkit.core.host.models import (
    Binding,
    EventMember,
    ExposureDeclaration,
    HostDeclaration,
    HostSchema,
    StorageMember,
)

__all__ = [
    # Models
    "Binding",
    "HostDeclaration",
    "ExposureDeclaration",
    "HostSchema",
    "StorageMember",
    "EventMember",
    # Core
    "include",
    "substorage",
    "embed",
    "Inclusion",
    "Embedding",
]
