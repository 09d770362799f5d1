"""Contract assembly: the `@contract` decorator, exposure resolution and entry points.

Architecture Note:
    contract/ is the only layer that ties declarations (core/), synthesis
    (synthesis/) and live state (runtime/) together. A decorated host class
    carries its ContractDefinition as ``__contract__``.
"""

from contractkit.contract.contract import (
    CompositionError,
    ContractDefinition,
    assemble,
    contract,
    contract_of,
)
from contractkit.contract.interface import (
    EntryPoint,
    ExposurePath,
    ExternalInterface,
    resolve_exposure,
)

__all__ = [
    # Contract
    "contract",
    "contract_of",
    "assemble",
    "ContractDefinition",
    "CompositionError",
    # Interface
    "ExposurePath",
    "EntryPoint",
    "ExternalInterface",
    "resolve_exposure",
]
