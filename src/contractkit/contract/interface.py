"""Exposure resolution and the contract's external interface.

An exposure declaration names a generated wrapper as
``componentPath::aliasName<HostType>``. The component path is matched against
the host's storage member names first (which disambiguates a component included
more than once), then against component names and qualified names, taking the
first binding in declaration order.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from contractkit.core.diagnostics import DuplicateEntryPoint, UnresolvedAlias
from contractkit.core.host.models import ExposureDeclaration, HostDeclaration
from contractkit.synthesis.models import BindingOutcome, CompositionResult
from contractkit.synthesis.wrapper import GeneratedWrapperImpl

logger = logging.getLogger(__name__)

_PATH = re.compile(r"^\s*(?P<component>[\w.]+)::(?P<alias>\w+)\s*<\s*(?P<host>[\w.]+)\s*>\s*$")


@dataclass(frozen=True, slots=True)
class ExposurePath:
    """Parsed ``componentPath::aliasName<HostType>``."""

    component_path: str
    alias_name: str
    host_name: str

    @classmethod
    def parse(cls, text: str) -> ExposurePath | None:
        """Parse an exposure path.

        Returns:
            The parsed path, or None if the text does not have the required shape.
        """
        match = _PATH.match(text)
        if match is None:
            return None
        return cls(match["component"], match["alias"], match["host"])


def _host_matches(name: str, declaration: HostDeclaration) -> bool:
    if name == declaration.host_name:
        return True
    host = declaration.host_type
    return host is not None and name == f"{host.__module__}.{host.__qualname__}"


def _match_outcome(component_path: str, result: CompositionResult) -> BindingOutcome | None:
    by_storage = result.outcome_for(component_path)
    if by_storage is not None:
        return by_storage
    return next(
        (
            o
            for o in result.outcomes
            if component_path in (o.binding.component.name, o.binding.component.qualified_name)
        ),
        None,
    )


def resolve_exposure(
    exposure: ExposureDeclaration,
    declaration: HostDeclaration,
    result: CompositionResult,
) -> GeneratedWrapperImpl | UnresolvedAlias:
    """Resolve an exposure declaration to a generated wrapper.

    Args:
        exposure: The exposure declaration.
        declaration: Host declaration it belongs to.
        result: Composition result of the host.

    Returns:
        The wrapper, or an UnresolvedAlias diagnostic when the path is malformed,
        names another host, names a component the host does not include, names
        a binding that produced no wrappers, or names something other than an
        embeddable alias (such as an internal impl name).
    """
    unresolved = UnresolvedAlias(declaration.host_name, exposure.local_name, exposure.path)
    path = ExposurePath.parse(exposure.path)
    if path is None or not _host_matches(path.host_name, declaration):
        return unresolved
    outcome = _match_outcome(path.component_path, result)
    if outcome is None:
        return unresolved
    wrapper = outcome.wrappers.get(path.alias_name)
    if wrapper is None:
        return unresolved
    return wrapper


@dataclass(frozen=True, slots=True)
class EntryPoint:
    """One externally callable method of a contract."""

    name: str
    local_name: str
    mutating: bool
    function: Callable[..., Any]


class ExternalInterface:
    """Ordered table of a contract's external entry points."""

    def __init__(self, host_name: str) -> None:
        self.host_name = host_name
        self._entry_points: dict[str, EntryPoint] = {}

    def add(self, local_name: str, wrapper: GeneratedWrapperImpl) -> list[DuplicateEntryPoint]:
        """Expose every method of a wrapper, keeping method order.

        A method whose name is already exposed is skipped and reported.

        Returns:
            Diagnostics for skipped duplicates.
        """
        diagnostics = []
        for method in wrapper.methods:
            existing = self._entry_points.get(method.name)
            if existing is not None:
                diagnostics.append(
                    DuplicateEntryPoint(
                        host=self.host_name,
                        name=method.name,
                        first_local_name=existing.local_name,
                        second_local_name=local_name,
                    )
                )
                continue
            self._entry_points[method.name] = EntryPoint(
                method.name, local_name, method.mutating, method.function
            )
        return diagnostics

    @property
    def entry_points(self) -> tuple[EntryPoint, ...]:
        """Entry points in exposure order."""
        return tuple(self._entry_points.values())

    def names(self) -> tuple[str, ...]:
        """Entry point names in exposure order."""
        return tuple(self._entry_points)

    def __contains__(self, name: object) -> bool:
        return name in self._entry_points

    def __len__(self) -> int:
        return len(self._entry_points)

    def invoke(self, state: Any, name: str, /, *args: Any, **kwargs: Any) -> Any:
        """Call an entry point on a contract state.

        Raises:
            KeyError: If there is no such entry point.
        """
        entry_point = self._entry_points.get(name)
        if entry_point is None:
            raise KeyError(f"Contract {self.host_name} has no entry point {name}")
        logger.debug("Invoking %s.%s", self.host_name, name)
        return entry_point.function(state, *args, **kwargs)
