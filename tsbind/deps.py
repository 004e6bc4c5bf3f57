"""Collection of the dependencies of a derived type, resolved on demand."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from functools import partial

from tsbind.types import TS, Dependency


def _own_or_children(ty: TS) -> list[Dependency]:
    if ty.transparent():
        return ty.dependencies()
    dep = Dependency.from_ty(ty)
    return [] if dep is None else [dep]


@dataclass
class Dependencies:
    """An ordered set of sources of dependencies, evaluated when resolved."""

    _sources: list[Callable[[], Iterable[Dependency]]] = field(default_factory=list)

    def append_from(self, ty: TS) -> None:
        """Add all dependencies of ``ty``."""
        self._sources.append(ty.dependencies)

    def push_or_append_from(self, ty: TS) -> None:
        """Add ``ty`` itself, or its dependencies if it is transparent."""
        self._sources.append(partial(_own_or_children, ty))

    def append(self, other: Dependencies) -> None:
        """Add everything that ``other`` collects."""
        self._sources.append(other.resolve)

    def resolve(self) -> list[Dependency]:
        """The collected dependencies, in the order they were added."""
        return [dep for source in self._sources for dep in source()]