"""HeaderAccessor: per-request facade over a frozen HeaderRegistry.

One accessor is created per request and owns that request's HeaderTable and
resolution cache. Each target class is resolved at most once per accessor;
later lookups return the cached instance (or cached absence) without running
the transform again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from strongheaders._errors import NullArgumentError, ResolutionFailedError
from strongheaders._rules import NOT_MAPPED

if TYPE_CHECKING:
    from strongheaders._registry import HeaderRegistry
    from strongheaders._table import HeaderTable


class HeaderAccessor:
    """Resolve typed header values for one request.

    ``get`` is the optional form, ``require`` the fail-fast form and
    ``resolve`` the type-erased fail-fast form for callers that only hold a
    runtime type.

    Not shared between requests. An accessor bound to an empty table behaves
    as if every header were absent.
    """

    __slots__ = ("_cache", "_registry", "_table")

    def __init__(self, registry: HeaderRegistry, table: HeaderTable) -> None:
        if registry is None:
            raise NullArgumentError("registry")
        if table is None:
            raise NullArgumentError("table")
        self._registry = registry
        self._table = table
        self._cache: dict[type, object] = {}

    @property
    def registry(self) -> HeaderRegistry:
        return self._registry

    @property
    def table(self) -> HeaderTable:
        """The request's headers."""
        return self._table

    def get[T](self, target: type[T]) -> T | None:
        """Return the value for *target*, or None.

        None is returned when *target* has no rule or when the rule produced
        something that is not an instance of *target*.
        """
        value = self._lookup(target)
        if value is NOT_MAPPED or not isinstance(value, target):
            return None
        return value

    def require[T](self, target: type[T]) -> T:
        """Return the value for *target*.

        Raises:
            ResolutionFailedError: no rule is registered, the rule produced
                None, or the value is not an instance of *target*
        """
        return cast("T", self.resolve(target))

    def resolve(self, target: type) -> object:
        """Type-erased ``require``: same checks, typed as ``object``."""
        value = self._lookup(target)
        if value is NOT_MAPPED or value is None or not isinstance(value, target):
            raise ResolutionFailedError(target)
        return value

    def is_mapped(self, target: type) -> bool:
        """Check if *target* has a rule in the registry."""
        return target in self._registry

    def is_cached(self, target: type) -> bool:
        """Check if *target* was already resolved by this accessor."""
        return target in self._cache

    def _lookup(self, target: type) -> object:
        if target is None:
            raise NullArgumentError("target")
        try:
            return self._cache[target]
        except KeyError:
            pass
        value = self._registry.resolve(target, self._table)
        self._cache[target] = value
        return value

    def __repr__(self) -> str:
        return f"HeaderAccessor(table={self._table!r}, cached={len(self._cache)})"
