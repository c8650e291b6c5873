"""Mapping registry for typed request headers.

The registry turns raw request headers into typed instances without
re-parsing headers at each call site.

Architecture:
- RegistryBuilder → .build() → HeaderRegistry (immutable)
- Rules are keyed by their target class; one rule per class
- HeaderRegistry.bind() creates the per-request HeaderAccessor

Example::

    builder = RegistryBuilder()
    builder.add_mapping(CorrelationId, "X-Correlation-Id", transforms.last(CorrelationId))
    registry = builder.build()

    headers = registry.bind({"X-Correlation-Id": "abc"})
    headers.require(CorrelationId)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, overload

from strongheaders._accessor import HeaderAccessor
from strongheaders._errors import (
    DuplicateTargetTypeError,
    InvalidMappingError,
    NullArgumentError,
    RegistryFrozenError,
)
from strongheaders._rules import (
    NOT_MAPPED,
    MappingRule,
    MultiHeaderRule,
    MultiValueTransform,
    SingleHeaderRule,
    SingleValueTransform,
)
from strongheaders._table import HeaderTable

if TYPE_CHECKING:
    from strongheaders._table import RawHeaders

logger = logging.getLogger("strongheaders.registry")


def _qualname(target: type) -> str:
    return f"{target.__module__}.{target.__qualname__}"


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════


class RegistryBuilder:
    """Builder for constructing a HeaderRegistry.

    Register one rule per target class, then call build() to produce an
    immutable HeaderRegistry. Configuration is expected to happen on one
    thread during startup.

    After build() the builder is frozen: further registration raises
    RegistryFrozenError.
    """

    def __init__(self) -> None:
        self._rules: dict[type, MappingRule] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        """True once build() has been called."""
        return self._frozen

    @overload
    def add_mapping[T](
        self, target: type[T], header: str, transform: SingleValueTransform[T]
    ) -> RegistryBuilder: ...

    @overload
    def add_mapping[T](
        self, target: type[T], header: Iterable[str], transform: MultiValueTransform[T]
    ) -> RegistryBuilder: ...

    def add_mapping(
        self, target: type, header: Any, transform: Callable[[Any], Any]
    ) -> RegistryBuilder:
        """Map *target* to one header (a ``str``) or several (any other iterable).

        Raises:
            NullArgumentError: header name(s) or transform is None
            InvalidMappingError: target is not a class, or names are malformed
            DuplicateTargetTypeError: target already has a rule
            RegistryFrozenError: build() was already called
        """
        if isinstance(header, str):
            return self.add_single(target, header, transform)
        if header is None:
            self._check_open("add a mapping")
            raise NullArgumentError("header")
        return self.add_multi(target, header, transform)

    def add_single[T](
        self, target: type[T], header: str, transform: SingleValueTransform[T]
    ) -> RegistryBuilder:
        """Map *target* to the value tokens of a single header."""
        self._check_open("add a mapping")
        if header is None:
            raise NullArgumentError("header")
        if transform is None:
            raise NullArgumentError("transform")
        _check_target(target)
        _check_header_name(header)
        _check_transform(transform)

        self._add(SingleHeaderRule(target=target, header=header, transform=transform))
        return self

    def add_multi[T](
        self, target: type[T], headers: Iterable[str], transform: MultiValueTransform[T]
    ) -> RegistryBuilder:
        """Map *target* to a sub-table of several headers."""
        self._check_open("add a mapping")
        if headers is None:
            raise NullArgumentError("headers")
        if transform is None:
            raise NullArgumentError("transform")
        _check_target(target)
        if isinstance(headers, str):
            msg = "headers must be an iterable of header names, not a single string"
            raise InvalidMappingError(msg)
        names = tuple(headers)
        if not names:
            raise InvalidMappingError("at least one header name is required")
        for name in names:
            _check_header_name(name)
        _check_transform(transform)

        self._add(MultiHeaderRule(target=target, headers=names, transform=transform))
        return self

    def build(self) -> HeaderRegistry:
        """Freeze the rule set. No further registration is possible."""
        self._check_open("build")
        self._frozen = True
        logger.debug("header registry built with %d mapping(s)", len(self._rules))
        return HeaderRegistry(_rules=MappingProxyType(dict(self._rules)))

    def _add(self, rule: MappingRule) -> None:
        existing = self._rules.get(rule.target)
        if existing is not None:
            raise DuplicateTargetTypeError(
                rule.target, existing.header_names, rule.header_names
            )
        self._rules[rule.target] = rule
        logger.debug(
            "mapped %s to header(s) %s", _qualname(rule.target), list(rule.header_names)
        )

    def _check_open(self, operation: str) -> None:
        if self._frozen:
            raise RegistryFrozenError(operation)


def _check_target(target: object) -> None:
    if target is None:
        raise NullArgumentError("target")
    if not isinstance(target, type):
        msg = f"target must be a class, got {type(target).__name__}"
        raise InvalidMappingError(msg)


def _check_header_name(name: object) -> None:
    if not isinstance(name, str):
        msg = f"header name must be a string, got {type(name).__name__}"
        raise InvalidMappingError(msg)
    if not name:
        raise InvalidMappingError("header name must not be empty")


def _check_transform(transform: object) -> None:
    if not callable(transform):
        msg = f"transform must be callable, got {type(transform).__name__}"
        raise InvalidMappingError(msg)


# ═══════════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class HeaderRegistry:
    """Immutable set of mapping rules, keyed by target class.

    Constructed via RegistryBuilder. Safe to share across concurrently
    handled requests: nothing mutates after build().
    """

    _rules: MappingProxyType[type, MappingRule] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def resolve(self, target: type, table: HeaderTable) -> object:
        """Run the rule for *target* against *table*.

        Returns NOT_MAPPED when *target* has no rule. Exceptions raised by
        the transform propagate unchanged.
        """
        rule = self._rules.get(target)
        if rule is None:
            return NOT_MAPPED
        return rule.apply(table)

    def bind(self, headers: RawHeaders = None) -> HeaderAccessor:
        """Create the per-request accessor for *headers*.

        None binds an empty table, so every rule sees its headers as absent.
        """
        return HeaderAccessor(self, HeaderTable.coerce(headers))

    def rule_for(self, target: type) -> MappingRule | None:
        """Return the rule registered for *target*, if any."""
        return self._rules.get(target)

    def header_names(self, target: type) -> tuple[str, ...]:
        """Return the header names *target* is mapped to.

        Raises:
            KeyError: target has no rule
        """
        return self._rules[target].header_names

    def targets(self) -> list[type]:
        """Return all mapped target classes (sorted by qualified name)."""
        return sorted(self._rules, key=_qualname)

    def __contains__(self, target: object) -> bool:
        return isinstance(target, type) and target in self._rules

    def __len__(self) -> int:
        return len(self._rules)
