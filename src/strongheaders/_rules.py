"""Mapping rules — how one target type is produced from request headers.

A rule is one of two variants:
- SingleHeaderRule: transform receives one header's value tokens
- MultiHeaderRule: transform receives a sub-table restricted to its declared names

The MappingRule union is pattern-matchable via match/case.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from strongheaders._table import HeaderTable

type SingleValueTransform[T] = Callable[[Sequence[str]], T]
type MultiValueTransform[T] = Callable[[Mapping[str, Sequence[str]]], T]


@dataclass(frozen=True, slots=True)
class SingleHeaderRule[T]:
    """Produce ``target`` from the value tokens of a single header.

    An absent header yields an empty sequence, never an error.
    """

    target: type[T]
    header: str
    transform: SingleValueTransform[T]

    @property
    def header_names(self) -> tuple[str, ...]:
        return (self.header,)

    def apply(self, table: HeaderTable) -> T:
        return self.transform(table.get_all(self.header))


@dataclass(frozen=True, slots=True)
class MultiHeaderRule[T]:
    """Produce ``target`` from several headers at once.

    The transform only sees the declared headers that are present, keyed by
    the spelling used at registration.
    """

    target: type[T]
    headers: tuple[str, ...]
    transform: MultiValueTransform[T]

    @property
    def header_names(self) -> tuple[str, ...]:
        return self.headers

    def apply(self, table: HeaderTable) -> T:
        return self.transform(table.restrict(self.headers))


type MappingRule = SingleHeaderRule[Any] | MultiHeaderRule[Any]


class _NotMapped(enum.Enum):
    NOT_MAPPED = enum.auto()

    def __repr__(self) -> str:
        return "NOT_MAPPED"


# Returned by HeaderRegistry.resolve() when no rule exists for the target.
NOT_MAPPED = _NotMapped.NOT_MAPPED
