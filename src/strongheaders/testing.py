"""Test utilities for strongheaders.

Provides helpers for exercising registries in tests and examples. These are
NOT needed at runtime.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from strongheaders._registry import RegistryBuilder

if TYPE_CHECKING:
    from strongheaders._registry import HeaderRegistry


@dataclass(slots=True)
class CountingTransform[T]:
    """Wrap a transform and record every input it is called with.

    >>> from strongheaders.transforms import last
    >>> counting = CountingTransform(last(str))
    >>> counting(["a", "b"])
    'b'
    >>> counting.count
    1
    """

    transform: Callable[[Any], T]
    calls: list[Any] = field(default_factory=list)

    def __call__(self, source: Any, /) -> T:
        self.calls.append(source)
        return self.transform(source)

    @property
    def count(self) -> int:
        return len(self.calls)


def registry_of(
    *mappings: tuple[type, str | Iterable[str], Callable[[Any], Any]],
) -> HeaderRegistry:
    """Build a registry from ``(target, header_or_headers, transform)`` tuples."""
    builder = RegistryBuilder()
    for target, headers, transform in mappings:
        builder.add_mapping(target, headers, transform)
    return builder.build()
