"""Ready-made transforms for common header shapes.

Each helper wraps a *factory* (usually the target class) and returns a
transform suitable for ``RegistryBuilder.add_mapping``. The factory is called
with the selected value, or with no arguments when the header is absent, so
targets such as ``HeaderValue`` subclasses produce their "no value" variant.

>>> from strongheaders import HeaderValue
>>> class ApiKey(HeaderValue[str]): ...
>>> last(ApiKey)(["k1", "k2"])
ApiKey(value='k2')
>>> last(ApiKey)([])
ApiKey(value=None)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from strongheaders._rules import MultiValueTransform, SingleValueTransform

type Selector = Callable[[Sequence[str]], Any]

# Selectors only ever see non-empty sequences.
SELECTORS: Mapping[str, Selector] = {
    "first": lambda values: values[0],
    "last": lambda values: values[-1],
    "all": tuple,
    "joined": ", ".join,
}


def _selector(select: str | Selector) -> Selector:
    if callable(select):
        return select
    try:
        return SELECTORS[select]
    except KeyError:
        msg = f"unknown selector {select!r} (expected one of {sorted(SELECTORS)})"
        raise ValueError(msg) from None


def select[T](
    factory: Callable[..., T], how: str | Selector = "last"
) -> SingleValueTransform[T]:
    """Build a single-value transform that applies selector *how*."""
    pick = _selector(how)

    def transform(values: Sequence[str]) -> T:
        if not values:
            return factory()
        return factory(pick(values))

    return transform


def merged[T](
    factory: Callable[..., T], how: str | Selector = "all"
) -> MultiValueTransform[T]:
    """Build a multi-value transform over the concatenated values.

    Values are concatenated in the order of the restricted table, which is
    the order the header names were declared in.
    """
    pick = _selector(how)

    def transform(table: Mapping[str, Sequence[str]]) -> T:
        values = [value for found in table.values() for value in found]
        if not values:
            return factory()
        return factory(pick(values))

    return transform


def first[T](factory: Callable[..., T]) -> SingleValueTransform[T]:
    """First value wins."""
    return select(factory, "first")


def last[T](factory: Callable[..., T]) -> SingleValueTransform[T]:
    """Last value wins."""
    return select(factory, "last")


def all_values[T](factory: Callable[..., T]) -> SingleValueTransform[T]:
    """Pass every value, in order, as a tuple."""
    return select(factory, "all")


def joined[T](factory: Callable[..., T], sep: str = ", ") -> SingleValueTransform[T]:
    """Pass every value joined back into one string."""
    return select(factory, sep.join)
