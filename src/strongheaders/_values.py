"""HeaderValue — base type for header-backed domain values."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HeaderValue[T]:
    """A value read from request headers, or its "no value" variant.

    Subclass per header so each gets its own target type::

        class CorrelationId(HeaderValue[str]):
            pass

        CorrelationId("abc").has_value  # True
        CorrelationId().has_value       # False
    """

    value: T | None = None

    @property
    def has_value(self) -> bool:
        return self.value is not None
