"""Error taxonomy for header mapping.

Every error derives from HeaderMappingError. Configuration errors are raised
synchronously by the builder and are meant to abort startup; resolution
errors are raised per request by the fail-fast accessor forms.
"""

from __future__ import annotations

from collections.abc import Sequence


def _type_name(target: object) -> str:
    if isinstance(target, type):
        return f"{target.__module__}.{target.__qualname__}"
    return repr(target)


class HeaderMappingError(Exception):
    """Base class for all strongheaders errors."""


# ═══════════════════════════════════════════════════════════════════════════════
# Registration errors
# ═══════════════════════════════════════════════════════════════════════════════


class NullArgumentError(HeaderMappingError, ValueError):
    """A required argument was None."""

    def __init__(self, argument: str) -> None:
        self.argument = argument
        super().__init__(f"argument {argument!r} must not be None")


class InvalidMappingError(HeaderMappingError, ValueError):
    """A mapping registration was malformed."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"invalid mapping: {source}")


class DuplicateTargetTypeError(HeaderMappingError):
    """A target type was registered twice.

    Carries the header names of the rule already bound to the type and of
    the rejected rule, both in the order they were supplied.
    """

    def __init__(
        self,
        target: type,
        existing_headers: Sequence[str],
        requested_headers: Sequence[str],
    ) -> None:
        self.target = target
        self.existing_headers = tuple(existing_headers)
        self.requested_headers = tuple(requested_headers)
        super().__init__(
            f"{_type_name(target)} is already mapped to headers "
            f"{list(self.existing_headers)} (requested: {list(self.requested_headers)})"
        )


class RegistryFrozenError(HeaderMappingError, RuntimeError):
    """The builder was used after build()."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"cannot {operation}: registry has already been built")


# ═══════════════════════════════════════════════════════════════════════════════
# Resolution errors
# ═══════════════════════════════════════════════════════════════════════════════


class ResolutionFailedError(HeaderMappingError, LookupError):
    """No usable value could be produced for a target type."""

    def __init__(self, target: type) -> None:
        self.target = target
        super().__init__(
            f"Unable to retrieve {_type_name(target)}. "
            "Check that a mapping has been registered."
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Config errors
# ═══════════════════════════════════════════════════════════════════════════════


class ConfigParseError(HeaderMappingError, ValueError):
    """Error parsing a config dict into config types."""


class UnknownTargetError(ConfigParseError):
    """A config entry named a target token that was not supplied."""

    def __init__(self, token: str, available: list[str]) -> None:
        self.token = token
        self.available = sorted(available)
        if self.available:
            msg = (
                f"unknown target: {token!r} "
                f"(available: {', '.join(self.available)})"
            )
        else:
            msg = f"unknown target: {token!r} (no targets were supplied)"
        super().__init__(msg)
