"""Request-scoped accessor via ContextVar.

Provides:
- ``request_scope()``: bind an accessor for the duration of one request.
- ``current_accessor()``: the accessor for the current request.

Explicit passing (``registry.bind(headers)``) needs neither of these. They
exist for code that cannot thread the accessor through, such as ASGI
middleware handing off to a framework.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local otherwise.
    No locks needed.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

from strongheaders._errors import NullArgumentError

if TYPE_CHECKING:
    from strongheaders._accessor import HeaderAccessor
    from strongheaders._registry import HeaderRegistry
    from strongheaders._table import RawHeaders

accessor_var: ContextVar[HeaderAccessor] = ContextVar("strongheaders_accessor")
"""The current request's accessor. Set by ``request_scope()``."""


@contextmanager
def request_scope(
    registry: HeaderRegistry, headers: RawHeaders = None
) -> Iterator[HeaderAccessor]:
    """Bind a fresh accessor for *headers* and make it the current one.

    The previous accessor (if any) is restored on exit.

    Usage::

        with request_scope(registry, request.headers.items()) as headers:
            handle(request)
    """
    if registry is None:
        raise NullArgumentError("registry")
    accessor = registry.bind(headers)
    token = accessor_var.set(accessor)
    try:
        yield accessor
    finally:
        accessor_var.reset(token)


def current_accessor(fallback: HeaderRegistry | None = None) -> HeaderAccessor:
    """Return the accessor for the current request.

    Outside a request scope, returns an accessor over an empty table bound
    to *fallback*, so rules still run and produce their "no value" result.

    Raises:
        LookupError: outside a request scope and no fallback given
    """
    accessor = accessor_var.get(None)
    if accessor is not None:
        return accessor
    if fallback is None:
        msg = "no header accessor is bound to the current context"
        raise LookupError(msg)
    return fallback.bind()
