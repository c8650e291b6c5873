"""ASGI adapter — bind a HeaderRegistry to every incoming request.

Pure ASGI middleware, no framework dependency. For ``http`` and
``websocket`` scopes it builds the request's HeaderTable from
``scope["headers"]``, binds an accessor, stores it in
``scope["state"][state_key]`` and runs the downstream app inside
``request_scope()`` so ``current_accessor()`` works too.

Usage::

    app = HeaderMappingMiddleware(app, registry)

    # downstream
    correlation = accessor_from_scope(scope).require(CorrelationId)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, MutableMapping
from typing import TYPE_CHECKING, Any

from strongheaders._context import request_scope
from strongheaders._errors import NullArgumentError
from strongheaders._table import HeaderTable

if TYPE_CHECKING:
    from strongheaders._accessor import HeaderAccessor
    from strongheaders._registry import HeaderRegistry

# Raw ASGI types (ASGI 3.0)
type Scope = MutableMapping[str, Any]
type Receive = Callable[[], Awaitable[MutableMapping[str, Any]]]
type Send = Callable[[MutableMapping[str, Any]], Awaitable[None]]
type ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

DEFAULT_STATE_KEY = "headers"

_REQUEST_SCOPES = frozenset({"http", "websocket"})


class HeaderMappingMiddleware:
    """Middleware that gives every request its own HeaderAccessor.

    Scopes other than ``http`` and ``websocket`` (e.g. ``lifespan``) pass
    through untouched.
    """

    __slots__ = ("_app", "_registry", "_state_key")

    def __init__(
        self,
        app: ASGIApp,
        registry: HeaderRegistry,
        *,
        state_key: str = DEFAULT_STATE_KEY,
    ) -> None:
        if app is None:
            raise NullArgumentError("app")
        if registry is None:
            raise NullArgumentError("registry")
        self._app = app
        self._registry = registry
        self._state_key = state_key

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in _REQUEST_SCOPES:
            await self._app(scope, receive, send)
            return

        table = HeaderTable.from_asgi(scope.get("headers", ()))
        with request_scope(self._registry, table) as accessor:
            scope.setdefault("state", {})[self._state_key] = accessor
            await self._app(scope, receive, send)


def accessor_from_scope(
    scope: Scope, state_key: str = DEFAULT_STATE_KEY
) -> HeaderAccessor:
    """Return the accessor HeaderMappingMiddleware stored on *scope*.

    Raises:
        LookupError: the middleware did not run for this scope
    """
    try:
        return scope["state"][state_key]
    except KeyError:
        msg = f"no header accessor stored under scope['state'][{state_key!r}]"
        raise LookupError(msg) from None
