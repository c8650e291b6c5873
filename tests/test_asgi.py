"""Tests for the ASGI adapter (strongheaders.asgi)."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from strongheaders import (
    HeaderAccessor,
    HeaderValue,
    NullArgumentError,
    accessor_var,
    current_accessor,
    transforms,
)
from strongheaders.asgi import HeaderMappingMiddleware, accessor_from_scope
from strongheaders.testing import CountingTransform, registry_of


class CorrelationId(HeaderValue[str]):
    pass


async def _receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


async def _send(message: dict[str, Any]) -> None:
    return None


def _http_scope(headers: list[tuple[bytes, bytes]]) -> dict[str, Any]:
    return {"type": "http", "method": "GET", "path": "/", "headers": headers}


class TestHeaderMappingMiddleware:
    def test_binds_accessor_per_request(self) -> None:
        counting = CountingTransform(transforms.last(CorrelationId))
        registry = registry_of((CorrelationId, "X-Correlation-Id", counting))
        seen: list[str | None] = []

        async def app(scope, receive, send) -> None:
            headers = accessor_from_scope(scope)
            assert current_accessor() is headers
            seen.append(headers.require(CorrelationId).value)
            seen.append(headers.require(CorrelationId).value)

        middleware = HeaderMappingMiddleware(app, registry)
        asyncio.run(middleware(_http_scope([(b"x-correlation-id", b"a, b")]), _receive, _send))
        asyncio.run(middleware(_http_scope([(b"X-Correlation-Id", b"c")]), _receive, _send))

        assert seen == ["b", "b", "c", "c"]
        assert counting.count == 2

    def test_scope_reset_after_request(self) -> None:
        registry = registry_of()

        async def app(scope, receive, send) -> None:
            return None

        asyncio.run(HeaderMappingMiddleware(app, registry)(_http_scope([]), _receive, _send))
        assert accessor_var.get(None) is None

    def test_custom_state_key(self) -> None:
        registry = registry_of()
        captured: list[HeaderAccessor] = []

        async def app(scope, receive, send) -> None:
            captured.append(accessor_from_scope(scope, "typed_headers"))

        middleware = HeaderMappingMiddleware(app, registry, state_key="typed_headers")
        asyncio.run(middleware(_http_scope([]), _receive, _send))
        assert len(captured) == 1

    def test_existing_state_preserved(self) -> None:
        registry = registry_of()
        scope = _http_scope([])
        scope["state"] = {"db": "conn"}

        async def app(scope, receive, send) -> None:
            assert scope["state"]["db"] == "conn"
            assert isinstance(scope["state"]["headers"], HeaderAccessor)

        asyncio.run(HeaderMappingMiddleware(app, registry)(scope, _receive, _send))

    def test_websocket_scope_bound(self) -> None:
        registry = registry_of((CorrelationId, "X-Correlation-Id", transforms.last(CorrelationId)))
        seen: list[str | None] = []

        async def app(scope, receive, send) -> None:
            seen.append(accessor_from_scope(scope).require(CorrelationId).value)

        scope = {"type": "websocket", "path": "/ws", "headers": [(b"x-correlation-id", b"w")]}
        asyncio.run(HeaderMappingMiddleware(app, registry)(scope, _receive, _send))
        assert seen == ["w"]

    def test_lifespan_passes_through(self) -> None:
        registry = registry_of()
        scopes: list[dict[str, Any]] = []

        async def app(scope, receive, send) -> None:
            scopes.append(scope)

        scope: dict[str, Any] = {"type": "lifespan"}
        asyncio.run(HeaderMappingMiddleware(app, registry)(scope, _receive, _send))
        assert scopes == [{"type": "lifespan"}]
        assert "state" not in scope

    def test_constructor_rejects_none(self) -> None:
        async def app(scope, receive, send) -> None:
            return None

        with pytest.raises(NullArgumentError):
            HeaderMappingMiddleware(app, None)  # type: ignore[arg-type]
        with pytest.raises(NullArgumentError):
            HeaderMappingMiddleware(None, registry_of())  # type: ignore[arg-type]


class TestAccessorFromScope:
    def test_missing_state(self) -> None:
        with pytest.raises(LookupError, match="no header accessor"):
            accessor_from_scope({"type": "http"})

    def test_missing_key(self) -> None:
        with pytest.raises(LookupError):
            accessor_from_scope({"type": "http", "state": {}})
