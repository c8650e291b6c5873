"""HeaderTable — immutable, case-insensitive view over request headers.

Maps the lower-cased header name to an ordered tuple of value tokens. A header
that occurs more than once, or that carries comma-joined content, is flattened
into a single tuple. Order and duplicates are preserved.

Comma splitting respects double-quoted strings and uses ``google-re2`` so
tokenizing stays linear-time on untrusted input.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

import re2

# A token is a run of quoted strings and non-comma characters. A stray quote
# with no closing partner is kept as a literal character.
_TOKEN = re2.compile(r'(?:"(?:[^"\\]|\\.)*"|[^,"]|")+')
_ESCAPE = re2.compile(r"\\(.)")

type RawHeaders = (
    HeaderTable
    | Mapping[str, str | Iterable[str]]
    | Iterable[tuple[str, str]]
    | None
)


def split_header_value(value: str) -> list[str]:
    """Split a comma-joined header value into tokens.

    Tokens are whitespace-trimmed, empty tokens are dropped and surrounding
    double quotes are removed (with backslash escapes undone).

    >>> split_header_value('a, "b,c" ,, d')
    ['a', 'b,c', 'd']
    """
    tokens: list[str] = []
    for match in _TOKEN.finditer(value):
        token = match.group(0).strip()
        if not token:
            continue
        if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
            token = _ESCAPE.sub(lambda m: m.group(1), token[1:-1])
        tokens.append(token)
    return tokens


class HeaderTable(Mapping[str, tuple[str, ...]]):
    """Immutable, case-insensitive table of header name to value tokens.

    Absent headers have no entry. Use ``get_all()`` to get an empty tuple
    instead of a KeyError.
    """

    __slots__ = ("_entries",)

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        entries: dict[str, list[str]] = {}
        for name, value in pairs:
            entries.setdefault(name.lower(), []).extend(split_header_value(value))
        self._entries: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {name: tuple(values) for name, values in entries.items()}
        )

    # ── Constructors ───────────────────────────────────────────────────────

    @classmethod
    def from_mapping(cls, headers: Mapping[str, str | Iterable[str]]) -> HeaderTable:
        """Build a table from ``{name: value}`` or ``{name: [values]}``."""
        return cls(_mapping_pairs(headers))

    @classmethod
    def from_asgi(cls, raw: Iterable[tuple[bytes, bytes]]) -> HeaderTable:
        """Build a table from ASGI ``scope["headers"]`` byte pairs."""
        return cls(
            (name.decode("latin-1"), value.decode("latin-1")) for name, value in raw
        )

    @classmethod
    def coerce(cls, headers: RawHeaders) -> HeaderTable:
        """Return *headers* as a HeaderTable.

        Accepts an existing table (returned as-is), a mapping, an iterable of
        ``(name, value)`` pairs, or None for an empty table.
        """
        if headers is None:
            return EMPTY_TABLE
        if isinstance(headers, HeaderTable):
            return headers
        if isinstance(headers, Mapping):
            return cls.from_mapping(headers)
        return cls(headers)

    # ── Lookup ─────────────────────────────────────────────────────────────

    def get_all(self, name: str) -> tuple[str, ...]:
        """Return the value tokens for *name*, or an empty tuple if absent."""
        return self._entries.get(name.lower(), ())

    def restrict(self, names: Iterable[str]) -> dict[str, tuple[str, ...]]:
        """Return the sub-table for *names*, keyed by the spelling given.

        Names absent from the table are omitted, not mapped to an empty tuple.
        """
        restricted: dict[str, tuple[str, ...]] = {}
        for name in names:
            found = self._entries.get(name.lower())
            if found is not None:
                restricted[name] = found
        return restricted

    def __getitem__(self, name: str) -> tuple[str, ...]:
        return self._entries[name.lower()]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"HeaderTable({dict(self._entries)!r})"


def _mapping_pairs(
    headers: Mapping[str, str | Iterable[str]],
) -> Iterator[tuple[str, str]]:
    for name, value in headers.items():
        if isinstance(value, str):
            yield name, value
        else:
            for item in value:
                yield name, item


EMPTY_TABLE = HeaderTable()
