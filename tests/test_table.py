"""Tests for HeaderTable and header value tokenizing."""

from __future__ import annotations

import pytest

from strongheaders import EMPTY_TABLE, HeaderTable, split_header_value


class TestSplitHeaderValue:
    def test_single_value(self) -> None:
        assert split_header_value("abc") == ["abc"]

    def test_comma_joined(self) -> None:
        assert split_header_value("a,b,c") == ["a", "b", "c"]

    def test_whitespace_trimmed(self) -> None:
        assert split_header_value("  a ,  b  ") == ["a", "b"]

    def test_empty_tokens_dropped(self) -> None:
        assert split_header_value("a,,b, ,") == ["a", "b"]

    def test_empty_string(self) -> None:
        assert split_header_value("") == []

    def test_quoted_comma_kept(self) -> None:
        assert split_header_value('"a,b", c') == ["a,b", "c"]

    def test_quoted_escape_undone(self) -> None:
        assert split_header_value(r'"say \"hi\""') == ['say "hi"']

    def test_unterminated_quote_kept_literally(self) -> None:
        assert split_header_value('"a, b') == ['"a', "b"]

    def test_duplicates_preserved(self) -> None:
        assert split_header_value("x, x, y") == ["x", "x", "y"]


class TestHeaderTable:
    def test_repeated_header_flattened_in_order(self) -> None:
        table = HeaderTable([("Accept", "a"), ("Accept", "b, c")])
        assert table["accept"] == ("a", "b", "c")

    def test_names_are_case_insensitive(self) -> None:
        table = HeaderTable([("X-Trace-Id", "t1"), ("x-trace-id", "t2")])
        assert table["X-TRACE-ID"] == ("t1", "t2")
        assert table["x-trace-id"] == ("t1", "t2")
        assert "X-Trace-ID" in table

    def test_keys_are_lowercased(self) -> None:
        table = HeaderTable([("X-Trace-Id", "t1"), ("ApiKey", "k")])
        assert sorted(table) == ["apikey", "x-trace-id"]
        assert len(table) == 2

    def test_absent_header(self) -> None:
        table = HeaderTable([("A", "1")])
        assert "B" not in table
        assert table.get_all("B") == ()
        with pytest.raises(KeyError):
            table["B"]

    def test_non_string_contains(self) -> None:
        table = HeaderTable([("A", "1")])
        assert 42 not in table

    def test_construction_is_idempotent(self) -> None:
        pairs = [("A", "1, 2"), ("b", "3")]
        assert HeaderTable(pairs) == HeaderTable(pairs)
        assert HeaderTable(pairs) == {"a": ("1", "2"), "b": ("3",)}

    def test_empty_table(self) -> None:
        assert len(EMPTY_TABLE) == 0
        assert EMPTY_TABLE.get_all("anything") == ()

    def test_repr(self) -> None:
        assert repr(HeaderTable([("A", "1")])) == "HeaderTable({'a': ('1',)})"


class TestConstructors:
    def test_from_mapping_str_values(self) -> None:
        table = HeaderTable.from_mapping({"X-Id": "1, 2"})
        assert table.get_all("x-id") == ("1", "2")

    def test_from_mapping_list_values(self) -> None:
        table = HeaderTable.from_mapping({"X-Id": ["1", "2,3"]})
        assert table.get_all("X-ID") == ("1", "2", "3")

    def test_from_mapping_merges_differently_cased_keys(self) -> None:
        table = HeaderTable.from_mapping({"X-Id": ["1"], "x-id": ["2"]})
        assert table.get_all("x-id") == ("1", "2")

    def test_from_asgi(self) -> None:
        table = HeaderTable.from_asgi([(b"x-id", b"1"), (b"X-Id", b"2")])
        assert table.get_all("X-Id") == ("1", "2")

    def test_from_asgi_latin1(self) -> None:
        table = HeaderTable.from_asgi([(b"x-name", "café".encode("latin-1"))])
        assert table.get_all("x-name") == ("café",)

    def test_coerce_none(self) -> None:
        assert HeaderTable.coerce(None) is EMPTY_TABLE

    def test_coerce_table_is_identity(self) -> None:
        table = HeaderTable([("A", "1")])
        assert HeaderTable.coerce(table) is table

    def test_coerce_mapping_and_pairs(self) -> None:
        assert HeaderTable.coerce({"A": "1"}) == HeaderTable.coerce([("a", "1")])


class TestRestrict:
    def test_only_declared_names(self) -> None:
        table = HeaderTable.from_mapping({"A": ["1", "2"], "B": "3", "C": "9"})
        assert table.restrict(["A", "B"]) == {"A": ("1", "2"), "B": ("3",)}

    def test_absent_names_omitted(self) -> None:
        table = HeaderTable.from_mapping({"H1": "x", "H3": "z"})
        restricted = table.restrict(["H1", "H2", "H3"])
        assert restricted == {"H1": ("x",), "H3": ("z",)}
        assert "H2" not in restricted

    def test_keyed_by_declared_spelling(self) -> None:
        table = HeaderTable([("x-external-id", "e")])
        assert table.restrict(["X-External-Id"]) == {"X-External-Id": ("e",)}

    def test_declared_order_preserved(self) -> None:
        table = HeaderTable([("b", "2"), ("a", "1")])
        assert list(table.restrict(["A", "B"])) == ["A", "B"]
