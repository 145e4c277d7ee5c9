"""Tests for the placeholder token codec."""

from __future__ import annotations

import pytest

from termread.placeholders import PLACEHOLDER, Placeholder, decode, encode


class TestEncode:

    def test_format(self):
        assert encode(0) == "$$$0$"
        assert encode(42) == "$$$42$"

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            encode(-1)

    @pytest.mark.parametrize("index", [0, 1, 9, 10, 99, 12345])
    def test_round_trip(self, index):
        found = decode(encode(index))
        assert len(found) == 1
        assert found[0].index == index
        assert found[0].text == encode(index)


class TestDecode:

    def test_positions_in_surrounding_text(self):
        text = f"See {encode(0)} and {encode(1)}."
        found = decode(text)
        assert [f.index for f in found] == [0, 1]
        for f in found:
            assert text[f.start:f.end] == f.text

    def test_no_tokens(self):
        assert decode("Plain prose with $5 and $$ signs.") == []

    def test_malformed_payload(self):
        found = decode("a $$$x1$ b $$$$ c")
        assert [f.index for f in found] == [None, None]

    def test_not_confused_by_markdown_image(self):
        assert decode("![alt](http://x/1.png)") == []


class TestSubstitute:

    def test_replaces_known_indices(self):
        text = f"{encode(0)}|{encode(1)}"
        out = PLACEHOLDER.substitute(text, lambda i: f"<{i}>")
        assert out == "<0>|<1>"

    def test_none_keeps_token(self):
        text = f"{encode(0)}|{encode(1)}"
        out = PLACEHOLDER.substitute(text, lambda i: "X" if i == 1 else None)
        assert out == f"{encode(0)}|X"

    def test_malformed_token_untouched(self):
        calls = []
        out = PLACEHOLDER.substitute("a $$$oops$ b", lambda i: calls.append(i) or "X")
        assert out == "a $$$oops$ b"
        assert calls == []

    def test_custom_delimiters(self):
        codec = Placeholder(opening="@@", closing="@")
        assert codec.encode(3) == "@@3@"
        assert codec.decode("x @@3@ y")[0].index == 3
