import ast
import math

import pytest
from hypothesis import given, strategies as st

from bzlgen.errors import EncodingError
from bzlgen.literals import ArgumentLiterals, StarlarkMarshaler, marshal, quote


class Label:
    def __init__(self, target: str) -> None:
        self.target = target

    def marshal_starlark(self) -> bytes:
        return f"Label({quote(self.target)})".encode("utf-8")


class Broken:
    def marshal_starlark(self) -> bytes:
        raise ValueError("boom")


class ReturnsText:
    def marshal_starlark(self):
        return "not bytes"


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, b"None"),
        (True, b"True"),
        (False, b"False"),
        (0, b"0"),
        (-42, b"-42"),
        (1.5, b"1.5"),
        ("foo", b'"foo"'),
        ('say "hi"', b'"say \\"hi\\""'),
        ("a\\b", b'"a\\\\b"'),
        ("line\nnext\ttab\r", b'"line\\nnext\\ttab\\r"'),
        ("\x01\x7f", b'"\\001\\177"'),
        ("café", '"café"'.encode("utf-8")),
        ([], b"[]"),
        ([1, "a", None], b'[1, "a", None]'),
        ((), b"()"),
        ((1,), b"(1,)"),
        ((1, 2), b"(1, 2)"),
        ({}, b"{}"),
        ({"srcs": ["a.cc"], "linkstatic": True}, b'{"srcs": ["a.cc"], "linkstatic": True}'),
        ([["nested"]], b'[["nested"]]'),
    ],
)
def test_builtin_encodings(value: object, expected: bytes) -> None:
    assert marshal(value) == expected


@pytest.mark.parametrize("value", [{1, 2}, frozenset(), b"raw", bytearray(b"x"), math.nan, math.inf, object()])
def test_unsupported_values(value: object) -> None:
    with pytest.raises(EncodingError) as info:
        marshal(value)
    assert info.value.value is value


def test_self_referencing_list() -> None:
    loop: list = []
    loop.append(loop)
    with pytest.raises(EncodingError, match="refers to itself"):
        marshal(loop)


def test_shared_but_acyclic_values_allowed() -> None:
    shared = ["x"]
    assert marshal([shared, shared]) == b'[["x"], ["x"]]'


def test_custom_marshaler_honored_when_nested() -> None:
    assert isinstance(Label("//a"), StarlarkMarshaler)
    assert marshal(Label("//a:b")) == b'Label("//a:b")'
    assert marshal({"dep": [Label("//x")]}) == b'{"dep": [Label("//x")]}'


def test_custom_marshaler_errors_are_wrapped() -> None:
    with pytest.raises(EncodingError) as info:
        marshal(Broken())
    assert isinstance(info.value.__cause__, ValueError)


def test_custom_marshaler_must_return_bytes() -> None:
    with pytest.raises(EncodingError, match="expected bytes"):
        marshal(ReturnsText())


def test_argument_literals_strip_brackets() -> None:
    assert marshal(ArgumentLiterals(["a.cc", "b.cc"])) == b'"a.cc", "b.cc"'
    assert marshal(ArgumentLiterals(["one"])) == b'"one"'
    assert marshal(ArgumentLiterals()) == b""


def test_argument_literals_require_strings() -> None:
    with pytest.raises(EncodingError, match="must be strings"):
        marshal(ArgumentLiterals(["ok", 1]))


def test_encoding_error_is_type_error() -> None:
    with pytest.raises(TypeError):
        marshal(object())


@given(st.text(alphabet=st.characters(exclude_categories=("Cs", "Zl", "Zp"), exclude_characters="\x85")))
def test_quote_reads_back(text: str) -> None:
    assert ast.literal_eval(quote(text)) == text


@pytest.mark.parametrize("value", ["\ud800", ["ok", "bad\udfff"], {"k": "\udc80"}])
def test_lone_surrogates_rejected(value: object) -> None:
    with pytest.raises(EncodingError, match="surrogate") as info:
        marshal(value)
    assert isinstance(info.value.__cause__, UnicodeEncodeError)
