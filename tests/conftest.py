"""
Pytest configuration and shared fixtures for jspan tests.

Provides immutable scan cases and sample documents shared across the lookup,
array, merge and build tests.
"""

from dataclasses import dataclass

import pytest


@dataclass(frozen=True)
class ScanCase:
    """
    Immutable container for a key lookup case.

    Holds the document, the key to look up and the expected raw value text
    and category name.
    """

    description: str
    input_data: str
    key: str
    expected_value: str = ""
    expected_type: str = "none"

    @property
    def should_find(self) -> bool:
        return self.expected_type != "none"


@dataclass(frozen=True)
class ArrayCase:
    """Immutable container for an array splitting case."""

    description: str
    input_data: str
    expected_items: tuple[str, ...] = ()


@pytest.fixture
def key_lookup_cases() -> list[ScanCase]:
    """
    Provides documents with one key to locate and the expected raw value.

    Covers every value category, whitespace around the colon, nested keys
    and keys that first appear as string values.
    """
    return [
        ScanCase("string value", '{"a":1,"b":"x"}', "b", "x", "string"),
        ScanCase("number value", '{"a":1,"b":"x"}', "a", "1", "number"),
        ScanCase(
            "boolean true", '{ "active" : true }', "active", "true", "boolean"
        ),
        ScanCase("boolean false", '{"v": false}', "v", "false", "boolean"),
        ScanCase("null value", '{"n":null}', "n", "null", "null"),
        ScanCase(
            "object value",
            '{"o": {"x": [1, 2]}, "p": 0}',
            "o",
            '{"x": [1, 2]}',
            "object",
        ),
        ScanCase(
            "array with bracket in string",
            '{"arr": [1, [2, 3], "]"], "z": 1}',
            "arr",
            '[1, [2, 3], "]"]',
            "array",
        ),
        ScanCase(
            "object with brace in string",
            '{"o": {"c": "}"}, "z": 1}',
            "o",
            '{"c": "}"}',
            "object",
        ),
        ScanCase(
            "exponent number", '{"neg": -12.5e3, "x": 1}', "neg", "-12.5e3",
            "number",
        ),
        ScanCase(
            "escaped quotes kept raw",
            '{"s":"say \\"hi\\""}',
            "s",
            'say \\"hi\\"',
            "string",
        ),
        ScanCase(
            "trailing backslash kept raw",
            '{"path":"C:\\\\","next":1}',
            "path",
            "C:\\\\",
            "string",
        ),
        ScanCase("empty string", '{"e":"","f":1}', "e", "", "string"),
        ScanCase(
            "key text first seen as a value",
            '{"title":"a","a":2}',
            "a",
            "2",
            "number",
        ),
        ScanCase(
            "whitespace before colon", '{"a" \n : 3}', "a", "3", "number"
        ),
        ScanCase(
            "nested key",
            '{"outer":{"inner":"deep"}}',
            "inner",
            "deep",
            "string",
        ),
        ScanCase("missing key", '{"a":1}', "b"),
        ScanCase("key only as a value", '{"k":"name"}', "name"),
        ScanCase("prefix of a longer key", '{"ab":1}', "a"),
    ]


@pytest.fixture
def array_cases() -> list[ArrayCase]:
    """Provides array texts with their expected top-level item texts."""
    return [
        ArrayCase(
            "mixed items", '[1,"a,b",[2,3]]', ("1", '"a,b"', "[2,3]")
        ),
        ArrayCase("empty", "[]"),
        ArrayCase("blank interior", "[ ]"),
        ArrayCase("surrounding whitespace", "  [ \n ]  "),
        ArrayCase(
            "objects with nested commas",
            '[{"a":1,"b":[1,2]}, {"c":"}"}]',
            ('{"a":1,"b":[1,2]}', '{"c":"}"}'),
        ),
        ArrayCase(
            "escaped quote in string",
            '["esc\\"aped, still", 2]',
            ('"esc\\"aped, still"', "2"),
        ),
        ArrayCase("padded items", "[ 1 , 2 ]", ("1", "2")),
        ArrayCase(
            "literals", "[null, true, false, -1]",
            ("null", "true", "false", "-1"),
        ),
        ArrayCase("not an array", "not an array"),
        ArrayCase("unclosed", "[1,2"),
        ArrayCase("object text", '{"a":1}'),
    ]


@pytest.fixture
def malformed_documents() -> list[str]:
    """
    Provides malformed documents from the json.org JSON_checker suite.

    Scanning is lenient, so none of these may raise; they surface as
    absent values, empty arrays or verbatim tokens instead.
    """
    return [
        '"A JSON payload should be an object or array, not a string."',
        '["Unclosed array"',
        '{unquoted_key: "keys must be quoted"}',
        '["extra comma",]',
        '["double extra comma",,]',
        '[   , "<-- missing value"]',
        '["Comma after the close"],',
        '["Extra close"]]',
        '{"Extra comma": true,}',
        '{"Illegal expression": 1 + 2}',
        '{"Numbers cannot be hex": 0x14}',
        "[\\naked]",
        '{"Missing colon" null}',
        '{"Double colon":: null}',
        '{"Comma instead of colon", null}',
        '["Colon instead of comma": false]',
        "['single quote']",
        '{"Comma instead if closing brace": true,',
        '["mismatch"}',
        "",
        "   ",
        '"',
        "{",
        "[",
    ]


@pytest.fixture
def pass1_document() -> str:
    """
    Provides the json.org pass1.json document.

    A valid array mixing every value type, escapes inside strings and
    irregular whitespace.
    """
    return """[
    "JSON Test Pattern pass1",
    {"object with 1 member":["array with 1 element"]},
    {},
    [],
    -42,
    true,
    false,
    null,
    {
        "integer": 1234567890,
        "real": -9876.543210,
        "e": 0.123456789e-12,
        "E": 1.234567890E+34,
        "":  23456789012E66,
        "zero": 0,
        "one": 1,
        "space": " ",
        "quote": "\\"",
        "backslash": "\\\\",
        "controls": "\\b\\f\\n\\r\\t",
        "slash": "/ & \\/",
        "alpha": "abcdefghijklmnopqrstuvwyz",
        "ALPHA": "ABCDEFGHIJKLMNOPQRSTUVWYZ",
        "digit": "0123456789",
        "0123456789": "digit",
        "special": "`1~!@#$%^&*()_+-={':[,]}|;.</>?",
        "hex": "\\u0123\\u4567\\u89AB\\uCDEF\\uabcd\\uef4A",
        "true": true,
        "false": false,
        "null": null,
        "array":[  ],
        "object":{  },
        "address": "50 St. James Street",
        "url": "https://www.JSON.org/",
        "comment": "// /* <!-- --",
        "# -- --> */": " ",
        " s p a c e d " :[1,2 , 3

,

4 , 5        ,          6           ,7        ],"compact":[1,2,3,4,5,6,7],
        "jsontext": "{\\"object with 1 member\\":[\\"array with 1 element\\"]}"
    }
]"""


@pytest.fixture
def catalog_document() -> str:
    """Provides an object holding an array of records under a key."""
    return (
        '{"items": [{"id": 1, "name": "bolt"}, {"id": 2, "name": "nut"},'
        ' {"id": 3, "name": "washer"}], "name": "hardware", "count": 3}'
    )
