"""
Pytest configuration and shared fixtures for jslice tests.

Provides immutable test data fixtures describing documents that must parse
and documents that must fail, together with the expected failure kind.
"""

from dataclasses import dataclass

import pytest

import jslice


@dataclass(frozen=True)
class JsonTestCase:
    """
    Immutable container for document test case data.

    Holds test input and expected behavior for consistent test execution.
    """

    description: str
    input_data: str
    should_fail: bool = False
    expected_kind: jslice.ErrorKind | None = None
    expected_entries: int | None = None


@pytest.fixture
def json_fail_cases() -> list[JsonTestCase]:
    """
    Provides documents that must fail, each with the error kind it raises.

    Parsing stops at the first bad token, so every case maps to exactly one
    kind.
    """
    bad_char = jslice.ErrorKind.BAD_CHAR
    no_end = jslice.ErrorKind.NO_END
    early_end = jslice.ErrorKind.EARLY_END

    return [
        JsonTestCase("empty document", "", True, early_end),
        JsonTestCase("only separators", " \n,: ", True, early_end),
        JsonTestCase("unterminated object", "{", True, early_end),
        JsonTestCase(
            "unterminated nested object", '{"a": {"b": true}', True, early_end
        ),
        JsonTestCase("unterminated array", '{"a": [1, 2', True, no_end),
        JsonTestCase("array after last value", '{"a": [true', True, early_end),
        JsonTestCase("number at end of input", '{"a": 1', True, no_end),
        JsonTestCase("unterminated string", '{"a": "b', True, no_end),
        JsonTestCase("unterminated key", '{"a', True, no_end),
        JsonTestCase("escaped closing quote", '{"a": "b\\"}', True, no_end),
        JsonTestCase("truncated boolean", '{"a": tru}', True, bad_char),
        JsonTestCase("capitalized boolean", '{"a": True}', True, bad_char),
        JsonTestCase("null literal", '{"a": null}', True, bad_char),
        JsonTestCase("unquoted key", '{unquoted_key: 1}', True, bad_char),
        JsonTestCase("single quotes", "{\"a\": 'x'}", True, bad_char),
        JsonTestCase("fraction", '{"a": 1.5}', True, bad_char),
        JsonTestCase("hex number", '{"a": 0x14}', True, bad_char),
        JsonTestCase("lone minus", '{"a": -}', True, bad_char),
        JsonTestCase("mismatched close", '{"a": [1, 2}', True, bad_char),
        JsonTestCase("tab separator", '{"a":\t1}', True, bad_char),
        JsonTestCase("carriage return", '{"a": 1\r\n}', True, bad_char),
        JsonTestCase("top-level array", "[1, 2, 3]", True, bad_char),
        JsonTestCase("top-level string", '"just a string"', True, bad_char),
        JsonTestCase("byte order mark", "\ufeff{\"a\": 1}", True, bad_char),
    ]


@pytest.fixture
def json_pass_cases() -> list[JsonTestCase]:
    """
    Provides documents that must parse, with their top-level entry counts.
    """
    return [
        JsonTestCase("empty object", "{}", expected_entries=0),
        JsonTestCase("empty object with space", "{ \n }", expected_entries=0),
        JsonTestCase("single number", '{"a": 1}', expected_entries=1),
        JsonTestCase("array of numbers", '{"a":[1,2,3]}', expected_entries=1),
        JsonTestCase(
            "nested objects",
            '{"JSON Test Pattern pass3": {"The outermost value": "must be an'
            ' object or array.", "In this test": "It is an object."}}',
            expected_entries=1,
        ),
        JsonTestCase(
            "deep nesting",
            '{"deep": [[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]}',
            expected_entries=1,
        ),
        JsonTestCase(
            "duplicate keys", '{"a": 1, "a": 2, "a": 3}', expected_entries=3
        ),
        JsonTestCase(
            "missing colon", '{"Missing colon" true}', expected_entries=1
        ),
        JsonTestCase(
            "double colon", '{"Double colon":: true}', expected_entries=1
        ),
        JsonTestCase(
            "comma instead of colon",
            '{"Comma instead of colon", true}',
            expected_entries=1,
        ),
        JsonTestCase(
            "extra commas", '{,"a": 1,, "b": [1,,2,],}', expected_entries=2
        ),
        JsonTestCase(
            "leading separators", '\n\n ,{"a": false}', expected_entries=1
        ),
        JsonTestCase(
            "whitespace before close",
            '{ "a" : 1 , "b" : 2 }',
            expected_entries=2,
        ),
    ]
