"""Tests for exportgen.defaults.

Default-value translation is a heuristic; these cases pin its current
behaviour rather than a complete C++ expression grammar.
"""

from __future__ import annotations

import logging

import pytest

from exportgen.defaults import cpp_arg_to_r_arg, generate_r_arg_list
from exportgen.models import Argument, Function, Type


@pytest.mark.parametrize(
    ("cpp_type", "cpp_arg", "expected"),
    [
        ("int", "5", "5L"),
        ("double", "5", "5"),
        ("float", "5", "5"),
        ("int", "5.5", "5.5"),
        ("int", "-3", "-3L"),
        ("int", "5L", "5L"),
        ("double", "5L", "5L"),
        ("int", "5 L", "5 L"),
        ("bool", "true", "TRUE"),
        ("bool", "false", "FALSE"),
        ("SEXP", "R_NilValue", "NULL"),
        ("int", "NA_INTEGER", "NA"),
        ("double", "NA_REAL", "NA"),
        ("std::string", "NA_STRING", "NA"),
        ("bool", "NA_LOGICAL", "NA"),
        ("std::string", '"hello"', '"hello"'),
        ("std::string", "'x'", "'x'"),
        ("CharacterVector", "CharacterVector::create(1)", "character(1)"),
        ("IntegerVector", "Rcpp::IntegerVector::create(1, 2)", "integer(1, 2)"),
        ("NumericVector", "NumericVector::create()", "numeric()"),
        ("NumericMatrix", "NumericMatrix(2, 2)", "matrix(2, 2)"),
    ],
)
def test_cpp_arg_to_r_arg(cpp_type: str, cpp_arg: str, expected: str) -> None:
    assert cpp_arg_to_r_arg(cpp_type, cpp_arg) == expected


@pytest.mark.parametrize(
    "cpp_arg",
    ["foo(x)", "List::create(1)", "CharacterVector::create", "Matrix", "\"unterminated", ""],
)
def test_untranslatable_values_return_none(cpp_arg: str) -> None:
    assert cpp_arg_to_r_arg("int", cpp_arg) is None


def test_generate_r_arg_list_translates_defaults() -> None:
    function = Function(
        type=Type("double"),
        name="scale",
        arguments=(
            Argument("x", Type("double")),
            Argument("times", Type("int"), "2"),
            Argument("verbose", Type("bool"), "false"),
        ),
    )
    assert generate_r_arg_list(function) == "x, times = 2L, verbose = FALSE"


def test_generate_r_arg_list_warns_and_drops_unparsable_default(caplog) -> None:
    function = Function(
        type=Type("int"),
        name="compute",
        arguments=(Argument("x", Type("int"), "foo(x)"), Argument("y", Type("int"))),
    )
    with caplog.at_level(logging.WARNING, logger="exportgen.defaults"):
        result = generate_r_arg_list(function)

    assert result == "x, y"
    messages = [record.getMessage() for record in caplog.records]
    assert any(
        "Unable to parse C++ default value 'foo(x)' for argument x of function compute" in message
        for message in messages
    )
