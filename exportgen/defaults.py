"""Translation of C++ default argument values into R default argument values.

The translation is a best-effort heuristic over the literal spelling of the
default, not an expression evaluator. Anything it does not recognise is
reported as a warning and dropped, which makes the R parameter required.
"""

from __future__ import annotations

import re
from typing import Optional

from .logging import get_logger
from .models import Function

_logger = get_logger("defaults")

_LITERALS = {
    "true": "TRUE",
    "false": "FALSE",
    "R_NilValue": "NULL",
    "NA_STRING": "NA",
    "NA_INTEGER": "NA",
    "NA_LOGICAL": "NA",
    "NA_REAL": "NA",
}

_CREATE_TYPES = {
    "CharacterVector": "character",
    "IntegerVector": "integer",
    "NumericVector": "numeric",
}

_CREATE = "::create"
_MATRIX = "Matrix"
_RCPP_SCOPE = "Rcpp::"
_FLOATING_TYPES = {"double", "float"}

# Mirrors what `std::istream >> double` consumes from the front of a string.
_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def is_quoted(text: str) -> bool:
    if len(text) < 2:
        return False
    quote = text[0]
    return quote in {"'", '"'} and text[-1] == quote


def literal_arg_to_r_arg(cpp_arg: str) -> Optional[str]:
    return _LITERALS.get(cpp_arg)


def create_arg_to_r_arg(cpp_arg: str) -> Optional[str]:
    """Rewrite `CharacterVector::create(...)` style values as R constructors."""
    create_loc = cpp_arg.find(_CREATE)
    if create_loc == -1 or create_loc + len(_CREATE) >= len(cpp_arg):
        return None

    type_name = cpp_arg[:create_loc]
    if type_name.startswith(_RCPP_SCOPE) and len(type_name) > len(_RCPP_SCOPE):
        type_name = type_name[len(_RCPP_SCOPE):]

    r_type = _CREATE_TYPES.get(type_name)
    if r_type is None:
        return None
    return r_type + cpp_arg[create_loc + len(_CREATE):]


def matrix_arg_to_r_arg(cpp_arg: str) -> Optional[str]:
    matrix_loc = cpp_arg.find(_MATRIX)
    if matrix_loc == -1 or matrix_loc + len(_MATRIX) >= len(cpp_arg):
        return None
    return "matrix" + cpp_arg[matrix_loc + len(_MATRIX):]


def numeric_arg_to_r_arg(cpp_type: str, cpp_arg: str) -> Optional[str]:
    """Translate a leading numeric literal, adding the integer suffix where needed."""
    match = _LEADING_NUMBER.match(cpp_arg)
    if match is None:
        return None

    # A lone trailing `L` token means the value is already an R integer literal.
    rest = cpp_arg[match.end():]
    if rest and rest.lstrip() == "L":
        return cpp_arg

    if "." not in cpp_arg and cpp_type not in _FLOATING_TYPES:
        return cpp_arg + "L"
    return cpp_arg


def cpp_arg_to_r_arg(cpp_type: str, cpp_arg: str) -> Optional[str]:
    """Return the R spelling of a C++ default value, or None when untranslatable."""
    if is_quoted(cpp_arg):
        return cpp_arg

    for convert in (literal_arg_to_r_arg, create_arg_to_r_arg, matrix_arg_to_r_arg):
        r_arg = convert(cpp_arg)
        if r_arg:
            return r_arg

    return numeric_arg_to_r_arg(cpp_type, cpp_arg) or None


def generate_r_arg_list(function: Function) -> str:
    """Render the formal parameter list of the R wrapper for `function`."""
    parts = []
    for argument in function.arguments:
        text = argument.name
        if argument.default_value:
            r_arg = cpp_arg_to_r_arg(argument.type.name, argument.default_value)
            if r_arg:
                text += f" = {r_arg}"
            else:
                _logger.warning(
                    "Unable to parse C++ default value '%s' for argument %s of function %s",
                    argument.default_value,
                    argument.name,
                    function.name,
                )
        parts.append(text)
    return ", ".join(parts)


__all__ = [
    "cpp_arg_to_r_arg",
    "create_arg_to_r_arg",
    "generate_r_arg_list",
    "is_quoted",
    "literal_arg_to_r_arg",
    "matrix_arg_to_r_arg",
    "numeric_arg_to_r_arg",
]
