"""Scanner for `// [[Rcpp::...]]` attributes in C++ source files.

Only attribute lines and the declaration following an export attribute are
understood; the rest of the file is never parsed.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence, Set, Tuple

from .logging import get_logger
from .models import (
    EXPORT_ATTRIBUTE,
    INTERFACES_ATTRIBUTE,
    Argument,
    Attribute,
    Function,
    Interface,
    Param,
    SourceFileAttributes,
    Type,
    unquote,
)

_ATTRIBUTE_PATTERN = re.compile(r"^\s*//\s*\[\[\s*([\w:]+)\s*(?:\((.*)\))?\s*\]\]\s*$")
_ROXYGEN_PATTERN = re.compile(r"^\s*//'(.*)$")
_BLOCK_COMMENT_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)
_DECLARATOR_PATTERN = re.compile(r"^(.*?)([A-Za-z_]\w*)\s*$", re.DOTALL)

_OPENERS = {"(": ")", "<": ">", "[": "]", "{": "}"}
_CLOSERS = {value: key for key, value in _OPENERS.items()}
_MAX_DECLARATION_LINES = 50


class AttributeParseError(ValueError):
    """Raised when an attribute or the declaration it annotates is malformed."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(message)
        self.line = line


class SourceFileAttributesParser:
    """Builds `SourceFileAttributes` records from annotated source files."""

    def __init__(self) -> None:
        self.logger = get_logger("parser")

    def parse(self, path: Path | str) -> SourceFileAttributes:
        source = Path(path)
        text = source.read_text(encoding="utf-8")
        return self.parse_text(text, source_file=str(source))

    def parse_text(self, text: str, *, source_file: str = "<string>") -> SourceFileAttributes:
        lines = text.splitlines()
        attributes: List[Attribute] = []
        interfaces: Set[Interface] = set()
        roxygen: List[str] = []

        for index, line in enumerate(lines):
            roxygen_match = _ROXYGEN_PATTERN.match(line)
            if roxygen_match:
                roxygen.append("#'" + roxygen_match.group(1))
                continue

            match = _ATTRIBUTE_PATTERN.match(line)
            if not match:
                continue

            name = match.group(1)
            line_number = index + 1
            try:
                params = parse_params(match.group(2) or "", line_number)
            except AttributeParseError as exc:
                self.logger.warning("%s:%d: %s", source_file, exc.line, exc)
                roxygen = []
                continue

            function: Optional[Function] = None
            if name == EXPORT_ATTRIBUTE:
                try:
                    function = parse_function(lines, index + 1)
                except AttributeParseError as exc:
                    self.logger.warning(
                        "No function found for %s attribute at %s:%d (%s)",
                        EXPORT_ATTRIBUTE,
                        source_file,
                        line_number,
                        exc,
                    )
            elif name == INTERFACES_ATTRIBUTE:
                interfaces.update(self._parse_interfaces(params, source_file, line_number))

            attributes.append(
                Attribute(name=name, params=tuple(params), function=function, roxygen=tuple(roxygen))
            )
            roxygen = []

        return SourceFileAttributes(
            source_file=source_file,
            attributes=tuple(attributes),
            interfaces=frozenset(interfaces),
        )

    def _parse_interfaces(
        self, params: Sequence[Param], source_file: str, line_number: int
    ) -> Set[Interface]:
        found: Set[Interface] = set()
        for param in params:
            try:
                found.add(Interface(param.name.lower()))
            except ValueError:
                self.logger.warning(
                    "%s:%d: unknown interface '%s' (expected r or cpp)",
                    source_file,
                    line_number,
                    param.name,
                )
        return found


def parse_params(text: str, line: int = 0) -> List[Param]:
    """Parse `a, b = value` attribute parameters.

    Bare parameters may be quoted (`export(".hidden")`); their quotes are
    stripped. Values keep their quotes.
    """
    params: List[Param] = []
    for chunk in split_top_level(text, ",", line):
        chunk = chunk.strip()
        if not chunk:
            continue
        name, value = _split_assignment(chunk, line)
        if not name:
            raise AttributeParseError(f"missing parameter name in '{chunk}'", line)
        if not value:
            name = unquote(name)
        params.append(Param(name=name, value=value))
    return params


def parse_function(lines: Sequence[str], start: int) -> Function:
    """Parse the declaration that begins at or after `lines[start]`."""
    declaration = _collect_declaration(lines, start)
    line = start + 1

    open_index = declaration.find("(")
    if open_index == -1:
        raise AttributeParseError("expected '(' in function declaration", line)
    close_index = _find_matching(declaration, open_index, line)

    head = declaration[:open_index].split()
    if len(head) < 2:
        raise AttributeParseError("expected a return type and a function name", line)
    name = head[-1]
    if not re.fullmatch(r"[A-Za-z_]\w*", name):
        raise AttributeParseError(f"invalid function name '{name}'", line)
    return_type = parse_type(" ".join(head[:-1]))

    arguments: List[Argument] = []
    args_text = declaration[open_index + 1 : close_index].strip()
    if args_text and args_text != "void":
        for chunk in split_top_level(args_text, ",", line):
            arguments.append(_parse_argument(chunk, line))

    names = [argument.name for argument in arguments]
    if len(set(names)) != len(names):
        raise AttributeParseError(f"duplicate argument names in {name}", line)
    return Function(type=return_type, name=name, arguments=tuple(arguments))


def parse_type(text: str) -> Type:
    type_text = " ".join(text.split())
    is_const = False
    if type_text.startswith("const "):
        is_const = True
        type_text = type_text[len("const "):].strip()
    is_reference = False
    if type_text.endswith("&"):
        is_reference = True
        type_text = type_text[:-1].strip()
    return Type(name=type_text, is_const=is_const, is_reference=is_reference)


def split_top_level(text: str, separator: str, line: int = 0) -> List[str]:
    """Split `text` on `separator` outside brackets and string literals."""
    parts: List[str] = []
    stack: List[str] = []
    quote: Optional[str] = None
    escape = False
    current: List[str] = []

    for ch in text:
        if quote is not None:
            current.append(ch)
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == quote:
                quote = None
            continue
        if ch in {'"', "'"}:
            quote = ch
        elif ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch in _CLOSERS:
            # `>` also appears in operators such as `->`; tolerate it unbalanced.
            if stack and stack[-1] == ch:
                stack.pop()
            elif ch != ">":
                raise AttributeParseError(f"unbalanced '{ch}' in '{text}'", line)
        elif ch == separator and not stack:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)

    if quote is not None:
        raise AttributeParseError(f"unterminated string literal in '{text}'", line)
    parts.append("".join(current))
    return parts


def _split_assignment(text: str, line: int) -> Tuple[str, str]:
    pieces = split_top_level(text, "=", line)
    if len(pieces) == 1:
        return text.strip(), ""
    return pieces[0].strip(), "=".join(pieces[1:]).strip()


def _parse_argument(text: str, line: int) -> Argument:
    declarator, default_value = _split_assignment(text, line)
    match = _DECLARATOR_PATTERN.match(declarator)
    if not match or not match.group(1).strip():
        raise AttributeParseError(f"cannot parse argument '{text.strip()}'", line)
    return Argument(
        name=match.group(2),
        type=parse_type(match.group(1)),
        default_value=default_value,
    )


def _collect_declaration(lines: Sequence[str], start: int) -> str:
    collected: List[str] = []
    for offset, raw in enumerate(lines[start : start + _MAX_DECLARATION_LINES]):
        if _ATTRIBUTE_PATTERN.match(raw):
            break
        stripped = _strip_line_comment(raw)
        if not stripped.strip() and not collected:
            continue
        collected.append(stripped)
        text = _BLOCK_COMMENT_PATTERN.sub(" ", "\n".join(collected))
        end = _find_declaration_end(text)
        if end != -1:
            return " ".join(text[:end].split())
    raise AttributeParseError("no function declaration follows the attribute", start + 1)


def _find_declaration_end(text: str) -> int:
    quote: Optional[str] = None
    escape = False
    for index, ch in enumerate(text):
        if quote is not None:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == quote:
                quote = None
            continue
        if ch in {'"', "'"}:
            quote = ch
        elif ch in {"{", ";"}:
            return index
    return -1


def _find_matching(text: str, open_index: int, line: int) -> int:
    depth = 0
    quote: Optional[str] = None
    escape = False
    for index in range(open_index, len(text)):
        ch = text[index]
        if quote is not None:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == quote:
                quote = None
            continue
        if ch in {'"', "'"}:
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return index
    raise AttributeParseError("unbalanced parentheses in function declaration", line)


def _strip_line_comment(line: str) -> str:
    quote: Optional[str] = None
    escape = False
    for index, ch in enumerate(line):
        if quote is not None:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == quote:
                quote = None
            continue
        if ch in {'"', "'"}:
            quote = ch
        elif line.startswith("//", index):
            return line[:index]
    return line


__all__ = [
    "AttributeParseError",
    "SourceFileAttributesParser",
    "parse_function",
    "parse_params",
    "parse_type",
    "split_top_level",
]
