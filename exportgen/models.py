"""Core data models shared across exportgen components."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Iterator, Optional, Tuple

EXPORT_ATTRIBUTE = "Rcpp::export"
INTERFACES_ATTRIBUTE = "Rcpp::interfaces"


class Interface(str, Enum):
    """Export surfaces a source file can offer."""

    R = "r"
    CPP = "cpp"


@dataclass(frozen=True)
class Type:
    """A C++ type reference as written in a declaration."""

    name: str
    is_const: bool = field(default=False, compare=False)
    is_reference: bool = field(default=False, compare=False)

    @property
    def full_name(self) -> str:
        prefix = "const " if self.is_const else ""
        suffix = "&" if self.is_reference else ""
        return f"{prefix}{self.name}{suffix}"

    def is_void(self) -> bool:
        return self.name == "void"

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class Argument:
    """A single formal parameter of an exported function."""

    name: str
    type: Type
    default_value: str = ""

    def __str__(self) -> str:
        text = f"{self.type.full_name} {self.name}"
        if self.default_value:
            text += f" = {self.default_value}"
        return text


@dataclass(frozen=True)
class Function:
    """A parsed C++ function declaration."""

    type: Type
    name: str
    arguments: Tuple[Argument, ...] = ()

    def renamed_to(self, name: str) -> "Function":
        """Return a copy of this function carrying a different name."""
        return replace(self, name=name)

    def is_hidden(self) -> bool:
        return self.name.startswith(".")

    def signature(self, name: Optional[str] = None) -> str:
        """Return the canonical key used to validate cross-package calls."""
        arg_types = ",".join(argument.type.full_name for argument in self.arguments)
        return f"{self.type.full_name}(*{name or self.name})({arg_types})"

    def __str__(self) -> str:
        args = ", ".join(str(argument) for argument in self.arguments)
        return f"{self.type.full_name} {self.name}({args})"


@dataclass(frozen=True)
class Param:
    """A `name` or `name = value` entry inside an attribute call."""

    name: str
    value: str = ""


@dataclass(frozen=True)
class Attribute:
    """A `// [[...]]` attribute and the declaration it is bound to."""

    name: str
    params: Tuple[Param, ...] = ()
    function: Optional[Function] = None
    roxygen: Tuple[str, ...] = ()

    def is_exported_function(self) -> bool:
        return self.name == EXPORT_ATTRIBUTE and self.function is not None

    def bound_function(self) -> Function:
        """Return the declaration this attribute annotates."""
        if self.function is None:
            raise ValueError(f"Attribute {self.name} is not bound to a function")
        return self.function

    def param(self, name: str) -> Optional[Param]:
        for param in self.params:
            if param.name == name:
                return param
        return None

    @property
    def exported_name(self) -> str:
        named = self.param("name")
        if named is not None and named.value:
            return unquote(named.value)
        if self.params and not self.params[0].value:
            return unquote(self.params[0].name)
        return self.function.name if self.function is not None else ""


@dataclass(frozen=True)
class SourceFileAttributes:
    """All attributes discovered in a single source file, in declaration order."""

    source_file: str
    attributes: Tuple[Attribute, ...] = ()
    interfaces: FrozenSet[Interface] = frozenset()

    def has_interface(self, interface: Interface) -> bool:
        # Files without an interfaces attribute only offer the R interface.
        if not self.interfaces:
            return interface is Interface.R
        return interface in self.interfaces

    def exported_attributes(self) -> Iterator[Attribute]:
        return (attribute for attribute in self.attributes if attribute.is_exported_function())

    def is_empty(self) -> bool:
        return not self.attributes

    def __iter__(self) -> Iterator[Attribute]:
        return iter(self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)


def unquote(value: str) -> str:
    """Strip one pair of matching single or double quotes."""
    if len(value) >= 2 and value[0] in {'"', "'"} and value[-1] == value[0]:
        return value[1:-1]
    return value


__all__ = [
    "EXPORT_ATTRIBUTE",
    "INTERFACES_ATTRIBUTE",
    "Argument",
    "Attribute",
    "Function",
    "Interface",
    "Param",
    "SourceFileAttributes",
    "Type",
    "unquote",
]
