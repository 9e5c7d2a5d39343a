"""Generator for `R/RcppExports.R`, the R wrappers around `.Call`."""

from __future__ import annotations

from typing import Sequence

from ..defaults import generate_r_arg_list
from ..models import Interface, SourceFileAttributes
from ..registry import SignatureRegistry
from .base import GeneratedFile, join_path


class RExportsGenerator:
    """Writes one R function per export plus the C-callable load hook."""

    def __init__(
        self,
        package_dir: str,
        package: str,
        file_sep: str,
        registry: SignatureRegistry | None = None,
    ) -> None:
        self.package = package
        self.registry = registry or SignatureRegistry(package)
        self.has_cpp_interface = False
        self._file = GeneratedFile(join_path(file_sep, package_dir, "R", "RcppExports.R"), "#")

    @property
    def target_file(self) -> str:
        return self._file.target_file

    @property
    def code(self) -> str:
        return self._file.code

    def write_begin(self) -> None:
        pass

    def write_functions(self, attributes: SourceFileAttributes, verbose: bool = False) -> None:
        if attributes.has_interface(Interface.CPP):
            self.has_cpp_interface = True
        if not attributes.has_interface(Interface.R):
            return

        out = self._file
        package = self.package
        for attribute in attributes.exported_attributes():
            function = attribute.bound_function()

            for line in attribute.roxygen:
                out.writeln(line)

            call = f".Call('{package}_{function.name}', PACKAGE = '{package}'"
            call += "".join(f", {argument.name}" for argument in function.arguments)
            call += ")"
            if function.type.is_void():
                call = f"invisible({call})"

            out.writeln(f"{attribute.exported_name} <- function({generate_r_arg_list(function)}) {{")
            out.writeln(f"    {call}")
            out.writeln("}")
            out.writeln()

    def write_end(self) -> None:
        if not self.has_cpp_interface:
            return
        out = self._file
        out.writeln("# Register entry points for exported C++ functions")
        out.writeln("methods::setLoadAction(function(ns) {")
        out.writeln(
            f"    .Call('{self.registry.register_ccallable_name}', PACKAGE = '{self.package}')"
        )
        out.writeln("})")

    def commit(self, includes: Sequence[str] = ()) -> bool:
        return self._file.commit()

    def is_stale(self, includes: Sequence[str] = ()) -> bool:
        return self._file.differs()

    def remove(self) -> bool:
        return self._file.remove()


__all__ = ["RExportsGenerator"]
