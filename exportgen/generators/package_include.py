"""Generator for `inst/include/<pkg>.h`, the package umbrella header."""

from __future__ import annotations

from typing import Sequence

from ..models import Interface, SourceFileAttributes
from .base import GeneratedFile, join_path
from .cpp_include import RCPP_EXPORTS_SUFFIX


class CppPackageIncludeGenerator:
    """Writes a guarded header that pulls in the package's C++ interface."""

    def __init__(self, package_dir: str, package: str, file_sep: str) -> None:
        self.package = package
        self.has_cpp_interface = False
        self.include_dir = join_path(file_sep, package_dir, "inst", "include")
        self._file = GeneratedFile(join_path(file_sep, self.include_dir, f"{package}.h"), "//")

    @property
    def target_file(self) -> str:
        return self._file.target_file

    @property
    def header_guard(self) -> str:
        return f"__{self.package}_h__"

    def write_begin(self) -> None:
        pass

    def write_functions(self, attributes: SourceFileAttributes, verbose: bool = False) -> None:
        if attributes.has_interface(Interface.CPP):
            self.has_cpp_interface = True

    def write_end(self) -> None:
        if not self.has_cpp_interface:
            return
        guard = self.header_guard
        out = self._file
        out.writeln(f"#ifndef {guard}")
        out.writeln(f"#define {guard}")
        out.writeln()
        out.writeln(f'#include "{self.package}{RCPP_EXPORTS_SUFFIX}"')
        out.writeln()
        out.writeln(f"#endif // {guard}")

    def commit(self, includes: Sequence[str] = ()) -> bool:
        if self.has_cpp_interface:
            return self._file.commit()
        return self._file.remove()

    def is_stale(self, includes: Sequence[str] = ()) -> bool:
        if self.has_cpp_interface:
            return self._file.differs()
        return self._file.exists()

    def remove(self) -> bool:
        return self._file.remove()


__all__ = ["CppPackageIncludeGenerator"]
