"""Generator for `src/RcppExports.cpp`, the SEXP call shims of every export."""

from __future__ import annotations

from typing import List, Sequence

from ..logging import get_logger
from ..models import Interface, SourceFileAttributes
from ..registry import SignatureRegistry
from .base import GeneratedFile, join_path

_logger = get_logger("generators.cpp_exports")


def generate_cpp(
    attributes: SourceFileAttributes,
    *,
    include_prototype: bool = True,
    context_id: str = "",
) -> str:
    """Render one `RcppExport SEXP` shim per exported function of a file.

    Each shim unboxes its `SEXP` arguments with `Rcpp::as`, calls the real
    function and boxes the result with `Rcpp::wrap` (or returns `R_NilValue`
    for void functions).
    """
    lines: List[str] = []
    for attribute in attributes.exported_attributes():
        function = attribute.bound_function()
        arguments = function.arguments

        head = ""
        if include_prototype:
            head = f"// {function.name}\n{function};"
        shim_name = f"{context_id}_{function.name}" if context_id else function.name
        params = ", ".join(f"SEXP {argument.name}SEXP" for argument in arguments)
        lines.append(f"{head}\nRcppExport SEXP {shim_name}({params}) {{")
        lines.append("BEGIN_RCPP")
        for argument in arguments:
            type_name = argument.type.name
            lines.append(
                f"    {type_name} {argument.name} = Rcpp::as<{type_name} >({argument.name}SEXP);"
            )
        call = f"{function.name}({', '.join(argument.name for argument in arguments)});"
        if function.type.is_void():
            lines.append(f"    {call}")
            lines.append("    return R_NilValue;")
        else:
            lines.append(f"    {function.type.full_name} result = {call}")
            lines.append("    return Rcpp::wrap(result);")
        lines.append("END_RCPP")
        lines.append("}")
    return "".join(f"{line}\n" for line in lines)


class CppExportsGenerator:
    """Writes the C-callable shims plus the validate/register entry points."""

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
        self._file = GeneratedFile(
            join_path(file_sep, package_dir, "src", "RcppExports.cpp"), "//"
        )

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

        self._file.write(generate_cpp(attributes, context_id=self.package))

        if attributes.has_interface(Interface.CPP):
            for attribute in attributes.exported_attributes():
                self.registry.record(attribute)

        if verbose:
            _logger.info("Exports from %s:", attributes.source_file)
            for attribute in attributes.exported_attributes():
                _logger.info("   %s", attribute.function)

    def write_end(self) -> None:
        if not self.has_cpp_interface:
            return
        registry = self.registry
        out = self._file

        # Signature set consulted by validateSignature in the interface header.
        out.writeln()
        out.writeln("// validate (ensure exported C++ functions exist before calling them)")
        out.writeln(
            f"static int {registry.validation_function_registered_name}(const char* sig) {{ "
        )
        out.writeln("    static std::set<std::string> signatures;")
        out.writeln("    if (signatures.empty()) {")
        for signature in registry.signatures():
            out.writeln(f'        signatures.insert("{signature}");')
        out.writeln("    }")
        out.writeln("    return signatures.find(sig) != signatures.end();")
        out.writeln("}")

        out.writeln()
        out.writeln("// registerCCallable (register entry points for exported C++ functions)")
        out.writeln(f"RcppExport SEXP {registry.register_ccallable_name}() {{ ")
        for attribute in registry.exports:
            out.writeln(
                self._register_ccallable(attribute.exported_name, attribute.bound_function().name)
            )
        out.writeln(
            self._register_ccallable(registry.validation_function, registry.validation_function)
        )
        out.writeln("    return R_NilValue;")
        out.writeln("}")

    def _register_ccallable(self, exported_name: str, name: str, indent: int = 4) -> str:
        package = self.package
        return (
            f'{" " * indent}R_RegisterCCallable("{package}", '
            f'"{self.registry.callable_name(exported_name)}", '
            f"(DL_FUNC){package}_{name});"
        )

    def _preamble(self, includes: Sequence[str]) -> str:
        lines = list(includes)
        lines.extend(["#include <string>", "#include <set>", "", "using namespace Rcpp;", ""])
        return "".join(f"{line}\n" for line in lines)

    def commit(self, includes: Sequence[str] = ()) -> bool:
        return self._file.commit(self._preamble(includes))

    def is_stale(self, includes: Sequence[str] = ()) -> bool:
        return self._file.differs(self._preamble(includes))

    def remove(self) -> bool:
        return self._file.remove()


__all__ = ["CppExportsGenerator", "generate_cpp"]
