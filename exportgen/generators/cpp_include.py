"""Generator for `inst/include/<pkg>_RcppExports.h`, the inline C++ interface."""

from __future__ import annotations

from typing import Sequence

from ..models import Interface, SourceFileAttributes
from ..registry import SignatureRegistry
from .base import GeneratedFile, join_path

RCPP_EXPORTS_SUFFIX = "_RcppExports.h"


class CppExportsIncludeGenerator:
    """Writes inline forwarders that resolve exports through `R_GetCCallable`.

    Every forwarder validates its signature against the exporting package
    before the first call, so a client compiled against an outdated header
    gets `Rcpp::function_not_exported` rather than undefined behaviour.
    """

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
        self.include_dir = join_path(file_sep, package_dir, "inst", "include")
        self._file = GeneratedFile(
            join_path(file_sep, self.include_dir, package + RCPP_EXPORTS_SUFFIX), "//"
        )

    @property
    def target_file(self) -> str:
        return self._file.target_file

    @property
    def code(self) -> str:
        return self._file.code

    @property
    def header_guard(self) -> str:
        return f"__{self.package}_RcppExports_h__"

    def _get_ccallable(self, name: str) -> str:
        return f'R_GetCCallable("{self.package}", "{name}")'

    def write_begin(self) -> None:
        out = self._file
        package = self.package
        out.writeln(f"namespace {package} {{")
        out.writeln()
        out.writeln("    using namespace Rcpp;")
        out.writeln()
        # Anonymous namespace gives the helper per-translation-unit linkage.
        out.writeln("    namespace {")
        out.writeln("        void validateSignature(const char* sig) {")
        out.writeln('            Rcpp::Function require = Rcpp::Environment::base_env()["require"];')
        out.writeln(f'            require("{package}", Rcpp::Named("quietly") = true);')
        out.writeln("            typedef int(*Ptr_validate)(const char*);")
        out.writeln("            static Ptr_validate p_validate = (Ptr_validate)")
        out.writeln(
            f"                {self._get_ccallable(self.registry.validation_function_registered_name)};"
        )
        out.writeln("            if (!p_validate(sig)) {")
        out.writeln("                throw Rcpp::function_not_exported(")
        out.writeln(
            "                    \"C++ function with signature '\" + std::string(sig) + "
            f"\"' not found in {package}\");"
        )
        out.writeln("            }")
        out.writeln("        }")
        out.writeln("    }")
        out.writeln()

    def write_functions(self, attributes: SourceFileAttributes, verbose: bool = False) -> None:
        if not attributes.has_interface(Interface.CPP):
            return
        self.has_cpp_interface = True

        out = self._file
        for attribute in attributes.exported_attributes():
            function = self.registry.exported_function(attribute)
            if function.is_hidden():
                continue

            fn_type = f"Ptr_{function.name}"
            ptr_name = f"p_{function.name}"
            sexp_params = ",".join("SEXP" for _ in function.arguments)
            wrapped_args = ", ".join(f"Rcpp::wrap({argument.name})" for argument in function.arguments)

            out.writeln(f"    inline {function} {{")
            out.writeln(f"        typedef SEXP(*{fn_type})({sexp_params});")
            out.writeln(f"        static {fn_type} {ptr_name} = NULL;")
            out.writeln(f"        if ({ptr_name} == NULL) {{")
            out.writeln(f'            validateSignature("{self.registry.signature_of(attribute)}");')
            out.writeln(
                f"            {ptr_name} = ({fn_type}){self._get_ccallable(self.registry.callable_name(function.name))};"
            )
            out.writeln("        }")
            if function.type.is_void():
                out.writeln(f"        {ptr_name}({wrapped_args});")
            else:
                out.writeln(f"        SEXP resultSEXP = {ptr_name}({wrapped_args});")
                out.writeln(f"        return Rcpp::as<{function.type.full_name} >(resultSEXP);")
            out.writeln("    }")
            out.writeln()

    def write_end(self) -> None:
        self._file.writeln("}")
        self._file.writeln()
        self._file.writeln(f"#endif // {self.header_guard}")

    def _preamble(self, includes: Sequence[str]) -> str:
        guard = self.header_guard
        preamble = f"#ifndef {guard}\n#define {guard}\n\n"
        if includes:
            preamble += "".join(f"{line}\n" for line in includes) + "\n"
        return preamble

    def commit(self, includes: Sequence[str] = ()) -> bool:
        if self.has_cpp_interface:
            return self._file.commit(self._preamble(includes))
        return self._file.remove()

    def is_stale(self, includes: Sequence[str] = ()) -> bool:
        if self.has_cpp_interface:
            return self._file.differs(self._preamble(includes))
        return self._file.exists()

    def remove(self) -> bool:
        return self._file.remove()


__all__ = ["CppExportsIncludeGenerator", "RCPP_EXPORTS_SUFFIX"]
