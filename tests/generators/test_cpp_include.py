"""Tests for the C++ interface header generators."""

from __future__ import annotations

from pathlib import Path

from exportgen.generators.base import GENERATOR_TOKEN
from exportgen.generators.cpp_exports import CppExportsGenerator
from exportgen.generators.cpp_include import CppExportsIncludeGenerator
from exportgen.generators.package_include import CppPackageIncludeGenerator
from exportgen.registry import SignatureRegistry

from tests._fixtures.sources import sample_attributes


def _include_generator(tmp_path: Path, registry: SignatureRegistry | None = None) -> CppExportsIncludeGenerator:
    return CppExportsIncludeGenerator(str(tmp_path), "demo", "/", registry or SignatureRegistry("demo"))


def test_write_begin_emits_validation_helper(tmp_path: Path) -> None:
    generator = _include_generator(tmp_path)
    generator.write_begin()
    code = generator.code

    assert code.startswith("namespace demo {\n\n    using namespace Rcpp;\n\n    namespace {\n")
    assert '            require("demo", Rcpp::Named("quietly") = true);\n' in code
    assert '                R_GetCCallable("demo", "demo_RcppExport_validate");\n' in code
    assert "throw Rcpp::function_not_exported(" in code
    assert "\"' not found in demo\");" in code


def test_forwarders_skip_hidden_functions(tmp_path: Path) -> None:
    generator = _include_generator(tmp_path)
    generator.write_functions(sample_attributes())
    code = generator.code

    assert "    inline NumericVector timesTwo(NumericVector x) {\n" in code
    assert "        typedef SEXP(*Ptr_timesTwo)(SEXP);\n" in code
    assert "        static Ptr_timesTwo p_timesTwo = NULL;\n" in code
    assert '            validateSignature("NumericVector(*timesTwo)(NumericVector)");\n' in code
    assert '            p_timesTwo = (Ptr_timesTwo)R_GetCCallable("demo", "demo_timesTwo");\n' in code
    assert "        SEXP resultSEXP = p_timesTwo(Rcpp::wrap(x));\n" in code
    assert "        return Rcpp::as<NumericVector >(resultSEXP);\n" in code

    assert "    inline void logMessage(const std::string& msg, bool loud = false) {\n" in code
    assert "        typedef SEXP(*Ptr_logMessage)(SEXP,SEXP);\n" in code
    assert "        p_logMessage(Rcpp::wrap(msg), Rcpp::wrap(loud));\n" in code

    assert "helper" not in code.lower()


def test_forwarders_require_cpp_interface(tmp_path: Path) -> None:
    generator = _include_generator(tmp_path)
    generator.write_functions(sample_attributes(interfaces=frozenset()))
    assert generator.code == ""
    assert not generator.has_cpp_interface


def test_signatures_match_between_shims_and_header(tmp_path: Path) -> None:
    registry = SignatureRegistry("demo")
    shims = CppExportsGenerator(str(tmp_path), "demo", "/", registry)
    header = _include_generator(tmp_path, registry)
    attributes = sample_attributes()
    for generator in (shims, header):
        generator.write_functions(attributes)
    shims.write_end()

    assert registry.signatures()
    for signature in registry.signatures():
        assert f'signatures.insert("{signature}");' in shims.code
        assert f'validateSignature("{signature}");' in header.code


def test_commit_wraps_in_header_guard(tmp_path: Path) -> None:
    generator = _include_generator(tmp_path)
    generator.write_begin()
    generator.write_functions(sample_attributes())
    generator.write_end()

    assert generator.commit(["#include <Rcpp.h>"]) is True
    target = tmp_path / "inst" / "include" / "demo_RcppExports.h"
    content = target.read_text(encoding="utf-8")
    assert "#ifndef __demo_RcppExports_h__\n#define __demo_RcppExports_h__\n\n#include <Rcpp.h>\n\nnamespace demo {" in content
    assert content.endswith("}\n\n#endif // __demo_RcppExports_h__\n")


def test_commit_removes_header_without_cpp_interface(tmp_path: Path) -> None:
    target = tmp_path / "inst" / "include" / "demo_RcppExports.h"
    target.parent.mkdir(parents=True)
    target.write_text(f"// Generator token: {GENERATOR_TOKEN}\n", encoding="utf-8")

    generator = _include_generator(tmp_path)
    generator.write_begin()
    generator.write_functions(sample_attributes(interfaces=frozenset()))
    generator.write_end()

    assert generator.is_stale()
    assert generator.commit() is True
    assert not target.exists()
    assert generator.is_stale() is False


def test_package_include_references_exports_header(tmp_path: Path) -> None:
    generator = CppPackageIncludeGenerator(str(tmp_path), "demo", "/")
    generator.write_begin()
    generator.write_functions(sample_attributes())
    generator.write_end()

    assert generator.commit(["#include <ignored.h>"]) is True
    content = (tmp_path / "inst" / "include" / "demo.h").read_text(encoding="utf-8")
    assert content.endswith(
        "#ifndef __demo_h__\n#define __demo_h__\n\n"
        '#include "demo_RcppExports.h"\n\n'
        "#endif // __demo_h__\n"
    )
    assert "ignored" not in content


def test_package_include_is_noop_without_cpp_interface(tmp_path: Path) -> None:
    generator = CppPackageIncludeGenerator(str(tmp_path), "demo", "/")
    generator.write_functions(sample_attributes(interfaces=frozenset()))
    generator.write_end()

    assert generator.commit() is False
    assert not (tmp_path / "inst").exists()
