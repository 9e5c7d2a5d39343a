"""Tests for exportgen.generators.collection."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from exportgen.generators import (
    CppExportsGenerator,
    CppExportsIncludeGenerator,
    CppPackageIncludeGenerator,
    ExportsGenerators,
    RExportsGenerator,
)
from exportgen.models import Argument, Attribute, Function, Param, SourceFileAttributes, Type

from tests._fixtures.sources import sample_attributes


class RecordingGenerator:
    """Test double that records lifecycle calls into a shared journal."""

    def __init__(self, name: str, journal: List[str], *, changes: bool = True) -> None:
        self.name = name
        self.journal = journal
        self.changes = changes

    @property
    def target_file(self) -> str:
        return f"/tmp/{self.name}"

    def write_begin(self) -> None:
        self.journal.append(f"{self.name}:begin")

    def write_functions(self, attributes: SourceFileAttributes, verbose: bool = False) -> None:
        self.journal.append(f"{self.name}:functions:{attributes.source_file}")

    def write_end(self) -> None:
        self.journal.append(f"{self.name}:end")

    def commit(self, includes: Sequence[str] = ()) -> bool:
        self.journal.append(f"{self.name}:commit:{len(includes)}")
        return self.changes

    def is_stale(self, includes: Sequence[str] = ()) -> bool:
        return self.changes

    def remove(self) -> bool:
        self.journal.append(f"{self.name}:remove")
        return self.changes


def test_broadcasts_in_insertion_order() -> None:
    journal: List[str] = []
    generators = ExportsGenerators([RecordingGenerator("a", journal)])
    generators.add(RecordingGenerator("b", journal, changes=False))

    generators.write_begin()
    generators.write_functions(SourceFileAttributes(source_file="one.cpp"))
    generators.write_functions(SourceFileAttributes(source_file="two.cpp"))
    generators.write_end()
    updated = generators.commit(["#include <Rcpp.h>"])

    assert journal == [
        "a:begin",
        "b:begin",
        "a:functions:one.cpp",
        "b:functions:one.cpp",
        "a:functions:two.cpp",
        "b:functions:two.cpp",
        "a:end",
        "b:end",
        "a:commit:1",
        "b:commit:1",
    ]
    assert updated == ["/tmp/a"]
    assert generators.stale() == ["/tmp/a"]
    assert len(generators) == 2


def test_remove_reports_deleted_targets() -> None:
    journal: List[str] = []
    generators = ExportsGenerators(
        [RecordingGenerator("a", journal, changes=False), RecordingGenerator("b", journal)]
    )
    assert generators.remove() == ["/tmp/b"]
    assert journal == ["a:remove", "b:remove"]


def test_for_package_builds_standard_generators(tmp_path: Path) -> None:
    generators = ExportsGenerators.for_package(str(tmp_path), "demo", "/")
    kinds = [type(generator) for generator in generators]
    assert kinds == [
        CppExportsGenerator,
        CppExportsIncludeGenerator,
        CppPackageIncludeGenerator,
        RExportsGenerator,
    ]
    registries = {id(generator.registry) for generator in generators if hasattr(generator, "registry")}
    assert len(registries) == 1
    assert [generator.target_file for generator in generators] == [
        f"{tmp_path}/src/RcppExports.cpp",
        f"{tmp_path}/inst/include/demo_RcppExports.h",
        f"{tmp_path}/inst/include/demo.h",
        f"{tmp_path}/R/RcppExports.R",
    ]


def test_full_lifecycle_is_idempotent(tmp_path: Path) -> None:
    def run() -> List[str]:
        generators = ExportsGenerators.for_package(str(tmp_path), "demo", "/")
        generators.write_begin()
        generators.write_functions(sample_attributes())
        generators.write_end()
        return generators.commit(["#include <Rcpp.h>"])

    assert len(run()) == 4
    assert run() == []


def test_non_export_attributes_reach_no_artifact(tmp_path: Path) -> None:
    unexported = Function(Type("int"), "secretHelper", (Argument("x", Type("int")),))
    attributes = SourceFileAttributes(
        source_file="src/sample.cpp",
        attributes=(
            Attribute("Rcpp::depends", params=(Param("RcppArmadillo"),), function=unexported),
            *sample_attributes().attributes,
        ),
        interfaces=sample_attributes().interfaces,
    )
    generators = ExportsGenerators.for_package(str(tmp_path), "demo", "/")
    generators.write_begin()
    generators.write_functions(attributes)
    generators.write_end()

    written = generators.commit(["#include <Rcpp.h>"])

    assert len(written) == 4
    for target in written:
        assert "secretHelper" not in Path(target).read_text(encoding="utf-8"), target
