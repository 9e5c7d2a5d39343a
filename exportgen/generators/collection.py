"""Composite that drives a set of export generators through one run."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence

from ..models import SourceFileAttributes
from ..registry import SignatureRegistry
from .base import ExportsGenerator
from .cpp_exports import CppExportsGenerator
from .cpp_include import CppExportsIncludeGenerator
from .package_include import CppPackageIncludeGenerator
from .r_exports import RExportsGenerator


class ExportsGenerators:
    """Broadcasts each lifecycle step to its generators in insertion order."""

    def __init__(self, generators: Iterable[ExportsGenerator] = ()) -> None:
        self._generators: List[ExportsGenerator] = list(generators)

    @classmethod
    def for_package(
        cls,
        package_dir: str,
        package: str,
        file_sep: str,
        registry: SignatureRegistry | None = None,
    ) -> "ExportsGenerators":
        """Build the standard generators around one shared signature registry."""
        registry = registry or SignatureRegistry(package)
        return cls(
            [
                CppExportsGenerator(package_dir, package, file_sep, registry),
                CppExportsIncludeGenerator(package_dir, package, file_sep, registry),
                CppPackageIncludeGenerator(package_dir, package, file_sep),
                RExportsGenerator(package_dir, package, file_sep, registry),
            ]
        )

    def add(self, generator: ExportsGenerator) -> None:
        self._generators.append(generator)

    def __iter__(self) -> Iterator[ExportsGenerator]:
        return iter(self._generators)

    def __len__(self) -> int:
        return len(self._generators)

    def write_begin(self) -> None:
        for generator in self._generators:
            generator.write_begin()

    def write_functions(self, attributes: SourceFileAttributes, verbose: bool = False) -> None:
        for generator in self._generators:
            generator.write_functions(attributes, verbose)

    def write_end(self) -> None:
        for generator in self._generators:
            generator.write_end()

    def commit(self, includes: Sequence[str] = ()) -> List[str]:
        """Commit every generator and return the targets that were written or deleted."""
        return [
            generator.target_file for generator in self._generators if generator.commit(includes)
        ]

    def stale(self, includes: Sequence[str] = ()) -> List[str]:
        """Return the targets a commit would write or delete, without touching disk."""
        return [
            generator.target_file for generator in self._generators if generator.is_stale(includes)
        ]

    def remove(self) -> List[str]:
        """Remove every target and return the ones that existed."""
        return [generator.target_file for generator in self._generators if generator.remove()]


__all__ = ["ExportsGenerators"]
