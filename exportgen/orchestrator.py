"""Pipeline orchestration for compiling attributes into export files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, List, Optional

from .config import ExportGenConfig, load_config
from .generators import ExportsGenerators
from .logging import get_logger
from .parser import SourceFileAttributesParser
from .registry import SignatureRegistry

_DESCRIPTION_FILE = "DESCRIPTION"
_EXPORTS_SOURCE = "RcppExports.cpp"


@dataclass
class CompileOutcome:
    """Result of a compile (or check) run."""

    updated: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    check: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.updated or self.removed)


class Orchestrator:
    """Scans a package's sources and drives the export generators."""

    def __init__(self, parser: SourceFileAttributesParser | None = None) -> None:
        self.parser = parser or SourceFileAttributesParser()
        self.logger = get_logger("orchestrator")

    def run_compile(
        self,
        path: str | Path,
        *,
        package: Optional[str] = None,
        file_sep: str = os.sep,
        verbose: bool = False,
        check: bool = False,
    ) -> CompileOutcome:
        """Regenerate every export file of the package rooted at `path`.

        With `check=True` nothing is written; the outcome lists the targets a
        real run would write (`updated`) or delete (`removed`).
        """
        package_dir = Path(path).expanduser()
        if not package_dir.is_dir():
            raise FileNotFoundError(f"Package directory not found: {package_dir}")

        config = load_config(package_dir)
        package_name = self._resolve_package_name(package_dir, package, config)
        self.logger.info("Compiling attributes for package %s in %s", package_name, package_dir)

        sources = self._discover_sources(package_dir, config)
        self.logger.debug("Discovered %d source files", len(sources))

        registry = SignatureRegistry(package_name)
        generators = ExportsGenerators.for_package(
            str(package_dir), package_name, file_sep, registry
        )
        generators.write_begin()

        have_attributes = False
        for source in sources:
            attributes = self.parser.parse(source)
            if attributes.is_empty():
                continue
            have_attributes = True
            generators.write_functions(attributes, verbose)

        includes = self._includes(package_dir, package_name, config)
        outcome = CompileOutcome(check=check)
        if have_attributes:
            generators.write_end()
            if check:
                outcome.updated = generators.stale(includes)
            else:
                # Generators whose interface disappeared delete their target on commit.
                changed = generators.commit(includes)
                outcome.updated = [target for target in changed if Path(target).exists()]
                outcome.removed = [target for target in changed if not Path(target).exists()]
        elif check:
            outcome.removed = [
                generator.target_file
                for generator in generators
                if Path(generator.target_file).exists()
            ]
        else:
            outcome.removed = generators.remove()

        for target in outcome.updated:
            self.logger.debug("Updated %s", target)
        for target in outcome.removed:
            self.logger.debug("Removed %s", target)
        self.logger.debug("Registered %d C++-callable exports", len(registry))
        return outcome

    def _resolve_package_name(
        self, package_dir: Path, package: Optional[str], config: ExportGenConfig
    ) -> str:
        if package:
            return package
        if config.package:
            return config.package
        description = read_description(package_dir / _DESCRIPTION_FILE)
        name = description.get("Package")
        if name:
            return name
        raise ValueError(
            f"Unable to determine the package name for {package_dir}: "
            "pass --package, set `package` in .exportgen.yml or add a DESCRIPTION file"
        )

    def _discover_sources(self, package_dir: Path, config: ExportGenConfig) -> List[Path]:
        src_dir = package_dir / "src"
        if not src_dir.is_dir():
            return []
        extensions = {ext.lower() for ext in config.source_extensions}
        sources: List[Path] = []
        for candidate in sorted(src_dir.iterdir(), key=lambda item: item.name):
            if not candidate.is_file():
                continue
            if candidate.suffix.lower() not in extensions:
                continue
            if candidate.name == _EXPORTS_SOURCE:
                continue
            rel_path = candidate.relative_to(package_dir).as_posix()
            if any(
                fnmatchcase(rel_path, pattern) or fnmatchcase(candidate.name, pattern)
                for pattern in config.exclude_paths
            ):
                self.logger.debug("Skipping excluded source %s", rel_path)
                continue
            sources.append(candidate)
        return sources

    def _includes(
        self, package_dir: Path, package: str, config: ExportGenConfig
    ) -> List[str]:
        includes = ["#include <Rcpp.h>"]
        types_header = f"{package}_types.h"
        if (package_dir / "inst" / "include" / types_header).exists():
            includes.append(f'#include "../inst/include/{types_header}"')
        elif (package_dir / "src" / types_header).exists():
            includes.append(f'#include "{types_header}"')
        includes.extend(config.includes)
        return includes


def read_description(path: Path) -> Dict[str, str]:
    """Parse the fields of a DCF-formatted R package DESCRIPTION file."""
    if not path.exists():
        return {}
    fields: Dict[str, str] = {}
    current: Optional[str] = None
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            current = None
            continue
        if line[0].isspace() and current is not None:
            fields[current] = f"{fields[current]} {line.strip()}".strip()
            continue
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        current = key.strip()
        fields[current] = value.strip()
    return fields


def compile_attributes(
    package_dir: str | Path,
    package: Optional[str] = None,
    file_sep: str = os.sep,
    verbose: bool = False,
    *,
    check: bool = False,
    orchestrator: Orchestrator | None = None,
) -> CompileOutcome:
    """Convenience wrapper around `Orchestrator.run_compile`."""
    runner = orchestrator or Orchestrator()
    return runner.run_compile(
        package_dir, package=package, file_sep=file_sep, verbose=verbose, check=check
    )


__all__ = ["CompileOutcome", "Orchestrator", "compile_attributes", "read_description"]
