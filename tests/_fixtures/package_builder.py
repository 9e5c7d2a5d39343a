"""Helper utilities for constructing temporary R packages in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping


class PackageBuilder:
    """Utility for writing files into a throwaway R package."""

    def __init__(self, tmp_path: Path, package: str = "demo") -> None:
        self.root = tmp_path / package
        self.root.mkdir()
        self.package = package
        self.write({"DESCRIPTION": f"Package: {package}\nVersion: 0.1.0\n"})

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the package."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def read(self, relative: str) -> str:
        return (self.root / relative).read_text(encoding="utf-8")

    def exists(self, relative: str) -> bool:
        return (self.root / relative).exists()

    def target(self, relative: str) -> str:
        """Return the generator target string for a package-relative path."""
        return "/".join([str(self.root), relative])

    def path(self) -> Path:
        """Return the package root path."""
        return self.root


__all__ = ["PackageBuilder"]
