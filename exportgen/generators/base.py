"""Shared contract and target-file handling for export generators."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from ..models import SourceFileAttributes

GENERATOR_LABEL = "Rcpp::compileAttributes"
GENERATOR_TOKEN = "10BE3573-1514-4C36-9D1C-5A225CD40393"


class OverwriteUnsafeError(FileExistsError):
    """Raised when a target exists but was not produced by a previous run."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"The file '{path}' already exists and was not generated by exportgen; "
            "refusing to overwrite it"
        )
        self.path = path


class GeneratedFileIOError(OSError):
    """Raised when a target file cannot be read, written or removed."""

    def __init__(self, path: str, detail: str = "") -> None:
        message = f"Error reading or writing '{path}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.path = path


class ExportsGenerator(Protocol):
    """Protocol implemented by every single-file export generator."""

    @property
    def target_file(self) -> str:
        """Path of the one file this generator owns."""

    def write_begin(self) -> None:
        """Emit content that precedes all per-file output."""

    def write_functions(self, attributes: SourceFileAttributes, verbose: bool = False) -> None:
        """Emit the content contributed by one scanned source file."""

    def write_end(self) -> None:
        """Emit content that follows all per-file output."""

    def commit(self, includes: Sequence[str] = ()) -> bool:
        """Write or remove the target; return True when the filesystem changed."""

    def is_stale(self, includes: Sequence[str] = ()) -> bool:
        """Return True when `commit` would touch the filesystem."""

    def remove(self) -> bool:
        """Delete the target; return True when a file was deleted."""


class GeneratedFile:
    """Owns one generated target: its previous contents and the pending buffer.

    Output is append-only for the lifetime of a run. Content reaches disk only
    through `commit`, and only when it differs from what is already there, so
    repeated runs over unchanged sources never touch the file.
    """

    def __init__(self, target_file: str, comment_prefix: str) -> None:
        self.target_file = target_file
        self.comment_prefix = comment_prefix
        self._path = Path(target_file)
        self._parts: List[str] = []
        self.existing_code = self._read_existing()
        if not self.is_safe_to_overwrite():
            raise OverwriteUnsafeError(target_file)

    def write(self, text: str) -> None:
        self._parts.append(text)

    def writeln(self, text: str = "") -> None:
        self._parts.append(f"{text}\n")

    @property
    def code(self) -> str:
        return "".join(self._parts)

    def exists(self) -> bool:
        return self._path.exists()

    def is_safe_to_overwrite(self) -> bool:
        return not self.existing_code or GENERATOR_TOKEN in self.existing_code

    def header(self) -> str:
        prefix = self.comment_prefix
        return (
            f"{prefix} This file was generated by {GENERATOR_LABEL}\n"
            f"{prefix} Generator token: {GENERATOR_TOKEN}\n\n"
        )

    def render(self, preamble: str = "") -> Optional[str]:
        """Return the full candidate content, or None when there is nothing to write."""
        code = self.code
        if not code and not self.exists():
            return None
        return self.header() + preamble + code

    def differs(self, preamble: str = "") -> bool:
        rendered = self.render(preamble)
        return rendered is not None and rendered != self.existing_code

    def commit(self, preamble: str = "") -> bool:
        rendered = self.render(preamble)
        if rendered is None or rendered == self.existing_code:
            return False
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(rendered, encoding="utf-8")
        except OSError as exc:
            raise GeneratedFileIOError(self.target_file, str(exc)) from exc
        self.existing_code = rendered
        return True

    def remove(self) -> bool:
        if not self.exists():
            return False
        try:
            self._path.unlink()
        except OSError as exc:
            raise GeneratedFileIOError(self.target_file, str(exc)) from exc
        self.existing_code = ""
        return True

    def _read_existing(self) -> str:
        if not self._path.exists():
            return ""
        try:
            return self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise GeneratedFileIOError(self.target_file, str(exc)) from exc


def join_path(file_sep: str, *parts: str) -> str:
    return file_sep.join(parts)


__all__ = [
    "ExportsGenerator",
    "GENERATOR_LABEL",
    "GENERATOR_TOKEN",
    "GeneratedFile",
    "GeneratedFileIOError",
    "OverwriteUnsafeError",
    "join_path",
]
