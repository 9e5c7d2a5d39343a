"""Export generators, one per generated artifact."""

from .base import (
    GENERATOR_TOKEN,
    ExportsGenerator,
    GeneratedFile,
    GeneratedFileIOError,
    OverwriteUnsafeError,
)
from .collection import ExportsGenerators
from .cpp_exports import CppExportsGenerator, generate_cpp
from .cpp_include import CppExportsIncludeGenerator
from .package_include import CppPackageIncludeGenerator
from .r_exports import RExportsGenerator

__all__ = [
    "GENERATOR_TOKEN",
    "CppExportsGenerator",
    "CppExportsIncludeGenerator",
    "CppPackageIncludeGenerator",
    "ExportsGenerator",
    "ExportsGenerators",
    "GeneratedFile",
    "GeneratedFileIOError",
    "OverwriteUnsafeError",
    "RExportsGenerator",
    "generate_cpp",
]
