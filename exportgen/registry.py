"""Registry of C++-callable exports and the names used to validate them."""

from __future__ import annotations

from typing import List

from .models import Attribute, Function

VALIDATION_FUNCTION = "RcppExport_validate"
REGISTER_CCALLABLE_FUNCTION = "RcppExport_registerCCallable"


class SignatureRegistry:
    """Collects the exports other packages may call through `R_GetCCallable`.

    One registry is shared by every generator of a run. The call-shim
    generator records exports into it and emits the signature set and the
    registration routine from it; the re-export header generator asks it for
    the same signature strings and symbol names, so both files always agree.
    """

    def __init__(self, package: str) -> None:
        self.package = package
        self._exports: List[Attribute] = []

    @property
    def validation_function(self) -> str:
        return VALIDATION_FUNCTION

    @property
    def validation_function_registered_name(self) -> str:
        return self.callable_name(VALIDATION_FUNCTION)

    @property
    def register_ccallable_name(self) -> str:
        return self.callable_name(REGISTER_CCALLABLE_FUNCTION)

    def callable_name(self, name: str) -> str:
        return f"{self.package}_{name}"

    @staticmethod
    def exported_function(attribute: Attribute) -> Function:
        """Return the attribute's function renamed to its exported name."""
        return attribute.bound_function().renamed_to(attribute.exported_name)

    def signature_of(self, attribute: Attribute) -> str:
        return self.exported_function(attribute).signature()

    def record(self, attribute: Attribute) -> bool:
        """Remember an exported attribute; hidden functions are skipped."""
        if not attribute.is_exported_function():
            return False
        if self.exported_function(attribute).is_hidden():
            return False
        self._exports.append(attribute)
        return True

    @property
    def exports(self) -> List[Attribute]:
        return list(self._exports)

    def signatures(self) -> List[str]:
        return [self.signature_of(attribute) for attribute in self._exports]

    def __len__(self) -> int:
        return len(self._exports)


__all__ = ["REGISTER_CCALLABLE_FUNCTION", "SignatureRegistry", "VALIDATION_FUNCTION"]
