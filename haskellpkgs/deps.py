"""Dependency handles for Haskell package builds.

A build input is either another Haskell library built by the same
package set, or something external: a system library, a pkg-config
package, or a build tool.

nixpkgs tells the two apart with a structural test on the derivation
(``x ? isHaskellLibrary``). Here the kind is fixed when the handle is
created and never inferred later::

    haskell_package("aeson", "2.2.3.0").is_haskell_library  # True
    pkgconfig_package("zlib").is_haskell_library            # False
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class DependencyKind(Enum):
    HASKELL_PACKAGE = "haskell-package"
    SYSTEM_LIBRARY = "system-library"
    PKGCONFIG_PACKAGE = "pkgconfig-package"
    TOOL = "tool"


@dataclass(frozen=True)
class Dependency:
    """An opaque reference to one build input.

    Equal handles compare equal, but nothing here deduplicates them:
    a handle listed twice stays listed twice.
    """

    name: str
    kind: DependencyKind
    version: str | None = None

    @property
    def is_haskell_library(self) -> bool:
        return self.kind is DependencyKind.HASKELL_PACKAGE

    def __str__(self) -> str:
        if self.version is None:
            return self.name
        return f"{self.name}-{self.version}"


def haskell_package(name: str, version: str | None = None) -> Dependency:
    return Dependency(name, DependencyKind.HASKELL_PACKAGE, version)


def system_library(name: str, version: str | None = None) -> Dependency:
    return Dependency(name, DependencyKind.SYSTEM_LIBRARY, version)


def pkgconfig_package(name: str, version: str | None = None) -> Dependency:
    return Dependency(name, DependencyKind.PKGCONFIG_PACKAGE, version)


def tool(name: str, version: str | None = None) -> Dependency:
    return Dependency(name, DependencyKind.TOOL, version)
