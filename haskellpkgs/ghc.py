"""The compiler a Haskell package set is built with.

Like ``ghcInfo`` in nixpkgs/pkgs/development/haskell-modules/lib.nix.
Cross compilers and GHCJS cannot run their own tools on the build
machine, so they carry the boot compiler (``ghc.bootPkgs.ghc``) that
does.
"""

from __future__ import annotations
from dataclasses import dataclass

from haskellpkgs.deps import Dependency, tool


@dataclass(frozen=True)
class Ghc:
    """A GHC (or GHCJS) compiler.

    Args:
        version:  Compiler version, e.g. "9.6.6".
        name:     Package name of the compiler ("ghc", "ghcjs").
        cross:    Target triple when cross compiling, else None.
        is_ghcjs: True for the JavaScript backend.
        boot_ghc: Native compiler used for build-time tools.
    """

    version: str
    name: str = "ghc"
    cross: str | None = None
    is_ghcjs: bool = False
    boot_ghc: Ghc | None = None

    @property
    def dependency(self) -> Dependency:
        """This compiler as a build input."""
        return tool(self.name, self.version)


@dataclass(frozen=True)
class GhcInfo:
    """How a compiler relates to the build machine.

    native_ghc is the compiler itself unless it cross compiles or
    targets JavaScript, in which case it is the boot compiler. It is
    only looked up when asked for, so a cross compiler without a boot
    compiler is still usable for everything else.
    """

    ghc: Ghc

    @property
    def is_cross(self) -> bool:
        return self.ghc.cross is not None

    @property
    def is_ghcjs(self) -> bool:
        return self.ghc.is_ghcjs

    @property
    def native_ghc(self) -> Ghc:
        if not (self.is_cross or self.is_ghcjs):
            return self.ghc
        if self.ghc.boot_ghc is None:
            raise ValueError(
                f"{self.ghc.name}-{self.ghc.version} has no boot compiler "
                f"(needed for native build tools)"
            )
        return self.ghc.boot_ghc


def ghc_info(ghc: Ghc) -> GhcInfo:
    return GhcInfo(ghc)
