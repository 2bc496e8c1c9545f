"""Haskell package helpers: overrideCabal and friends, in Python.

Like nixpkgs/pkgs/development/haskell-modules/lib.nix. A package is
described by an immutable BuildConfig (the arguments of its
mkDerivation call); the helpers in ``haskellpkgs.lib`` each return an
adjusted copy, and ``extract_build_inputs`` sorts its dependencies into
the sets the generic Haskell builder needs.
"""

from haskellpkgs.build_inputs import (
    BuildInputs,
    Phases,
    control_phases,
    extract_build_inputs,
    get_haskell_build_inputs,
)
from haskellpkgs.cabal import BuildConfig, override_cabal
from haskellpkgs.deps import (
    Dependency,
    DependencyKind,
    haskell_package,
    pkgconfig_package,
    system_library,
    tool,
)
from haskellpkgs.ghc import Ghc, GhcInfo, ghc_info
from haskellpkgs.overlays import package_source_overrides
from haskellpkgs.versions import compare_versions, version_older

__all__ = [
    "BuildConfig", "override_cabal",
    "Dependency", "DependencyKind",
    "haskell_package", "system_library", "pkgconfig_package", "tool",
    "Ghc", "GhcInfo", "ghc_info",
    "Phases", "BuildInputs",
    "control_phases", "extract_build_inputs", "get_haskell_build_inputs",
    "package_source_overrides",
    "compare_versions", "version_older",
]
