"""Sorting a Haskell package's build inputs into the sets the builder uses.

Like the mkDerivation helpers at the bottom of haskell-modules/lib.nix
(``controlPhases``, ``extractBuildInputs``). The generic Haskell builder
needs its ~20 dependency lists grouped two ways:

  - by who needs them: propagated (buildDepends, library and executable
    Haskell deps, which consumers of the package need too) versus other
    (everything needed only while building this package)
  - by what they are: Haskell libraries versus system inputs

Test and benchmark inputs only count when that phase runs, so the phase
flags are resolved first (control_phases), then the lists concatenated
in a fixed order. Order matters downstream (search paths, link order)
and is kept everywhere; nothing is deduplicated.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass

from haskellpkgs.cabal import BuildConfig
from haskellpkgs.deps import Dependency
from haskellpkgs.ghc import Ghc, ghc_info
from haskellpkgs.versions import version_older

log = logging.getLogger(__name__)

# Test suites are run by default only on compilers newer than this.
CHECK_MIN_GHC_VERSION = "7.4"


@dataclass(frozen=True)
class Phases:
    do_check: bool
    do_benchmark: bool


@dataclass(frozen=True)
class BuildInputs:
    """A package's build inputs, grouped.

    haskell_build_inputs and system_build_inputs partition
    propagated_build_inputs + other_build_inputs, each keeping the
    relative order of that concatenation.
    """

    haskell_build_inputs: tuple[Dependency, ...]
    system_build_inputs: tuple[Dependency, ...]
    propagated_build_inputs: tuple[Dependency, ...]
    other_build_inputs: tuple[Dependency, ...]
    all_pkgconfig_depends: tuple[Dependency, ...]


def control_phases(ghc: Ghc, config: BuildConfig) -> Phases:
    """Decide whether the test and benchmark phases run.

    A flag set in the config always wins. Otherwise tests run unless
    cross compiling or on an old compiler, and benchmarks don't run.
    """
    do_check = config.do_check
    if do_check is None:
        do_check = (not ghc_info(ghc).is_cross
                    and version_older(CHECK_MIN_GHC_VERSION, ghc.version))
    do_benchmark = config.do_benchmark
    if do_benchmark is None:
        do_benchmark = False
    return Phases(do_check=do_check, do_benchmark=do_benchmark)


def extract_build_inputs(ghc: Ghc, config: BuildConfig) -> BuildInputs:
    """Divide the build inputs of a package into useful sets."""
    info = ghc_info(ghc)
    phases = control_phases(ghc, config)
    c = config

    all_pkgconfig_depends = (
        c.pkgconfig_depends
        + c.library_pkgconfig_depends
        + c.executable_pkgconfig_depends
    )
    if phases.do_check:
        all_pkgconfig_depends += c.test_pkgconfig_depends
    if phases.do_benchmark:
        all_pkgconfig_depends += c.benchmark_pkgconfig_depends

    other = (
        c.setup_haskell_depends
        + c.extra_libraries
        + c.library_system_depends
        + c.executable_system_depends
        + all_pkgconfig_depends
    )
    if phases.do_check:
        other += (c.test_depends + c.test_haskell_depends
                  + c.test_system_depends + c.test_tool_depends)
    # ghcjs's hsc2hs calls out to the native hsc2hs
    if info.is_ghcjs:
        other += (info.native_ghc.dependency,)
    if phases.do_benchmark:
        other += (c.benchmark_depends + c.benchmark_haskell_depends
                  + c.benchmark_system_depends + c.benchmark_tool_depends)

    propagated = (
        c.build_depends
        + c.library_haskell_depends
        + c.executable_haskell_depends
    )

    haskell, system = [], []
    for dep in propagated + other:
        (haskell if dep.is_haskell_library else system).append(dep)

    log.debug(
        "%s: doCheck=%s doBenchmark=%s, %d haskell / %d system inputs",
        c.pname or c.name, phases.do_check, phases.do_benchmark,
        len(haskell), len(system),
    )
    return BuildInputs(
        haskell_build_inputs=tuple(haskell),
        system_build_inputs=tuple(system),
        propagated_build_inputs=propagated,
        other_build_inputs=other,
        all_pkgconfig_depends=all_pkgconfig_depends,
    )


def get_haskell_build_inputs(ghc: Ghc, config: BuildConfig) -> tuple[Dependency, ...]:
    """The Haskell libraries a package is built against.

    Useful for building a development environment for the package.
    """
    return extract_build_inputs(ghc, config).haskell_build_inputs
