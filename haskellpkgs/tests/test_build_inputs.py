"""Tests for control_phases and extract_build_inputs."""

import pytest

from haskellpkgs.build_inputs import (
    control_phases,
    extract_build_inputs,
    get_haskell_build_inputs,
)
from haskellpkgs.cabal import BuildConfig
from haskellpkgs.deps import haskell_package, pkgconfig_package, system_library, tool
from haskellpkgs.ghc import Ghc

GHC = Ghc(version="9.6.6")
OLD_GHC = Ghc(version="7.2.2")
BOOT_GHC = Ghc(version="9.4.8")
CROSS_GHC = Ghc(version="9.6.6", cross="aarch64-unknown-linux-gnu", boot_ghc=BOOT_GHC)
GHCJS = Ghc(version="8.10.7", name="ghcjs", is_ghcjs=True, boot_ghc=BOOT_GHC)

HSPEC = haskell_package("hspec")


def test_empty_config():
    """Nothing in, nothing out; tests on and benchmarks off by default."""
    phases = control_phases(GHC, BuildConfig())
    assert phases.do_check is True
    assert phases.do_benchmark is False

    inputs = extract_build_inputs(GHC, BuildConfig())
    assert inputs.haskell_build_inputs == ()
    assert inputs.system_build_inputs == ()
    assert inputs.propagated_build_inputs == ()
    assert inputs.other_build_inputs == ()
    assert inputs.all_pkgconfig_depends == ()


def test_test_depends_follow_do_check():
    cfg = BuildConfig(test_haskell_depends=[HSPEC])
    assert HSPEC in extract_build_inputs(GHC, cfg).other_build_inputs

    cfg = cfg.override(do_check=False)
    assert HSPEC not in extract_build_inputs(GHC, cfg).other_build_inputs


def test_benchmark_depends_follow_do_benchmark():
    criterion = haskell_package("criterion")
    cfg = BuildConfig(benchmark_haskell_depends=[criterion])
    assert criterion not in extract_build_inputs(GHC, cfg).other_build_inputs

    cfg = cfg.override(do_benchmark=True)
    assert criterion in extract_build_inputs(GHC, cfg).other_build_inputs


def test_cross_compiling_skips_tests_by_default():
    assert control_phases(CROSS_GHC, BuildConfig()).do_check is False
    cfg = BuildConfig(test_haskell_depends=[HSPEC])
    assert extract_build_inputs(CROSS_GHC, cfg).other_build_inputs == ()


def test_old_ghc_skips_tests_by_default():
    assert control_phases(OLD_GHC, BuildConfig()).do_check is False
    # only compilers strictly newer than 7.4 run tests
    assert control_phases(Ghc(version="7.4"), BuildConfig()).do_check is False
    assert control_phases(Ghc(version="7.4.1"), BuildConfig()).do_check is True


def test_explicit_do_check_wins():
    """An explicit flag beats both the cross and the version default."""
    assert control_phases(CROSS_GHC, BuildConfig(do_check=True)).do_check is True
    assert control_phases(OLD_GHC, BuildConfig(do_check=True)).do_check is True
    assert control_phases(GHC, BuildConfig(do_check=False)).do_check is False


def test_cross_without_boot_ghc():
    """The boot compiler is only needed for GHCJS."""
    ghc = Ghc(version="9.6.6", cross="x86_64-w64-mingw32")
    assert extract_build_inputs(ghc, BuildConfig()).other_build_inputs == ()


def test_stable_partition():
    a = haskell_package("a")
    b = system_library("b")
    c = haskell_package("c")
    inputs = extract_build_inputs(GHC, BuildConfig(build_depends=[a, b, c]))
    assert inputs.propagated_build_inputs == (a, b, c)
    assert inputs.haskell_build_inputs == (a, c)
    assert inputs.system_build_inputs == (b,)


def test_propagated_come_first():
    setup = haskell_package("Cabal")
    lib = haskell_package("text")
    cfg = BuildConfig(setup_haskell_depends=[setup], library_haskell_depends=[lib])
    assert extract_build_inputs(GHC, cfg).haskell_build_inputs == (lib, setup)


def test_ghcjs_adds_native_ghc():
    inputs = extract_build_inputs(GHCJS, BuildConfig())
    assert inputs.other_build_inputs == (BOOT_GHC.dependency,)
    assert inputs.system_build_inputs == (BOOT_GHC.dependency,)


def test_ghcjs_native_ghc_regardless_of_phases():
    for do_check in (True, False):
        for do_benchmark in (True, False):
            cfg = BuildConfig(do_check=do_check, do_benchmark=do_benchmark)
            inputs = extract_build_inputs(GHCJS, cfg)
            assert inputs.other_build_inputs.count(BOOT_GHC.dependency) == 1


def test_ghcjs_without_boot_ghc():
    ghcjs = Ghc(version="8.10.7", name="ghcjs", is_ghcjs=True)
    with pytest.raises(ValueError, match="boot compiler"):
        extract_build_inputs(ghcjs, BuildConfig())


def test_pkgconfig_depends_follow_phases():
    p, lp, ep, tp, bp = (pkgconfig_package(n) for n in ("p", "lp", "ep", "tp", "bp"))
    cfg = BuildConfig(
        pkgconfig_depends=[p],
        library_pkgconfig_depends=[lp],
        executable_pkgconfig_depends=[ep],
        test_pkgconfig_depends=[tp],
        benchmark_pkgconfig_depends=[bp],
    )
    assert extract_build_inputs(GHC, cfg).all_pkgconfig_depends == (p, lp, ep, tp)
    cfg = cfg.override(do_check=False, do_benchmark=True)
    assert extract_build_inputs(GHC, cfg).all_pkgconfig_depends == (p, lp, ep, bp)


def test_order_end_to_end():
    """Every list non-empty: other_build_inputs is the fixed concatenation."""
    d = {}
    fields = [
        "setup_haskell_depends", "extra_libraries", "library_system_depends",
        "executable_system_depends", "pkgconfig_depends",
        "library_pkgconfig_depends", "executable_pkgconfig_depends",
        "test_pkgconfig_depends", "benchmark_pkgconfig_depends",
        "test_depends", "test_haskell_depends", "test_system_depends",
        "test_tool_depends", "benchmark_depends", "benchmark_haskell_depends",
        "benchmark_system_depends", "benchmark_tool_depends", "build_depends",
        "library_haskell_depends", "executable_haskell_depends",
    ]
    for f in fields:
        d[f] = tool(f)
    # duplicates are kept
    cfg = BuildConfig(
        do_check=True,
        do_benchmark=True,
        **{f: [dep, dep] if f == "extra_libraries" else [dep] for f, dep in d.items()},
    )
    inputs = extract_build_inputs(GHCJS, cfg)

    assert inputs.other_build_inputs == (
        d["setup_haskell_depends"],
        d["extra_libraries"], d["extra_libraries"],
        d["library_system_depends"],
        d["executable_system_depends"],
        d["pkgconfig_depends"],
        d["library_pkgconfig_depends"],
        d["executable_pkgconfig_depends"],
        d["test_pkgconfig_depends"],
        d["benchmark_pkgconfig_depends"],
        d["test_depends"],
        d["test_haskell_depends"],
        d["test_system_depends"],
        d["test_tool_depends"],
        BOOT_GHC.dependency,
        d["benchmark_depends"],
        d["benchmark_haskell_depends"],
        d["benchmark_system_depends"],
        d["benchmark_tool_depends"],
    )
    assert inputs.propagated_build_inputs == (
        d["build_depends"],
        d["library_haskell_depends"],
        d["executable_haskell_depends"],
    )
    assert inputs.system_build_inputs == (
        inputs.propagated_build_inputs + inputs.other_build_inputs
    )
    assert inputs.haskell_build_inputs == ()


def test_get_haskell_build_inputs():
    text = haskell_package("text")
    zlib = pkgconfig_package("zlib")
    cfg = BuildConfig(
        library_haskell_depends=[text],
        library_pkgconfig_depends=[zlib],
        test_haskell_depends=[HSPEC],
    )
    assert get_haskell_build_inputs(GHC, cfg) == (text, HSPEC)


OLD_CROSS_GHC = Ghc(version="7.2.2", cross="aarch64-unknown-linux-gnu", boot_ghc=BOOT_GHC)


def test_old_cross_ghc_precedence():
    """Cross and old: tests off by default, but an explicit do_check=True wins."""
    hunit = haskell_package("HUnit")
    cfg = BuildConfig(test_depends=[hunit])

    assert control_phases(OLD_CROSS_GHC, cfg).do_check is False
    assert hunit not in extract_build_inputs(OLD_CROSS_GHC, cfg).other_build_inputs

    cfg = cfg.override(do_check=True)
    assert control_phases(OLD_CROSS_GHC, cfg).do_check is True
    assert hunit in extract_build_inputs(OLD_CROSS_GHC, cfg).other_build_inputs


def test_test_depends_field_follows_do_check():
    hunit = haskell_package("HUnit")
    cfg = BuildConfig(test_depends=[hunit])
    assert extract_build_inputs(GHC, cfg).other_build_inputs == (hunit,)
    assert extract_build_inputs(GHC, cfg.override(do_check=False)).other_build_inputs == ()
