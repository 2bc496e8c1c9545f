"""Helpers for adjusting Haskell packages.

Like nixpkgs/pkgs/development/haskell-modules/lib.nix (``haskell.lib``).
Every helper is override_cabal() with a fixed patch and returns a new
BuildConfig; the argument is never changed.

    aeson = dont_check(aeson)
    servant = append_configure_flag(servant, "--profiling-detail=all-functions")
    vty = enable_cabal_flag(vty, "terminfo")

Three kinds of helper:
  - toggles set one field to a constant; applying one twice is the same
    as applying it once
  - appenders add to the end of a list field; applying one twice adds
    the value twice
  - remove_configure_flag drops every occurrence of a flag
"""

from __future__ import annotations
from collections.abc import Sequence

from haskellpkgs.cabal import BuildConfig, as_tuple, override_cabal
from haskellpkgs.deps import Dependency


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Platforms hydra builds for when a package doesn't list its own.
DEFAULT_HYDRA_PLATFORMS = ("i686-linux", "x86_64-linux", "x86_64-darwin")

GOLD_LINKER_FLAGS = (
    "--ghc-option=-optl-fuse-ld=gold --ld-option=-fuse-ld=gold --with-ld=ld.gold"
)

# -g: debugging symbols; --disable-*-stripping: GHC keeps them in the binaries
DWARF_DEBUGGING_FLAGS = (
    "--ghc-options=-g --disable-executable-stripping --disable-library-stripping"
)

ALL_WARNINGS_FLAGS = "--ghc-option=-Wall --ghc-option=-Werror"

MINIMAL_IMPORTS_FLAG = "--ghc-option=-ddump-minimal-imports"

DARWIN_DEAD_STRIP_FLAG = "--ghc-option=-optl=-dead_strip"


# ---------------------------------------------------------------------------
# Toggles
# ---------------------------------------------------------------------------

def do_coverage(config: BuildConfig) -> BuildConfig:
    """Generate and install a coverage report (hpc)."""
    return override_cabal(config, lambda _: {"do_coverage": True})


def dont_coverage(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"do_coverage": False})


def do_haddock(config: BuildConfig) -> BuildConfig:
    """Generate and install API documentation with haddock."""
    return override_cabal(config, lambda _: {"do_haddock": True})


def dont_haddock(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"do_haddock": False})


def do_jailbreak(config: BuildConfig) -> BuildConfig:
    """Remove the version bounds from the cabal file.

    Makes packages with overly tight bounds build, at the risk of
    breaking them in ways the bounds were there to prevent. Patching
    the cabal file is usually the better fix.
    """
    return override_cabal(config, lambda _: {"jailbreak": True})


def dont_jailbreak(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"jailbreak": False})


def do_check(config: BuildConfig) -> BuildConfig:
    """Build and run the test suites."""
    return override_cabal(config, lambda _: {"do_check": True})


def dont_check(config: BuildConfig) -> BuildConfig:
    """Skip the test suites, and their dependencies with them."""
    return override_cabal(config, lambda _: {"do_check": False})


def do_benchmark(config: BuildConfig) -> BuildConfig:
    """Build and run the benchmarks."""
    return override_cabal(config, lambda _: {"do_benchmark": True})


def dont_benchmark(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"do_benchmark": False})


def do_distribute(config: BuildConfig) -> BuildConfig:
    """Let hydra build and distribute binaries of the package."""
    return override_cabal(config, lambda old: {
        "hydra_platforms": (old.platforms if old.platforms is not None
                            else DEFAULT_HYDRA_PLATFORMS),
    })


def dont_distribute(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"hydra_platforms": ()})


def mark_broken(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"broken": True, "hydra_platforms": ()})


def mark_broken_version(version: str, config: BuildConfig) -> BuildConfig:
    """mark_broken, but only for the version that is known to be broken.

    Raises ValueError once the package has moved to another version, so
    the stale override gets noticed and removed.
    """
    if config.version != version:
        raise ValueError(
            f"{config.pname} is version {config.version}, "
            f"but was marked broken for version {version}"
        )
    return mark_broken(config)


def enable_library_profiling(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"enable_library_profiling": True})


def disable_library_profiling(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"enable_library_profiling": False})


def enable_shared_executables(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"enable_shared_executables": True})


def disable_shared_executables(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"enable_shared_executables": False})


def enable_shared_libraries(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"enable_shared_libraries": True})


def disable_shared_libraries(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"enable_shared_libraries": False})


def enable_dead_code_elimination(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"enable_dead_code_elimination": True})


def disable_dead_code_elimination(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"enable_dead_code_elimination": False})


def enable_static_libraries(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"enable_static_libraries": True})


def disable_static_libraries(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"enable_static_libraries": False})


def do_hyperlink_source(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"hyperlink_source": True})


def dont_hyperlink_source(config: BuildConfig) -> BuildConfig:
    return override_cabal(config, lambda _: {"hyperlink_source": False})


def disable_hardening(config: BuildConfig, flags: Sequence[str]) -> BuildConfig:
    """Replace the list of disabled hardening flags."""
    return override_cabal(config, lambda _: {"hardening_disable": flags})


def do_strip(config: BuildConfig) -> BuildConfig:
    """Strip binaries, removing their debugging symbols."""
    return override_cabal(config, lambda _: {"dont_strip": False})


def dont_strip(config: BuildConfig) -> BuildConfig:
    """Keep debugging symbols in the binaries."""
    return override_cabal(config, lambda _: {"dont_strip": True})


# ---------------------------------------------------------------------------
# Appenders
# ---------------------------------------------------------------------------

def append_configure_flag(config: BuildConfig, flag: str) -> BuildConfig:
    """Pass one more argument to ``Setup configure``, after the existing ones."""
    return append_configure_flags(config, [flag])


def append_configure_flags(config: BuildConfig, flags: Sequence[str]) -> BuildConfig:
    flags = as_tuple("configure_flags", flags)
    return override_cabal(config, lambda old: {
        "configure_flags": old.configure_flags + flags,
    })


def remove_configure_flag(config: BuildConfig, flag: str) -> BuildConfig:
    """Drop every configure argument equal to flag."""
    return override_cabal(config, lambda old: {
        "configure_flags": tuple(f for f in old.configure_flags if f != flag),
    })


def add_build_tool(config: BuildConfig, dep: Dependency) -> BuildConfig:
    return add_build_tools(config, [dep])


def add_build_tools(config: BuildConfig, deps: Sequence[Dependency]) -> BuildConfig:
    deps = as_tuple("build_tools", deps)
    return override_cabal(config, lambda old: {"build_tools": old.build_tools + deps})


def add_extra_library(config: BuildConfig, dep: Dependency) -> BuildConfig:
    return add_extra_libraries(config, [dep])


def add_extra_libraries(config: BuildConfig, deps: Sequence[Dependency]) -> BuildConfig:
    deps = as_tuple("extra_libraries", deps)
    return override_cabal(config, lambda old: {
        "extra_libraries": old.extra_libraries + deps,
    })


def add_build_depend(config: BuildConfig, dep: Dependency) -> BuildConfig:
    return add_build_depends(config, [dep])


def add_build_depends(config: BuildConfig, deps: Sequence[Dependency]) -> BuildConfig:
    deps = as_tuple("build_depends", deps)
    return override_cabal(config, lambda old: {"build_depends": old.build_depends + deps})


def add_pkgconfig_depend(config: BuildConfig, dep: Dependency) -> BuildConfig:
    return add_pkgconfig_depends(config, [dep])


def add_pkgconfig_depends(config: BuildConfig, deps: Sequence[Dependency]) -> BuildConfig:
    deps = as_tuple("pkgconfig_depends", deps)
    return override_cabal(config, lambda old: {
        "pkgconfig_depends": old.pkgconfig_depends + deps,
    })


def add_setup_depend(config: BuildConfig, dep: Dependency) -> BuildConfig:
    return add_setup_depends(config, [dep])


def add_setup_depends(config: BuildConfig, deps: Sequence[Dependency]) -> BuildConfig:
    deps = as_tuple("setup_haskell_depends", deps)
    return override_cabal(config, lambda old: {
        "setup_haskell_depends": old.setup_haskell_depends + deps,
    })


def append_patch(config: BuildConfig, patch) -> BuildConfig:
    return append_patches(config, [patch])


def append_patches(config: BuildConfig, patches: Sequence) -> BuildConfig:
    patches = as_tuple("patches", patches)
    return override_cabal(config, lambda old: {"patches": old.patches + patches})


# ---------------------------------------------------------------------------
# Cabal flags and compiler options
# ---------------------------------------------------------------------------

def enable_cabal_flag(config: BuildConfig, flag: str) -> BuildConfig:
    """Turn a cabal flag on, replacing any earlier ``-f-flag``."""
    return append_configure_flag(remove_configure_flag(config, f"-f-{flag}"), f"-f{flag}")


def disable_cabal_flag(config: BuildConfig, flag: str) -> BuildConfig:
    """Turn a cabal flag off, replacing any earlier ``-fflag``."""
    return append_configure_flag(remove_configure_flag(config, f"-f{flag}"), f"-f-{flag}")


def enable_dwarf_debugging(config: BuildConfig) -> BuildConfig:
    """Keep debugging symbols all the way through. Useful with gdb."""
    return append_configure_flag(dont_strip(config), DWARF_DEBUGGING_FLAGS)


def link_with_gold(config: BuildConfig) -> BuildConfig:
    return append_configure_flag(config, GOLD_LINKER_FLAGS)


def fail_on_all_warnings(config: BuildConfig) -> BuildConfig:
    """Turn on most compiler warnings and fail the build if any occur."""
    return append_configure_flag(config, ALL_WARNINGS_FLAGS)


def just_static_executables(config: BuildConfig, *, is_darwin: bool = False) -> BuildConfig:
    """Link executables statically against Haskell libraries.

    Drops the library, its docs and its dynamic Haskell dependencies,
    which shrinks the closure to the executables alone.
    """
    def patch(old):
        changes = {
            "enable_shared_executables": False,
            "is_library": False,
            "do_haddock": False,
            "post_fixup": "rm -rf $out/lib $out/nix-support $out/share/doc",
        }
        if is_darwin:
            changes["configure_flags"] = old.configure_flags + (DARWIN_DEAD_STRIP_FLAG,)
        return changes
    return override_cabal(config, patch)


def check_unused_packages(
    config: BuildConfig,
    packunused,
    *,
    ignore_empty_imports: bool = False,
    ignore_main_module: bool = False,
    ignore_packages: Sequence[str] = (),
) -> BuildConfig:
    """Check after the build that declared dependencies are actually used.

    Args:
        packunused: The packunused package (its path goes into post_build).
        ignore_empty_imports: Pass --ignore-empty-imports.
        ignore_main_module: Pass --ignore-main-module.
        ignore_packages: Package names that would otherwise be false alarms.
    """
    args = []
    if ignore_empty_imports:
        args.append("--ignore-empty-imports")
    if ignore_main_module:
        args.append("--ignore-main-module")
    ignore_packages = as_tuple("ignore_packages", ignore_packages)
    args += [f"--ignore-package {pkg}" for pkg in ignore_packages]

    command = f"{packunused}/bin/packunused"
    if args:
        command += " " + " ".join(args)
    return override_cabal(
        append_configure_flag(config, MINIMAL_IMPORTS_FLAG),
        lambda _: {"post_build": command},
    )


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

def _to_string(value) -> str:
    # Nix toString: true is "1", false and null are ""
    if value is True:
        return "1"
    if value is False or value is None:
        return ""
    return str(value)


def trigger_rebuild(config: BuildConfig, i: int | str) -> BuildConfig:
    """Force a rebuild even if an equivalent build is already in the store."""
    return override_cabal(config, lambda _: {
        "post_unpack": f": trigger rebuild {_to_string(i)}",
    })


def override_src(config: BuildConfig, src, version: str | None = None) -> BuildConfig:
    """Build from a different source, optionally as a different version.

    The revised cabal file belongs to the old source, so it is dropped.
    """
    return override_cabal(config, lambda old: {
        "src": src,
        "version": version if version is not None else old.version,
        "edited_cabal_file": None,
    })


def _pname_version(config: BuildConfig) -> tuple[str, str]:
    if config.pname is None or config.version is None:
        raise ValueError("source distribution needs both pname and version")
    return config.pname, config.version


def sdist_tarball(config: BuildConfig) -> BuildConfig:
    """Build a source distribution tarball, like the ones on hackage.

    The haddock phase is skipped, so the doc output goes away too.
    """
    pname, version = _pname_version(config)
    return override_cabal(config, lambda _: {
        "name": f"{pname}-source-{version}",
        "outputs": ("out",),
        "build_phase": "./Setup sdist",
        "haddock_phase": ":",
        "check_phase": ":",
        "install_phase": (
            f"install -D dist/{pname}-*.tar.gz $out/{pname}-{version}.tar.gz"
        ),
        "fixup_phase": ":",
    })


def build_from_sdist(config: BuildConfig, sdist) -> BuildConfig:
    """Build from the package's own source tarball instead of its source tree.

    sdist is the built output of sdist_tarball(config). Packaging
    mistakes in the cabal file (missing extra-source-files and such)
    then make the build fail, as they would for a hackage upload.
    """
    pname, version = _pname_version(config)
    tarball = f"{sdist}/{pname}-{version}.tar.gz"
    return override_cabal(config, lambda _: {
        "unpack_phase": (
            f'echo "Source tarball is at {tarball}"\n'
            f"tar xf {tarball}\n"
            f"cd {pname}-*\n"
        ),
    })


def build_strictly(config: BuildConfig, sdist) -> BuildConfig:
    """build_from_sdist with fail_on_all_warnings."""
    return build_from_sdist(fail_on_all_warnings(config), sdist)
