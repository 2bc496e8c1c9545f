"""Haskell package build descriptions and the overrideCabal combinator.

A BuildConfig is the argument set that a hackage-packages.nix entry
passes to ``haskellPackages.mkDerivation``:

    mkDerivation {
      pname = "aeson"; version = "2.2.3.0";
      libraryHaskellDepends = [ attoparsec base bytestring ... ];
      testHaskellDepends = [ QuickCheck tasty ... ];
    }

It is immutable. Every change goes through override_cabal(), which
builds a new record from the old one, like ``overrideCabal drv f``:

    override_cabal(aeson, lambda old: {
        "configure_flags": old.configure_flags + ("-fcffi",),
    })

Python attributes are snake_case. to_attrs()/from_attrs() translate
to and from the camelCase names mkDerivation uses.
"""

from __future__ import annotations
import dataclasses
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from haskellpkgs.deps import Dependency

log = logging.getLogger(__name__)

Deps = tuple[Dependency, ...]


@dataclass(frozen=True)
class BuildConfig:
    """Arguments of one Haskell package's mkDerivation call.

    Unset list fields are empty; unset flags are None, meaning "use the
    builder's default". Sequences given for list fields are stored as
    tuples in the order given, duplicates included.
    """

    pname: str | None = None
    version: str | None = None
    src: Any = None
    edited_cabal_file: str | None = None

    # Build inputs
    setup_haskell_depends: Deps = ()
    extra_libraries: Deps = ()
    library_system_depends: Deps = ()
    executable_system_depends: Deps = ()
    pkgconfig_depends: Deps = ()
    library_pkgconfig_depends: Deps = ()
    executable_pkgconfig_depends: Deps = ()
    test_pkgconfig_depends: Deps = ()
    benchmark_pkgconfig_depends: Deps = ()
    test_depends: Deps = ()
    test_haskell_depends: Deps = ()
    test_system_depends: Deps = ()
    test_tool_depends: Deps = ()
    benchmark_depends: Deps = ()
    benchmark_haskell_depends: Deps = ()
    benchmark_system_depends: Deps = ()
    benchmark_tool_depends: Deps = ()
    build_depends: Deps = ()
    library_haskell_depends: Deps = ()
    executable_haskell_depends: Deps = ()
    build_tools: Deps = ()

    # Phases
    do_check: bool | None = None
    do_benchmark: bool | None = None
    do_coverage: bool | None = None
    do_haddock: bool | None = None
    hyperlink_source: bool | None = None
    jailbreak: bool | None = None
    dont_strip: bool | None = None

    # Cabal configure
    configure_flags: tuple[str, ...] = ()
    patches: tuple[Any, ...] = ()
    hardening_disable: tuple[str, ...] = ()
    is_library: bool | None = None
    enable_library_profiling: bool | None = None
    enable_shared_executables: bool | None = None
    enable_shared_libraries: bool | None = None
    enable_dead_code_elimination: bool | None = None
    enable_static_libraries: bool | None = None

    # Hooks and phase bodies
    post_unpack: str | None = None
    post_build: str | None = None
    post_fixup: str | None = None
    unpack_phase: str | None = None
    build_phase: str | None = None
    haddock_phase: str | None = None
    check_phase: str | None = None
    install_phase: str | None = None
    fixup_phase: str | None = None

    # Derivation / meta
    name: str | None = None
    outputs: tuple[str, ...] | None = None
    platforms: tuple[str, ...] | None = None
    hydra_platforms: tuple[str, ...] | None = None
    broken: bool | None = None

    def __post_init__(self):
        for f in _SEQUENCE_FIELDS:
            value = getattr(self, f)
            if value is None and f not in _OPTIONAL_SEQUENCE_FIELDS:
                # mkDerivation's `? []`: absent and null both mean empty
                value = ()
            if value is not None:
                value = as_tuple(f, value)
            object.__setattr__(self, f, value)

    def override(self, **fields) -> BuildConfig:
        """Set fields to constant values. Like overrideCabal with a constant patch."""
        return override_cabal(self, lambda _: fields)

    def to_attrs(self) -> dict[str, Any]:
        """The mkDerivation attributes this record sets, under their Nix names.

        Fields still at their default are left out, the way a
        hackage-packages.nix entry only lists what it needs.
        """
        attrs = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if value == f.default:
                continue
            attrs[attr_name(f.name)] = list(value) if isinstance(value, tuple) else value
        return attrs

    @classmethod
    def from_attrs(cls, attrs: Mapping[str, Any]) -> BuildConfig:
        """Build a record from mkDerivation attributes (camelCase names)."""
        kwargs = {}
        for key, value in attrs.items():
            field_name = _FIELDS_BY_ATTR.get(key)
            if field_name is None:
                raise TypeError(f"unknown mkDerivation attribute {key!r}")
            kwargs[field_name] = value
        return cls(**kwargs)


def as_tuple(name: str, value) -> tuple:
    """A list-valued argument as a tuple, order and duplicates kept.

    Only real sequences are accepted: a str would be split into
    characters, and a set or dict has no order to keep.
    """
    if isinstance(value, tuple):
        return value
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise TypeError(f"{name} must be a sequence, got {type(value).__name__}")
    return tuple(value)


def attr_name(field_name: str) -> str:
    """Python field name -> mkDerivation attribute name.

        attr_name("setup_haskell_depends")  # "setupHaskellDepends"
    """
    head, *rest = field_name.split("_")
    return head + "".join(part.capitalize() for part in rest)


_FIELD_NAMES = frozenset(f.name for f in dataclasses.fields(BuildConfig))
_FIELDS_BY_ATTR = {attr_name(n): n for n in _FIELD_NAMES}
_OPTIONAL_SEQUENCE_FIELDS = frozenset({"outputs", "platforms", "hydra_platforms"})
_SEQUENCE_FIELDS = tuple(
    f.name for f in dataclasses.fields(BuildConfig)
    if f.default == () or f.name in _OPTIONAL_SEQUENCE_FIELDS
)


def override_cabal(
    config: BuildConfig,
    patch: Callable[[BuildConfig], Mapping[str, Any]],
) -> BuildConfig:
    """Return config with the fields returned by patch(config) replaced.

    patch sees the record before the override, so it can extend a list:

        override_cabal(cfg, lambda old: {"patches": old.patches + (p,)})

    Fields patch does not mention are kept; fields it does mention are
    replaced outright, not merged. A patch naming a field BuildConfig
    does not have is a bug in the patch and raises TypeError.
    """
    changes = patch(config)
    if not isinstance(changes, Mapping):
        raise TypeError(
            f"override patch must return a mapping of fields, "
            f"got {type(changes).__name__}"
        )
    unknown = sorted(set(changes) - _FIELD_NAMES)
    if unknown:
        raise TypeError(f"BuildConfig has no field {unknown[0]!r}")
    log.debug("override %s: %s", config.pname or config.name, ", ".join(changes))
    return dataclasses.replace(config, **changes)
