"""Overlays that pin Haskell packages to other sources or versions.

An overlay is a function (final, prev) -> dict, like Nix's
``final: prev: { ... }``: final is the finished package set, prev the set
before the overlay. The package set itself is external; all this needs
from final are its ``call_cabal2nix`` and ``call_hackage`` builders.
"""

from __future__ import annotations
import logging
from collections.abc import Mapping

log = logging.getLogger(__name__)


def _is_path(src) -> bool:
    return str(src).startswith("/")


def package_source_overrides(overrides: Mapping[str, object]):
    """Overlay setting each named package to a source path or hackage version.

        overlay = package_source_overrides({
            "my-lib": "/home/me/src/my-lib",   # cabal2nix on a local tree
            "aeson": "2.2.3.0",                # that version from hackage
        })

    Absolute paths are built with final.call_cabal2nix(name, src, {}),
    anything else is a version for final.call_hackage(name, version, {}).
    """
    def overlay(final, prev):
        result = {}
        for name, src in overrides.items():
            if _is_path(src):
                log.debug("%s: cabal2nix %s", name, src)
                result[name] = final.call_cabal2nix(name, src, {})
            else:
                log.debug("%s: hackage version %s", name, src)
                result[name] = final.call_hackage(name, src, {})
        return result
    return overlay
