"""Nix version comparison.

Same ordering as ``builtins.compareVersions`` and ``lib.versionOlder``.
A version string is split into components:

  - ``.`` and ``-`` are separators and never part of a component
  - a run of digits is one component
  - a run of anything else is one component

So "2.3a-pre1" splits into ["2", "3", "a", "pre", "1"].

Components are compared pairwise; the shorter version is padded with
empty components. See: nix/src/libstore/names.cc, compareVersions()
"""

_SEPARATORS = ".-"
_DIGITS = "0123456789"


def split_version(v: str) -> list[str]:
    """Split a version string into its comparable components."""
    components = []
    pos = 0
    while pos < len(v):
        if v[pos] in _SEPARATORS:
            pos += 1
            continue
        start = pos
        if v[pos] in _DIGITS:
            while pos < len(v) and v[pos] in _DIGITS:
                pos += 1
        else:
            while pos < len(v) and not (v[pos] in _DIGITS or v[pos] in _SEPARATORS):
                pos += 1
        components.append(v[start:pos])
    return components


def _component_lt(c1: str, c2: str) -> bool:
    n1 = c1 != "" and c1.strip(_DIGITS) == ""
    n2 = c2 != "" and c2.strip(_DIGITS) == ""
    if n1 and n2:
        return int(c1) < int(c2)
    if c1 == "" and n2:
        return True
    if c1 == "pre" and c2 != "pre":
        return True
    if c2 == "pre":
        return False
    # "2.3a" < "2.3.1"
    if n2:
        return True
    if n1:
        return False
    return c1 < c2


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as version a is older, equal to, or newer than b."""
    ca = split_version(a)
    cb = split_version(b)
    for i in range(max(len(ca), len(cb))):
        c1 = ca[i] if i < len(ca) else ""
        c2 = cb[i] if i < len(cb) else ""
        if _component_lt(c1, c2):
            return -1
        if _component_lt(c2, c1):
            return 1
    return 0


def version_older(a: str, b: str) -> bool:
    """True if version a is strictly older than b. Like lib.versionOlder."""
    return compare_versions(a, b) < 0
