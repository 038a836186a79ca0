#!/usr/bin/env python3
"""
Capability Surface
Maps a resolved flag set to the items exposed to the downstream build.
"""

from .errors import ConflictError
from .registry import FEATURE

OUTPUT_FORMATS = ('list', 'cargo', 'mask')


def check_conflicts(registry, capabilities):
    """Raise ConflictError if both flags of a mutually-exclusive pair are enabled."""
    for flag_a, flag_b in registry.conflicts:
        if flag_a in capabilities and flag_b in capabilities:
            raise ConflictError(flag_a, flag_b)


def materialize(registry, capabilities):
    """
    Union of the items every enabled flag provides.

    Composition is additive only: no flag can take away an item that another
    flag contributes.
    """
    check_conflicts(registry, capabilities)

    items = set()
    for name in capabilities:
        items |= registry.get(name).provides
    return frozenset(items)


def build_flag_string(registry, capabilities):
    """
    Build a Y/N string with one character per registry flag.

    Example:
      flags declared: derive, std, unstable
      capabilities = {'std'}
      returns: "NYN"
    """
    flag_string = ""
    for name in registry.names:
        if name in capabilities:
            flag_string += "Y"
        else:
            flag_string += "N"
    return flag_string


def render(registry, capabilities, items=None, fmt='list'):
    """
    Format a resolved build for the downstream sink.

    list  - exposed items, one per line (capabilities if items is None)
    cargo - "--no-default-features --features a,b" over every enabled feature
            (dependency flags omitted; defaults are already in the closure)
    mask  - Y/N flag string in registry declaration order
    """
    if fmt == 'list':
        return "\n".join(sorted(items if items is not None else capabilities))
    if fmt == 'cargo':
        features = [name for name in registry.names
                    if name in capabilities and registry.get(name).kind == FEATURE]
        if not features:
            return "--no-default-features"
        return "--no-default-features --features " + ",".join(features)
    if fmt == 'mask':
        return build_flag_string(registry, capabilities)
    raise ValueError(f"Unknown output format: {fmt} (expected one of {', '.join(OUTPUT_FORMATS)})")
