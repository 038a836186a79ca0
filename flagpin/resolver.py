#!/usr/bin/env python3
"""
Resolver
Computes the closure of enabled flags for a build request.
"""

from .errors import UnknownFlagError
from .registry import DEFAULT_SET_NAME


class CapabilitySet(frozenset):
    """Enabled flag names after closure. Immutable and unordered."""

    def __repr__(self):
        return f"CapabilitySet({sorted(self)})"


def _check_requested(registry, requested):
    for name in sorted(requested):
        if name != DEFAULT_SET_NAME and name not in registry:
            raise UnknownFlagError(name)


def resolve(registry, requested=(), default_features=True):
    """
    Resolve requested flag names into a CapabilitySet.

    The working set starts as the requested names plus the registry's default
    set (when default_features is on, or `default` is requested) and grows by
    implication edges until nothing new is added.

    Example:
      resolve(registry, {'derive'})
      returns: CapabilitySet(['derive', 'mesalock_sgx', 'serde_derive', 'sgx_tstd', 'std'])
    """
    if isinstance(requested, str):
        requested = [requested]
    requested = set(requested)
    _check_requested(registry, requested)

    working = requested - {DEFAULT_SET_NAME}
    if default_features or DEFAULT_SET_NAME in requested:
        working |= registry.default_set

    # Fixpoint; bounded by the depth of the (acyclic) implication graph
    frontier = set(working)
    while frontier:
        implied = set()
        for name in frontier:
            implied |= registry.implied_by(name)
        frontier = implied - working
        working |= frontier

    return CapabilitySet(working)


def explain(registry, capabilities):
    """
    Map each enabled flag to the enabled flags that pulled it in.

    Requested and default flags with no enabled implier map to an empty set.
    """
    reasons = {name: set() for name in capabilities}
    for name in capabilities:
        for target in registry.implied_by(name):
            if target in reasons:
                reasons[target].add(name)
    return {name: frozenset(parents) for name, parents in reasons.items()}
