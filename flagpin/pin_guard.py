#!/usr/bin/env python3
"""
Pin Guard
Validates declared artifact versions against the contracts carried by
enabled flags.

Exact pins compare version strings byte for byte: output generated by one
patch release of the companion is not assumed to work with another, so
"1.0.140" does not satisfy "=1.0.139". Compatible ranges accept the same
major version with an equal or newer minor version.
"""

from .errors import (
    IncompatibleVersionError, MissingArtifactError, VersionMismatchError
)
from .versions import COMPATIBLE_RANGE, EXACT_PIN, parse_version

RELEASE = 'release'
DEV = 'dev'

BUILD_MODES = (RELEASE, DEV)


def check_contract(contract, found):
    """Check one declared version against one contract. Raises on violation."""
    if contract.mode == EXACT_PIN:
        if found != contract.version:
            raise VersionMismatchError(contract.version, found, artifact=contract.artifact)
        return

    if contract.mode == COMPATIBLE_RANGE:
        required_major, required_minor, _ = parse_version(contract.version)
        try:
            found_major, found_minor, _ = parse_version(found)
        except ValueError:
            raise IncompatibleVersionError(contract.version, found, artifact=contract.artifact) from None
        if found_major != required_major or found_minor < required_minor:
            raise IncompatibleVersionError(contract.version, found, artifact=contract.artifact)
        return

    raise ValueError(f"Unknown contract mode: {contract.mode}")


def validate(registry, capabilities, artifacts, mode=RELEASE):
    """
    Check every enabled flag that carries an artifact contract.

    Args:
        registry: FlagRegistry the capabilities were resolved against
        capabilities: resolved CapabilitySet
        artifacts: mapping of artifact name -> declared version string
        mode: 'release' or 'dev' (dev contracts replace release ones where declared)

    Returns:
        None; raises a PinError on the first violation (flags in name order)
    """
    if mode not in BUILD_MODES:
        raise ValueError(f"Unknown build mode: {mode}")

    for name in sorted(capabilities):
        contract = registry.contract_for(name, mode)
        if contract is None:
            continue
        if contract.artifact not in artifacts:
            raise MissingArtifactError(name, artifact=contract.artifact)
        check_contract(contract, str(artifacts[contract.artifact]))


def pinned_contracts(registry, mode=RELEASE):
    """All (flag name, contract) pairs in the registry, in declaration order."""
    pairs = []
    for name in registry.names:
        contract = registry.contract_for(name, mode)
        if contract is not None:
            pairs.append((name, contract))
    return pairs


def check_lockstep(registry):
    """
    Release rule: every exact pin must name the owning artifact's own version.

    The core and its companion are released together, so serde 1.0.139 must
    pin serde_derive at =1.0.139.
    """
    owner = registry.artifact
    if owner is None:
        return
    for _, contract in pinned_contracts(registry, RELEASE):
        if contract.mode == EXACT_PIN and contract.version != owner.version:
            raise VersionMismatchError(owner.version, contract.version, artifact=contract.artifact)
