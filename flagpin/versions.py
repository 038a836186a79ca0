#!/usr/bin/env python3
"""
Version strings and Cargo-style requirement strings.

Only the pieces the pin checks need: "major.minor[.patch]" with an optional
pre-release/build suffix, and requirements of the form "=1.0.139" (exact pin)
or "1.0" / "^1.0" (compatible range).
"""

import re

EXACT_PIN = 'exact'
COMPATIBLE_RANGE = 'compatible'

CONTRACT_MODES = (EXACT_PIN, COMPATIBLE_RANGE)

_VERSION_RE = re.compile(r'^(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:[-+][0-9A-Za-z.+-]*)?$')


def parse_version(text):
    """
    Split a version string into (major, minor, patch) integers.

    Missing components are 0. Raises ValueError for anything that is not a
    dotted numeric version.
    """
    match = _VERSION_RE.match(str(text).strip())
    if not match:
        raise ValueError(f"Not a version: '{text}'")
    major, minor, patch = match.groups()
    return int(major), int(minor or 0), int(patch or 0)


def parse_requirement(text):
    """
    Turn a requirement string into (version, mode).

    "=1.0.139" -> ("1.0.139", EXACT_PIN)
    "1.0"      -> ("1.0", COMPATIBLE_RANGE)
    "^1.0.90"  -> ("1.0.90", COMPATIBLE_RANGE)
    """
    requirement = str(text).strip()
    if requirement.startswith('='):
        mode = EXACT_PIN
        version = requirement[1:].strip()
    elif requirement.startswith('^'):
        mode = COMPATIBLE_RANGE
        version = requirement[1:].strip()
    else:
        mode = COMPATIBLE_RANGE
        version = requirement

    # Validates the shape; exact pins still compare as raw strings later.
    parse_version(version)
    return version, mode
