#!/usr/bin/env python3
"""
Profile Flag Compiler
Turns a build profile (YAML) into a BuildRequest, and parses the ad-hoc
flag and artifact arguments the CLI accepts.
"""

from ..pipeline import BuildRequest
from .settings import profile_path
from .validation import load_profile


def split_features(text):
    """
    Split a comma/space separated feature list.

    Example:
      split_features("derive, rc std") returns: ['derive', 'rc', 'std']
    """
    if not text:
        return []
    return [part for part in text.replace(',', ' ').split() if part]


def parse_artifacts(pairs):
    """
    Parse NAME=VERSION arguments into a mapping.

    Example:
      parse_artifacts(['serde_derive=1.0.139']) returns: {'serde_derive': '1.0.139'}
    """
    artifacts = {}
    for pair in pairs or []:
        name, sep, version = pair.partition('=')
        if not sep or not name.strip() or not version.strip():
            raise ValueError(f"Artifact reference must look like NAME=VERSION, got '{pair}'")
        artifacts[name.strip()] = version.strip()
    return artifacts


def request_from_profile(profile, settings):
    """Build a BuildRequest from a loaded profile, filling gaps from settings."""
    build = settings.get('build', {})
    return BuildRequest(
        name=profile['name'],
        features=frozenset(profile.get('features', [])),
        default_features=profile.get('default_features', build.get('default_features', True)),
        artifacts={name: str(version) for name, version in profile.get('artifacts', {}).items()},
        mode=profile.get('mode', build.get('mode', 'release')),
    )


def load_request(settings, profile_name=None, profile_file=None):
    """Load a profile by name (from the profiles dir) or by path."""
    if profile_file is None:
        profile_file = profile_path(settings, profile_name)
    return request_from_profile(load_profile(profile_file), settings)
