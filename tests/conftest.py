"""
Shared fixtures for the flagpin test suite.
"""

from pathlib import Path

import pytest

from flagpin.registry import build_registry, load_registry

PACKAGE_DIR = Path(__file__).parent.parent / 'flagpin'
SERDE_MANIFEST = PACKAGE_DIR / 'manifests' / 'serde.yaml'
PROFILE_DIR = PACKAGE_DIR / 'profiles'


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment overrides out of the tests."""
    monkeypatch.delenv('FLAGPIN_CONFIG', raising=False)
    monkeypatch.delenv('FLAGPIN_ENV', raising=False)


@pytest.fixture
def serde_manifest():
    return SERDE_MANIFEST


@pytest.fixture
def registry():
    """The shipped serde feature table."""
    return load_registry(SERDE_MANIFEST)


@pytest.fixture
def make_registry():
    """Build a registry from a compact {name: implies} table."""
    def _make(implications, default=(), conflicts=(), contracts=None, artifact=None):
        contracts = contracts or {}
        flags = []
        for name, implies in implications.items():
            entry = {'name': name, 'implies': list(implies), 'provides': [f"item:{name}"]}
            if name in contracts:
                entry['requirement'] = contracts[name]
            flags.append(entry)
        table = {'flags': flags, 'default': list(default), 'conflicts': [list(p) for p in conflicts]}
        if artifact:
            table['artifact'] = {'name': artifact[0], 'version': artifact[1]}
        return build_registry(table)
    return _make


@pytest.fixture
def profile_dir():
    return PROFILE_DIR
