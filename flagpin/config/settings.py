#!/usr/bin/env python3
"""
Settings - layered YAML configuration for the flagpin tools.
"""

import copy
import os
from pathlib import Path

import yaml

PACKAGE_DIR = Path(__file__).parent.parent
ROOT_DIR = PACKAGE_DIR.parent

DEFAULT_SETTINGS = {
    'registry': {
        'manifest': str(PACKAGE_DIR / 'manifests' / 'serde.yaml'),
    },
    'profiles': {
        'dir': str(PACKAGE_DIR / 'profiles'),
    },
    'build': {
        'mode': 'release',
        'default_features': True,
    },
    'output': {
        'format': 'list',
    },
}


def load_yaml(file_path):
    with open(file_path, 'r') as f:
        return yaml.safe_load(f) or {}


def deep_merge(base, override):
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_settings():
    """
    Load settings with optional local overrides.
    - Default: config/flagpin-config.yaml (or FLAGPIN_CONFIG) over built-in defaults
    - FLAGPIN_ENV=local: merges flagpin-config.local.yaml next to the base file
    """
    base_path = Path(os.environ.get('FLAGPIN_CONFIG', ROOT_DIR / 'config' / 'flagpin-config.yaml'))
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    if base_path.exists():
        settings = deep_merge(settings, load_yaml(base_path))

    env = os.environ.get('FLAGPIN_ENV', '').strip()
    if env == 'local':
        override_path = base_path.with_name(base_path.stem + '.local' + base_path.suffix)
        if override_path.exists():
            settings = deep_merge(settings, load_yaml(override_path))

    return settings


def _resolve_path(value):
    # Relative paths in settings are relative to the repository root
    path = Path(value)
    if not path.is_absolute():
        path = ROOT_DIR / path
    return path


def manifest_path(settings):
    return _resolve_path(settings['registry']['manifest'])


def profile_path(settings, profile_name):
    return _resolve_path(settings['profiles']['dir']) / f"{profile_name}.yaml"
