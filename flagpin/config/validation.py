#!/usr/bin/env python3
"""
Manifest and Profile Validation
Validates feature manifests and build profiles against their JSON schemas
"""

import json
from pathlib import Path

import jsonschema
import yaml

from ..errors import ManifestError

SCHEMA_DIR = Path(__file__).parent.parent / 'schemas'

MANIFEST_SCHEMA = 'feature-manifest-schema.json'
PROFILE_SCHEMA = 'build-profile-schema.json'


def load_yaml(file_path):
    """Load YAML file safely."""
    try:
        with open(file_path, 'r') as f:
            return yaml.safe_load(f), None
    except yaml.YAMLError as e:
        return None, str(e)
    except OSError as e:
        return None, str(e)


def load_schema(schema_name):
    """Load a JSON schema shipped with the package."""
    schema_file = SCHEMA_DIR / schema_name
    with open(schema_file, 'r') as f:
        return json.load(f)


def validate_against_schema(document, schema_name):
    """
    Validate a loaded document against one of the package schemas.
    Returns (is_valid, errors_list)
    """
    try:
        schema = load_schema(schema_name)
    except (OSError, json.JSONDecodeError) as e:
        return False, [f"Error loading schema file {schema_name}: {e}"]

    try:
        jsonschema.validate(instance=document, schema=schema)
        return True, []
    except jsonschema.ValidationError as e:
        # Parse validation error into readable message
        error_path = ' -> '.join(str(p) for p in e.path) if e.path else 'root'
        return False, [f"Schema validation failed at '{error_path}': {e.message}"]
    except jsonschema.SchemaError as e:
        return False, [f"Schema file is invalid: {e.message}"]


def _load_checked(file_path, schema_name):
    path = Path(file_path)
    if not path.exists():
        raise ManifestError(str(file_path), "file not found")

    document, err = load_yaml(path)
    if err:
        raise ManifestError(str(file_path), f"YAML syntax error: {err}")
    if not document:
        raise ManifestError(str(file_path), "file is empty")

    is_valid, errors = validate_against_schema(document, schema_name)
    if not is_valid:
        raise ManifestError(str(file_path), '; '.join(errors))
    return document


def load_manifest(file_path):
    """Load a feature manifest and check it against the manifest schema."""
    return _load_checked(file_path, MANIFEST_SCHEMA)


def load_profile(file_path):
    """Load a build profile and check it against the profile schema."""
    return _load_checked(file_path, PROFILE_SCHEMA)
