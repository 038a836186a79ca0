"""
Feature-flag capability resolution and artifact pin validation.

A FlagRegistry is built once from a declarative manifest. Build requests are
resolved against it into a CapabilitySet, checked against the artifact version
contracts of the enabled flags, and materialized into the exposed item set.
"""

from .errors import (
    ConflictError, CyclicImplicationError, DuplicateFlagError, FlagPinError,
    IncompatibleVersionError, ManifestError, MissingArtifactError, PinError,
    RegistryError, UnknownFlagError, VersionMismatchError
)
from .registry import (
    ArtifactContract, ArtifactInfo, Flag, FlagRegistry, build_registry,
    get_registry, load_registry
)
from .resolver import CapabilitySet, resolve
from .pin_guard import check_lockstep, validate
from .surface import materialize
from .pipeline import BuildRequest, BuildResult, run_pipeline

__version__ = '1.0.139'

__all__ = [
    'ArtifactContract', 'ArtifactInfo', 'BuildRequest', 'BuildResult',
    'CapabilitySet', 'ConflictError', 'CyclicImplicationError',
    'DuplicateFlagError', 'Flag', 'FlagPinError', 'FlagRegistry',
    'IncompatibleVersionError', 'ManifestError', 'MissingArtifactError',
    'PinError', 'RegistryError', 'UnknownFlagError', 'VersionMismatchError',
    'build_registry', 'check_lockstep', 'get_registry', 'load_registry',
    'materialize', 'resolve', 'run_pipeline', 'validate',
]
