#!/usr/bin/env python3
"""
Build Pipeline
Runs one build request through closure, pin validation and surface
materialization, in that order and exactly once.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet

from . import pin_guard
from .resolver import CapabilitySet, resolve
from .surface import materialize


@dataclass(frozen=True)
class BuildRequest:
    features: FrozenSet[str] = frozenset()
    default_features: bool = True
    artifacts: Dict[str, str] = field(default_factory=dict, hash=False)
    mode: str = pin_guard.RELEASE
    name: str = 'adhoc'


@dataclass(frozen=True)
class BuildResult:
    request: BuildRequest
    capabilities: CapabilitySet
    items: FrozenSet[str]


def run_pipeline(registry, request):
    """
    request -> closure -> validate -> surface.

    Any failure propagates as raised; there is no partial BuildResult.
    """
    capabilities = resolve(registry, request.features, request.default_features)
    pin_guard.validate(registry, capabilities, request.artifacts, request.mode)
    items = materialize(registry, capabilities)
    return BuildResult(request=request, capabilities=capabilities, items=items)
