#!/usr/bin/env python3
"""
Flag Registry
Static, validated table of capability flags, their defaults, implication
edges and artifact contracts.

A registry is checked once when it is built (duplicates, dangling names,
implication cycles) and is read-only afterwards, so any number of resolutions
can share one instance.
"""

import threading
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional

from .config.settings import load_settings, manifest_path
from .config.validation import load_manifest
from .errors import CyclicImplicationError, DuplicateFlagError, ManifestError, UnknownFlagError
from .versions import EXACT_PIN, parse_requirement

DEFAULT_SET_NAME = 'default'

FEATURE = 'feature'
DEPENDENCY = 'dependency'


@dataclass(frozen=True)
class ArtifactInfo:
    """Name and version of the artifact that owns a registry."""
    name: str
    version: str


@dataclass(frozen=True)
class ArtifactContract:
    """Version an enabled flag requires of an external artifact."""
    artifact: str
    version: str
    mode: str

    @property
    def requirement(self):
        if self.mode == EXACT_PIN:
            return f"={self.version}"
        return self.version

    @classmethod
    def from_requirement(cls, artifact, requirement):
        version, mode = parse_requirement(requirement)
        return cls(artifact=artifact, version=version, mode=mode)


@dataclass(frozen=True)
class Flag:
    name: str
    is_default: bool = False
    implies: FrozenSet[str] = frozenset()
    contract: Optional[ArtifactContract] = None
    dev_contract: Optional[ArtifactContract] = None
    kind: str = FEATURE
    description: str = ''
    provides: FrozenSet[str] = frozenset()
    source: Mapping = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        # Frozen copies so a registry never shares mutable state with its caller
        object.__setattr__(self, 'implies', frozenset(self.implies))
        object.__setattr__(self, 'provides', frozenset(self.provides))
        object.__setattr__(self, 'source', MappingProxyType(dict(self.source)))


class FlagRegistry:
    """Read-only flag table."""

    def __init__(self, flags, default=(), conflicts=(), artifact=None):
        by_name = {}
        order = []
        for flag in flags:
            if flag.name == DEFAULT_SET_NAME:
                raise ManifestError('flags', f"'{DEFAULT_SET_NAME}' is reserved for the default set")
            if flag.name in by_name:
                raise DuplicateFlagError(flag.name)
            by_name[flag.name] = flag
            order.append(flag.name)

        default_names = set(default)
        for name in sorted(default_names):
            if name not in by_name:
                raise UnknownFlagError(name)

        # Flags listed under `default` are marked as defaults on the flag itself
        for name in default_names:
            if not by_name[name].is_default:
                by_name[name] = replace(by_name[name], is_default=True)

        for flag in by_name.values():
            for target in sorted(flag.implies):
                if target not in by_name:
                    raise UnknownFlagError(target)

        pairs = []
        for pair in conflicts:
            flag_a, flag_b = tuple(pair)
            for name in (flag_a, flag_b):
                if name not in by_name:
                    raise UnknownFlagError(name)
            pairs.append((flag_a, flag_b))

        _check_acyclic(by_name, order)

        self._flags = MappingProxyType(by_name)
        self._order = tuple(order)
        self._default_set = frozenset(name for name in order if by_name[name].is_default)
        self._conflicts = tuple(pairs)
        self._artifact = artifact

    def __contains__(self, name):
        return name in self._flags

    def __iter__(self):
        return (self._flags[name] for name in self._order)

    def __len__(self):
        return len(self._order)

    def get(self, name):
        """Look up a flag by name."""
        try:
            return self._flags[name]
        except KeyError:
            raise UnknownFlagError(name) from None

    @property
    def names(self):
        """Flag names in declaration order."""
        return self._order

    @property
    def default_set(self):
        return self._default_set

    def implied_by(self, name):
        """Direct implication edges of a flag."""
        return self.get(name).implies

    def contract_for(self, name, mode='release'):
        """
        Artifact contract a flag carries, or None.

        In dev mode a flag's looser dev contract wins when it declares one.
        """
        flag = self.get(name)
        if mode == 'dev' and flag.dev_contract is not None:
            return flag.dev_contract
        return flag.contract

    @property
    def conflicts(self):
        return self._conflicts

    @property
    def artifact(self):
        return self._artifact

    def __repr__(self):
        owner = f"{self._artifact.name} {self._artifact.version}" if self._artifact else 'anonymous'
        return f"<FlagRegistry {owner}: {len(self._order)} flags>"


def _check_acyclic(by_name, order):
    """Depth-first walk over implication edges; raises on the first back edge."""
    visiting, done = set(), set()

    for root in order:
        if root in done:
            continue
        path = [root]
        stack = [iter(sorted(by_name[root].implies))]
        visiting.add(root)
        while stack:
            target = next(stack[-1], None)
            if target is None:
                stack.pop()
                finished = path.pop()
                visiting.discard(finished)
                done.add(finished)
                continue
            if target in visiting:
                start = path.index(target)
                raise CyclicImplicationError(path[start:] + [target])
            if target in done:
                continue
            visiting.add(target)
            path.append(target)
            stack.append(iter(sorted(by_name[target].implies)))


def flag_from_entry(entry):
    """Build a Flag from one manifest `flags` entry."""
    name = entry['name']
    artifact_name = entry.get('artifact', name)

    contract = None
    if entry.get('requirement'):
        contract = ArtifactContract.from_requirement(artifact_name, entry['requirement'])

    dev_contract = None
    if entry.get('dev_requirement'):
        dev_contract = ArtifactContract.from_requirement(artifact_name, entry['dev_requirement'])

    return Flag(
        name=name,
        is_default=bool(entry.get('default', False)),
        implies=frozenset(entry.get('implies', [])),
        contract=contract,
        dev_contract=dev_contract,
        kind=entry.get('kind', FEATURE),
        description=entry.get('description', '').strip(),
        provides=frozenset(entry.get('provides', [])),
        source=entry.get('source', {}),
    )


def build_registry(table):
    """
    Build a registry from a declarative table (the parsed manifest).

    Example:
      table = {
          'artifact': {'name': 'serde', 'version': '1.0.139'},
          'default': ['std'],
          'flags': [{'name': 'std'}, {'name': 'rc'}],
      }
    """
    artifact = None
    if table.get('artifact'):
        artifact = ArtifactInfo(
            name=table['artifact']['name'],
            version=str(table['artifact']['version']),
        )

    flags = [flag_from_entry(entry) for entry in table.get('flags', [])]
    return FlagRegistry(
        flags,
        default=table.get('default', []),
        conflicts=table.get('conflicts', []),
        artifact=artifact,
    )


def load_registry(file_path):
    """Load, schema-check and build a registry from a YAML manifest."""
    return build_registry(load_manifest(file_path))


# Process-wide registry instance
_registry_instance = None
_registry_lock = threading.Lock()


def get_registry():
    """Get the process-wide registry, building it from settings on first use."""
    global _registry_instance
    if _registry_instance is None:
        with _registry_lock:
            if _registry_instance is None:
                _registry_instance = load_registry(manifest_path(load_settings()))
    return _registry_instance
