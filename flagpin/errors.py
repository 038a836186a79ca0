#!/usr/bin/env python3
"""
Error taxonomy for flag resolution and pin validation.

Registry errors are construction defects: a process must not continue with a
broken registry. Pin and conflict errors abort the build request that hit them.
None of them are transient, so nothing here is ever retried.
"""


class FlagPinError(Exception):
    """Base for all flagpin errors."""


class RegistryError(FlagPinError):
    """The flag table itself is broken."""


class UnknownFlagError(RegistryError):
    def __init__(self, name):
        super().__init__(f"Unknown flag: '{name}'")
        self.name = name


class DuplicateFlagError(RegistryError):
    def __init__(self, name):
        super().__init__(f"Flag declared more than once: '{name}'")
        self.name = name


class CyclicImplicationError(RegistryError):
    def __init__(self, cycle):
        self.cycle = list(cycle)
        super().__init__(f"Implication cycle: {' -> '.join(self.cycle)}")


class ManifestError(RegistryError):
    def __init__(self, source, detail):
        super().__init__(f"Invalid manifest '{source}': {detail}")
        self.source = source
        self.detail = detail


class PinError(FlagPinError):
    """An artifact reference violates a version contract."""


class VersionMismatchError(PinError):
    def __init__(self, required, found, artifact=None):
        label = f" for {artifact}" if artifact else ""
        super().__init__(f"Exact pin violated{label}: required ={required}, found {found}")
        self.required = required
        self.found = found
        self.artifact = artifact


class IncompatibleVersionError(PinError):
    def __init__(self, required, found, artifact=None):
        label = f" for {artifact}" if artifact else ""
        super().__init__(f"Incompatible version{label}: required ^{required}, found {found}")
        self.required = required
        self.found = found
        self.artifact = artifact


class MissingArtifactError(PinError):
    def __init__(self, flag_name, artifact=None):
        detail = f" (needs artifact '{artifact}')" if artifact else ""
        super().__init__(f"No artifact reference supplied for flag '{flag_name}'{detail}")
        self.flag_name = flag_name
        self.artifact = artifact


class ConflictError(FlagPinError):
    def __init__(self, flag_a, flag_b):
        super().__init__(f"Mutually exclusive flags both enabled: '{flag_a}' and '{flag_b}'")
        self.flag_a = flag_a
        self.flag_b = flag_b
