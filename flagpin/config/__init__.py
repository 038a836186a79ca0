"""
Configuration, validation, and profile compilation package.

This package contains modules for loading settings, validating feature
manifests and build profiles, and compiling profiles into build requests.
"""

__all__ = ['settings', 'validation', 'flags']
