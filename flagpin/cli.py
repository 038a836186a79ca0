#!/usr/bin/env python3
"""
flagpin command line
Resolves feature requests, checks artifact pins and prints the capability
surface for the downstream build.
"""

import argparse
import sys

from .config.flags import load_request, parse_artifacts, split_features
from .config.settings import load_settings
from .errors import FlagPinError
from .pin_guard import BUILD_MODES, check_lockstep, pinned_contracts, validate
from .pipeline import run_pipeline
from .registry import get_registry, load_registry
from .resolver import explain, resolve
from .surface import OUTPUT_FORMATS, materialize, render


def _print_phase(phase_num, phase_name, profile_name=None):
    """Helper to print phase headers."""
    print(f"\n{'='*60}")
    if profile_name:
        print(f"PHASE {phase_num}: {phase_name} ({profile_name.upper()})")
    else:
        print(f"PHASE {phase_num}: {phase_name}")
    print(f"{'='*60}")


def _registry(args):
    if args.manifest:
        return load_registry(args.manifest)
    return get_registry()


def _default_features(args, settings):
    if args.no_default_features:
        return False
    return settings['build'].get('default_features', True)


def resolve_command(args, settings):
    """Print the closed capability set for the requested features."""
    registry = _registry(args)
    capabilities = resolve(registry, split_features(args.features), _default_features(args, settings))
    if args.explain:
        reasons = explain(registry, capabilities)
        for name in sorted(capabilities):
            via = ', '.join(sorted(reasons[name]))
            print(f"{name}" + (f"  (via {via})" if via else ""))
    else:
        print(render(registry, capabilities, fmt='list'))


def validate_command(args, settings):
    """Resolve, then check artifact pins for the enabled flags."""
    registry = _registry(args)
    capabilities = resolve(registry, split_features(args.features), _default_features(args, settings))
    mode = args.mode or settings['build'].get('mode', 'release')
    validate(registry, capabilities, parse_artifacts(args.artifact), mode)
    print(f"[OK] Artifact pins satisfied ({mode})")


def surface_command(args, settings):
    """Print the exposed items (or flag string) for the requested features."""
    registry = _registry(args)
    capabilities = resolve(registry, split_features(args.features), _default_features(args, settings))
    items = materialize(registry, capabilities)
    fmt = args.format or settings['output'].get('format', 'list')
    print(render(registry, capabilities, items=items, fmt=fmt))


def build_command(args, settings):
    """Run a profile through the whole pipeline, printing each phase."""
    registry = _registry(args)
    request = load_request(settings, args.profile, args.profile_file)

    print("=" * 60)
    print(f"BUILD ({request.name.upper()})")
    print("=" * 60)
    print(f"Registry: {registry!r}")
    print(f"Requested: {', '.join(sorted(request.features)) or '(none)'}")
    print(f"Default features: {'on' if request.default_features else 'off'}, Mode: {request.mode}")

    result = run_pipeline(registry, request)

    _print_phase(1, "CLOSURE", request.name)
    print(render(registry, result.capabilities, fmt='list'))

    _print_phase(2, "PINS", request.name)
    contracts = [(name, contract) for name, contract in pinned_contracts(registry, request.mode)
                 if name in result.capabilities]
    if not contracts:
        print("No artifact contracts on enabled flags")
    for name, contract in contracts:
        found = request.artifacts.get(contract.artifact)
        print(f"  ✓ {name}: {contract.artifact} {contract.requirement} (found {found})")

    _print_phase(3, "SURFACE", request.name)
    fmt = args.format or settings['output'].get('format', 'list')
    print(render(registry, result.capabilities, items=result.items, fmt=fmt))

    print("=" * 60)
    print(f"BUILD ({request.name.upper()}) COMPLETE")
    print("=" * 60)


def flags_command(args, settings):
    """Print only the compiled flag string (for easy parsing by build scripts)."""
    registry = _registry(args)
    request = load_request(settings, args.profile, args.profile_file)
    result = run_pipeline(registry, request)
    print(render(registry, result.capabilities, fmt=args.format or 'mask'))


def check_release_command(args, settings):
    """Check that every exact pin matches the owning artifact's version."""
    registry = _registry(args)
    check_lockstep(registry)
    owner = registry.artifact
    label = f"{owner.name} {owner.version}" if owner else "registry"
    print(f"[OK] Release pins in lockstep with {label}")


COMMANDS = {
    'resolve': resolve_command,
    'validate': validate_command,
    'surface': surface_command,
    'build': build_command,
    'flags': flags_command,
    'check-release': check_release_command,
}


def build_parser():
    parser = argparse.ArgumentParser(
        prog='flagpin',
        description='Feature flag resolution and artifact pin validation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  flagpin resolve --features derive
  flagpin resolve --features alloc --no-default-features --explain
  flagpin validate --features derive --artifact serde_derive=1.0.139
  flagpin surface --features derive,rc --format cargo
  flagpin build --profile playground
  flagpin flags --profile no-std
  flagpin check-release
        """
    )
    parser.add_argument('command', choices=list(COMMANDS), help='Command to run')
    parser.add_argument('--manifest', help='Feature manifest (defaults to the configured one)')
    parser.add_argument('--features', default='', help='Comma separated flags to request')
    parser.add_argument('--no-default-features', action='store_true', help='Do not enable the default set')
    parser.add_argument('--artifact', action='append', default=[], help='Declared artifact version, NAME=VERSION')
    parser.add_argument('--mode', choices=BUILD_MODES, help='Pin mode (release enforces exact pins)')
    parser.add_argument('--format', choices=OUTPUT_FORMATS, help='Output format')
    parser.add_argument('--profile', help='Build profile name')
    parser.add_argument('--profile-file', help='Build profile path')
    parser.add_argument('--explain', action='store_true', help='Show which flag enabled each flag')
    return parser


def main(argv=None):
    """Main entry point - parse command line and run the command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in ('build', 'flags') and not (args.profile or args.profile_file):
        parser.error(f"{args.command} requires --profile or --profile-file")

    try:
        parse_artifacts(args.artifact)
    except ValueError as e:
        parser.error(str(e))

    settings = load_settings()
    try:
        COMMANDS[args.command](args, settings)
    except FlagPinError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
