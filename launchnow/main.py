#!/usr/bin/env python3
"""LaunchNow command line entry point.

Runs one application discovery scan and prints the result.

Usage:
    launchnow                              # JSON list of discovered apps
    launchnow --format yaml                # Same, as YAML
    launchnow --config search-paths.yaml   # Use a different root list
    launchnow --save ~/apps.yaml           # Also write a snapshot
    launchnow --compare ~/apps.yaml        # Report changes since a snapshot
    launchnow --verbose                    # Log skipped entries to stderr

Errors are reported as a JSON object on stdout with exit status 1.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from .config import SearchPathError, load_search_paths
from .output.state import SnapshotError, compare_with_snapshot, write_snapshot
from .scanners import applications
from .utils.log import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="launchnow",
        description="Discover installed macOS application bundles",
    )
    parser.add_argument(
        '--config',
        type=Path,
        help='Search paths YAML file (default: $LAUNCHNOW_SEARCH_PATHS or packaged defaults)'
    )
    parser.add_argument(
        '--format',
        choices=('json', 'yaml'),
        default='json',
        help='Output format (default: json)'
    )
    parser.add_argument(
        '--save',
        type=Path,
        metavar='FILE',
        help='Write a YAML snapshot of the result to FILE'
    )
    parser.add_argument(
        '--compare',
        type=Path,
        metavar='FILE',
        help='Compare the result against a snapshot written by --save'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log scan details, including skipped entries, to stderr'
    )
    return parser


def run_scan(
    config_path: Optional[Path] = None,
    save_path: Optional[Path] = None,
    compare_path: Optional[Path] = None,
) -> dict[str, Any]:
    """Run one scan and build the command output.

    Args:
        config_path: Optional search paths file
        save_path: Where to write a snapshot, if anywhere
        compare_path: Snapshot to compare against, if any

    Returns:
        Results dictionary with status, applications, count, search_paths,
        errors and, when requested, snapshot / comparison sections

    Raises:
        SearchPathError: If the search path configuration is invalid
        SnapshotError: If the comparison snapshot cannot be loaded or the
            snapshot cannot be written
    """
    config = load_search_paths(config_path)
    scan_output = applications.scan(config)

    results: dict[str, Any] = {"status": "success"}
    results.update(scan_output)

    if compare_path is not None:
        results["comparison"] = compare_with_snapshot(scan_output, compare_path)

    if save_path is not None:
        write_snapshot(scan_output, save_path, config.roots)
        results["snapshot"] = str(save_path.expanduser())

    return results


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for LaunchNow."""
    args = build_parser().parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        results = run_scan(args.config, args.save, args.compare)
    except (SearchPathError, SnapshotError) as e:
        print(json.dumps({
            "status": "error",
            "error": str(e),
            "exception_type": type(e).__name__,
        }))
        return 1

    if args.format == 'yaml':
        print(yaml.dump(results, default_flow_style=False, sort_keys=False, allow_unicode=True), end="")
    else:
        print(json.dumps(results, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
