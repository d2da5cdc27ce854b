"""Scan snapshots for comparing discovery results over time.

The scanner keeps nothing between scans; callers that want to know what
changed since the last refresh write a snapshot and compare the next
result against it.

Snapshot format (YAML):
    launchnow:
      version: 1.0.0
      capture_timestamp: 2026-10-19T14:30:22
    search_paths: [...]
    applications:
      - name: Safari
        path: /Applications/Safari.app
        bundle_id: com.apple.Safari
        icon_file: AppIcon
        version: "18.0"
    count: 1
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import yaml

from .. import __version__
from ..scanners.models import ScanResult
from ..utils import log


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read, written or parsed."""
    pass


ScanOutput = Union[ScanResult, dict[str, Any]]


def _applications_payload(result: ScanOutput) -> dict[str, Any]:
    """The applications and count of a ScanResult or a scan() dictionary."""
    if isinstance(result, ScanResult):
        return result.to_dict()
    return {"applications": list(result["applications"]), "count": result["count"]}


def build_snapshot(
    result: ScanOutput,
    search_paths: Optional[Iterable[Union[str, Path]]] = None,
) -> dict[str, Any]:
    """Build the snapshot mapping for a scan result.

    Args:
        result: ScanResult or the dictionary returned by scanners.applications.scan
        search_paths: Roots the scan walked, recorded for reference

    Returns:
        Snapshot dictionary ready for YAML serialization
    """
    snapshot: dict[str, Any] = {
        "launchnow": {
            "version": __version__,
            "capture_timestamp": datetime.now().isoformat(timespec="seconds"),
        },
        "search_paths": [str(path) for path in search_paths or []],
    }
    snapshot.update(_applications_payload(result))
    return snapshot


def write_snapshot(
    result: ScanOutput,
    snapshot_path: Path,
    search_paths: Optional[Iterable[Union[str, Path]]] = None,
) -> dict[str, Any]:
    """Write a scan result to a YAML snapshot file.

    Returns:
        The snapshot that was written

    Raises:
        SnapshotError: If the file or its directory cannot be written
    """
    snapshot = build_snapshot(result, search_paths)

    snapshot_path = Path(snapshot_path).expanduser()
    try:
        snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        with open(snapshot_path, "w") as f:
            yaml.dump(snapshot, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
    except OSError as e:
        raise SnapshotError(f"Could not write snapshot {snapshot_path}: {e}")

    log.persistence.info("Wrote snapshot of %d applications to %s", snapshot["count"], snapshot_path)
    return snapshot


def load_snapshot(snapshot_path: Path) -> dict[str, Any]:
    """Load a snapshot file.

    Args:
        snapshot_path: Path to a snapshot written by write_snapshot

    Returns:
        Parsed snapshot dictionary

    Raises:
        SnapshotError: If the file is missing, invalid YAML, or has no
            applications list
    """
    snapshot_path = Path(snapshot_path).expanduser()
    try:
        with open(snapshot_path) as f:
            snapshot = yaml.safe_load(f)
    except FileNotFoundError:
        raise SnapshotError(f"Snapshot not found: {snapshot_path}")
    except (yaml.YAMLError, OSError) as e:
        raise SnapshotError(f"Could not read snapshot {snapshot_path}: {e}")

    if not isinstance(snapshot, dict) or not isinstance(snapshot.get("applications"), list):
        raise SnapshotError(f"Not a LaunchNow snapshot: {snapshot_path}")

    return snapshot


def _index_by_path(applications: Iterable[dict[str, Any]]) -> dict[str, dict[str, Any]]:
    return {
        str(app["path"]): app
        for app in applications
        if isinstance(app, dict) and app.get("path")
    }


def compare_snapshots(
    before: dict[str, Any],
    after: dict[str, Any],
) -> dict[str, Any]:
    """Compare two snapshots by canonical path.

    Args:
        before: Older snapshot (or ScanResult.to_dict() output)
        after: Newer snapshot

    Returns:
        Dictionary with added, removed and updated applications (lists
        sorted by name) plus the count change
    """
    old = _index_by_path(before.get("applications", []))
    new = _index_by_path(after.get("applications", []))

    def by_name(apps: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
        return sorted(apps, key=lambda app: (str(app.get("name", "")).casefold(), str(app["path"])))

    added = by_name(new[path] for path in new.keys() - old.keys())
    removed = by_name(old[path] for path in old.keys() - new.keys())

    updated = []
    for path in sorted(old.keys() & new.keys()):
        if old[path].get("version") != new[path].get("version"):
            updated.append({
                "name": new[path].get("name"),
                "path": path,
                "before": old[path].get("version"),
                "after": new[path].get("version"),
            })

    return {
        "timestamp1": before.get("launchnow", {}).get("capture_timestamp"),
        "timestamp2": after.get("launchnow", {}).get("capture_timestamp"),
        "added": added,
        "removed": removed,
        "updated": updated,
        "count_change": len(new) - len(old),
    }


def compare_with_snapshot(result: ScanOutput, snapshot_path: Path) -> dict[str, Any]:
    """Compare a fresh scan result against a saved snapshot.

    Raises:
        SnapshotError: If the snapshot cannot be loaded
    """
    return compare_snapshots(load_snapshot(snapshot_path), build_snapshot(result))
