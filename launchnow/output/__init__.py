"""Output generation for scan results.

Modules:
    state: Write, load and compare YAML snapshots of scan results
"""

from .state import (
    SnapshotError,
    build_snapshot,
    compare_snapshots,
    compare_with_snapshot,
    load_snapshot,
    write_snapshot,
)

__all__ = [
    'SnapshotError',
    'build_snapshot',
    'compare_snapshots',
    'compare_with_snapshot',
    'load_snapshot',
    'write_snapshot',
]
