"""LaunchNow application discovery.

Finds installed macOS application bundles across a configurable set of
search roots, with symlink-aware deduplication and nested-bundle
filtering, and delivers a sorted result off the caller's thread.

Usage:
    from launchnow import ApplicationScanner

    scanner = ApplicationScanner()
    scanner.scan(show_apps, dispatch=loop.call_soon_threadsafe)
"""

__version__ = "1.0.0"

from .config import SearchPathConfig, SearchPathError, load_search_paths
from .scanners import (
    ApplicationRecord,
    ApplicationScanner,
    CancelToken,
    ScanCancelled,
    ScanResult,
)

__all__ = [
    '__version__',
    'ApplicationRecord',
    'ApplicationScanner',
    'CancelToken',
    'ScanCancelled',
    'ScanResult',
    'SearchPathConfig',
    'SearchPathError',
    'load_search_paths',
]
