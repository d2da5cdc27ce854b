"""Utility modules for common operations.

Modules:
    constants: Bundle extensions, timeouts and environment names
    log: Named logger categories and handler setup
    paths: Canonical path resolution and bundle containment checks
    plist: Info.plist reading for bundle metadata
"""

from .log import configure_logging
from .paths import (
    canonical_path,
    has_extension,
    is_app_bundle_name,
    is_hidden,
    is_inside_app_bundle,
)
from .plist import (
    PlistError,
    is_binary_plist,
    read_bundle_info,
    read_plist,
    read_plist_safe,
)

__all__ = [
    # log
    'configure_logging',
    # paths
    'canonical_path',
    'has_extension',
    'is_app_bundle_name',
    'is_hidden',
    'is_inside_app_bundle',
    # plist
    'PlistError',
    'is_binary_plist',
    'read_bundle_info',
    'read_plist',
    'read_plist_safe',
]
