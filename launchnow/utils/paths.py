"""Path helpers for application discovery.

Every identity decision the scanner makes is taken on the canonical path,
the path with all symbolic links resolved. Without resolution the same
bundle could show up under two different strings (a symlinked
~/Applications pointing into /Applications, for example), which would
defeat both the duplicate check and the nested-bundle check.
"""

import os
from pathlib import Path
from typing import Iterable, Union

from .constants import APP_EXTENSION


def canonical_path(path: Union[str, Path]) -> Path:
    """Resolve every symbolic link in a path.

    Resolution is non-strict: a dangling link resolves to its target path
    and the existence check is left to the caller.

    Args:
        path: Path to resolve

    Returns:
        Absolute path with symlinks resolved

    Raises:
        OSError: If the filesystem refuses resolution
    """
    return Path(os.path.realpath(path))


def is_hidden(name: str) -> bool:
    """Check if a directory entry name is hidden (dot-prefixed).

    Examples:
        >>> is_hidden(".Trash")
        True
        >>> is_hidden("Safari.app")
        False
    """
    return name.startswith(".")


def has_extension(path: Union[str, Path], extensions: Iterable[str]) -> bool:
    """Check a path's final suffix against a set of extensions.

    Examples:
        >>> has_extension("/Applications/Safari.app", {".app"})
        True
        >>> has_extension("/Applications/notanapp", {".app"})
        False
    """
    suffix = Path(path).suffix
    return bool(suffix) and suffix in set(extensions)


def is_app_bundle_name(path: Union[str, Path]) -> bool:
    """Check if a path's name carries the application bundle extension."""
    return has_extension(path, (APP_EXTENSION,))


def is_inside_app_bundle(path: Union[str, Path]) -> bool:
    """Check if a path lives beneath another application bundle.

    Every component except the last is inspected; a single ``.app``
    ancestor is enough to classify the path as embedded (a helper app in
    another app's Contents, for example).

    Args:
        path: Canonical path of the candidate bundle

    Returns:
        True if any ancestor component ends in ``.app``

    Examples:
        >>> is_inside_app_bundle("/Applications/Xcode.app/Contents/Developer/Simulator.app")
        True
        >>> is_inside_app_bundle("/Applications/Utilities/Terminal.app")
        False
    """
    parts = Path(path).parts
    return any(part.endswith(APP_EXTENSION) for part in parts[:-1])
