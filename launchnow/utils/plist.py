"""Info.plist reading for application bundles.

The scanner only needs a handful of identity keys from each bundle's
``Contents/Info.plist``: identifier, icon and version. Bundles ship that
file as XML or binary plist; plistlib reads both, and ``plutil`` is used
as a fallback for the occasional binary plist plistlib rejects.
"""

import os
import plistlib
import stat
import subprocess
from pathlib import Path
from typing import Any, Optional
from xml.parsers.expat import ExpatError

from .constants import TIMEOUT_SYSTEM_QUICK


class PlistError(Exception):
    """Raised when plist operations fail."""
    pass


def is_binary_plist(file_path: Path) -> bool:
    """Check if a file is a binary plist.

    Binary plists start with the magic bytes 'bplist'.

    Args:
        file_path: Path to the file to check

    Returns:
        True if file is a binary plist, False otherwise
    """
    try:
        with open(file_path, 'rb') as f:
            return f.read(6) == b'bplist'
    except OSError:
        return False


def _convert_with_plutil(file_path: Path) -> dict[str, Any]:
    """Read a plist through ``plutil -convert xml1`` (macOS only).

    Raises:
        PlistError: If plutil is unavailable or cannot convert the file
    """
    try:
        result = subprocess.run(
            ['/usr/bin/plutil', '-convert', 'xml1', '-o', '-', str(file_path)],
            capture_output=True,
            timeout=TIMEOUT_SYSTEM_QUICK,
        )
    except subprocess.TimeoutExpired:
        raise PlistError(f"plutil timed out on {file_path}")
    except OSError as e:
        raise PlistError(f"plutil unavailable: {e}")

    if result.returncode != 0:
        message = result.stderr.decode(errors='replace').strip() or "Unknown error"
        raise PlistError(f"plutil error: {message}")

    try:
        return plistlib.loads(result.stdout)
    except (ExpatError, ValueError) as e:
        raise PlistError(f"Invalid plist format: {e}")


def read_plist(file_path: Path) -> dict[str, Any]:
    """Read a plist file and return its contents as a dictionary.

    Handles both binary and XML plist formats.

    Args:
        file_path: Path to the plist file

    Returns:
        Dictionary with plist contents

    Raises:
        PlistError: If file cannot be read or parsed
    """
    try:
        with open(file_path, 'rb') as f:
            data = plistlib.load(f)
    except plistlib.InvalidFileException as e:
        if is_binary_plist(file_path):
            data = _convert_with_plutil(file_path)
        else:
            raise PlistError(f"Invalid plist format: {e}")
    except OSError as e:
        raise PlistError(f"Could not read plist: {e}")
    except (ExpatError, ValueError) as e:
        raise PlistError(f"Invalid plist format: {e}")

    if not isinstance(data, dict):
        raise PlistError(f"Plist root is not a dictionary: {file_path}")
    return data


def read_plist_safe(file_path: Path) -> tuple[Optional[dict], Optional[str]]:
    """Safely read a plist file, returning error instead of raising.

    Args:
        file_path: Path to the plist file

    Returns:
        Tuple of (data, error_message) - data is None if error
    """
    try:
        return read_plist(file_path), None
    except PlistError as e:
        return None, str(e)


def _string_value(plist: dict[str, Any], *keys: str) -> Optional[str]:
    """First non-empty string among the given keys."""
    for key in keys:
        value = plist.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def read_bundle_info(app_path: Path) -> tuple[dict[str, Optional[str]], Optional[str]]:
    """Extract identity metadata from an application bundle.

    Args:
        app_path: Path to the .app bundle

    Returns:
        Tuple of (info, error_message). ``info`` always carries the keys
        bundle_id, icon_file and version, set to None when unavailable.
    """
    info: dict[str, Optional[str]] = {
        'bundle_id': None,
        'icon_file': None,
        'version': None,
    }

    info_plist = app_path / 'Contents' / 'Info.plist'
    try:
        mode = os.stat(info_plist).st_mode
    except (FileNotFoundError, NotADirectoryError):
        return info, f"No Info.plist in {app_path}"
    except OSError as e:
        return info, f"Could not read Info.plist: {e}"
    if not stat.S_ISREG(mode):
        return info, f"No Info.plist in {app_path}"

    plist, error = read_plist_safe(info_plist)
    if plist is None:
        return info, error

    info['bundle_id'] = _string_value(plist, 'CFBundleIdentifier')
    info['icon_file'] = _string_value(plist, 'CFBundleIconFile', 'CFBundleIconName')
    info['version'] = _string_value(plist, 'CFBundleShortVersionString', 'CFBundleVersion')
    return info, None
