"""Search path configuration for application discovery.

This module is the single source of truth for the directories the
scanner walks. Defaults ship in ``data/search-paths.yaml``; a different
file can be supplied explicitly or through ``$LAUNCHNOW_SEARCH_PATHS``.

File format:
    search_paths:          # ordered list of absolute directories
      - /Applications
      - ~/Applications     # ~ expands to the current user's home
    package_extensions:    # directories never descended into
      - .app
      - .bundle

Validation rules:
    - Every search path must be absolute after ~ expansion
    - Duplicate entries are dropped, first occurrence wins
    - A missing or unreadable file falls back to built-in defaults
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import yaml

from ..utils import log
from ..utils.constants import DEFAULT_PACKAGE_EXTENSIONS, SEARCH_PATHS_ENV_VAR

DEFAULT_SEARCH_PATHS = (
    "/Applications",
    "~/Applications",
    "/System/Applications",
    "/System/Cryptexes/App/System/Applications",
)


class SearchPathError(ValueError):
    """Raised when a configured search path is not usable as a root."""
    pass


def get_default_search_paths_file() -> Path:
    """Get the path to the packaged search-paths.yaml."""
    # Go from config/ up to the package root, then to data/
    return Path(__file__).parent.parent / "data" / "search-paths.yaml"


def validate_search_path(path: Union[str, Path]) -> Path:
    """Expand and validate a single search path.

    Args:
        path: Configured path, optionally starting with ~

    Returns:
        The expanded absolute path (symlinks are left unresolved; the
        scanner resolves every entry it visits)

    Raises:
        SearchPathError: If the path is empty or not absolute
    """
    text = str(path).strip()
    if not text:
        raise SearchPathError("Empty search path")

    expanded = Path(os.path.expanduser(text))
    if not expanded.is_absolute():
        raise SearchPathError(f"Search paths must be absolute: {text}")

    return expanded


def _normalize_extension(ext: str) -> str:
    """Ensure an extension starts with a dot."""
    ext = ext.strip()
    if not ext.startswith("."):
        ext = "." + ext
    return ext


@dataclass(frozen=True)
class SearchPathConfig:
    """Immutable set of search roots and package extensions.

    Example:
        >>> config = SearchPathConfig.from_paths(["/Applications"])
        >>> config.roots
        (PosixPath('/Applications'),)
    """

    roots: tuple[Path, ...]
    package_extensions: tuple[str, ...] = DEFAULT_PACKAGE_EXTENSIONS
    source: Optional[Path] = field(default=None, compare=False)

    @classmethod
    def from_paths(
        cls,
        paths: Iterable[Union[str, Path]],
        package_extensions: Optional[Iterable[str]] = None,
        source: Optional[Path] = None,
    ) -> "SearchPathConfig":
        """Build a config from raw path strings.

        Raises:
            SearchPathError: If any path is not absolute
        """
        roots: list[Path] = []
        for raw in paths:
            root = validate_search_path(raw)
            if root not in roots:
                roots.append(root)

        if package_extensions is None:
            extensions = DEFAULT_PACKAGE_EXTENSIONS
        else:
            extensions = tuple(
                dict.fromkeys(_normalize_extension(ext) for ext in package_extensions if ext)
            )

        return cls(roots=tuple(roots), package_extensions=extensions, source=source)

    def to_dict(self) -> dict[str, Any]:
        return {
            "search_paths": [str(root) for root in self.roots],
            "package_extensions": list(self.package_extensions),
            "source": str(self.source) if self.source else None,
        }


def _read_yaml(config_path: Path) -> Optional[dict[str, Any]]:
    """Load the YAML mapping at config_path, or None if unusable."""
    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        log.general.warning("Search path file not found: %s", config_path)
        return None
    except (yaml.YAMLError, OSError) as e:
        log.general.warning("Could not read search path file %s: %s", config_path, e)
        return None

    if data is None:
        return {}
    if not isinstance(data, dict):
        log.general.warning("Search path file %s is not a mapping", config_path)
        return None
    return data


def load_search_paths(config_path: Optional[Union[str, Path]] = None) -> SearchPathConfig:
    """Load the search path configuration.

    Resolution order: explicit ``config_path``, ``$LAUNCHNOW_SEARCH_PATHS``,
    then the packaged ``data/search-paths.yaml``. An unreadable file
    falls back to the built-in defaults.

    Args:
        config_path: Optional path to a search-paths YAML file

    Returns:
        The loaded SearchPathConfig

    Raises:
        SearchPathError: If the file lists a relative or empty path, or if
            search_paths / package_extensions is not a list
    """
    if config_path is None:
        config_path = os.environ.get(SEARCH_PATHS_ENV_VAR) or get_default_search_paths_file()
    config_path = Path(config_path).expanduser()

    data = _read_yaml(config_path)
    if data is None:
        log.general.info("Using built-in search paths")
        return SearchPathConfig.from_paths(DEFAULT_SEARCH_PATHS)

    paths = data.get("search_paths")
    if paths is None:
        paths = list(DEFAULT_SEARCH_PATHS)
    elif not isinstance(paths, list):
        raise SearchPathError(f"search_paths must be a list in {config_path}")

    extensions = data.get("package_extensions")
    if extensions is not None and not isinstance(extensions, list):
        raise SearchPathError(f"package_extensions must be a list in {config_path}")

    config = SearchPathConfig.from_paths(paths, extensions, source=config_path)
    log.general.debug("Loaded %d search paths from %s", len(config.roots), config_path)
    return config
