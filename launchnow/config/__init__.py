"""Configuration for application discovery.

Modules:
    search_paths: Load and validate the search-paths.yaml root list
"""

from .search_paths import (
    DEFAULT_SEARCH_PATHS,
    SearchPathConfig,
    SearchPathError,
    get_default_search_paths_file,
    load_search_paths,
    validate_search_path,
)

__all__ = [
    'DEFAULT_SEARCH_PATHS',
    'SearchPathConfig',
    'SearchPathError',
    'get_default_search_paths_file',
    'load_search_paths',
    'validate_search_path',
]
