"""Centralized constants for LaunchNow.

Provides the bundle extensions, timeouts and environment names used
throughout the codebase. Centralizing these values makes them easier to
tune and keeps the scanner and its callers consistent.
"""

# =============================================================================
# BUNDLE EXTENSIONS
# =============================================================================

# Extension that marks a directory as an application bundle
APP_EXTENSION = ".app"

# Directories with these extensions are opaque packages: the walk reports
# them but never descends into their contents
DEFAULT_PACKAGE_EXTENSIONS = (
    ".app",
    ".appex",
    ".bundle",
    ".framework",
    ".kext",
    ".plugin",
    ".xpc",
)

# =============================================================================
# SUBPROCESS TIMEOUTS (in seconds)
# =============================================================================

# plutil conversion of a single Info.plist
TIMEOUT_SYSTEM_QUICK = 5

# =============================================================================
# ENVIRONMENT
# =============================================================================

# Overrides the location of search-paths.yaml
SEARCH_PATHS_ENV_VAR = "LAUNCHNOW_SEARCH_PATHS"
