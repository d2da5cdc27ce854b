"""Scanner modules for discovering installed software.

Modules:
    applications: Walk the search paths for .app bundles
    models: ApplicationRecord and ScanResult types
"""

from . import applications
from .applications import ApplicationScanner, CancelToken, ScanCancelled
from .models import ApplicationRecord, ScanResult

__all__ = [
    "applications",
    "ApplicationScanner",
    "ApplicationRecord",
    "CancelToken",
    "ScanCancelled",
    "ScanResult",
]
