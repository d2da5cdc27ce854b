"""Scanner for installed applications on macOS.

Walks every configured search root (/Applications, ~/Applications,
/System/Applications and the cryptex overlay by default) and returns the
application bundles found there as a sorted ScanResult.

Rules applied to every visited entry, in order:
    1. Resolve all symbolic links; later checks only see the canonical path
    2. Keep only names ending in .app
    3. Keep only paths that exist as directories (drops dangling links)
    4. Drop bundles nested inside another .app (helpers in Contents/)
    5. Drop canonical paths already recorded by this scan

Hidden entries are skipped and package directories (.app, .framework,
...) are never descended into. Discovery is best effort: unreadable
roots and entries are skipped and logged, never raised.

The walk runs on a background executor. ``ApplicationScanner.scan`` hands
the finished result to a completion callback on a context chosen by the
caller; ``scan_async`` is the asyncio equivalent.
"""

import asyncio
import os
import stat
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from ..config import SearchPathConfig, load_search_paths
from ..utils import log
from ..utils.paths import (
    canonical_path,
    has_extension,
    is_app_bundle_name,
    is_hidden,
    is_inside_app_bundle,
)
from ..utils.plist import read_bundle_info
from .models import ApplicationRecord, ScanResult

Dispatch = Callable[..., Any]
SearchPaths = Union[SearchPathConfig, Iterable[Union[str, Path]]]


class ScanCancelled(Exception):
    """Raised on a scan's future when its CancelToken was cancelled."""
    pass


class CancelToken:
    """Thread-safe cancellation flag shared between a caller and a scan.

    Example:
        >>> token = CancelToken()
        >>> future = scanner.scan(show_apps, cancel_token=token)
        >>> token.cancel()  # show_apps is never called
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ScanCancelled("Application scan cancelled")


def _call_directly(fn: Callable[..., Any], *args: Any) -> None:
    fn(*args)


def _default_dispatch() -> Dispatch:
    """Deliver on the caller's asyncio loop if there is one."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return _call_directly
    return loop.call_soon_threadsafe


def _walk_root(
    root: Path,
    package_extensions: tuple[str, ...],
    errors: list[dict[str, str]],
) -> Iterator[Path]:
    """Yield every non-hidden entry below root, skipping package contents.

    Symlinked directories are yielded but not followed, matching how
    Finder enumerates a folder.

    Args:
        root: Directory to walk
        package_extensions: Directory extensions that are never entered
        errors: Receives a {"path", "error"} entry per unreadable directory
    """

    def on_error(err: OSError) -> None:
        path = err.filename or str(root)
        log.app_scanning.debug("Skipping unreadable directory %s: %s", path, err)
        errors.append({"path": str(path), "error": err.strerror or str(err)})

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames[:] = sorted(name for name in dirnames if not is_hidden(name))
        visible_files = sorted(name for name in filenames if not is_hidden(name))

        entries = [Path(dirpath) / name for name in dirnames + visible_files]

        # Package descendants are never traversed
        dirnames[:] = [
            name for name in dirnames if not has_extension(name, package_extensions)
        ]

        yield from entries


def _is_directory(path: Path, errors: list[dict[str, str]]) -> bool:
    """Check that path is a directory, recording inaccessible paths as skips.

    Missing paths (dangling symlinks, entries removed mid-scan) are not
    errors; anything else the filesystem refuses is appended to errors.
    """
    try:
        mode = os.stat(path).st_mode
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as e:
        log.app_scanning.debug("Skipping inaccessible path %s: %s", path, e)
        errors.append({"path": str(path), "error": e.strerror or str(e)})
        return False
    return stat.S_ISDIR(mode)


def _resolve_app(entry: Path, errors: list[dict[str, str]]) -> Optional[Path]:
    """Canonical path of entry if it is a top-level application bundle."""
    try:
        resolved = canonical_path(entry)
    except OSError as e:
        log.app_scanning.debug("Could not resolve %s: %s", entry, e)
        errors.append({"path": str(entry), "error": f"Could not resolve path: {e}"})
        return None

    if not is_app_bundle_name(resolved):
        return None

    # Dangling symlinks and entries removed mid-scan fail here
    if not _is_directory(resolved, errors):
        log.app_scanning.debug("Skipping %s: not a directory at %s", entry, resolved)
        return None

    if is_inside_app_bundle(resolved):
        log.app_scanning.debug("Skipping %s: nested inside another bundle", resolved)
        return None

    return resolved


class ApplicationScanner:
    """Discovers installed application bundles.

    The scanner holds no state between scans: every call walks the
    filesystem from scratch. Construct one per process and pass it to
    whatever drives application refreshes.

    Example:
        >>> scanner = ApplicationScanner()
        >>> result = scanner.perform_scan()
        >>> [app.name for app in result][:3]
        ['Activity Monitor', 'App Store', 'Automator']

    Args:
        search_paths: SearchPathConfig or plain list of roots
            (default: load_search_paths())
        executor: Executor for background scans (default: a private
            thread pool, shut down by close())
        read_metadata: Read Info.plist for bundle_id, icon and version
    """

    def __init__(
        self,
        search_paths: Optional[SearchPaths] = None,
        executor: Optional[Executor] = None,
        read_metadata: bool = True,
    ):
        if search_paths is None:
            search_paths = load_search_paths()
        elif not isinstance(search_paths, SearchPathConfig):
            search_paths = SearchPathConfig.from_paths(search_paths)

        self._config: SearchPathConfig = search_paths
        self._executor = executor
        self._owns_executor = executor is None
        self._executor_lock = threading.Lock()
        self.read_metadata = read_metadata

    @property
    def search_paths(self) -> SearchPathConfig:
        return self._config

    def _get_executor(self) -> Executor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(thread_name_prefix="launchnow-scan")
            return self._executor

    def close(self) -> None:
        """Shut down the private executor, waiting for running scans."""
        with self._executor_lock:
            executor = self._executor if self._owns_executor else None
            if executor is not None:
                self._executor = None

        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self) -> "ApplicationScanner":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _build_record(self, path: Path, errors: list[dict[str, str]]) -> ApplicationRecord:
        if not self.read_metadata:
            return ApplicationRecord.from_path(path)

        info, error = read_bundle_info(path)
        if error:
            log.app_scanning.debug("Incomplete metadata for %s: %s", path, error)
            errors.append({"path": str(path), "error": error})
        return ApplicationRecord.from_path(path, **info)

    def collect(
        self, cancel_token: Optional[CancelToken] = None
    ) -> tuple[list[ApplicationRecord], list[dict[str, str]]]:
        """Walk all roots and return unsorted records plus skip events.

        Raises:
            ScanCancelled: If cancel_token is cancelled during the walk
        """
        records: list[ApplicationRecord] = []
        errors: list[dict[str, str]] = []
        seen: set[Path] = set()

        for root in self._config.roots:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()

            if not _is_directory(root, errors):
                # Expected for OS-version-specific roots
                log.app_scanning.debug("Search path unavailable, skipping: %s", root)
                continue

            for entry in _walk_root(root, self._config.package_extensions, errors):
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled()

                resolved = _resolve_app(entry, errors)
                if resolved is None or resolved in seen:
                    continue

                seen.add(resolved)
                records.append(self._build_record(resolved, errors))

        return records, errors

    def perform_scan(self, cancel_token: Optional[CancelToken] = None) -> ScanResult:
        """Run a complete scan on the current thread.

        Raises:
            ScanCancelled: If cancel_token is cancelled before completion
        """
        started = time.perf_counter()
        records, errors = self.collect(cancel_token)
        result = ScanResult(records)

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        log.performance.info(
            "Scanned %d search paths in %.3fs: %d applications, %d skipped entries",
            len(self._config.roots),
            time.perf_counter() - started,
            len(result),
            len(errors),
        )
        return result

    def scan(
        self,
        on_complete: Callable[[ScanResult], Any],
        dispatch: Optional[Dispatch] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> "Future[ScanResult]":
        """Scan in the background and hand the result to on_complete.

        on_complete runs exactly once with the full, sorted result, or not
        at all if the scan is cancelled. It is scheduled through dispatch,
        a callable invoked as ``dispatch(on_complete, result)`` that should
        move the call onto the caller's context (``loop.call_soon_threadsafe``
        or a GUI toolkit's equivalent). Without dispatch, delivery goes to
        the running asyncio loop of the calling thread if any, otherwise
        on_complete is called from the worker thread.

        The future resolves only after the result has been handed to
        dispatch, so delivery and the future always agree: either
        on_complete was dispatched and the future holds the result, or the
        future raises ScanCancelled and nothing was dispatched. Exceptions
        raised by dispatch (or by on_complete when it is called directly)
        are raised from the future.

        Args:
            on_complete: Receives the ScanResult
            dispatch: Schedules on_complete on the caller's context
            cancel_token: Cancels the scan and suppresses delivery

        Returns:
            Future resolving to the ScanResult (raises ScanCancelled if
            cancelled)
        """
        if dispatch is None:
            dispatch = _default_dispatch()

        def run() -> ScanResult:
            try:
                result = self.perform_scan(cancel_token)
            except ScanCancelled:
                raise
            except Exception:
                log.app_scanning.exception("Application scan failed")
                raise

            # Last cancellation point; nothing is dispatched after this
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()

            dispatch(on_complete, result)
            return result

        return self._get_executor().submit(run)

    async def scan_async(self, cancel_token: Optional[CancelToken] = None) -> ScanResult:
        """Scan in the executor and return the result on the awaiting loop.

        Cancelling the awaiting task also cancels the underlying walk.
        """
        token = cancel_token or CancelToken()
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._get_executor(), self.perform_scan, token)
        except asyncio.CancelledError:
            token.cancel()
            raise


def scan(search_paths: Optional[SearchPaths] = None) -> dict:
    """Scan for installed applications.

    Synchronous convenience wrapper used by the command line.

    Args:
        search_paths: Roots to walk (default: configured search paths)

    Returns:
        Dictionary with 'applications' list, 'count', 'search_paths' and
        'errors' list of skipped roots and entries
    """
    scanner = ApplicationScanner(search_paths)
    started = time.perf_counter()
    records, errors = scanner.collect()
    result = ScanResult(records)

    log.performance.info(
        "Scanned %d search paths in %.3fs: %d applications",
        len(scanner.search_paths.roots),
        time.perf_counter() - started,
        len(result),
    )

    output = result.to_dict()
    output["search_paths"] = [str(root) for root in scanner.search_paths.roots]
    output["errors"] = errors
    return output
