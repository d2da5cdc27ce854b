import errno
import logging
import os
import plistlib
from pathlib import Path

import pytest


def make_app(parent: Path, name: str, info: dict = None, binary: bool = False) -> Path:
    """Create a minimal .app bundle directory with an optional Info.plist."""
    app = parent / f"{name}.app"
    contents = app / "Contents"
    (contents / "MacOS").mkdir(parents=True)
    if info is not None:
        fmt = plistlib.FMT_BINARY if binary else plistlib.FMT_XML
        with open(contents / "Info.plist", "wb") as f:
            plistlib.dump(info, f, fmt=fmt)
    return app


def deny_access(monkeypatch, function_name: str, *targets: Path) -> None:
    """Make os.<function_name> raise EACCES for targets, as an unreadable path would.

    Works under any uid, unlike chmod, which root ignores.
    """
    real = getattr(os, function_name)
    denied = {str(target) for target in targets}

    def guarded(path, *args, **kwargs):
        if isinstance(path, (str, os.PathLike)) and os.fspath(path) in denied:
            raise PermissionError(errno.EACCES, "Permission denied", os.fspath(path))
        return real(path, *args, **kwargs)

    monkeypatch.setattr(os, function_name, guarded)


@pytest.fixture
def apps_root(tmp_path):
    root = tmp_path.resolve() / "Applications"
    root.mkdir()
    return root


@pytest.fixture
def home(tmp_path, monkeypatch):
    home_dir = tmp_path.resolve() / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture(autouse=True)
def reset_launchnow_logging():
    root = logging.getLogger("launchnow")
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
