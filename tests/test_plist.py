import plistlib

import pytest

from launchnow.utils.plist import PlistError, is_binary_plist, read_bundle_info, read_plist, read_plist_safe

from conftest import deny_access, make_app


def test_reads_xml_and_binary_plists(tmp_path):
    data = {"CFBundleIdentifier": "com.example.App"}
    xml_path = tmp_path / "xml.plist"
    bin_path = tmp_path / "bin.plist"
    xml_path.write_bytes(plistlib.dumps(data, fmt=plistlib.FMT_XML))
    bin_path.write_bytes(plistlib.dumps(data, fmt=plistlib.FMT_BINARY))

    assert read_plist(xml_path) == data
    assert read_plist(bin_path) == data
    assert is_binary_plist(bin_path)
    assert not is_binary_plist(xml_path)


@pytest.mark.parametrize("content", [
    b"not a plist at all",
    b"<?xml version='1.0'?><plist><dict><key>unterminated",
    b"bplist00 this is truncated",
])
def test_invalid_plists_raise_plist_error(tmp_path, content):
    path = tmp_path / "Info.plist"
    path.write_bytes(content)

    with pytest.raises(PlistError):
        read_plist(path)

    data, error = read_plist_safe(path)
    assert data is None
    assert error


def test_non_dict_root_is_rejected(tmp_path):
    path = tmp_path / "Info.plist"
    path.write_bytes(plistlib.dumps(["a", "b"]))

    with pytest.raises(PlistError):
        read_plist(path)


def test_missing_plist_is_reported(tmp_path):
    data, error = read_plist_safe(tmp_path / "absent.plist")

    assert data is None
    assert "Could not read plist" in error


def test_bundle_info_prefers_short_version_and_icon_file(tmp_path):
    app = make_app(tmp_path, "Pages", info={
        "CFBundleIdentifier": "com.apple.iWork.Pages",
        "CFBundleIconFile": "AppIcon.icns",
        "CFBundleIconName": "AppIcon",
        "CFBundleShortVersionString": "14.2",
        "CFBundleVersion": "7029",
    }, binary=True)

    info, error = read_bundle_info(app)

    assert error is None
    assert info == {
        "bundle_id": "com.apple.iWork.Pages",
        "icon_file": "AppIcon.icns",
        "version": "14.2",
    }


def test_bundle_info_falls_back_to_secondary_keys(tmp_path):
    app = make_app(tmp_path, "Tool", info={
        "CFBundleIconName": "ToolIcon",
        "CFBundleVersion": "12",
        "CFBundleIdentifier": 42,
    })

    info, error = read_bundle_info(app)

    assert error is None
    assert info == {"bundle_id": None, "icon_file": "ToolIcon", "version": "12"}


def test_bundle_without_info_plist_gives_empty_info(tmp_path):
    app = make_app(tmp_path, "Bare")

    info, error = read_bundle_info(app)

    assert info == {"bundle_id": None, "icon_file": None, "version": None}
    assert "No Info.plist" in error


def test_unreadable_info_plist_is_reported_not_raised(tmp_path, monkeypatch):
    app = make_app(tmp_path, "Locked", info={"CFBundleIdentifier": "com.example.Locked"})
    deny_access(monkeypatch, "stat", app / "Contents" / "Info.plist")

    info, error = read_bundle_info(app)

    assert info == {"bundle_id": None, "icon_file": None, "version": None}
    assert error.startswith("Could not read Info.plist")
    assert "Permission denied" in error
