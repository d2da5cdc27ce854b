from pathlib import Path

from launchnow.scanners.models import ApplicationRecord, ScanResult


def test_record_name_strips_extension():
    record = ApplicationRecord.from_path(Path("/Applications/Visual Studio Code.app"))

    assert record.name == "Visual Studio Code"
    assert record.icon_path is None


def test_records_equal_by_path_regardless_of_metadata():
    path = Path("/Applications/Safari.app")

    assert ApplicationRecord.from_path(path, bundle_id="com.apple.Safari") == ApplicationRecord.from_path(path)


def test_icon_path_keeps_existing_suffix():
    record = ApplicationRecord.from_path(Path("/Applications/Foo.app"), icon_file="Foo.icns")

    assert record.icon_path == Path("/Applications/Foo.app/Contents/Resources/Foo.icns")


def test_scan_result_sorts_and_serializes():
    result = ScanResult([
        ApplicationRecord.from_path(Path("/Applications/zeta.app")),
        ApplicationRecord.from_path(Path("/Users/me/Applications/Alpha.app")),
        ApplicationRecord.from_path(Path("/Applications/Alpha.app")),
        ApplicationRecord.from_path(Path("/Applications/beta.app")),
    ])

    assert result.names() == ("Alpha", "Alpha", "beta", "zeta")
    assert result[0].path == Path("/Applications/Alpha.app")
    assert result[1].path == Path("/Users/me/Applications/Alpha.app")
    assert len(result[1:]) == 3

    data = result.to_dict()
    assert data["count"] == 4
    assert data["applications"][0] == {
        "name": "Alpha",
        "path": "/Applications/Alpha.app",
        "bundle_id": None,
        "icon_file": None,
        "version": None,
    }


def test_empty_scan_results_are_equal():
    assert ScanResult() == ScanResult([])
    assert len(ScanResult()) == 0
    assert repr(ScanResult()) == "ScanResult(0 applications)"
