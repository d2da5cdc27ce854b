import json

import yaml

from launchnow.main import main

from conftest import make_app


def write_config(tmp_path, *roots):
    config_file = tmp_path / "search-paths.yaml"
    config_file.write_text(yaml.dump({"search_paths": [str(root) for root in roots]}))
    return config_file


def test_prints_json_result(apps_root, tmp_path, capsys):
    make_app(apps_root, "Notes", info={"CFBundleIdentifier": "com.apple.Notes"})
    config_file = write_config(tmp_path, apps_root, tmp_path / "missing")

    assert main(["--config", str(config_file)]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["status"] == "success"
    assert output["count"] == 1
    assert output["applications"][0]["bundle_id"] == "com.apple.Notes"
    assert output["search_paths"] == [str(apps_root), str(tmp_path / "missing")]
    assert output["errors"] == []


def test_prints_yaml_result(apps_root, tmp_path, capsys):
    make_app(apps_root, "Notes")
    config_file = write_config(tmp_path, apps_root)

    assert main(["--config", str(config_file), "--format", "yaml"]) == 0

    output = yaml.safe_load(capsys.readouterr().out)
    assert [app["name"] for app in output["applications"]] == ["Notes"]


def test_save_then_compare(apps_root, tmp_path, capsys):
    make_app(apps_root, "Notes")
    config_file = write_config(tmp_path, apps_root)
    snapshot = tmp_path / "apps.yaml"

    assert main(["--config", str(config_file), "--save", str(snapshot)]) == 0
    assert json.loads(capsys.readouterr().out)["snapshot"] == str(snapshot)

    make_app(apps_root, "Maps")
    assert main(["--config", str(config_file), "--compare", str(snapshot)]) == 0

    comparison = json.loads(capsys.readouterr().out)["comparison"]
    assert [app["name"] for app in comparison["added"]] == ["Maps"]
    assert comparison["removed"] == []


def test_invalid_config_reports_error(tmp_path, capsys):
    config_file = tmp_path / "bad.yaml"
    config_file.write_text("search_paths: [relative/path]\n")

    assert main(["--config", str(config_file)]) == 1

    output = json.loads(capsys.readouterr().out)
    assert output["status"] == "error"
    assert output["exception_type"] == "SearchPathError"


def test_missing_snapshot_reports_error(apps_root, tmp_path, capsys):
    config_file = write_config(tmp_path, apps_root)

    assert main(["--config", str(config_file), "--compare", str(tmp_path / "none.yaml")]) == 1

    assert json.loads(capsys.readouterr().out)["exception_type"] == "SnapshotError"


def test_unwritable_save_path_reports_error(apps_root, tmp_path, capsys):
    make_app(apps_root, "Notes")
    config_file = write_config(tmp_path, apps_root)
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("")

    assert main(["--config", str(config_file), "--save", str(blocker / "apps.yaml")]) == 1

    output = json.loads(capsys.readouterr().out)
    assert output["status"] == "error"
    assert output["exception_type"] == "SnapshotError"
    assert "Could not write snapshot" in output["error"]
