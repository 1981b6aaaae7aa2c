import json

import pytest

import storage
from app import main as app_main


@pytest.fixture
def prefs_file(tmp_path, monkeypatch):
    path = tmp_path / "prefs.json"
    monkeypatch.setattr(storage, "DATA_FILE", path)
    return path


def test_command_line_options_are_remembered(prefs_file):
    args = app_main.build_parser().parse_args(["--server", "http://game.example:9000/", "--cookie", "id=7"])

    settings = app_main.resolve_settings(args)

    assert settings == {"server": "http://game.example:9000", "cookie": "id=7"}
    stored = json.loads(prefs_file.read_text())
    assert stored["server_url"] == "http://game.example:9000"
    assert stored["cookie"] == "id=7"


def test_stored_preferences_fill_missing_options(prefs_file):
    prefs_file.write_text(json.dumps({"server_url": "https://saved.example", "cookie": "id=1"}))
    args = app_main.build_parser().parse_args([])

    settings = app_main.resolve_settings(args)

    assert settings == {"server": "https://saved.example", "cookie": "id=1"}
    assert args.log_level == "INFO"


def test_invalid_server_exits_with_usage_code(prefs_file, monkeypatch):
    monkeypatch.setattr(app_main.signal, "signal", lambda *args: None)
    run = []
    monkeypatch.setattr(app_main, "run", lambda *args: run.append(args))

    assert app_main.main(["--server", "ftp://nowhere"]) == 2
    assert run == []
