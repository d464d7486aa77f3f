"""CLI — argument parsing, data file preparation and startup failures."""

import pytest

from docstore import cli


def test_parser_defaults(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("HOST", raising=False)
    args = cli._build_parser().parse_args(["db.json"])
    assert args.file == "db.json"
    assert args.port == 3000
    assert args.host == "localhost"
    assert args.static == []


def test_parser_repeated_static_dirs():
    args = cli._build_parser().parse_args(
        ["db.json", "-p", "4000", "-H", "0.0.0.0", "-s", "a", "--static", "b"],
    )
    assert args.port == 4000
    assert args.host == "0.0.0.0"
    assert args.static == ["a", "b"]


def test_parser_port_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    assert cli._build_parser().parse_args(["db.json"]).port == 8080


def test_prepare_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        cli.prepare_file(tmp_path / "nope.json")


def test_prepare_file_initializes_empty_file(tmp_path):
    path = tmp_path / "db.json"
    path.write_text("  \n", encoding="utf-8")
    cli.prepare_file(path)
    assert path.read_text(encoding="utf-8") == "{}"


def test_main_missing_file_exits_1(tmp_path):
    assert cli.main([str(tmp_path / "nope.json")]) == 1


def test_main_malformed_file_exits_1(tmp_path):
    path = tmp_path / "db.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert cli.main([str(path)]) == 1


def test_main_serves_loaded_store(tmp_path, monkeypatch):
    path = tmp_path / "db.json"
    path.write_text('{"posts": [{"id": 1}]}', encoding="utf-8")
    served = {}

    def fake_run(app, host, port, log_level):
        served.update(app=app, host=host, port=port)

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)
    assert cli.main([str(path), "--port", "3100"]) == 0
    assert served["port"] == 3100
    assert served["app"].state.service.find("posts") == [{"id": "1"}]
