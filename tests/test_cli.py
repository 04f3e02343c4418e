import sqlite3
import sys

import pytest

from geo_extractor import cli
from geo_extractor.config import CONFIG_ENV_VAR
from geo_extractor.errors import InputDecodeError


def _write_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(f"output:\n  sqlite_path: {tmp_path / 'osm_data.db'}\n", encoding="utf-8")
    return path


def test_missing_argument_is_usage_error(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["geo-extract"])
    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    assert excinfo.value.code != 0
    assert "usage" in capsys.readouterr().err


def test_missing_input_file_exits_with_error(monkeypatch, tmp_path):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr(sys, "argv", ["geo-extract", str(tmp_path / "missing.osm.pbf")])
    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    assert excinfo.value.code == 1


def test_run_writes_store(monkeypatch, tmp_path, scenario_elements):
    pbf = tmp_path / "extract.osm.pbf"
    pbf.write_bytes(b"")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(_write_config(tmp_path)))
    monkeypatch.setattr(cli, "OsmElementReader", lambda path: scenario_elements)
    monkeypatch.setattr(sys, "argv", ["geo-extract", str(pbf)])
    cli.main()
    conn = sqlite3.connect(tmp_path / "osm_data.db")
    try:
        rows = conn.execute("SELECT osm_type, name, full_address FROM pois ORDER BY osm_type").fetchall()
    finally:
        conn.close()
    assert rows == [("node", "Joe's", "5 Oak Ave"), ("way", "Best Bakery", "5 Oak Ave")]


def test_decode_error_exits_with_error(monkeypatch, tmp_path):
    pbf = tmp_path / "extract.osm.pbf"
    pbf.write_bytes(b"")

    class BrokenReader:
        def __init__(self, path):
            self.path = path

        def __iter__(self):
            raise InputDecodeError("输入文件解析失败")

    monkeypatch.setenv(CONFIG_ENV_VAR, str(_write_config(tmp_path)))
    monkeypatch.setattr(cli, "OsmElementReader", BrokenReader)
    monkeypatch.setattr(sys, "argv", ["geo-extract", str(pbf)])
    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    assert excinfo.value.code == 1
