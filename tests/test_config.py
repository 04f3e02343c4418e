from pathlib import Path

import pytest

from geo_extractor.config import CONFIG_ENV_VAR, PipelineConfig, load_config
from geo_extractor.errors import ValidationError
from geo_extractor.validator import resolve_config, validate_input


def test_defaults():
    config = PipelineConfig()
    assert config.output.sqlite_path == Path("osm_data.db")
    assert config.output.json_dir is None
    assert config.runtime.progress_interval == 10_000_000
    assert config.enrichment.enabled


def test_load_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        f"output:\n  sqlite_path: {tmp_path / 'out' / 'osm.db'}\n  json_dir: {tmp_path / 'json'}\n"
        "runtime:\n  progress_interval: 100\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.output.sqlite_path == tmp_path / "out" / "osm.db"
    assert (tmp_path / "out").is_dir()
    assert config.runtime.progress_interval == 100


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == PipelineConfig()


def test_resolve_config_without_env(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    assert resolve_config() == PipelineConfig()


def test_resolve_config_missing_file(monkeypatch, tmp_path):
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.yaml"))
    with pytest.raises(ValidationError):
        resolve_config()


def test_resolve_config_invalid_values(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("runtime:\n  progress_interval: -5\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    with pytest.raises(ValidationError):
        resolve_config()


def test_validate_input(tmp_path):
    with pytest.raises(ValidationError):
        validate_input(tmp_path / "missing.osm.pbf")
    with pytest.raises(ValidationError):
        validate_input(tmp_path)
    pbf = tmp_path / "extract.osm.pbf"
    pbf.write_bytes(b"")
    validate_input(pbf)


def test_resolve_config_malformed_yaml(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("runtime: [progress_interval\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    with pytest.raises(ValidationError):
        resolve_config()


def test_unknown_node_index_rejected(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("runtime:\n  node_index: no_such_map\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    with pytest.raises(ValidationError):
        resolve_config()
    assert PipelineConfig(runtime={"node_index": f"sparse_file_array,{tmp_path / 'nodes.idx'}"})
