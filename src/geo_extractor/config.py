from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import osmium.index
import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_ENV_VAR = "GEO_EXTRACT_CONFIG"


class OutputConfig(BaseModel):
    sqlite_path: Path = Path("osm_data.db")
    json_dir: Optional[Path] = None
    csv_dir: Optional[Path] = None
    overwrite: bool = True

    @field_validator("sqlite_path", mode="before")
    @classmethod
    def ensure_output_parent(cls, value: Path | str) -> Path:
        path = Path(value)
        if not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        return path


class RuntimeConfig(BaseModel):
    progress_interval: int = Field(default=10_000_000, ge=0)
    node_index: str = "flex_mem"
    log_level: str = "INFO"

    @field_validator("node_index")
    @classmethod
    def known_node_index(cls, value: str) -> str:
        map_type = value.split(",", 1)[0]
        if map_type not in osmium.index.map_types():
            raise ValueError(f"不支持的节点索引类型：{map_type}")
        return value


class EnrichmentConfig(BaseModel):
    enabled: bool = True


class PipelineConfig(BaseModel):
    output: OutputConfig = Field(default_factory=OutputConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    enrichment: EnrichmentConfig = Field(default_factory=EnrichmentConfig)


def load_config(path: str | Path) -> PipelineConfig:
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    return PipelineConfig(**data)


def config_from_env() -> PipelineConfig:
    raw = os.environ.get(CONFIG_ENV_VAR)
    if not raw:
        return PipelineConfig()
    return load_config(raw)
