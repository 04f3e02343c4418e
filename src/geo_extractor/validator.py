from __future__ import annotations

import os
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError as SchemaError

from .config import CONFIG_ENV_VAR, PipelineConfig, config_from_env
from .errors import ValidationError


def validate_input(path: Path) -> None:
    if not path.exists():
        raise ValidationError(f"输入文件不存在：{path}")
    if not path.is_file():
        raise ValidationError(f"输入路径不是文件：{path}")
    logger.info("路径检查通过：输入={path}", path=path)


def resolve_config() -> PipelineConfig:
    raw = os.environ.get(CONFIG_ENV_VAR)
    if raw and not Path(raw).is_file():
        raise ValidationError(f"配置文件不存在：{raw}（来自环境变量 {CONFIG_ENV_VAR}）")
    try:
        return config_from_env()
    except (SchemaError, yaml.YAMLError) as exc:
        raise ValidationError(f"配置文件无效：{exc}") from exc
