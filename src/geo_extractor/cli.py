from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from .errors import ExtractionError
from .pipeline import GeoExtractionPipeline
from .reader import OsmElementReader
from .validator import resolve_config, validate_input


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geo-extract",
        description="OSM PBF 两遍扫描提取 POI 与地址，并按最近地址补全",
        epilog="示例：geo-extract ontario-latest.osm.pbf",
    )
    parser.add_argument(
        "pbf_file",
        type=Path,
        help="OSM PBF 文件路径",
    )
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    pbf_path: Path = args.pbf_file
    try:
        pipe_config = resolve_config()
        logger.remove()
        logger.add(sys.stderr, level=pipe_config.runtime.log_level)
        validate_input(pbf_path)
        logger.info("输入文件 {}", pbf_path)
        pipeline = GeoExtractionPipeline(pipe_config, OsmElementReader(pbf_path))
        summary = pipeline.run()
    except ExtractionError as exc:
        logger.error(str(exc))
        raise SystemExit(1)
    logger.info("全部完成，总耗时 {:.2f}s", summary.total_seconds)


if __name__ == "__main__":
    main()
