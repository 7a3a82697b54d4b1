"""
공저 네트워크 맵 실행 스크립트
- build: TSV export → nodes/links 아티팩트
- layout: 아티팩트 → 수렴한 레이아웃 좌표 JSON
"""

import sys
import json
import logging
import argparse
from pathlib import Path

from coauthor_map import setup_logging
from coauthor_map.config_manager import CoauthorMapConfigManager, ConfigurationError
from coauthor_map.data_processing import run_complete_data_processing
from coauthor_map.graph_construction import load_graph_artifact
from coauthor_map.layout import ForceSimulation, SIZE_METRICS

logger = logging.getLogger("coauthor_map.main")


def configure_logging(config, verbose=False):
    """설정 파일의 로깅 섹션 적용 (-v 는 DEBUG 우선)"""
    level = "DEBUG" if verbose else config.logging.level
    setup_logging(level, config.logging.format, config.logging.log_file)


def run_build(args):
    manager = CoauthorMapConfigManager(
        config_file=args.config,
        env_file=args.env_file,
        overrides={
            "input_file": args.input,
            "output_file": args.output,
            "analysis_file": args.analysis,
            "subject_marker": args.marker,
        },
    )
    configure_logging(manager.config, args.verbose)
    # 검증 실패 시 아무 파일도 쓰지 않음
    manager.validate()
    run_complete_data_processing(manager.config)
    return 0


def run_layout(args):
    manager = CoauthorMapConfigManager(
        config_file=args.config,
        env_file=args.env_file,
        overrides={
            "size_metric": args.metric,
            "width": args.width,
            "height": args.height,
            "max_ticks": args.max_ticks,
        },
    )
    configure_logging(manager.config, args.verbose)
    graph_file = Path(args.graph)
    if not graph_file.is_file():
        raise ConfigurationError(f"Graph artifact not found: {graph_file}")
    output_file = Path(args.output) if args.output else graph_file.with_suffix(".layout.json")

    try:
        graph = load_graph_artifact(graph_file)
    except (ValueError, KeyError) as e:
        logger.error(f"❌ Invalid graph artifact {graph_file}: {e!r}")
        return 1
    simulation = ForceSimulation(graph, manager.config.layout)
    simulation.run_until_settled()

    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(simulation.export_layout(), f, ensure_ascii=False, indent=2)
    logger.info(f"💾 Layout saved: {output_file}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(description="Subject-country co-authorship map")
    parser.add_argument("--config", default=None, help="YAML 설정 파일")
    parser.add_argument("--env-file", default=None, help=".env 파일 경로")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="TSV export → nodes/links artifact")
    build.add_argument("--input", "-i", default=None, help="입력 TSV (INPUT_FILE)")
    build.add_argument(
        "--output", "-o", default=None, help="출력 파일 .json / .js (OUTPUT_FILE)"
    )
    build.add_argument("--marker", default=None, help="대상 국가 문자열 (SUBJECT_COUNTRY)")
    build.add_argument("--analysis", default=None, help="그래프 분석 JSON 저장 경로")
    build.set_defaults(func=run_build)

    layout = subparsers.add_parser("layout", help="artifact → settled layout positions")
    layout.add_argument("graph", help="build 결과 아티팩트 (.json / .js)")
    layout.add_argument("--output", "-o", default=None, help="레이아웃 JSON 경로")
    layout.add_argument("--metric", choices=sorted(SIZE_METRICS), default=None)
    layout.add_argument("--width", type=float, default=None)
    layout.add_argument("--height", type=float, default=None)
    layout.add_argument("--max-ticks", type=int, default=None)
    layout.set_defaults(func=run_layout)

    return parser


def main(argv=None):
    """메인 함수"""
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "INFO")

    try:
        return args.func(args)
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
