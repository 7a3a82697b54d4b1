"""
국가 소속 저자 공저 네트워크 맵
Subject-country co-authorship map

이 패키지는 다음 컴포넌트들을 제공합니다:
- TsvRecordReader: 서지 export(TSV) 읽기
- AffiliationParser: 레코드별 대상 국가 소속 저자 추출
- AuthorshipResolver: 2-패스 저자 판정 (전역 → 레코드별)
- AuthorCollaborationGraphBuilder: 노드/링크 집계 및 아티팩트 저장
- ForceSimulation: 컴포넌트 분리 힘을 포함한 force-directed 레이아웃

사용 예시:
    from coauthor_map.data_processing import run_complete_data_processing
    from coauthor_map.config_manager import CoauthorMapConfigManager

    manager = CoauthorMapConfigManager(overrides={"input_file": "savedrecs.txt",
                                                  "output_file": "papers.js"})
    graph = run_complete_data_processing(manager.config)
"""

__version__ = "1.0.0"
__author__ = "Co-authorship Map Team"
__description__ = "Subject-country co-authorship map with component-separating layout"

import sys
import logging
from pathlib import Path
from typing import Optional

DEFAULT_LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """'coauthor_map' 로거에 stdout 핸들러(및 선택적 파일 핸들러)를 붙임

    여러 번 호출해도 핸들러가 중복되지 않도록 기존 핸들러를 교체합니다.
    알 수 없는 level 문자열은 INFO로 처리합니다.
    """
    formatter = logging.Formatter(format_string or DEFAULT_LOG_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    package_logger = logging.getLogger("coauthor_map")
    package_logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    return package_logger


__all__ = ["setup_logging", "DEFAULT_LOG_FORMAT", "__version__"]
