"""
통합 데이터 처리 파이프라인
Integrated build pipeline: TSV → 저자 판정 → 그래프 → 아티팩트
"""

import logging

from .affiliation_parser import AffiliationParser
from .authorship_resolver import AuthorshipResolver
from .tsv_record_reader import TsvRecordReader
from ..graph_construction.author_collaboration_graph import (
    AuthorCollaborationGraphBuilder,
)

logger = logging.getLogger(__name__)


def build_graph(records, subject_marker="Japan"):
    """메모리 상의 레코드 → CoauthorshipGraph (파일 입출력 없음)"""
    resolver = AuthorshipResolver(AffiliationParser(subject_marker))
    result = resolver.resolve(records)
    builder = AuthorCollaborationGraphBuilder()
    return builder.process_records(result.resolved, record_count=len(records))


def run_complete_data_processing(config, write_output=True):
    """전체 빌드 파이프라인 실행

    Args:
        config (CoauthorMapConfig): 검증된 설정
        write_output (bool): 아티팩트 파일 저장 여부

    Returns:
        CoauthorshipGraph: 빌드 결과
    """
    logger.info("🚀 Starting co-authorship map build...")

    # Step 1: TSV 읽기
    reader = TsvRecordReader(config.columns)
    records = reader.read(config.paths.input_file)

    # Step 2: 2-패스 저자 판정
    parser = AffiliationParser(config.affiliation.subject_marker)
    resolution = AuthorshipResolver(parser).resolve(records)

    # Step 3: 그래프 집계
    builder = AuthorCollaborationGraphBuilder()
    graph = builder.process_records(resolution.resolved, record_count=len(records))

    # Step 4: 저장
    if write_output:
        builder.save_graph_artifact(graph, config.paths.output_file)
        if config.paths.analysis_file:
            stats = builder.analyze_graph_properties(graph)
            builder.save_analysis(stats, config.paths.analysis_file)

    logger.info(
        f"Generated co-authorship map ({config.affiliation.subject_marker}-affiliated only):"
    )
    logger.info(f"  Nodes: {len(graph.nodes)}")
    logger.info(f"  Links: {len(graph.links)}")
    logger.info(f"  Records: {graph.record_count}")
    return graph
