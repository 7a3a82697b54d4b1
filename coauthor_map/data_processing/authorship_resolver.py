"""
2-패스 저자 판정 모듈
Pass 1: 레코드별 대상 저자 집합 → 전역 합집합
Pass 2: 각 레코드의 전체 저자 목록 ∩ 전역 대상 집합
"""

import logging
from typing import FrozenSet, Iterable, Sequence, Tuple

from .affiliation_parser import AffiliationParser, is_misaligned
from ..models import PaperSummary, Record, ResolvedRecord, ResolutionResult

logger = logging.getLogger(__name__)


def union_population(subject_sets: Iterable[FrozenSet[str]]) -> FrozenSet[str]:
    """레코드별 대상 집합의 합집합"""
    return frozenset().union(*subject_sets)


class AuthorshipResolver:
    """전역 대상 저자 집합을 만들고 레코드를 다시 필터링하는 클래스"""

    def __init__(self, parser: AffiliationParser):
        self.parser = parser

    def find_subject_sets(self, records: Sequence[Record]) -> Tuple[FrozenSet[str], ...]:
        """Pass 1: 레코드별 대상 저자 집합"""
        return tuple(self.parser.parse_record(record) for record in records)

    def filter_records(
        self, records: Sequence[Record], population: FrozenSet[str]
    ) -> Tuple[ResolvedRecord, ...]:
        """Pass 2: 레코드 저자 순서를 유지한 교집합, 빈 레코드는 제외"""
        resolved = []
        for record in records:
            # 같은 레코드 안의 중복 저자는 한 번만
            subject_authors = tuple(
                dict.fromkeys(a for a in record.authors if a in population)
            )
            if not subject_authors:
                continue
            resolved.append(
                ResolvedRecord(
                    subject_authors=subject_authors,
                    paper=PaperSummary.from_record(record),
                )
            )
        return tuple(resolved)

    def resolve(self, records: Sequence[Record]) -> ResolutionResult:
        """Pass 1 + Pass 2"""
        logger.info("👥 Resolving subject-author population...")
        subject_sets = self.find_subject_sets(records)
        population = union_population(subject_sets)
        resolved = self.filter_records(records, population)

        misaligned = sum(1 for r in records if is_misaligned(r.authors, r.full_names))

        result = ResolutionResult(
            population=population,
            resolved=resolved,
            subject_sets=subject_sets,
            misaligned_count=misaligned,
        )
        logger.info(f"   🎯 Subject authors: {len(population)}")
        logger.info(f"   📄 Records kept: {len(resolved)} / {len(records)}")
        if result.misaligned_count:
            logger.info(f"   ⚠️ Records with AU/AF length mismatch: {result.misaligned_count}")
        return result
