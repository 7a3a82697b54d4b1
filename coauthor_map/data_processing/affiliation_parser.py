"""
소속 정보(C1)에서 대상 국가 소속 저자 추출 모듈
Affiliation block parser
"""

import re
import logging

logger = logging.getLogger(__name__)

# [Name1; Name2] address ... ; [Name3] address2 ...
AFFILIATION_GROUP_PATTERN = re.compile(r"\[([^\]]+)\]\s*([^\[]*?)(?=;\s*\[|\Z)")


def build_name_table(authors, full_names):
    """풀네임(소문자) → 약칭 매핑 (짧은 쪽 길이까지 위치 기반)"""
    table = {}
    for full_name, short_name in zip(full_names, authors):
        table[full_name.lower()] = short_name
    return table


def is_misaligned(authors, full_names):
    """AU / AF 목록 길이 불일치 여부"""
    return len(authors) != len(full_names)


class AffiliationParser:
    """레코드 하나의 소속 블록에서 대상 저자 집합을 추출하는 클래스"""

    def __init__(self, subject_marker="Japan"):
        """
        Args:
            subject_marker (str): 대상 국가 판정용 부분 문자열 (대소문자 구분)
        """
        if not subject_marker:
            raise ValueError("subject_marker must be a non-empty string")
        self.subject_marker = subject_marker

    def parse_groups(self, affiliation_text):
        """[이름 목록] 주소 그룹 분해 → [(names, address), ...]"""
        groups = []
        for match in AFFILIATION_GROUP_PATTERN.finditer(affiliation_text):
            names = [n.strip() for n in match.group(1).split(";") if n.strip()]
            groups.append((names, match.group(2)))
        return groups

    def parse(self, affiliation_text, authors, full_names=()):
        """대상 국가 소속 저자 약칭 집합 반환"""
        affiliation_text = affiliation_text or ""

        # 소속 정보 없음 → 전원 대상
        if not affiliation_text.strip():
            return frozenset(authors)

        # 괄호 없음 → 주소 전체에 marker 포함 여부
        if "[" not in affiliation_text:
            if self.subject_marker in affiliation_text:
                return frozenset(authors)
            return frozenset()

        if is_misaligned(authors, full_names):
            logger.debug(
                f"AU/AF length mismatch ({len(authors)} vs {len(full_names)}); "
                f"mapping first {min(len(authors), len(full_names))} positions only"
            )
        name_table = build_name_table(authors, full_names)

        subjects = set()
        for names, address in self.parse_groups(affiliation_text):
            if self.subject_marker not in address:
                continue
            for full_name in names:
                short_name = name_table.get(full_name.lower())
                if short_name:
                    subjects.add(short_name)
        return frozenset(subjects)

    def parse_record(self, record):
        return self.parse(record.affiliation_text, record.authors, record.full_names)
