"""
공저자 네트워크 데이터 모델
Data models for the co-authorship map
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Tuple

# 표시용 저자 문자열에서 생략 없이 보여줄 최대 저자 수
MAX_DISPLAY_AUTHORS = 5


@dataclass(frozen=True)
class Record:
    """서지 레코드 한 행 (raw input row)"""

    authors: Tuple[str, ...]
    full_names: Tuple[str, ...]
    affiliation_text: str = ""
    title: str = ""
    journal: str = ""
    year: str = ""
    doi: str = ""
    citation_count: int = 0
    row_number: int = 0


@dataclass(frozen=True)
class PaperSummary:
    """저자 노드에 붙는 논문 요약"""

    title: str
    journal: str
    year: str
    doi: str
    citation_count: int
    authors_display: str

    @classmethod
    def from_record(cls, record: Record) -> "PaperSummary":
        return cls(
            title=record.title,
            journal=record.journal,
            year=record.year,
            doi=record.doi,
            citation_count=record.citation_count,
            authors_display=format_authors_display(record.authors),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "journal": self.journal,
            "year": self.year,
            "doi": self.doi,
            "tc": self.citation_count,
            "authors": self.authors_display,
        }


@dataclass(frozen=True)
class Node:
    """저자 노드"""

    id: str
    paper_count: int
    citation_sum: int
    degree: int = 0
    weighted_degree: int = 0
    paper_list: Tuple[PaperSummary, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "papers": self.paper_count,
            "citations": self.citation_sum,
            "degree": self.degree,
            "weightedDegree": self.weighted_degree,
            "paperList": [paper.to_dict() for paper in self.paper_list],
        }


@dataclass(frozen=True)
class Link:
    """공저 링크 (source < target)"""

    source: str
    target: str
    weight: int

    def __post_init__(self):
        if self.source >= self.target:
            raise ValueError(
                f"Link endpoints must be sorted and distinct: {self.source!r}, {self.target!r}"
            )
        if self.weight < 1:
            raise ValueError(f"Link weight must be >= 1, got {self.weight}")

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "target": self.target, "weight": self.weight}


@dataclass(frozen=True)
class ResolvedRecord:
    """2차 패스를 통과한 레코드: 대상 저자 + 논문 메타데이터"""

    subject_authors: Tuple[str, ...]
    paper: PaperSummary


@dataclass(frozen=True)
class CoauthorshipGraph:
    """빌드 결과 (읽기 전용 스냅샷)"""

    nodes: Tuple[Node, ...] = ()
    links: Tuple[Link, ...] = ()
    record_count: int = 0

    @property
    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoauthorshipGraph":
        """저장된 아티팩트(JSON)에서 그래프 복원"""
        nodes = []
        for node_data in data.get("nodes", []):
            papers = tuple(
                PaperSummary(
                    title=p.get("title", ""),
                    journal=p.get("journal", ""),
                    year=p.get("year", ""),
                    doi=p.get("doi", ""),
                    citation_count=int(p.get("tc", 0)),
                    authors_display=p.get("authors", ""),
                )
                for p in node_data.get("paperList", [])
            )
            nodes.append(
                Node(
                    id=node_data["id"],
                    paper_count=int(node_data.get("papers", 0)),
                    citation_sum=int(node_data.get("citations", 0)),
                    degree=int(node_data.get("degree", 0)),
                    weighted_degree=int(node_data.get("weightedDegree", 0)),
                    paper_list=papers,
                )
            )
        links = tuple(
            Link(l["source"], l["target"], int(l["weight"]))
            for l in data.get("links", [])
        )
        return cls(nodes=tuple(nodes), links=links)


@dataclass(frozen=True)
class ResolutionResult:
    """저자 판정 결과"""

    population: FrozenSet[str]
    resolved: Tuple[ResolvedRecord, ...]
    subject_sets: Tuple[FrozenSet[str], ...] = field(default=(), repr=False)
    misaligned_count: int = 0

    @property
    def dropped_count(self) -> int:
        return len(self.subject_sets) - len(self.resolved)


def format_authors_display(authors):
    """전체 저자 목록 표시 문자열 (5명 초과 시 생략)"""
    if len(authors) <= MAX_DISPLAY_AUTHORS:
        return "; ".join(authors)
    return "; ".join(authors[:MAX_DISPLAY_AUTHORS]) + " et al."
