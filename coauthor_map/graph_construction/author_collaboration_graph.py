"""
저자 협업 네트워크 그래프 구축 모듈
Author Collaboration Network Graph Construction Module
"""

import json
import os
import tempfile
import numpy as np
import networkx as nx
from pathlib import Path
from collections import Counter, defaultdict
from itertools import combinations
from tqdm import tqdm
import logging

from ..models import CoauthorshipGraph, Link, Node

logger = logging.getLogger(__name__)

JS_MODULE_SUFFIXES = {".js", ".mjs"}


def canonical_pair(author1, author2):
    """사전순 정렬된 (source, target) 키"""
    if author1 > author2:
        author1, author2 = author2, author1
    return author1, author2


class AuthorCollaborationGraphBuilder:
    """대상 저자 공저 네트워크 (노드/링크)를 구축하는 클래스"""

    def __init__(self):
        # 결과 저장용
        self.author_papers = defaultdict(list)  # 저자별 PaperSummary 목록
        self.author_citations = Counter()
        self.collaboration_counts = Counter()  # (source, target) → weight

    def reset(self):
        self.author_papers = defaultdict(list)
        self.author_citations = Counter()
        self.collaboration_counts = Counter()

    def extract_author_collaborations(self, resolved_records):
        """판정된 레코드에서 저자 지표와 협업 횟수 집계"""
        logger.info("🔍 Extracting author collaborations from records...")

        collaboration_pairs = 0
        for record in tqdm(resolved_records, desc="Aggregating records", disable=None):
            authors = record.subject_authors

            for author in authors:
                self.author_papers[author].append(record.paper)
                self.author_citations[author] += record.paper.citation_count

            # 레코드 내 대상 저자 쌍마다 1회
            for author1, author2 in combinations(authors, 2):
                self.collaboration_counts[canonical_pair(author1, author2)] += 1
                collaboration_pairs += 1

        logger.info(f"   🤝 Unique authors: {len(self.author_papers)}")
        logger.info(f"   🔗 Collaboration pair increments: {collaboration_pairs}")

    def build_links(self):
        """누적된 쌍별 가중치 → Link 목록 (source, target 순 정렬)"""
        return tuple(
            Link(source, target, weight)
            for (source, target), weight in sorted(self.collaboration_counts.items())
        )

    @staticmethod
    def calculate_degrees(links):
        """링크 집합에서 degree / weighted degree 계산"""
        degree = Counter()
        weighted_degree = Counter()
        for link in links:
            degree[link.source] += 1
            degree[link.target] += 1
            weighted_degree[link.source] += link.weight
            weighted_degree[link.target] += link.weight
        return degree, weighted_degree

    def build_nodes(self, links):
        """저자별 집계 → Node 목록 (논문 수 내림차순, id 오름차순)"""
        degree, weighted_degree = self.calculate_degrees(links)
        nodes = [
            Node(
                id=author,
                paper_count=len(papers),
                citation_sum=self.author_citations[author],
                degree=degree[author],
                weighted_degree=weighted_degree[author],
                paper_list=tuple(papers),
            )
            for author, papers in self.author_papers.items()
        ]
        nodes.sort(key=lambda n: (-n.paper_count, n.id))
        return tuple(nodes)

    def process_records(self, resolved_records, record_count=None):
        """전체 처리 파이프라인"""
        logger.info("🚀 Starting co-authorship graph construction...")
        self.reset()

        # 1. 집계
        self.extract_author_collaborations(resolved_records)

        # 2. 링크 / 노드
        links = self.build_links()
        nodes = self.build_nodes(links)

        graph = CoauthorshipGraph(
            nodes=nodes,
            links=links,
            record_count=len(resolved_records) if record_count is None else record_count,
        )
        logger.info(f"✅ Graph constructed: {len(nodes)} nodes, {len(links)} links")
        return graph

    @staticmethod
    def build_collaboration_graph(graph):
        """CoauthorshipGraph → networkx 무방향 그래프"""
        G = nx.Graph()

        for node in graph.nodes:
            G.add_node(
                node.id,
                node_type="author",
                paper_count=node.paper_count,
                citation_sum=node.citation_sum,
                weighted_degree=node.weighted_degree,
            )

        for link in graph.links:
            G.add_edge(
                link.source,
                link.target,
                edge_type="collaboration",
                weight=link.weight,
            )

        return G

    def analyze_graph_properties(self, graph, top_n=10):
        """그래프 속성 분석"""
        logger.info("📈 Analyzing co-authorship graph properties...")
        G = self.build_collaboration_graph(graph)

        stats = {
            "basic_stats": {
                "num_nodes": G.number_of_nodes(),
                "num_edges": G.number_of_edges(),
                "num_records": graph.record_count,
                "density": float(nx.density(G)) if G.number_of_nodes() > 1 else 0.0,
            }
        }

        if G.number_of_nodes() == 0:
            return stats

        # 연결 성분 분석
        component_sizes = sorted(
            (len(c) for c in nx.connected_components(G)), reverse=True
        )
        stats["connectivity"] = {
            "num_components": len(component_sizes),
            "largest_component_size": component_sizes[0],
            "isolated_authors": sum(1 for size in component_sizes if size == 1),
            "component_sizes": component_sizes[:10],  # 상위 10개만
        }

        weights = [link.weight for link in graph.links]
        stats["collaboration_strength"] = {
            "mean": float(np.mean(weights)) if weights else 0.0,
            "median": float(np.median(weights)) if weights else 0.0,
            "max": int(max(weights)) if weights else 0,
        }

        # 상위 저자 (논문 수 / 차수)
        stats["top_by_papers"] = [
            (n.id, n.paper_count)
            for n in sorted(graph.nodes, key=lambda n: -n.paper_count)[:top_n]
        ]
        stats["top_by_degree"] = [
            (n.id, n.degree)
            for n in sorted(graph.nodes, key=lambda n: -n.degree)[:top_n]
        ]

        return stats

    @staticmethod
    def coauthors_of(graph, author):
        """특정 저자의 공저자 목록 (가중치 내림차순)"""
        coauthors = []
        for link in graph.links:
            if link.source == author:
                coauthors.append((link.target, link.weight))
            elif link.target == author:
                coauthors.append((link.source, link.weight))
        coauthors.sort(key=lambda item: (-item[1], item[0]))
        return coauthors

    @staticmethod
    def render_artifact(graph, output_file):
        """출력 확장자에 맞는 아티팩트 문자열"""
        payload = json.dumps(graph.to_dict(), ensure_ascii=False)
        if Path(output_file).suffix.lower() in JS_MODULE_SUFFIXES:
            return f"const RAW = {payload};\n\nexport default RAW;\n"
        return payload + "\n"

    def save_graph_artifact(self, graph, output_file):
        """읽기 전용 아티팩트 저장 (임시 파일 → 교체)"""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        content = self.render_artifact(graph, output_file)

        fd, tmp_path = tempfile.mkstemp(
            dir=output_file.parent, prefix=f".{output_file.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, output_file)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

        logger.info(f"💾 Graph artifact saved: {output_file}")
        return output_file

    @staticmethod
    def save_analysis(stats, output_file):
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(stats, f, ensure_ascii=False, indent=2)
        logger.info(f"📊 Analysis saved: {output_file}")
        return output_file


def load_graph_artifact(input_file):
    """저장된 JSON 아티팩트 로드 (.js 모듈은 RAW 리터럴 추출)"""
    input_file = Path(input_file)
    text = input_file.read_text(encoding="utf-8")
    if input_file.suffix.lower() in JS_MODULE_SUFFIXES:
        start = text.index("{")
        end = text.rindex("};")
        text = text[start : end + 1]
    return CoauthorshipGraph.from_dict(json.loads(text))
