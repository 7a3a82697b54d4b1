import json
import random
from collections import defaultdict
from itertools import combinations

import pytest

from coauthor_map.data_processing import AffiliationParser, AuthorshipResolver
from coauthor_map.graph_construction import (
    AuthorCollaborationGraphBuilder,
    canonical_pair,
    load_graph_artifact,
)
from coauthor_map.models import CoauthorshipGraph, Link


def sample_records(record):
    return [
        record("A X; B Y; C Z", "", tc=10, title="P1"),
        record("A X; B Y", "", tc=2, title="P2"),
        record("C Z", "", tc=1, title="P3"),
        record("D W", "", title="P4"),
        record("E V; A X", "[E, V] Paris, France; [A, X] Osaka, Japan",
               full_names="E, V; A, X", title="P5"),
    ]


def test_scenario_four_authors_make_six_pairs(record, graph_from):
    graph = graph_from([record("A A; B B; C C; D D", "")])

    assert len(graph.links) == 6
    assert all(link.weight == 1 for link in graph.links)
    assert {(l.source, l.target) for l in graph.links} == set(
        combinations(["A A", "B B", "C C", "D D"], 2)
    )


def test_link_weights_count_co_occurring_records(record, graph_from):
    records = sample_records(record)
    graph = graph_from(records)

    weights = {(l.source, l.target): l.weight for l in graph.links}
    assert weights == {("A X", "B Y"): 2, ("A X", "C Z"): 1, ("B Y", "C Z"): 1}

    # weight == 해당 쌍을 포함하는 레코드 수
    resolved = AuthorshipResolver(AffiliationParser("Japan")).resolve(records).resolved
    for (u, v), w in weights.items():
        assert w == sum(1 for r in resolved if u in r.subject_authors and v in r.subject_authors)


def test_node_metrics(record, graph_from):
    graph = graph_from(sample_records(record))
    nodes = {n.id: n for n in graph.nodes}

    assert set(nodes) == {"A X", "B Y", "C Z", "D W"}
    assert nodes["A X"].paper_count == 3
    assert nodes["A X"].citation_sum == 12
    assert nodes["C Z"].paper_count == 2
    assert nodes["C Z"].citation_sum == 11
    assert nodes["D W"].degree == 0
    assert nodes["D W"].weighted_degree == 0
    assert [p.title for p in nodes["A X"].paper_list] == ["P1", "P2", "P5"]


def test_degrees_match_link_set(record, graph_from):
    graph = graph_from(sample_records(record))

    neighbors = defaultdict(set)
    weighted = defaultdict(int)
    for link in graph.links:
        neighbors[link.source].add(link.target)
        neighbors[link.target].add(link.source)
        weighted[link.source] += link.weight
        weighted[link.target] += link.weight

    for node in graph.nodes:
        assert node.degree == len(neighbors[node.id])
        assert node.weighted_degree == weighted[node.id]


def test_nodes_sorted_by_papers_then_id(record, graph_from):
    graph = graph_from(sample_records(record))

    assert graph.node_ids == ["A X", "B Y", "C Z", "D W"]


def test_rebuild_is_independent_of_row_order(record, graph_from):
    records = sample_records(record)
    shuffled = list(records)
    random.Random(7).shuffle(shuffled)

    def summary(graph):
        return (
            sorted((n.id, n.paper_count, n.citation_sum, n.degree, n.weighted_degree)
                   for n in graph.nodes),
            list(graph.links),
        )

    assert summary(graph_from(records)) == summary(graph_from(shuffled))
    assert graph_from(records).to_dict() == graph_from(records).to_dict()


def test_single_subject_author_gives_node_without_links(record, graph_from):
    graph = graph_from([record("Smith J", "Tokyo, Japan")])

    assert graph.node_ids == ["Smith J"]
    assert graph.links == ()


def test_empty_population_is_valid(record, graph_from):
    graph = graph_from([record("Lee S", "Seoul, South Korea")])

    assert graph.to_dict() == {"nodes": [], "links": []}
    assert graph.record_count == 1


def test_canonical_pair():
    assert canonical_pair("b", "a") == ("a", "b")
    assert canonical_pair("a", "b") == ("a", "b")


def test_link_rejects_unsorted_or_zero_weight():
    with pytest.raises(ValueError):
        Link("b", "a", 1)
    with pytest.raises(ValueError):
        Link("a", "b", 0)


def test_serialized_keys(record, graph_from):
    graph = graph_from([record("A X; B Y", "", tc=4, title="T", doi="10.1/x")])
    data = graph.to_dict()

    node = data["nodes"][0]
    assert set(node) == {"id", "papers", "citations", "degree", "weightedDegree", "paperList"}
    assert node["paperList"][0] == {
        "title": "T",
        "journal": "Journal",
        "year": "2020",
        "doi": "10.1/x",
        "tc": 4,
        "authors": "A X; B Y",
    }
    assert data["links"] == [{"source": "A X", "target": "B Y", "weight": 1}]


def test_js_module_artifact(tmp_path, record, graph_from):
    graph = graph_from(sample_records(record))
    builder = AuthorCollaborationGraphBuilder()

    path = builder.save_graph_artifact(graph, tmp_path / "out" / "papers.js")

    text = path.read_text(encoding="utf-8")
    assert text.startswith("const RAW = {")
    assert text.endswith("};\n\nexport default RAW;\n")
    assert load_graph_artifact(path).to_dict() == graph.to_dict()
    assert [p.name for p in path.parent.iterdir()] == ["papers.js"]


def test_json_artifact(tmp_path, record, graph_from):
    graph = graph_from(sample_records(record))

    path = AuthorCollaborationGraphBuilder().save_graph_artifact(graph, tmp_path / "papers.json")

    assert json.loads(path.read_text(encoding="utf-8")) == graph.to_dict()


def test_analyze_graph_properties(record, graph_from):
    graph = graph_from(sample_records(record))

    stats = AuthorCollaborationGraphBuilder().analyze_graph_properties(graph)

    assert stats["basic_stats"]["num_nodes"] == 4
    assert stats["basic_stats"]["num_edges"] == 3
    assert stats["connectivity"]["num_components"] == 2
    assert stats["connectivity"]["isolated_authors"] == 1
    assert stats["top_by_papers"][0] == ("A X", 3)
    assert stats["collaboration_strength"]["max"] == 2


def test_analyze_empty_graph():
    stats = AuthorCollaborationGraphBuilder().analyze_graph_properties(CoauthorshipGraph())

    assert stats["basic_stats"]["num_nodes"] == 0
    assert "connectivity" not in stats


def test_coauthors_of_sorted_by_weight(record, graph_from):
    graph = graph_from(sample_records(record))

    assert AuthorCollaborationGraphBuilder.coauthors_of(graph, "A X") == [
        ("B Y", 2),
        ("C Z", 1),
    ]


def test_networkx_view(record, graph_from):
    graph = graph_from(sample_records(record))

    G = AuthorCollaborationGraphBuilder.build_collaboration_graph(graph)

    assert G.number_of_nodes() == 4
    assert G.edges["A X", "B Y"]["weight"] == 2
    assert G.nodes["A X"]["paper_count"] == 3
