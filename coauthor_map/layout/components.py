"""
연결 성분 라벨링
Connected-component labeling for the layout
"""

import logging
import networkx as nx

logger = logging.getLogger(__name__)


def label_components(node_ids, links):
    """노드 순서대로 BFS 탐색, 발견 순서대로 0, 1, 2, ... 부여

    Args:
        node_ids (Iterable[str]): 노드 id (반복 순서 = 탐색 시작 순서)
        links (Iterable[Link]): 무방향 링크

    Returns:
        Dict[str, int]: 노드 id → 성분 id (모든 노드에 정확히 하나)
    """
    G = nx.Graph()
    G.add_nodes_from(node_ids)

    dangling = 0
    for link in links:
        if link.source in G and link.target in G:
            G.add_edge(link.source, link.target)
        else:
            dangling += 1
    if dangling:
        logger.debug(f"Ignored {dangling} links with unknown endpoints")

    components = {}
    # connected_components는 노드 순서대로 BFS를 시작
    for component_id, members in enumerate(nx.connected_components(G)):
        for node_id in members:
            components[node_id] = component_id
    return components


def component_sizes(components):
    """성분 id → 크기"""
    sizes = {}
    for component_id in components.values():
        sizes[component_id] = sizes.get(component_id, 0) + 1
    return sizes
