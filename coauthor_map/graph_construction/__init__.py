"""
그래프 구축 모듈
Graph Construction Module for the co-authorship map
"""

from .author_collaboration_graph import (
    AuthorCollaborationGraphBuilder,
    canonical_pair,
    load_graph_artifact,
)

__all__ = [
    "AuthorCollaborationGraphBuilder",
    "canonical_pair",
    "load_graph_artifact",
]
