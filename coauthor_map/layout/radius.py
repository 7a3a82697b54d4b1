"""
노드 반지름 (크기 지표별)
"""

import math
import numpy as np

MIN_RADIUS = 4.0
LINEAR_SCALE = 3.5
SQRT_SCALE = 1.2


def _linear(value):
    return max(MIN_RADIUS, value * LINEAR_SCALE)


def _sqrt(value):
    return max(MIN_RADIUS, math.sqrt(value) * SQRT_SCALE)


# 지표 이름 → (노드 속성, 스케일 함수)
SIZE_METRICS = {
    "papers": ("paper_count", _linear),
    "citations": ("citation_sum", _sqrt),
    "degree": ("degree", _linear),
}


def validate_metric(metric):
    if metric not in SIZE_METRICS:
        raise ValueError(
            f"Unknown size metric {metric!r}; expected one of {sorted(SIZE_METRICS)}"
        )
    return metric


def node_radius(node, metric="papers"):
    """노드 반지름 (값 0은 1로 취급)"""
    attribute, scale = SIZE_METRICS[validate_metric(metric)]
    value = getattr(node, attribute) or 1
    return scale(value)


def radii_for(nodes, metric="papers"):
    return np.array([node_radius(node, metric) for node in nodes], dtype=float)
