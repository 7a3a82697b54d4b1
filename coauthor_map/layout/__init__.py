"""
레이아웃 모듈
Force-directed layout with connected-component separation
"""

from .components import label_components, component_sizes
from .radius import SIZE_METRICS, node_radius, radii_for
from .forces import (
    CenterForce,
    CollisionForce,
    ComponentSeparationForce,
    LinkForce,
    ManyBodyForce,
    PositionForce,
)
from .scheduler import FrameScheduler
from .simulation import ForceSimulation, LayoutState

__all__ = [
    "label_components",
    "component_sizes",
    "SIZE_METRICS",
    "node_radius",
    "radii_for",
    "LinkForce",
    "ManyBodyForce",
    "CollisionForce",
    "ComponentSeparationForce",
    "CenterForce",
    "PositionForce",
    "FrameScheduler",
    "ForceSimulation",
    "LayoutState",
]
