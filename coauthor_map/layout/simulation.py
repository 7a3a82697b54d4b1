"""
Force-directed 레이아웃 시뮬레이션 모듈
Force simulation with cross-component separation

그래프 모델(Node/Link)은 읽기 전용이고, 위치/속도/고정(pin) 값은
LayoutState가 독점적으로 소유합니다. 렌더링 측은 snapshot()만 읽습니다.
"""

import math
import logging
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

import numpy as np

from ..config_manager import LayoutConfig
from .components import component_sizes, label_components
from .forces import (
    CenterForce,
    CollisionForce,
    ComponentSeparationForce,
    LinkForce,
    ManyBodyForce,
    PositionForce,
)
from .radius import radii_for, validate_metric
from .scheduler import FrameScheduler

logger = logging.getLogger(__name__)

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))

EVENTS = ("tick", "end")


class LayoutState:
    """레이아웃 전용 가변 상태 (위치, 속도, 고정 좌표, 반지름, 성분 id)"""

    def __init__(self, node_ids: List[str], components: Dict[str, int], seed: int = 42):
        self.ids = list(node_ids)
        self.index = {node_id: i for i, node_id in enumerate(self.ids)}
        self.n = len(self.ids)

        self.x = np.zeros(self.n)
        self.y = np.zeros(self.n)
        self.vx = np.zeros(self.n)
        self.vy = np.zeros(self.n)
        self.fx = np.full(self.n, np.nan)
        self.fy = np.full(self.n, np.nan)
        self.radii = np.zeros(self.n)
        self.components = np.array([components[i] for i in self.ids], dtype=int)
        self.rng = np.random.default_rng(seed)

    def place_phyllotaxis(self, cx: float, cy: float) -> None:
        """초기 위치: 중심 주변 나선 배치 (결정적)"""
        i = np.arange(self.n)
        radius = INITIAL_RADIUS * np.sqrt(0.5 + i)
        angle = i * INITIAL_ANGLE
        self.x = cx + radius * np.cos(angle)
        self.y = cy + radius * np.sin(angle)


class ForceSimulation:
    """연결 성분 분리 힘을 포함한 반복 시뮬레이션"""

    def __init__(
        self,
        graph,
        config: Optional[LayoutConfig] = None,
        components: Optional[Dict[str, int]] = None,
        scheduler: Optional[FrameScheduler] = None,
    ):
        self.config = config or LayoutConfig()
        self.nodes = graph.nodes
        self.links = graph.links
        self.components = (
            components
            if components is not None
            else label_components(graph.node_ids, graph.links)
        )

        cfg = self.config
        self.alpha = cfg.alpha
        self.alpha_min = cfg.alpha_min
        self.alpha_decay = cfg.resolved_alpha_decay()
        self.alpha_target = 0.0
        self.velocity_decay = 1 - cfg.velocity_decay
        self.tick_count = 0

        self.state = LayoutState(graph.node_ids, self.components, seed=cfg.seed)
        self.state.place_phyllotaxis(cfg.width / 2, cfg.height / 2)
        self.size_metric = validate_metric(cfg.size_metric)
        self.state.radii = radii_for(self.nodes, self.size_metric)

        self._forces: "OrderedDict[str, Callable]" = OrderedDict()
        self._listeners: Dict[str, List[Callable]] = {event: [] for event in EVENTS}
        self._scheduler = scheduler
        self._handle: Optional[int] = None

        self._install_default_forces()
        logger.info(
            f"🧲 Simulation ready: {self.state.n} nodes, {len(self.links)} links, "
            f"{len(component_sizes(self.components))} components"
        )

    def _install_default_forces(self) -> None:
        f = self.config.forces
        cx, cy = self.config.width / 2, self.config.height / 2
        self.force("link", LinkForce(self.links, f.link_distance, f.link_strength))
        self.force(
            "charge",
            ManyBodyForce(f.charge_strength, f.charge_distance_min, f.charge_distance_max),
        )
        self.force("center", CenterForce(cx, cy))
        self.force("collision", CollisionForce(f.collision_padding, f.collision_strength))
        self.force(
            "componentSep",
            ComponentSeparationForce(f.separation_margin, f.separation_factor),
        )
        self.force("x", PositionForce("x", cx, f.position_strength))
        self.force("y", PositionForce("y", cy, f.position_strength))

    # ------------------------------------------------------------------
    # 힘 / 이벤트 등록
    # ------------------------------------------------------------------

    def force(self, name: str, force=None):
        """이름으로 힘 조회 / 등록 (None이면 조회)"""
        if force is None:
            return self._forces.get(name)
        if hasattr(force, "initialize"):
            force.initialize(self.state)
        self._forces[name] = force
        return self

    def remove_force(self, name: str) -> None:
        self._forces.pop(name, None)

    def on(self, event: str, callback: Optional[Callable]) -> "ForceSimulation":
        """tick / end 리스너 등록 (None이면 해당 이벤트 리스너 전부 해제)"""
        if event not in self._listeners:
            raise ValueError(f"Unknown event {event!r}; expected one of {EVENTS}")
        if callback is None:
            self._listeners[event].clear()
        else:
            self._listeners[event].append(callback)
        return self

    def _emit(self, event: str) -> None:
        for callback in list(self._listeners[event]):
            callback(self)

    # ------------------------------------------------------------------
    # 진행 제어
    # ------------------------------------------------------------------

    def tick(self, iterations: int = 1) -> "ForceSimulation":
        """이벤트 없이 상태만 iterations 만큼 진행"""
        s = self.state
        for _ in range(iterations):
            self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay

            for force in self._forces.values():
                force(self.alpha)

            s.vx *= self.velocity_decay
            s.vy *= self.velocity_decay
            s.x += s.vx
            s.y += s.vy

            # 고정된 노드는 고정 좌표로, 속도 0
            pinned_x = ~np.isnan(s.fx)
            pinned_y = ~np.isnan(s.fy)
            s.x[pinned_x] = s.fx[pinned_x]
            s.vx[pinned_x] = 0.0
            s.y[pinned_y] = s.fy[pinned_y]
            s.vy[pinned_y] = 0.0

            self.tick_count += 1
        return self

    @property
    def settled(self) -> bool:
        return self.alpha < self.alpha_min

    @property
    def running(self) -> bool:
        return (
            self._scheduler is not None
            and self._handle is not None
            and self._scheduler.is_registered(self._handle)
        )

    def _step(self) -> None:
        """스케줄러 콜백: tick 1회 + 이벤트, 수렴 시 자동 정지"""
        self.tick()
        self._emit("tick")
        if self.settled:
            self.stop()
            self._emit("end")

    def attach(self, scheduler: FrameScheduler) -> "ForceSimulation":
        if self.running:
            self.stop()
        self._scheduler = scheduler
        return self

    def restart(self) -> "ForceSimulation":
        """스케줄러에 tick 등록 (이미 등록되어 있으면 그대로)"""
        if self._scheduler is None:
            raise RuntimeError("No scheduler attached; call attach() first")
        if not self.running:
            self._handle = self._scheduler.register(self._step)
        return self

    def stop(self) -> "ForceSimulation":
        """tick 등록 해제 (이후 콜백 없음)"""
        if self._scheduler is not None and self._handle is not None:
            self._scheduler.cancel(self._handle)
        self._handle = None
        return self

    def run_until_settled(self, max_ticks: Optional[int] = None) -> int:
        """스케줄러 없이 수렴할 때까지 진행, 수행한 tick 수 반환"""
        max_ticks = self.config.max_ticks if max_ticks is None else max_ticks
        ticks = 0
        while not self.settled and ticks < max_ticks:
            self.tick()
            ticks += 1
        if self.settled:
            logger.info(f"✅ Layout settled after {ticks} ticks (alpha={self.alpha:.4f})")
        else:
            logger.warning(
                f"⚠️ Layout not settled after {ticks} ticks (alpha={self.alpha:.4f})"
            )
        return ticks

    # ------------------------------------------------------------------
    # 드래그 (tick 사이에서만 호출)
    # ------------------------------------------------------------------

    def _index_of(self, node_id: str) -> int:
        try:
            return self.state.index[node_id]
        except KeyError:
            raise KeyError(f"Unknown node id: {node_id!r}") from None

    def drag_start(self, node_id: str) -> None:
        """현재 위치에 고정 + 재가열"""
        i = self._index_of(node_id)
        self.alpha_target = self.config.drag_alpha_target
        if self._scheduler is not None:
            self.restart()
        self.state.fx[i] = self.state.x[i]
        self.state.fy[i] = self.state.y[i]

    def drag_to(self, node_id: str, x: float, y: float) -> None:
        i = self._index_of(node_id)
        self.state.fx[i] = x
        self.state.fy[i] = y

    def drag_end(self, node_id: str) -> None:
        """고정 해제, alpha target 복원"""
        i = self._index_of(node_id)
        self.alpha_target = 0.0
        self.state.fx[i] = np.nan
        self.state.fy[i] = np.nan

    # ------------------------------------------------------------------
    # 크기 지표 / 스냅샷
    # ------------------------------------------------------------------

    def set_size_metric(self, metric: str) -> None:
        """다음 tick부터 충돌/분리 반지름에 반영 (재시작 불필요)"""
        self.size_metric = validate_metric(metric)
        self.state.radii = radii_for(self.nodes, metric)

    def radius(self, node_id: str) -> float:
        return float(self.state.radii[self._index_of(node_id)])

    def position(self, node_id: str):
        i = self._index_of(node_id)
        return float(self.state.x[i]), float(self.state.y[i])

    def snapshot(self) -> List[dict]:
        """렌더링용 읽기 전용 사본"""
        s = self.state
        return [
            {
                "id": node_id,
                "x": float(s.x[i]),
                "y": float(s.y[i]),
                "component": int(s.components[i]),
                "radius": float(s.radii[i]),
                "fixed": bool(not np.isnan(s.fx[i])),
            }
            for i, node_id in enumerate(s.ids)
        ]

    def export_layout(self) -> dict:
        return {
            "metric": self.size_metric,
            "width": self.config.width,
            "height": self.config.height,
            "ticks": self.tick_count,
            "alpha": self.alpha,
            "nodes": self.snapshot(),
        }
