"""
레이아웃 힘(force) 모듈
Link attraction, many-body repulsion, collision, component separation, centering

각 힘은 initialize(state)로 레이아웃 상태에 연결되고, 매 tick마다
force(alpha)로 호출되어 state의 속도(또는 위치)를 갱신합니다.
"""

import numpy as np

JIGGLE_SCALE = 1e-6


def jiggle(values, rng):
    """0인 성분을 아주 작은 난수로 치환 (동일 위치 노드 분리용)"""
    zero = values == 0
    if np.any(zero):
        values = values.copy()
        values[zero] = (rng.random(int(zero.sum())) - 0.5) * JIGGLE_SCALE
    return values


class Force:
    """힘 기본 클래스"""

    def __init__(self):
        self.state = None

    def initialize(self, state):
        self.state = state

    def __call__(self, alpha):
        raise NotImplementedError


class LinkForce(Force):
    """링크 양 끝을 rest length로 당기는 스프링"""

    def __init__(self, links, distance=80.0, strength=0.4):
        super().__init__()
        self.links = tuple(links)
        self.distance = distance
        self.strength = strength
        self.source = np.empty(0, dtype=int)
        self.target = np.empty(0, dtype=int)
        self.bias = np.empty(0, dtype=float)

    def initialize(self, state):
        super().initialize(state)
        pairs = [
            (state.index[l.source], state.index[l.target])
            for l in self.links
            if l.source in state.index and l.target in state.index
        ]
        if not pairs:
            self.source = np.empty(0, dtype=int)
            self.target = np.empty(0, dtype=int)
            self.bias = np.empty(0, dtype=float)
            return
        self.source, self.target = (np.array(p, dtype=int) for p in zip(*pairs))
        count = np.bincount(
            np.concatenate([self.source, self.target]), minlength=state.n
        ).astype(float)
        # 연결 수가 적은 쪽이 더 많이 움직임
        self.bias = count[self.source] / (count[self.source] + count[self.target])

    def __call__(self, alpha):
        if self.source.size == 0:
            return
        s = self.state
        src, tgt = self.source, self.target
        dx = jiggle(s.x[tgt] + s.vx[tgt] - s.x[src] - s.vx[src], s.rng)
        dy = jiggle(s.y[tgt] + s.vy[tgt] - s.y[src] - s.vy[src], s.rng)
        length = np.sqrt(dx * dx + dy * dy)
        k = (length - self.distance) / length * alpha * self.strength
        dx *= k
        dy *= k
        np.add.at(s.vx, tgt, -dx * self.bias)
        np.add.at(s.vy, tgt, -dy * self.bias)
        np.add.at(s.vx, src, dx * (1 - self.bias))
        np.add.at(s.vy, src, dy * (1 - self.bias))


class ManyBodyForce(Force):
    """모든 노드 쌍 사이 역거리 반발력 (distance_max 밖은 무시)"""

    def __init__(self, strength=-200.0, distance_min=1.0, distance_max=400.0):
        super().__init__()
        self.strength = strength
        self.distance_min2 = distance_min * distance_min
        self.distance_max2 = distance_max * distance_max

    def __call__(self, alpha):
        s = self.state
        if s.n < 2:
            return
        dx = s.x[None, :] - s.x[:, None]
        dy = s.y[None, :] - s.y[:, None]
        off_diagonal = ~np.eye(s.n, dtype=bool)

        coincident = off_diagonal & (dx == 0) & (dy == 0)
        if np.any(coincident):
            count = int(coincident.sum())
            dx[coincident] = (s.rng.random(count) - 0.5) * JIGGLE_SCALE
            dy[coincident] = (s.rng.random(count) - 0.5) * JIGGLE_SCALE

        l2 = dx * dx + dy * dy
        in_range = off_diagonal & (l2 < self.distance_max2)
        near = l2 < self.distance_min2
        l2 = np.where(near, np.sqrt(self.distance_min2 * l2), l2)
        with np.errstate(divide="ignore", invalid="ignore"):
            w = np.where(in_range, self.strength * alpha / l2, 0.0)
        s.vx += (dx * w).sum(axis=1)
        s.vy += (dy * w).sum(axis=1)


def _overlapping_pairs(x, y, min_distance):
    """i < j 이면서 중심 거리 < min_distance[i, j] 인 쌍"""
    dx = x[None, :] - x[:, None]
    dy = y[None, :] - y[:, None]
    l2 = dx * dx + dy * dy
    upper = np.triu(np.ones_like(l2, dtype=bool), k=1)
    i, j = np.nonzero(upper & (l2 < min_distance * min_distance))
    return i, j


class CollisionForce(Force):
    """반지름 + padding 원이 겹치는 노드를 밀어냄 (alpha와 무관)"""

    def __init__(self, padding=18.0, strength=1.0):
        super().__init__()
        self.padding = padding
        self.strength = strength

    def __call__(self, alpha):
        s = self.state
        if s.n < 2:
            return
        r = s.radii + self.padding
        px = s.x + s.vx
        py = s.y + s.vy
        i, j = _overlapping_pairs(px, py, r[:, None] + r[None, :])
        if i.size == 0:
            return

        dx = jiggle(px[i] - px[j], s.rng)
        dy = jiggle(py[i] - py[j], s.rng)
        length = np.sqrt(dx * dx + dy * dy)
        k = (r[i] + r[j] - length) / length * self.strength
        dx *= k
        dy *= k
        ri2 = r[i] * r[i]
        rj2 = r[j] * r[j]
        share = rj2 / (ri2 + rj2)  # 작은 노드가 더 많이 밀림
        np.add.at(s.vx, i, dx * share)
        np.add.at(s.vy, i, dy * share)
        np.add.at(s.vx, j, -dx * (1 - share))
        np.add.at(s.vy, j, -dy * (1 - share))


class ComponentSeparationForce(Force):
    """서로 다른 연결 성분의 노드가 겹치면 밀어냄. 같은 성분은 제외."""

    def __init__(self, margin=10.0, factor=1.0):
        super().__init__()
        self.margin = margin
        self.factor = factor
        self.cross_component = None

    def initialize(self, state):
        super().initialize(state)
        comp = state.components
        self.cross_component = comp[:, None] != comp[None, :]

    def __call__(self, alpha):
        s = self.state
        if s.n < 2:
            return
        min_distance = s.radii[:, None] + s.radii[None, :] + self.margin
        min_distance = np.where(self.cross_component, min_distance, 0.0)
        i, j = _overlapping_pairs(s.x, s.y, min_distance)
        if i.size == 0:
            return

        dx = s.x[j] - s.x[i]
        dy = s.y[j] - s.y[i]
        dist = np.sqrt(dx * dx + dy * dy)
        dist[dist == 0] = 1.0
        k = (min_distance[i, j] - dist) / dist * alpha * self.factor
        mx = dx * k
        my = dy * k
        np.add.at(s.vx, j, mx)
        np.add.at(s.vy, j, my)
        np.add.at(s.vx, i, -mx)
        np.add.at(s.vy, i, -my)


class CenterForce(Force):
    """전체 평균 위치를 화면 중심으로 평행 이동"""

    def __init__(self, x=0.0, y=0.0, strength=1.0):
        super().__init__()
        self.x = x
        self.y = y
        self.strength = strength

    def __call__(self, alpha):
        s = self.state
        if s.n == 0:
            return
        s.x -= (s.x.mean() - self.x) * self.strength
        s.y -= (s.y.mean() - self.y) * self.strength


class PositionForce(Force):
    """한 축 방향으로 목표 좌표를 향해 약하게 당김"""

    def __init__(self, axis, target, strength=0.03):
        super().__init__()
        if axis not in ("x", "y"):
            raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")
        self.axis = axis
        self.target = target
        self.strength = strength

    def __call__(self, alpha):
        s = self.state
        position = getattr(s, self.axis)
        velocity = getattr(s, "v" + self.axis)
        velocity += (self.target - position) * self.strength * alpha
