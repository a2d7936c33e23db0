"""
环形点阵模型

LED 帽由若干同心环组成，每环有相同数量的 LED：
- 点的身份是 (ring, position)，生成后不变，直到点阵尺寸改变时整体重建
- x 由环内序号归一化到 [-1, 1]（不是 cos(angle)）
- y 由环序号归一化到 [0, 1]
- 屏幕坐标（left, top）单独保存，容器尺寸变化时只重新布局，不重建点
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from utils.logger import get_logger


logger = get_logger()

DEFAULT_POINTS_PER_RING = 50
DEFAULT_RING_COUNT = 5
LAYOUT_MARGIN = 20.0  # 最外环到容器边缘的距离（像素）
RING_SPACING = 10.0  # 相邻两环的半径差（像素）


@dataclass(frozen=True)
class GridPoint:
    """
    点阵中的一个 LED。

    Attributes:
        ring: 环序号 j（0 为最外环）
        position: 环内序号 i（0 在正上方，顺时针递增）
        index: 全局序号 j * points_per_ring + i，也是帧内顺序
        angle: 角度（弧度），(i / p) * 2π - π/2
        x: 归一化横坐标，(i / (p - 1)) * 2 - 1
        y: 归一化纵坐标，j / (r - 1)
    """

    ring: int
    position: int
    index: int
    angle: float
    x: float
    y: float


def _normalize(i: int, count: int) -> float:
    # 只有一个元素时该轴没有跨度，结果未定义
    if count == 1:
        return math.nan
    return i / (count - 1)


def build_grid(points_per_ring: int, ring_count: int) -> List[GridPoint]:
    """
    生成 points_per_ring * ring_count 个点，按 (ring, position) 顺序排列。

    Raises:
        ValueError: 任一数量不是正整数
    """
    if points_per_ring <= 0:
        raise ValueError(f"points_per_ring must be positive, got {points_per_ring}")
    if ring_count <= 0:
        raise ValueError(f"ring_count must be positive, got {ring_count}")

    points: List[GridPoint] = []
    for j in range(ring_count):
        y = _normalize(j, ring_count)
        for i in range(points_per_ring):
            points.append(
                GridPoint(
                    ring=j,
                    position=i,
                    index=j * points_per_ring + i,
                    angle=(i / points_per_ring) * 2 * math.pi - math.pi / 2,
                    x=_normalize(i, points_per_ring) * 2 - 1,
                    y=y,
                )
            )
    return points


class Grid:
    """
    点阵及其屏幕布局。

    - resize(): 数量变化时丢弃全部点并重建
    - layout(): 根据容器尺寸重新计算每个点的屏幕坐标，点本身不变
    """

    def __init__(
        self,
        points_per_ring: int = DEFAULT_POINTS_PER_RING,
        ring_count: int = DEFAULT_RING_COUNT,
        margin: float = LAYOUT_MARGIN,
        ring_spacing: float = RING_SPACING,
    ) -> None:
        self.points_per_ring = points_per_ring
        self.ring_count = ring_count
        self.margin = margin
        self.ring_spacing = ring_spacing
        self.container_size: Optional[float] = None
        self._points: List[GridPoint] = []
        self._placement: Dict[int, Tuple[float, float]] = {}
        self.regenerate()

    @property
    def points(self) -> List[GridPoint]:
        return self._points

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[GridPoint]:
        return iter(self._points)

    def regenerate(self) -> None:
        """丢弃所有点和屏幕坐标，按当前数量重新生成。"""
        self._points = build_grid(self.points_per_ring, self.ring_count)
        self._placement = {}
        if self.container_size is not None:
            self.layout(self.container_size)
        logger.info(
            "Grid regenerated: points_per_ring=%d, ring_count=%d, total=%d",
            self.points_per_ring,
            self.ring_count,
            len(self._points),
        )

    def resize(self, points_per_ring: Optional[int] = None, ring_count: Optional[int] = None) -> bool:
        """
        修改点阵数量，只有数量确实变化时才重建。

        Returns:
            是否发生了重建
        """
        new_points = self.points_per_ring if points_per_ring is None else points_per_ring
        new_rings = self.ring_count if ring_count is None else ring_count
        if new_points == self.points_per_ring and new_rings == self.ring_count:
            return False

        # 先校验，避免留下尺寸与点不一致的状态
        build_grid(new_points, new_rings)
        self.points_per_ring = new_points
        self.ring_count = new_rings
        self.regenerate()
        return True

    def layout(self, container_size: float) -> Dict[int, Tuple[float, float]]:
        """
        根据容器边长重新计算所有点的屏幕坐标 (left, top)。

        半径 = size / 2 - margin - ring * ring_spacing，圆心位于容器中心。
        """
        self.container_size = container_size
        center = container_size / 2
        placement: Dict[int, Tuple[float, float]] = {}
        for point in self._points:
            radius = center - self.margin - point.ring * self.ring_spacing
            placement[point.index] = (
                center + radius * math.cos(point.angle),
                center + radius * math.sin(point.angle),
            )
        self._placement = placement
        logger.debug("Grid laid out: container_size=%.1f, points=%d", container_size, len(placement))
        return placement

    def placement(self, point: GridPoint) -> Optional[Tuple[float, float]]:
        """返回点的屏幕坐标，尚未布局时返回 None。"""
        return self._placement.get(point.index)
