"""
公式队列

LED 帽轮流展示用户提交的公式：
- 每个公式至少展示 time_min 秒
- 总时间预算 time_total 由排队中的公式平分
- 队列为空时当前公式一直保留
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Optional, Tuple

from utils.logger import get_logger

from .formula import ChannelFormulas


logger = get_logger()


class FormulaQueue:
    """
    公式轮播队列。

    Args:
        time_min: 单个公式的最短展示时间（秒）
        time_total: 排队公式平分的总时间预算（秒）
    """

    def __init__(self, time_min: float = 10.0, time_total: float = 300.0) -> None:
        if time_min < 0:
            raise ValueError(f"time_min must be non-negative, got {time_min}")
        if time_total < 0:
            raise ValueError(f"time_total must be non-negative, got {time_total}")
        self.time_min = time_min
        self.time_total = time_total
        self._queue: Deque[ChannelFormulas] = deque()
        self._current: Optional[ChannelFormulas] = None
        self._time_start: float = 0.0

    def __len__(self) -> int:
        """排队中（不含当前展示）的公式数量。"""
        return len(self._queue)

    def add(self, formulas: ChannelFormulas) -> None:
        self._queue.append(formulas)
        logger.info("Formula queued: waiting=%d", len(self._queue))

    def slot_duration(self) -> float:
        """当前公式的展示时长；没有排队公式时为 0（不轮换）。"""
        if not self._queue:
            return 0.0
        return max(self.time_min, self.time_total / len(self._queue))

    def current(self, now: float) -> Optional[Tuple[ChannelFormulas, float]]:
        """
        取当前应展示的公式。

        Args:
            now: 当前时间（秒）

        Returns:
            (公式, 本公式已展示的秒数)；从未有过公式时返回 None
        """
        if self._current is not None and now < self._time_start:
            # 时间被拨回（reset/scrub），当前公式从新时间重新计时
            self._time_start = now
            logger.debug("Formula slot re-anchored: start=%.3f", now)
        if self._current is None or (
            self._queue and now - self._time_start >= self.slot_duration()
        ):
            if not self._queue:
                return None
            self._current = self._queue.popleft()
            self._time_start = now
            logger.info("Formula rotated: waiting=%d, start=%.3f", len(self._queue), now)
        return self._current, now - self._time_start
