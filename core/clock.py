"""
动画时钟

核心设计：
- 维护单个可变标量 current_time（秒），由动画驱动独占
- 播放时通过「纪元」锚点换算：current_time = now - epoch
- start() 时重新锚定纪元，使时间从当前值继续而不是归零
- set_time()/reset() 随时可用；播放中调用会同时重新锚定纪元

显示时间：display_time = current_time % loop_window，只影响显示，底层时间不回绕。
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from utils.logger import get_logger


logger = get_logger()

DEFAULT_LOOP_WINDOW = 10.0  # 显示用的循环窗口（秒）


class AnimationClock:
    """
    动画时钟。

    Args:
        time_source: 返回单调秒数的函数，默认 time.monotonic；测试中注入手动时钟
        loop_window: 显示时间的循环窗口（秒）
    """

    def __init__(
        self,
        time_source: Optional[Callable[[], float]] = None,
        loop_window: float = DEFAULT_LOOP_WINDOW,
    ) -> None:
        if loop_window <= 0:
            raise ValueError(f"loop_window must be positive, got {loop_window}")
        self._time_source = time_source or time.monotonic
        self.loop_window = loop_window
        self.current_time: float = 0.0
        self._epoch: float = 0.0
        self._is_running: bool = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def display_time(self) -> float:
        """回绕到 [0, loop_window) 的显示时间。"""
        return self.current_time % self.loop_window

    def start(self) -> None:
        """开始计时，从当前 current_time 继续。"""
        if not self._is_running:
            self._epoch = self._time_source() - self.current_time
            self._is_running = True
            logger.info("AnimationClock started: current_time=%.3f", self.current_time)

    def stop(self) -> None:
        """停止计时，current_time 冻结在最近一次 tick 的值。"""
        if self._is_running:
            self._is_running = False
            logger.info("AnimationClock stopped: current_time=%.3f", self.current_time)

    def tick(self) -> float:
        """
        播放中根据纪元重新计算 current_time；停止时保持不变。

        Returns:
            当前时间（秒）
        """
        if self._is_running:
            self.current_time = self._time_source() - self._epoch
        return self.current_time

    def set_time(self, value: float) -> None:
        """直接设置时间（拖动时间轴）。"""
        self.current_time = float(value)
        if self._is_running:
            self._epoch = self._time_source() - self.current_time
        logger.debug("AnimationClock set: current_time=%.3f", self.current_time)

    def reset(self) -> None:
        """时间归零。"""
        self.set_time(0.0)
        logger.info("AnimationClock reset")
