"""
帧调度

动画驱动不直接依赖显示刷新，而是通过调度器「请求下一帧」：
- request_frame(callback): 下一次刷新时回调一次
- call_later(delay, callback): 延迟回调一次（用于尺寸变化的防抖）
- cancel(handle): 取消尚未触发的回调，重复取消无副作用

实现：
- ManualScheduler: 虚拟时间，由调用方手动推进，测试使用
- LoopScheduler: 单线程协作循环，按帧率 sleep，适合无显示环境下实时运行
"""

from __future__ import annotations

import itertools
import time
from typing import Callable, Dict, Optional, Tuple

from utils.logger import get_logger


logger = get_logger()

Callback = Callable[[], None]

DEFAULT_FRAME_RATE = 60.0
FRAME_TIME_WARNING_THRESHOLD = 0.6  # 帧耗时警告阈值（占帧间隔的百分比）


class BaseScheduler:
    """
    调度器基类，维护待触发的帧回调与定时回调。

    子类只需实现 now()，并在合适的时机调用 _run_due_timers() / _run_frame_callbacks()。
    """

    def __init__(self) -> None:
        self._handles = itertools.count(1)
        self._frames: Dict[int, Callback] = {}
        self._timers: Dict[int, Tuple[float, Callback]] = {}

    def now(self) -> float:  # pragma: no cover - 由子类实现
        raise NotImplementedError

    def request_frame(self, callback: Callback) -> int:
        handle = next(self._handles)
        self._frames[handle] = callback
        return handle

    def call_later(self, delay: float, callback: Callback) -> int:
        handle = next(self._handles)
        self._timers[handle] = (self.now() + delay, callback)
        return handle

    def cancel(self, handle: Optional[int]) -> None:
        if handle is None:
            return
        self._frames.pop(handle, None)
        self._timers.pop(handle, None)

    @property
    def pending(self) -> int:
        """尚未触发的回调数量。"""
        return len(self._frames) + len(self._timers)

    def _run_due_timers(self) -> int:
        now = self.now()
        due = sorted(
            (entry[0], handle) for handle, entry in self._timers.items() if entry[0] <= now
        )
        for _, handle in due:
            # 前面的回调可能已经取消了它
            entry = self._timers.pop(handle, None)
            if entry is not None:
                entry[1]()
        return len(due)

    def _run_frame_callbacks(self) -> int:
        # 回调中再次 request_frame 的会排到下一帧
        frames = list(self._frames.items())
        self._frames = {}
        for _, callback in frames:
            callback()
        return len(frames)


class ManualScheduler(BaseScheduler):
    """
    手动推进的调度器。

    Args:
        frame_interval: run_frame() 每次推进的虚拟时间（秒）
        start_time: 虚拟时间起点
    """

    def __init__(self, frame_interval: float = 1.0 / DEFAULT_FRAME_RATE, start_time: float = 0.0) -> None:
        super().__init__()
        self.frame_interval = frame_interval
        self._now = start_time

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        """推进虚拟时间并触发到期的定时回调（不触发帧回调）。"""
        self._now += seconds
        self._run_due_timers()

    def run_frame(self) -> int:
        """
        推进一个帧间隔，然后触发一次刷新。

        Returns:
            本次触发的帧回调数量
        """
        self.advance(self.frame_interval)
        return self._run_frame_callbacks()

    def run_frames(self, count: int) -> int:
        return sum(self.run_frame() for _ in range(count))


class LoopScheduler(BaseScheduler):
    """
    单线程协作式刷新循环。

    run() 按帧率循环：触发到期定时回调 -> 触发帧回调 -> sleep 到下一帧。
    没有任何待触发回调时自动退出。
    """

    def __init__(self, frame_rate: float = DEFAULT_FRAME_RATE) -> None:
        if frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {frame_rate}")
        super().__init__()
        self.frame_interval = 1.0 / frame_rate
        self._stopped = False

    def now(self) -> float:
        return time.monotonic()

    def stop(self) -> None:
        """请求 run() 在当前帧结束后退出。"""
        self._stopped = True

    def run(self, max_frames: Optional[int] = None) -> int:
        """
        运行刷新循环。

        Args:
            max_frames: 最多刷新的帧数，None 表示直到 stop() 或空闲

        Returns:
            实际刷新的帧数
        """
        self._stopped = False
        frames = 0
        while not self._stopped and self.pending:
            if max_frames is not None and frames >= max_frames:
                break
            frame_start = self.now()
            self._run_due_timers()
            if self._run_frame_callbacks():
                frames += 1

            elapsed = self.now() - frame_start
            threshold = self.frame_interval * FRAME_TIME_WARNING_THRESHOLD
            if elapsed > threshold:
                logger.warning(
                    "Frame time (%.4fs) exceeds %d%% of frame interval (%.4fs), frame=%d",
                    elapsed,
                    int(FRAME_TIME_WARNING_THRESHOLD * 100),
                    self.frame_interval,
                    frames,
                )
            remaining = self.frame_interval - elapsed
            if remaining > 0:
                time.sleep(remaining)
        return frames

