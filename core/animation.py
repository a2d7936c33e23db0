"""
动画驱动

每次刷新：
1. 从动画时钟取得当前时间 t
2. 对点阵中每个点构造变量绑定 {x, y, t}
3. 用三个通道公式求值并映射为 0~255
4. 把整帧交给输出端（渲染器/传输层）

状态：STOPPED / PLAYING。
- start(): 锚定纪元后开始逐帧刷新，时间从当前值继续
- stop(): 取消已请求的下一帧并冻结时间，重复调用无副作用
- reset()/scrub(t): 设置时间并立即渲染一帧，与播放状态无关
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, Iterable, Iterator, Optional, Tuple

from presets import get_preset
from utils.logger import get_logger

from .clock import DEFAULT_LOOP_WINDOW, AnimationClock
from .color import Color
from .formula import ChannelFormulas, ValidationResult, evaluate_for_channel
from .grid import Grid, GridPoint
from .parser import SimulationConfig
from .playlist import FormulaQueue
from .scheduler import BaseScheduler, LoopScheduler


logger = get_logger()

DEFAULT_RESIZE_DEBOUNCE = 0.1  # 尺寸变化防抖（秒）


class PlayState(Enum):
    """播放状态。"""

    STOPPED = auto()
    PLAYING = auto()


@dataclass(frozen=True)
class FramePixel:
    """帧中的一个点及其颜色。"""

    point: GridPoint
    red: int
    green: int
    blue: int

    @property
    def color(self) -> Color:
        return Color(self.red, self.green, self.blue)


@dataclass(frozen=True)
class Frame:
    """
    一次完整求值的结果，按点阵顺序排列。

    Attributes:
        time: 求值使用的时间 t（秒）
        pixels: (点, R, G, B) 序列
    """

    time: float
    pixels: Tuple[FramePixel, ...]

    def __len__(self) -> int:
        return len(self.pixels)

    def __iter__(self) -> Iterator[FramePixel]:
        return iter(self.pixels)

    def to_hex(self) -> str:
        """按点阵顺序拼接每个点的 "rrggbb"。"""
        return "".join(pixel.color.to_hex() for pixel in self.pixels)

    def to_rgb_list(self) -> list:
        return [[pixel.red, pixel.green, pixel.blue] for pixel in self.pixels]


FrameSink = Callable[[Frame], None]


def render_frame(points: Iterable[GridPoint], formulas: ChannelFormulas, time: float) -> Frame:
    """在给定时间对所有点求值三个通道公式。"""
    pixels = []
    for point in points:
        variables = {"x": point.x, "y": point.y, "t": time}
        pixels.append(
            FramePixel(
                point=point,
                red=evaluate_for_channel(formulas.red, variables),
                green=evaluate_for_channel(formulas.green, variables),
                blue=evaluate_for_channel(formulas.blue, variables),
            )
        )
    return Frame(time=time, pixels=tuple(pixels))


class AnimationDriver:
    """
    动画驱动。

    特点：
    - 独占一个 AnimationClock，不同驱动实例互不影响
    - 通过调度器请求下一帧，测试时注入 ManualScheduler
    - 可选的 FormulaQueue：设置后每帧从队列取当前公式，t 为该公式已展示的秒数
    """

    def __init__(
        self,
        grid: Optional[Grid] = None,
        formulas: Optional[ChannelFormulas] = None,
        sink: Optional[FrameSink] = None,
        scheduler: Optional[BaseScheduler] = None,
        loop_window: float = DEFAULT_LOOP_WINDOW,
        resize_debounce: float = DEFAULT_RESIZE_DEBOUNCE,
        playlist: Optional[FormulaQueue] = None,
    ) -> None:
        self.grid = grid if grid is not None else Grid()
        self.formulas = formulas or ChannelFormulas()
        self.sink = sink
        self.scheduler = scheduler or LoopScheduler()
        self.clock = AnimationClock(time_source=self.scheduler.now, loop_window=loop_window)
        self.resize_debounce = resize_debounce
        self.playlist = playlist
        self.state = PlayState.STOPPED
        self.display_time: float = 0.0
        self._frame_handle: Optional[int] = None
        self._resize_handle: Optional[int] = None

        logger.info(
            "AnimationDriver initialized: points=%d, loop_window=%.1f, resize_debounce=%.3f",
            len(self.grid),
            loop_window,
            resize_debounce,
        )

    @classmethod
    def from_config(
        cls,
        config: SimulationConfig,
        sink: Optional[FrameSink] = None,
        scheduler: Optional[BaseScheduler] = None,
    ) -> "AnimationDriver":
        """
        从 SimulationConfig 创建驱动。

        config.formulas 为空时使用 config.preset 指定的预设。
        """
        grid = Grid(config.points_per_ring, config.ring_count)
        grid.layout(config.container_size)
        driver = cls(
            grid=grid,
            formulas=config.formulas or get_preset(config.preset),
            sink=sink,
            scheduler=scheduler or LoopScheduler(config.frame_rate),
            loop_window=config.loop_window,
            resize_debounce=config.resize_debounce,
        )
        driver.validate_formulas()
        return driver

    # 状态 ---------------------------------------------------------------
    @property
    def is_playing(self) -> bool:
        return self.state is PlayState.PLAYING

    @property
    def current_time(self) -> float:
        return self.clock.current_time

    # 公式 ---------------------------------------------------------------
    def validate_formulas(self) -> Dict[str, ValidationResult]:
        """检查三个通道公式，错误以 warning 记录，不影响渲染。"""
        results = self.formulas.validate()
        for channel, result in results.items():
            for error in result.errors:
                logger.warning("Formula error in %s channel: %s", channel, error)
        return results

    def set_formulas(
        self,
        red: Optional[str] = None,
        green: Optional[str] = None,
        blue: Optional[str] = None,
    ) -> Dict[str, ValidationResult]:
        """
        替换部分或全部通道公式。

        停止状态下立即渲染一帧预览；播放中由下一帧生效。
        """
        self.formulas = ChannelFormulas(
            red=self.formulas.red if red is None else red,
            green=self.formulas.green if green is None else green,
            blue=self.formulas.blue if blue is None else blue,
        )
        results = self.validate_formulas()
        if not self.is_playing:
            self.render()
        return results

    def load_preset(self, name: str) -> ChannelFormulas:
        """载入预设公式，未知名称回退到默认预设。"""
        formulas = get_preset(name)
        self.set_formulas(formulas.red, formulas.green, formulas.blue)
        return formulas

    # 播放控制 -----------------------------------------------------------
    def start(self) -> None:
        """开始播放，并立即渲染第一帧。"""
        if self.is_playing:
            return
        self.state = PlayState.PLAYING
        self.clock.start()
        logger.info("Animation started at t=%.3f", self.clock.current_time)
        self._tick()

    def stop(self) -> None:
        """停止播放，取消已请求的下一帧。"""
        self.state = PlayState.STOPPED
        self.clock.stop()
        self.scheduler.cancel(self._frame_handle)
        self._frame_handle = None
        logger.info("Animation stopped at t=%.3f", self.clock.current_time)

    def reset(self) -> Frame:
        """时间归零并立即渲染。"""
        self.clock.reset()
        self.display_time = 0.0
        return self.render()

    def scrub(self, time: float) -> Frame:
        """跳到指定时间并立即渲染。"""
        self.clock.set_time(time)
        self.display_time = self.clock.display_time
        return self.render()

    def _tick(self) -> None:
        self._frame_handle = None
        # 已排队的回调在 stop() 之后触发时直接忽略
        if not self.is_playing:
            return
        self.clock.tick()
        self.render()
        self.display_time = self.clock.display_time
        self._frame_handle = self.scheduler.request_frame(self._tick)

    # 渲染 ---------------------------------------------------------------
    def render(self, time: Optional[float] = None) -> Frame:
        """
        在指定时间（默认当前时间）渲染一帧并交给输出端。

        设置了 playlist 时使用队列中的当前公式及其局部时间。
        """
        t = self.clock.current_time if time is None else time
        formulas = self.formulas
        if self.playlist is not None:
            entry = self.playlist.current(t)
            if entry is not None:
                formulas, t = entry

        frame = render_frame(self.grid, formulas, t)
        if self.sink is not None:
            self.sink(frame)
        return frame

    def clear(self) -> Frame:
        """输出一帧全黑。"""
        frame = Frame(
            time=self.clock.current_time,
            pixels=tuple(FramePixel(point, 0, 0, 0) for point in self.grid),
        )
        if self.sink is not None:
            self.sink(frame)
        return frame

    # 点阵 ---------------------------------------------------------------
    def set_led_count(self, points_per_ring: int) -> bool:
        """修改每环 LED 数量，变化时重建点阵。"""
        return self.resize_grid(points_per_ring=points_per_ring)

    def resize_grid(self, points_per_ring: Optional[int] = None, ring_count: Optional[int] = None) -> bool:
        """修改点阵数量；重建后停止状态下立即重新渲染。"""
        changed = self.grid.resize(points_per_ring=points_per_ring, ring_count=ring_count)
        if changed and not self.is_playing:
            self.render()
        return changed

    def handle_resize(self, container_size: float) -> None:
        """
        容器尺寸变化通知。

        连续的通知合并为一次重新布局，在最后一次通知 resize_debounce 秒后执行。
        """
        self.scheduler.cancel(self._resize_handle)
        self._resize_handle = self.scheduler.call_later(
            self.resize_debounce, lambda: self._relayout(container_size)
        )

    def _relayout(self, container_size: float) -> None:
        self._resize_handle = None
        self.grid.layout(container_size)
        logger.info("Grid relaid out: container_size=%.1f", container_size)

    def destroy(self) -> None:
        """停止播放并取消所有待触发回调。"""
        self.scheduler.cancel(self._resize_handle)
        self._resize_handle = None
        self.stop()
