"""
帧预览绘图工具

使用 matplotlib 把一帧画在环形布局上并保存为图片，支持：
- 单帧绘制 plot_frame()
- 作为 AnimationDriver 输出端逐帧保存 FramePlotter
"""

from __future__ import annotations

import pathlib
from typing import Optional

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from core.animation import Frame
from core.grid import Grid
from utils.logger import get_logger


logger = get_logger()

DEFAULT_CONTAINER_SIZE = 400.0
LED_MARKER_SIZE = 30


def plot_frame(frame: Frame, grid: Grid, path: str | pathlib.Path, dpi: int = 100) -> pathlib.Path:
    """
    绘制一帧并保存。

    点阵尚未布局时按默认容器尺寸布局一次。

    Args:
        frame: 要绘制的帧
        grid: 帧对应的点阵（提供屏幕坐标）
        path: 输出图片路径
        dpi: 输出分辨率

    Returns:
        输出文件路径
    """
    if grid.container_size is None:
        grid.layout(DEFAULT_CONTAINER_SIZE)
    size = grid.container_size

    lefts, tops, colors = [], [], []
    for pixel in frame:
        placement = grid.placement(pixel.point)
        if placement is None:
            continue
        lefts.append(placement[0])
        tops.append(placement[1])
        colors.append((pixel.red / 255, pixel.green / 255, pixel.blue / 255))

    figure = Figure(figsize=(size / dpi, size / dpi), dpi=dpi)
    FigureCanvasAgg(figure)
    axes = figure.add_axes([0, 0, 1, 1])
    axes.set_facecolor("black")
    axes.scatter(lefts, tops, c=colors, s=LED_MARKER_SIZE)
    axes.set_xlim(0, size)
    # 屏幕坐标 top 向下增长
    axes.set_ylim(size, 0)
    axes.set_aspect("equal")
    axes.axis("off")
    axes.text(4, 12, f"t={frame.time:.2f}s", color="white", fontsize=8)

    output = pathlib.Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    figure.savefig(output, facecolor="black")
    logger.debug("Frame plotted: time=%.3f, points=%d, path=%s", frame.time, len(lefts), output)
    return output


class FramePlotter:
    """
    逐帧保存图片的输出端。

    Args:
        grid: 点阵
        output_dir: 输出目录
        every: 每隔多少帧保存一次
    """

    def __init__(self, grid: Grid, output_dir: str | pathlib.Path, every: int = 1) -> None:
        if every <= 0:
            raise ValueError(f"every must be positive, got {every}")
        self.grid = grid
        self.output_dir = pathlib.Path(output_dir)
        self.every = every
        self.frame_count = 0
        self.last_path: Optional[pathlib.Path] = None

    def __call__(self, frame: Frame) -> None:
        if self.frame_count % self.every == 0:
            self.last_path = plot_frame(
                frame, self.grid, self.output_dir / f"frame_{self.frame_count:05d}.png"
            )
        self.frame_count += 1
