"""
仿真配置解析器

负责：
- 从 YAML 文件中读取仿真配置（例如 config/simulation.yaml）
- 解析出 SimulationConfig（点阵尺寸、时间窗口、帧率、公式/预设、传输配置）

示例：

    points_per_ring: 50
    ring_count: 5
    loop_window: 10.0
    frame_rate: 60
    preset: rainbow
    formulas:            # 可选，优先于 preset
      red: "x sin"
      green: "y"
      blue: "t sin abs"
    redis:               # 可选，交给 data_manager.RealtimeConfig
      redis_host: localhost
    preview:             # 可选，run_preview.py 的运行选项
      max_frames: 600
      publish: true
      plot_dir: output/frames
      plot_every: 60
"""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from .formula import ChannelFormulas


class ConfigError(ValueError):
    """配置内容无效。"""


@dataclass
class PreviewConfig:
    """
    预览运行选项。

    Attributes:
        max_frames: 最多刷新的帧数，None 表示一直运行
        publish: 是否把每帧推送到 Redis
        plot_dir: 预览图片输出目录，None 表示不保存
        plot_every: 每隔多少帧保存一张图片
    """

    max_frames: Optional[int] = None
    publish: bool = False
    plot_dir: Optional[str] = None
    plot_every: int = 60

    def __post_init__(self) -> None:
        if self.max_frames is not None and self.max_frames < 0:
            raise ConfigError(f"max_frames must be non-negative, got {self.max_frames}")
        if self.plot_every <= 0:
            raise ConfigError(f"plot_every must be positive, got {self.plot_every}")


@dataclass
class SimulationConfig:
    """
    仿真配置。

    Attributes:
        points_per_ring: 每环 LED 数量
        ring_count: 环数
        loop_window: 显示时间的循环窗口（秒）
        resize_debounce: 尺寸变化防抖时间（秒）
        frame_rate: 实时循环的帧率
        container_size: 屏幕布局使用的容器边长（像素）
        preset: 未提供 formulas 时使用的预设名称
        formulas: 三个通道的公式（可选）
        redis: 传输层配置（可选，原样保留）
        preview: 预览运行选项
    """

    points_per_ring: int = 50
    ring_count: int = 5
    loop_window: float = 10.0
    resize_debounce: float = 0.1
    frame_rate: float = 60.0
    container_size: float = 400.0
    preset: str = "wave"
    formulas: Optional[ChannelFormulas] = None
    redis: Dict[str, Any] = field(default_factory=dict)
    preview: PreviewConfig = field(default_factory=PreviewConfig)

    def __post_init__(self) -> None:
        """验证配置有效性。"""
        if self.points_per_ring <= 0:
            raise ConfigError(f"points_per_ring must be positive, got {self.points_per_ring}")
        if self.ring_count <= 0:
            raise ConfigError(f"ring_count must be positive, got {self.ring_count}")
        if self.loop_window <= 0:
            raise ConfigError(f"loop_window must be positive, got {self.loop_window}")
        if self.resize_debounce < 0:
            raise ConfigError(f"resize_debounce must be non-negative, got {self.resize_debounce}")
        if self.frame_rate <= 0:
            raise ConfigError(f"frame_rate must be positive, got {self.frame_rate}")
        if self.container_size <= 0:
            raise ConfigError(f"container_size must be positive, got {self.container_size}")


class ConfigParser:
    """
    仿真配置解析器。

    未出现的键使用 SimulationConfig 的默认值。
    """

    def parse_file(self, path: str | pathlib.Path) -> SimulationConfig:
        """
        从 YAML 文件解析 SimulationConfig。

        Args:
            path: 配置文件路径。
        """
        path_obj = pathlib.Path(path)
        with path_obj.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> SimulationConfig:
        if not isinstance(data, dict):
            raise ConfigError(f"config root must be a mapping, got {type(data)}")

        defaults = SimulationConfig()
        redis_config = data.get("redis") or {}
        if not isinstance(redis_config, dict):
            raise ConfigError(f"redis must be a mapping, got {type(redis_config)}")

        return SimulationConfig(
            points_per_ring=int(data.get("points_per_ring", defaults.points_per_ring)),
            ring_count=int(data.get("ring_count", defaults.ring_count)),
            loop_window=float(data.get("loop_window", defaults.loop_window)),
            resize_debounce=float(data.get("resize_debounce", defaults.resize_debounce)),
            frame_rate=float(data.get("frame_rate", defaults.frame_rate)),
            container_size=float(data.get("container_size", defaults.container_size)),
            preset=str(data.get("preset", defaults.preset)),
            formulas=self._parse_formulas(data.get("formulas")),
            redis=dict(redis_config),
            preview=self._parse_preview(data.get("preview")),
        )

    @staticmethod
    def _parse_preview(raw: Any) -> PreviewConfig:
        """解析 preview 段，未出现的键使用默认值。"""
        if raw is None:
            return PreviewConfig()
        if not isinstance(raw, dict):
            raise ConfigError(f"preview must be a mapping, got {type(raw)}")
        unknown = set(raw) - {"max_frames", "publish", "plot_dir", "plot_every"}
        if unknown:
            raise ConfigError(f"unknown preview options: {sorted(unknown)}")
        max_frames = raw.get("max_frames")
        plot_dir = raw.get("plot_dir")
        return PreviewConfig(
            max_frames=None if max_frames is None else int(max_frames),
            publish=bool(raw.get("publish", False)),
            plot_dir=None if plot_dir is None else str(plot_dir),
            plot_every=int(raw.get("plot_every", 60)),
        )

    @staticmethod
    def _parse_formulas(raw: Any) -> Optional[ChannelFormulas]:
        """解析 formulas 段，缺失的通道视为空公式。"""
        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise ConfigError(f"formulas must be a mapping, got {type(raw)}")
        unknown = set(raw) - {"red", "green", "blue"}
        if unknown:
            raise ConfigError(f"unknown formula channels: {sorted(unknown)}")
        return ChannelFormulas(
            red=str(raw.get("red", "") or ""),
            green=str(raw.get("green", "") or ""),
            blue=str(raw.get("blue", "") or ""),
        )
