"""
公式预览运行脚本

按 config/simulation.yaml 运行动画：
- 检查三个通道公式并输出中缀形式
- 实时刷新，可选推送到 Redis、保存预览图片

运行帧数、是否推送、图片目录由配置文件的 preview 段决定，
作为函数调用时可以用参数覆盖。

使用方式：
    python run_preview.py [配置文件路径]
"""

import pathlib
import sys
from typing import Dict, Optional

from core.animation import AnimationDriver
from core.formula import ChannelFormulas, to_infix
from core.parser import ConfigParser
from core.scheduler import LoopScheduler
from data_manager import RealtimeConfig, RealtimeFramePublisher
from tools.frame_plotter import FramePlotter
from utils.logger import close_logger, get_logger


logger = get_logger()

DEFAULT_CONFIG_PATH = pathlib.Path(__file__).parent / "config" / "simulation.yaml"


def describe_formulas(formulas: ChannelFormulas) -> Dict[str, Dict[str, object]]:
    """
    生成三个通道的预览信息。

    Returns:
        {通道名: {"formula", "infix", "valid", "errors"}}
    """
    summary: Dict[str, Dict[str, object]] = {}
    results = formulas.validate()
    for channel, formula in formulas.channels().items():
        result = results[channel]
        summary[channel] = {
            "formula": formula,
            "infix": to_infix(formula),
            "valid": result.valid,
            "errors": list(result.errors),
        }
    return summary


def run_preview(
    config_path: str | pathlib.Path = DEFAULT_CONFIG_PATH,
    max_frames: Optional[int] = None,
    publish: Optional[bool] = None,
    plot_dir: Optional[str | pathlib.Path] = None,
    plot_every: Optional[int] = None,
) -> int:
    """
    运行预览

    参数为 None 时使用配置文件 preview 段中的值。

    Args:
        config_path: 配置文件路径
        max_frames: 最多刷新的帧数，两处都为 None 表示直到 Ctrl+C
        publish: 是否推送到 Redis（使用配置中的 redis 段）
        plot_dir: 预览图片输出目录，两处都为 None 表示不保存
        plot_every: 每隔多少帧保存一张图片

    Returns:
        实际刷新的帧数
    """
    config = ConfigParser().parse_file(config_path)
    options = config.preview
    if max_frames is None:
        max_frames = options.max_frames
    if publish is None:
        publish = options.publish
    if plot_dir is None:
        plot_dir = options.plot_dir
    if plot_every is None:
        plot_every = options.plot_every
    logger.info(
        "Preview options: max_frames=%s, publish=%s, plot_dir=%s, plot_every=%d",
        max_frames,
        publish,
        plot_dir,
        plot_every,
    )

    scheduler = LoopScheduler(config.frame_rate)
    driver = AnimationDriver.from_config(config, scheduler=scheduler)

    for channel, info in describe_formulas(driver.formulas).items():
        logger.info("%s: %s  =>  %s", channel, info["formula"], info["infix"])
        for error in info["errors"]:
            logger.warning("%s: %s", channel, error)

    sinks = []
    publisher: Optional[RealtimeFramePublisher] = None
    if publish:
        publisher = RealtimeFramePublisher(RealtimeConfig(**config.redis))
        sinks.append(publisher)
    if plot_dir is not None:
        sinks.append(FramePlotter(driver.grid, plot_dir, every=plot_every))

    def fan_out(frame):
        for sink in sinks:
            sink(frame)

    driver.sink = fan_out

    frames = 0
    try:
        driver.start()
        frames = scheduler.run(max_frames=max_frames)
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, stopping preview")
    finally:
        driver.destroy()
        if publisher is not None:
            publisher.close()
        logger.info("Preview stopped: frames=%d, t=%.3f", frames, driver.current_time)
    return frames


if __name__ == "__main__":
    run_preview(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CONFIG_PATH)
    close_logger()
