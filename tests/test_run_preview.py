"""
预览脚本测试
"""

import json
from unittest import mock

import redis

from core.formula import ChannelFormulas
from run_preview import describe_formulas, run_preview


def test_describe_formulas():
    summary = describe_formulas(ChannelFormulas("3 4 +", "+", ""))

    assert summary["red"] == {"formula": "3 4 +", "infix": "(3 + 4)", "valid": True, "errors": []}
    assert summary["green"]["valid"] is False
    assert summary["green"]["infix"] == "Error: + needs two operands"
    assert summary["blue"]["infix"] == ""


def test_run_preview_for_fixed_frames(tmp_path):
    config_path = tmp_path / "sim.yaml"
    config_path.write_text(
        "points_per_ring: 8\n"
        "ring_count: 2\n"
        "frame_rate: 500\n"
        "container_size: 100\n"
        "preset: pulse\n",
        encoding="utf-8",
    )
    plot_dir = tmp_path / "plots"

    frames = run_preview(config_path, max_frames=3, plot_dir=plot_dir, plot_every=2)

    assert frames == 3
    # 首帧在 start() 时渲染，之后 3 帧由循环刷新，共 4 帧，保存第 0、2 帧
    assert sorted(p.name for p in plot_dir.iterdir()) == ["frame_00000.png", "frame_00002.png"]


def test_run_preview_options_from_config_publish_frames(tmp_path):
    plot_dir = tmp_path / "plots"
    config_path = tmp_path / "sim.yaml"
    config_path.write_text(
        "points_per_ring: 6\n"
        "ring_count: 2\n"
        "frame_rate: 500\n"
        "container_size: 100\n"
        "redis:\n"
        "  pubsub_channel: hat\n"
        "preview:\n"
        "  max_frames: 2\n"
        "  publish: true\n"
        f"  plot_dir: '{plot_dir}'\n"
        "  plot_every: 1\n",
        encoding="utf-8",
    )
    client = mock.MagicMock(spec=redis.Redis)

    with mock.patch("redis.Redis", return_value=client) as redis_cls:
        frames = run_preview(config_path)

    assert frames == 2
    redis_cls.assert_called_once()
    client.ping.assert_called_once()
    # start() 渲染一帧，循环再刷新两帧
    assert client.set.call_count == 3
    assert client.set.call_args[0][0] == "ledhat:current"
    assert {call[0][0] for call in client.publish.call_args_list} == {"hat"}
    assert json.loads(client.publish.call_args[0][1])["count"] == 12
    client.close.assert_called_once()
    assert len(list(plot_dir.iterdir())) == 3


def test_run_preview_arguments_override_config(tmp_path):
    config_path = tmp_path / "sim.yaml"
    config_path.write_text(
        "points_per_ring: 4\n"
        "ring_count: 1\n"
        "frame_rate: 500\n"
        "preview:\n"
        "  max_frames: 50\n"
        "  publish: true\n",
        encoding="utf-8",
    )

    with mock.patch("redis.Redis") as redis_cls:
        frames = run_preview(config_path, max_frames=1, publish=False)

    assert frames == 1
    redis_cls.assert_not_called()
