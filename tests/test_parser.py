"""
仿真配置解析测试
"""

import pathlib

import pytest

from core.formula import ChannelFormulas
from core.parser import ConfigError, ConfigParser, PreviewConfig, SimulationConfig


project_root = pathlib.Path(__file__).parent.parent


def test_shipped_config_parses():
    config = ConfigParser().parse_file(project_root / "config" / "simulation.yaml")
    assert config.points_per_ring == 50
    assert config.ring_count == 5
    assert config.loop_window == 10.0
    assert config.preset == "wave"
    assert config.formulas is None
    assert config.redis["pubsub_channel"] == "ledhat"


def test_defaults_for_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert ConfigParser().parse_file(path) == SimulationConfig()


def test_formulas_section(tmp_path):
    path = tmp_path / "sim.yaml"
    path.write_text(
        "ring_count: 3\n"
        "formulas:\n"
        "  red: 'x sin'\n"
        "  blue: 't'\n",
        encoding="utf-8",
    )
    config = ConfigParser().parse_file(path)
    assert config.ring_count == 3
    assert config.formulas == ChannelFormulas(red="x sin", green="", blue="t")


@pytest.mark.parametrize(
    "data",
    [
        {"ring_count": 0},
        {"points_per_ring": -3},
        {"loop_window": 0},
        {"frame_rate": 0},
        {"resize_debounce": -1},
        {"container_size": 0},
        {"formulas": "x y +"},
        {"formulas": {"alpha": "x"}},
        {"redis": "localhost"},
        {"preview": "fast"},
        {"preview": {"frames": 10}},
        {"preview": {"max_frames": -1}},
        {"preview": {"plot_every": 0}},
    ],
)
def test_invalid_config(data):
    with pytest.raises(ConfigError):
        ConfigParser().parse_dict(data)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        SimulationConfig(ring_count=0)


def test_preview_section(tmp_path):
    path = tmp_path / "sim.yaml"
    path.write_text(
        "preview:\n"
        "  max_frames: 120\n"
        "  publish: true\n"
        "  plot_dir: output/frames\n",
        encoding="utf-8",
    )
    config = ConfigParser().parse_file(path)
    assert config.preview == PreviewConfig(max_frames=120, publish=True, plot_dir="output/frames", plot_every=60)


def test_shipped_config_preview_runs_until_interrupted():
    config = ConfigParser().parse_file(project_root / "config" / "simulation.yaml")
    assert config.preview == PreviewConfig()
