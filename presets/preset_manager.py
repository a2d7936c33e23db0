"""
预设公式管理器

负责加载和管理预设公式目录（YAML），按名称取出 (red, green, blue) 公式三元组。
"""

from __future__ import annotations

import pathlib
from typing import Dict, List, Optional

import yaml

from core.formula import ChannelFormulas
from utils.logger import get_logger


logger = get_logger()

# 默认目录文件（相对于模块目录）
CATALOGUE_PATH = pathlib.Path(__file__).parent / "catalogue.yaml"

DEFAULT_PRESET = "wave"


class PresetManager:
    """
    预设管理器

    名称无法识别时返回目录中 `default` 指定的预设（缺省为 wave）。
    """

    def __init__(self, catalogue_path: Optional[pathlib.Path] = None) -> None:
        """
        初始化预设管理器

        Args:
            catalogue_path: 目录文件路径，为 None 时使用包内的 catalogue.yaml

        Raises:
            FileNotFoundError: 目录文件不存在
            ValueError: 目录格式错误或默认预设不存在
        """
        self.catalogue_path = pathlib.Path(catalogue_path or CATALOGUE_PATH)
        if not self.catalogue_path.exists():
            raise FileNotFoundError(f"Preset catalogue not found: {self.catalogue_path}")

        with self.catalogue_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        self._presets = self._parse_presets(data.get("presets", {}))
        self.default_name = str(data.get("default", DEFAULT_PRESET))
        if self.default_name not in self._presets:
            raise ValueError(
                f"Default preset '{self.default_name}' is not defined in {self.catalogue_path}"
            )

        logger.info(
            "PresetManager initialized: catalogue=%s, presets=%d, default=%s",
            self.catalogue_path,
            len(self._presets),
            self.default_name,
        )

    @staticmethod
    def _parse_presets(raw: Dict) -> Dict[str, ChannelFormulas]:
        """
        解析 presets 段

        每项必须是包含 red/green/blue 的映射，缺失的通道视为空公式。
        """
        if not isinstance(raw, dict):
            raise ValueError(f"presets must be a mapping, got {type(raw)}")

        presets: Dict[str, ChannelFormulas] = {}
        for name, entry in raw.items():
            if not isinstance(entry, dict):
                raise ValueError(f"preset '{name}' must be a mapping, got {type(entry)}")
            presets[str(name)] = ChannelFormulas(
                red=str(entry.get("red", "")),
                green=str(entry.get("green", "")),
                blue=str(entry.get("blue", "")),
            )
        return presets

    def get(self, name: Optional[str]) -> ChannelFormulas:
        """按名称取预设，无法识别时返回默认预设。"""
        if self.preset_exists(name):
            return self._presets[name]
        logger.warning("Unknown preset '%s', falling back to '%s'", name, self.default_name)
        return self._presets[self.default_name]

    def list_presets(self) -> List[str]:
        """列出所有预设名称（按目录顺序）。"""
        return list(self._presets)

    def preset_exists(self, name: Optional[str]) -> bool:
        return name in self._presets


_DEFAULT_MANAGER: PresetManager | None = None


def get_preset(name: Optional[str]) -> ChannelFormulas:
    """使用包内默认目录取预设。"""
    global _DEFAULT_MANAGER
    if _DEFAULT_MANAGER is None:
        _DEFAULT_MANAGER = PresetManager()
    return _DEFAULT_MANAGER.get(name)
