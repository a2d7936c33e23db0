"""
预设公式模块

包含：
- PresetManager: 从 YAML 目录加载预设公式三元组
- get_preset: 使用包内目录按名称取预设（未知名称回退到 wave）
"""

from .preset_manager import DEFAULT_PRESET, PresetManager, get_preset

__all__ = ["DEFAULT_PRESET", "PresetManager", "get_preset"]
