"""
数据管理模块

包含：
- RealtimeFramePublisher: 实时帧推送（Redis）
"""

from .realtime_manager import RealtimeConfig, RealtimeFramePublisher

__all__ = [
    "RealtimeConfig",
    "RealtimeFramePublisher",
]
