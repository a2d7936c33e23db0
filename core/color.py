"""
颜色映射

把公式结果（任意实数）映射为 0~255 的 LED 通道值，并提供
RGB 三元组与 "rrggbb" 十六进制串之间的转换。
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass


CHANNEL_MAX = 255
_HEX_COMPONENT = re.compile(r"[0-9a-fA-F]{2}")


def clamp_to_device_range(value: float) -> int:
    """
    把任意实数映射为 LED 通道值。

    - nan 映射为 0（黑色）
    - 先饱和到 [-1, 1]（+inf -> 1，-inf -> -1）
    - 再线性映射：floor(((v + 1) / 2) * 256)，并封顶到 255，
      因此 1.0 映射为 255 而不是溢出的 256

    Examples:
        clamp_to_device_range(-1.0) -> 0
        clamp_to_device_range(0.0) -> 128
        clamp_to_device_range(1.0) -> 255
    """
    if math.isnan(value):
        return 0

    normalized = max(-1.0, min(1.0, value))
    return min(CHANNEL_MAX, math.floor(((normalized + 1) / 2) * 256))


@dataclass(frozen=True)
class Color:
    """单个 LED 的颜色。"""

    red: int
    green: int
    blue: int

    def to_hex(self) -> str:
        """编码为 "rrggbb"（小写）。"""
        return f"{self.red:02x}{self.green:02x}{self.blue:02x}"

    @classmethod
    def from_hex(cls, text: str) -> "Color":
        """
        从 "rrggbb" 解码。

        长度不是 6 时为白色；某个分量不是两位十六进制数字（含 "+f"、" f"）时该分量取 0xff。
        """
        channels = [0xFF, 0xFF, 0xFF]
        if len(text) == 6:
            for i in range(3):
                component = text[i * 2:i * 2 + 2]
                if _HEX_COMPONENT.fullmatch(component):
                    channels[i] = int(component, 16)
        return cls(*channels)

    def is_black(self) -> bool:
        return self.red == 0 and self.green == 0 and self.blue == 0


BLACK = Color(0, 0, 0)
WHITE = Color(0xFF, 0xFF, 0xFF)
