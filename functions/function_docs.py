"""
函数文档元数据

为公式编辑器的帮助面板提供每个运算符的说明。
"""

from __future__ import annotations

from typing import Dict, Optional


FUNCTION_DOCS: Dict[str, Dict[str, str]] = {
    "cos": {
        "name": "cos",
        "chinese_name": "余弦",
        "doc": "返回 cos(a·π)，参数以半圈为单位，`1 cos` 得到 -1。",
        "example": "x cos",
    },
    "sin": {
        "name": "sin",
        "chinese_name": "正弦",
        "doc": "返回 sin(a·π)，参数以半圈为单位，`0.5 sin` 得到 1。",
        "example": "t x + sin",
    },
    "tan": {
        "name": "tan",
        "chinese_name": "正切",
        "doc": "返回 tan(a·π)，参数以半圈为单位。",
        "example": "x 0.25 * tan",
    },
    "acos": {
        "name": "acos",
        "chinese_name": "反余弦",
        "doc": "返回 acos(a)/π，`-1 acos` 得到 1；|a| > 1 时结果为 nan（显示为黑色）。",
        "example": "x acos",
    },
    "asin": {
        "name": "asin",
        "chinese_name": "反正弦",
        "doc": "返回 asin(a)/π，`1 asin` 得到 0.5。",
        "example": "y asin",
    },
    "atan": {
        "name": "atan",
        "chinese_name": "反正切",
        "doc": "返回 atan(a)/π，结果位于 (-0.5, 0.5)。",
        "example": "t atan",
    },
    "sqrt": {
        "name": "sqrt",
        "chinese_name": "平方根",
        "doc": "返回平方根，负数输入得到 nan。",
        "example": "y sqrt",
    },
    "exp": {
        "name": "exp",
        "chinese_name": "指数",
        "doc": "返回 e 的 a 次方。",
        "example": "x exp",
    },
    "abs": {
        "name": "abs",
        "chinese_name": "绝对值",
        "doc": "返回绝对值，常用于把 [-1, 1] 的波形折成 [0, 1]。",
        "example": "t sin abs",
    },
    "+": {"name": "+", "chinese_name": "加", "doc": "a + b", "example": "x y +"},
    "-": {"name": "-", "chinese_name": "减", "doc": "a - b（b 为后压入的操作数）", "example": "x 1 -"},
    "*": {"name": "*", "chinese_name": "乘", "doc": "a * b", "example": "x 0.5 *"},
    "/": {"name": "/", "chinese_name": "除", "doc": "a / b，除以 0 得到 ±inf 或 nan", "example": "x 2 /"},
    "%": {"name": "%", "chinese_name": "取余", "doc": "截断取余，符号跟随 a", "example": "t 2 %"},
    "^": {"name": "^", "chinese_name": "幂", "doc": "a 的 b 次方，与 pow 等价", "example": "x 2 ^"},
    "pow": {"name": "pow", "chinese_name": "幂", "doc": "a 的 b 次方，与 ^ 等价", "example": "x 2 pow"},
}


def get_function_doc(name: str) -> Optional[Dict[str, str]]:
    """获取运算符文档，找不到时返回 None。"""
    return FUNCTION_DOCS.get(name)
