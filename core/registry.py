"""
运算符注册表

本模块只负责「运算符注册」，不承载具体数学实现：
- UnaryOperator / BinaryOperator：带元数（arity）标记的运算符条目
- OperatorRegistry：统一管理 {记号 -> 运算符} 的映射

具体的三角函数、四则运算等实现放在独立的 functions 包中，
通过 OperatorRegistry 进行注册。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union


@dataclass(frozen=True)
class UnaryOperator:
    """一元函数：弹出 1 个操作数，压入 1 个结果。"""

    name: str
    func: Callable[[float], float]
    arity: int = 1


@dataclass(frozen=True)
class BinaryOperator:
    """二元运算符：先弹出 b 再弹出 a，压入 func(a, b)。"""

    name: str
    func: Callable[[float, float], float]
    arity: int = 2


Operator = Union[UnaryOperator, BinaryOperator]


class OperatorRegistry:
    """
    运算符注册表。

    所有注册/获取都通过类方法完成，表达式引擎与文档工具共享同一张表。
    注册顺序即 `list_unary()` / `list_binary()` 的返回顺序。
    """

    _operators: Dict[str, Operator] = {}

    @classmethod
    def register_unary(cls, name: str, func: Callable[[float], float]) -> None:
        """注册一元函数，例如 sin、sqrt。"""
        cls._operators[name] = UnaryOperator(name=name, func=func)

    @classmethod
    def register_binary(cls, name: str, func: Callable[[float, float], float]) -> None:
        """注册二元运算符，例如 +、pow。"""
        cls._operators[name] = BinaryOperator(name=name, func=func)

    @classmethod
    def get(cls, name: str) -> Optional[Operator]:
        """根据记号获取运算符，找不到时返回 None。"""
        return cls._operators.get(name)

    @classmethod
    def list_unary(cls) -> List[str]:
        """返回已注册的一元函数名称列表。"""
        return [name for name, op in cls._operators.items() if isinstance(op, UnaryOperator)]

    @classmethod
    def list_binary(cls) -> List[str]:
        """返回已注册的二元运算符名称列表。"""
        return [name for name, op in cls._operators.items() if isinstance(op, BinaryOperator)]
