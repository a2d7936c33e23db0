"""
RPN 公式引擎

公式是以空白分隔的记号序列（逆波兰表示法），例如 "t x + sin 0.5 * 0.5 +"。
本模块提供三种对同一记号序列的遍历：
- evaluate: 数值求值（动画循环内每帧调用数千次）
- validate: 无绑定的语法检查，给出带位置的错误信息
- to_infix: 转为中缀表达式，仅用于预览显示

所有函数都是纯函数且从不抛出异常：
- 操作数不足：evaluate 返回 0，validate 记录错误，to_infix 返回错误描述
- 未知记号：evaluate/to_infix 在该记号处停止并返回已有结果，validate 记录错误后停止
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Mapping, Optional

import functions  # noqa: F401  注册运算符
from functions import get_function_doc

from .color import clamp_to_device_range
from .registry import BinaryOperator, OperatorRegistry


VARIABLES = ("x", "y", "t")

# 记号开头的十进制数（仅 ASCII 数字），与浏览器 parseFloat 的前缀解析一致
_NUMBER_PREFIX = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class TokenKind(Enum):
    """记号类别。"""

    NUMBER = auto()
    VARIABLE = auto()
    OPERATOR = auto()
    UNKNOWN = auto()


@dataclass
class ValidationResult:
    """
    语法检查结果。

    Attributes:
        valid: 没有任何错误时为 True
        errors: 错误信息列表，记号位置从 1 开始计数
        stack_depth: 检查结束时符号栈的深度（>1 表示公式未完全归约）
    """

    valid: bool = True
    errors: List[str] = field(default_factory=list)
    stack_depth: int = 0


@dataclass(frozen=True)
class ChannelFormulas:
    """红、绿、蓝三个通道的公式。"""

    red: str = ""
    green: str = ""
    blue: str = ""

    def channels(self) -> Dict[str, str]:
        return {"red": self.red, "green": self.green, "blue": self.blue}

    def validate(self) -> Dict[str, "ValidationResult"]:
        """分别检查三个通道，返回 {通道名: 检查结果}。"""
        return {name: validate(formula) for name, formula in self.channels().items()}


def tokenize(formula: str) -> List[str]:
    """按空白切分公式。"""
    return formula.split()


def parse_number(token: str) -> Optional[float]:
    """
    把记号解析为有限浮点数。

    只看记号开头的数字部分："3abc" -> 3.0，"1_0" -> 1.0，"1e" -> 1.0。
    开头不是数字（含 "inf"、"nan"、非 ASCII 数字）或结果溢出为 inf 时返回 None。
    """
    match = _NUMBER_PREFIX.match(token)
    if match is None:
        return None
    value = float(match.group())
    if not math.isfinite(value):
        return None
    return value


def classify_token(token: str) -> TokenKind:
    if parse_number(token) is not None:
        return TokenKind.NUMBER
    if token in VARIABLES:
        return TokenKind.VARIABLE
    if OperatorRegistry.get(token) is not None:
        return TokenKind.OPERATOR
    return TokenKind.UNKNOWN


def evaluate(formula: str, variables: Mapping[str, float]) -> float:
    """
    对公式求值。

    Args:
        formula: RPN 公式字符串
        variables: 变量绑定，只识别 x、y、t

    Returns:
        栈顶的值；栈为空或操作数不足时返回 0.0。
        结果可能是 inf 或 nan，由颜色映射负责吸收。
    """
    if not formula or not formula.strip():
        return 0.0

    stack: List[float] = []
    for token in tokenize(formula):
        number = parse_number(token)
        if number is not None:
            stack.append(number)
            continue

        if token in VARIABLES and token in variables:
            stack.append(float(variables[token]))
            continue

        operator = OperatorRegistry.get(token)
        if operator is None:
            # 输入中途的公式：只计算已识别的前缀
            break

        if len(stack) < operator.arity:
            return 0.0

        if isinstance(operator, BinaryOperator):
            b = stack.pop()
            a = stack.pop()
            stack.append(operator.func(a, b))
        else:
            stack.append(operator.func(stack.pop()))

    return stack[-1] if stack else 0.0


def validate(formula: str) -> ValidationResult:
    """
    检查公式语法（不需要变量绑定）。

    每次按键都会调用，因此从不抛出异常。
    操作数不足的错误会继续向后检查；遇到未知记号则记录错误后停止。
    """
    result = ValidationResult()
    if not formula or not formula.strip():
        return result

    stack: List[str] = []
    for position, token in enumerate(tokenize(formula), start=1):
        kind = classify_token(token)
        if kind is TokenKind.NUMBER:
            stack.append("number")
        elif kind is TokenKind.VARIABLE:
            stack.append("variable")
        elif kind is TokenKind.OPERATOR:
            operator = OperatorRegistry.get(token)
            if len(stack) < operator.arity:
                if isinstance(operator, BinaryOperator):
                    result.errors.append(
                        f"Token {position} ('{token}'): Binary operator requires two operands"
                    )
                else:
                    result.errors.append(
                        f"Token {position} ('{token}'): Unary function requires one operand"
                    )
            else:
                del stack[len(stack) - operator.arity:]
                stack.append("result")
        else:
            result.errors.append(f"Token {position} ('{token}'): Unknown token")
            break

    result.valid = not result.errors
    result.stack_depth = len(stack)
    return result


def to_infix(formula: str) -> str:
    """
    把公式转为中缀表达式字符串，仅用于显示。

    Examples:
        to_infix("3 4 +") -> "(3 + 4)"
        to_infix("2 3 pow") -> "pow(2, 3)"
        to_infix("x sin") -> "sin(x)"
    """
    if not formula or not formula.strip():
        return ""

    stack: List[str] = []
    for token in tokenize(formula):
        kind = classify_token(token)
        if kind is TokenKind.NUMBER or kind is TokenKind.VARIABLE:
            stack.append(token)
            continue
        if kind is TokenKind.UNKNOWN:
            break

        operator = OperatorRegistry.get(token)
        if isinstance(operator, BinaryOperator):
            if len(stack) < 2:
                return f"Error: {token} needs two operands"
            b = stack.pop()
            a = stack.pop()
            if token in ("pow", "^"):
                stack.append(f"pow({a}, {b})")
            else:
                stack.append(f"({a} {token} {b})")
        else:
            if not stack:
                return f"Error: {token} needs one operand"
            stack.append(f"{token}({stack.pop()})")

    return stack[-1] if stack else ""


def evaluate_for_channel(formula: str, variables: Mapping[str, float]) -> int:
    """求值并映射为 0~255 的颜色通道值。"""
    return clamp_to_device_range(evaluate(formula, variables))


def available_functions() -> Dict[str, List[str]]:
    """返回可用的一元函数、二元运算符和变量名，供编辑器帮助面板展示。"""
    return {
        "unary": OperatorRegistry.list_unary(),
        "binary": OperatorRegistry.list_binary(),
        "variables": list(VARIABLES),
    }


def describe(name: str) -> Optional[Dict[str, Any]]:
    """
    获取单个运算符的帮助信息（文档 + 元数）。

    变量和未知记号返回 None。
    """
    operator = OperatorRegistry.get(name)
    doc = get_function_doc(name)
    if operator is None or doc is None:
        return None
    return {**doc, "arity": operator.arity}
