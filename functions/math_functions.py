"""
数学函数库

提供 RPN 公式中可直接调用的数学函数。
所有函数都是无状态的，只接受参数并返回计算结果，且从不抛出异常：
定义域之外的输入返回 nan，溢出返回 ±inf，交由颜色映射统一吸收。

角度约定：
- cos/sin/tan 的参数以「半圈」为单位（1.0 表示 π 弧度）
- acos/asin/atan 的结果同样以半圈为单位
"""

import math


def _half_turn(func):
    def wrapper(a: float) -> float:
        radians = a * math.pi
        if not math.isfinite(radians):
            return math.nan
        return func(radians)

    wrapper.__name__ = func.__name__
    return wrapper


cos_half = _half_turn(math.cos)
sin_half = _half_turn(math.sin)
tan_half = _half_turn(math.tan)


def acos_half(a: float) -> float:
    """反余弦，结果除以 π；|a| > 1 时返回 nan。"""
    if not -1.0 <= a <= 1.0:
        return math.nan
    return math.acos(a) / math.pi


def asin_half(a: float) -> float:
    """反正弦，结果除以 π；|a| > 1 时返回 nan。"""
    if not -1.0 <= a <= 1.0:
        return math.nan
    return math.asin(a) / math.pi


def atan_half(a: float) -> float:
    """反正切，结果除以 π。"""
    return math.atan(a) / math.pi


def sqrt_func(a: float) -> float:
    """
    计算平方根。

    Examples:
        sqrt_func(4) -> 2.0
        sqrt_func(-1) -> nan
    """
    if a < 0:
        return math.nan
    return math.sqrt(a)


def exp_func(a: float) -> float:
    """计算 e 的 a 次方，溢出时返回 inf。"""
    try:
        return math.exp(a)
    except OverflowError:
        return math.inf


def abs_func(a: float) -> float:
    """
    计算绝对值。

    Examples:
        abs_func(-5) -> 5.0
    """
    return float(abs(a))


def add(a: float, b: float) -> float:
    return a + b


def subtract(a: float, b: float) -> float:
    return a - b


def multiply(a: float, b: float) -> float:
    return a * b


def divide(a: float, b: float) -> float:
    """
    浮点除法。

    除数为 0 时不抛 ZeroDivisionError：
    - 0/0 或 nan/0 返回 nan
    - 其他按被除数与除数的符号返回 ±inf
    """
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def remainder(a: float, b: float) -> float:
    """
    截断取余（结果符号与被除数一致，例如 -7 % 3 -> -1）。

    除数为 0 或被除数为无穷时返回 nan。
    """
    if b == 0 or math.isinf(a):
        return math.nan
    return math.fmod(a, b)


def power(a: float, b: float) -> float:
    """
    幂运算 a ** b。

    - 溢出返回 ±inf（负底数配奇数整数指数时为 -inf）
    - 负底数配小数指数返回 nan
    - 0 的负数次方返回 inf
    """
    try:
        return math.pow(a, b)
    except OverflowError:
        if a < 0 and float(b).is_integer() and int(b) % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        if a == 0:
            return math.inf
        return math.nan
