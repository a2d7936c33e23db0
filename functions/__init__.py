"""
无状态函数库

包含可以在 RPN 公式中直接使用的运算符：
- 一元函数：cos, sin, tan, acos, asin, atan, sqrt, exp, abs
- 二元运算符：+, -, *, /, %, ^, pow

所有运算符通过 OperatorRegistry 注册，导入本包即完成注册。
"""

from core.registry import OperatorRegistry

from .function_docs import FUNCTION_DOCS, get_function_doc
from .math_functions import (
    abs_func,
    acos_half,
    add,
    asin_half,
    atan_half,
    cos_half,
    divide,
    exp_func,
    multiply,
    power,
    remainder,
    sin_half,
    sqrt_func,
    subtract,
    tan_half,
)

# 一元函数
OperatorRegistry.register_unary("cos", cos_half)
OperatorRegistry.register_unary("sin", sin_half)
OperatorRegistry.register_unary("tan", tan_half)
OperatorRegistry.register_unary("acos", acos_half)
OperatorRegistry.register_unary("asin", asin_half)
OperatorRegistry.register_unary("atan", atan_half)
OperatorRegistry.register_unary("sqrt", sqrt_func)
OperatorRegistry.register_unary("exp", exp_func)
OperatorRegistry.register_unary("abs", abs_func)

# 二元运算符
OperatorRegistry.register_binary("+", add)
OperatorRegistry.register_binary("-", subtract)
OperatorRegistry.register_binary("*", multiply)
OperatorRegistry.register_binary("/", divide)
OperatorRegistry.register_binary("%", remainder)
OperatorRegistry.register_binary("^", power)
OperatorRegistry.register_binary("pow", power)

__all__ = ["FUNCTION_DOCS", "get_function_doc"]
