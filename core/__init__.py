"""
ledhat.core

公式预览核心模块：
- 运算符表 `registry`
- RPN 公式引擎 `formula`
- 颜色映射 `color`
- 环形点阵 `grid`
- 动画时钟 `clock` 与帧调度 `scheduler`
- 动画驱动 `animation`
- 公式轮播队列 `playlist`
- 仿真配置解析 `parser`
"""
