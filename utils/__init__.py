"""
工具模块：日志等。
"""
