"""
辅助工具：帧预览绘图等。
"""
