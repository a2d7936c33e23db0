"""
日志模块（ledhat）

提供多等级文件日志（debug/info/warning/error 分文件轮转），
动画循环中的各模块通过 `get_logger()` 共享同一个 logger。
"""

import logging
import os
from logging.handlers import RotatingFileHandler


LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5

_DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
_BRIEF_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
_ERROR_FORMAT = "%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"


class SafeRotatingFileHandler(RotatingFileHandler):
    """
    安全的日志轮转处理器

    日志文件被其他进程占用时轮转会失败，这里吞掉轮转异常，继续写当前文件。
    """

    def doRollover(self) -> None:
        try:
            super().doRollover()
        except OSError:
            # 文件被占用（常见于 Windows），继续使用当前日志文件
            pass


class Logger:
    """
    日志管理器。

    - 按等级输出到不同日志文件（debug/info/warning/error）。
    - 统一 logger 名称为 "ledhat"。
    """

    def __init__(self, log_dir: str = "logs", name: str = "ledhat") -> None:
        """
        初始化日志管理器。

        Args:
            log_dir: 日志输出目录，默认 "logs"。
            name: 日志名称前缀，默认 "ledhat"。
        """
        self.log_dir = log_dir
        self.name = name

        os.makedirs(log_dir, exist_ok=True)

        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)

        # 避免重复添加 handler
        if not self.logger.handlers:
            self._setup_handlers()

    def _make_handler(self, level_name: str, level: int, fmt: str) -> SafeRotatingFileHandler:
        handler = SafeRotatingFileHandler(
            os.path.join(self.log_dir, f"{self.name}_{level_name}.log"),
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(fmt))
        return handler

    def _setup_handlers(self) -> None:
        """设置不同级别的日志处理器。"""
        self.logger.addHandler(self._make_handler("debug", logging.DEBUG, _DETAILED_FORMAT))
        self.logger.addHandler(self._make_handler("info", logging.INFO, _BRIEF_FORMAT))
        self.logger.addHandler(self._make_handler("warning", logging.WARNING, _BRIEF_FORMAT))
        self.logger.addHandler(self._make_handler("error", logging.ERROR, _ERROR_FORMAT))

    def get_logger(self) -> logging.Logger:
        """获取底层 logger 实例。"""
        return self.logger

    def close(self) -> None:
        """
        关闭所有日志处理器。

        在程序退出前调用，确保日志文件句柄被释放。
        """
        for handler in list(self.logger.handlers):
            handler.flush()
            handler.close()
            self.logger.removeHandler(handler)


_LOGGER_INSTANCE: Logger | None = None


def get_logger(log_dir: str | None = None, name: str = "ledhat") -> logging.Logger:
    """
    获取全局 logger 实例（单例）。

    Args:
        log_dir: 日志输出目录，为 None 时读取环境变量 LEDHAT_LOG_DIR，默认 "logs"。
        name: 日志名称前缀。
    """
    global _LOGGER_INSTANCE
    if _LOGGER_INSTANCE is None:
        _LOGGER_INSTANCE = Logger(log_dir or os.environ.get("LEDHAT_LOG_DIR", "logs"), name)
    return _LOGGER_INSTANCE.get_logger()


def close_logger() -> None:
    """
    关闭全局 logger 实例。

    长时间运行的进程退出前调用，确保日志文件句柄释放。
    """
    global _LOGGER_INSTANCE
    if _LOGGER_INSTANCE is not None:
        _LOGGER_INSTANCE.close()
        _LOGGER_INSTANCE = None
