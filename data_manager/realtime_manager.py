"""
实时帧推送模块

负责把每一帧的十六进制编码推送到 Redis，供 LED 帽控制器等外部消费者读取。
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

import redis
from redis.connection import ConnectionPool

from core.animation import Frame
from utils.logger import get_logger


logger = get_logger()


@dataclass
class RealtimeConfig:
    """
    实时推送配置

    Attributes:
        redis_host: Redis 主机地址
        redis_port: Redis 端口
        redis_db: Redis 数据库编号
        redis_password: Redis 密码（可选）
        pubsub_channel: Pub/Sub 频道名称，用于通知消费者有新帧
        use_connection_pool: 是否使用连接池（默认 False，单线程场景不需要）
    """
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None
    pubsub_channel: str = "ledhat"
    use_connection_pool: bool = False


class RealtimeFramePublisher:
    """
    实时帧推送器

    功能：
    - 每帧更新 ledhat:current 键（最新帧）
    - 发布通知到 Pub/Sub
    - 实例本身可作为 AnimationDriver 的输出端（可调用）
    """

    REDIS_KEY_PREFIX = "ledhat"

    def __init__(self, config: RealtimeConfig, client: Optional[redis.Redis] = None):
        """
        初始化实时帧推送器

        Args:
            config: 实时推送配置
            client: 已创建的 Redis 客户端（可选），为 None 时按配置连接
        """
        self.config = config
        self._connection_pool: Optional[ConnectionPool] = None
        self._redis_client: Optional[redis.Redis] = client
        self._frame_count = 0

        if self._redis_client is None:
            self._init_redis()

        logger.info(
            "RealtimeFramePublisher initialized: redis=%s:%d/%d, channel=%s",
            config.redis_host,
            config.redis_port,
            config.redis_db,
            config.pubsub_channel,
        )

    def _init_redis(self) -> None:
        """初始化 Redis 连接"""
        try:
            if self.config.use_connection_pool:
                self._connection_pool = ConnectionPool(
                    host=self.config.redis_host,
                    port=self.config.redis_port,
                    db=self.config.redis_db,
                    password=self.config.redis_password,
                    decode_responses=True,
                    max_connections=10,
                )
                self._redis_client = redis.Redis(connection_pool=self._connection_pool)
            else:
                self._redis_client = redis.Redis(
                    host=self.config.redis_host,
                    port=self.config.redis_port,
                    db=self.config.redis_db,
                    password=self.config.redis_password,
                    decode_responses=True,
                )

            self._redis_client.ping()
            logger.info("Redis connection established")
        except redis.RedisError as e:
            logger.error("Failed to connect to Redis: %s", e)
            raise

    @property
    def current_key(self) -> str:
        return f"{self.REDIS_KEY_PREFIX}:current"

    def push_frame(self, frame: Frame) -> None:
        """
        推送一帧到 Redis

        操作：
        1. 更新 ledhat:current 键：{"time", "count", "hex"}
        2. 发布通知：{"time", "count"}

        推送失败只记录日志，不影响动画循环。
        """
        self._frame_count += 1
        try:
            payload = {
                "time": frame.time,
                "count": len(frame),
                "hex": frame.to_hex(),
            }
            self._redis_client.set(self.current_key, json.dumps(payload))

            notification = {"time": frame.time, "count": len(frame)}
            self._redis_client.publish(self.config.pubsub_channel, json.dumps(notification))

            logger.debug(
                "Frame pushed to Redis: frame=%d, time=%.3f, points=%d",
                self._frame_count,
                frame.time,
                len(frame),
            )
        except redis.RedisError as e:
            logger.error("Failed to push frame to Redis: %s", e, exc_info=True)

    def __call__(self, frame: Frame) -> None:
        self.push_frame(frame)

    def close(self) -> None:
        """关闭 Redis 连接"""
        if self._redis_client is None:
            return
        try:
            if self._connection_pool is not None:
                self._connection_pool.disconnect()
            else:
                self._redis_client.close()
            logger.info("Redis connection closed")
        except redis.RedisError as e:
            logger.error("Failed to close Redis connection: %s", e, exc_info=True)
