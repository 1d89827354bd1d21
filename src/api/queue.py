from redis import Redis
from redis.exceptions import RedisError
from rq import Queue

from utils.config_loader import get_settings

QUEUE_NAME = "edustudio"


def get_redis() -> Redis:
    return Redis.from_url(get_settings().redis_url, socket_connect_timeout=2)


def get_queue() -> Queue:
    return Queue(QUEUE_NAME, connection=get_redis())


def redis_available() -> bool:
    """True when the job queue's redis answers a ping"""
    if not get_settings().redis_url:
        return False
    try:
        return bool(get_redis().ping())
    except RedisError:
        return False
