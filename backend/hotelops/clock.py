"""
时间源
数据库中统一保存 naive UTC 时间
"""
from datetime import datetime, UTC
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """当前 UTC 时间（naive）"""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """带时区的时间转为 naive UTC，naive 时间原样返回"""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)
