"""
任务时间线状态：按截止时间与当前时刻的差值分红 / 黄 / 绿三档

判定顺序固定：<=3h 红 → <=24h 黄 → >=72h 绿 → 其余（24h~72h）落到默认黄。
"""

from datetime import datetime, timezone
from typing import Literal

TimelineStatus = Literal["red", "amber", "green"]

RED_HOURS = 3
AMBER_HOURS = 24
GREEN_HOURS = 72


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite 等后端读回的时间不带时区，按 UTC 处理
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def classify_timeline(due: datetime, now: datetime) -> TimelineStatus:
    hours_remaining = (_as_utc(due) - _as_utc(now)).total_seconds() / 3600

    if hours_remaining <= RED_HOURS:
        return "red"
    if hours_remaining <= AMBER_HOURS:
        return "amber"
    if hours_remaining >= GREEN_HOURS:
        return "green"
    return "amber"
