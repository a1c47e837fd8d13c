"""时间标签解析与时间区间过滤。

时间标签格式：dd/mm/yyyy hh:mm:ss[.fff]，按本地时间解释，秒级精度（毫秒忽略）。

与 C mktime 不同：不存在的日期时间（如 31/02、25:00:00）视为无效而不是顺延；
夏令时切换时重复或跳过的本地时刻按墙上时间直接比较，不做时区换算。
"""
from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from typing import Optional

_DT_RE = re.compile(
    r"\s*([+-]?\d+)\s*/\s*([+-]?\d+)\s*/\s*([+-]?\d+)"
    r"\s+([+-]?\d+)\s*:\s*([+-]?\d+)\s*:\s*([+-]?\d+)"
)


def dt2time(date_and_time: str) -> Optional[datetime.datetime]:
    """'dd/mm/yyyy hh:mm:ss' -> datetime；无法解析返回 None。

    秒之后的内容（毫秒、行内其它文本）被忽略。
    """
    m = _DT_RE.match(date_and_time)
    if not m:
        return None
    try:
        day, month, year, hour, minute, second = (int(g) for g in m.groups())
        return datetime.datetime(year, month, day, hour, minute, second)
    except (ValueError, OverflowError):
        return None


@dataclass(frozen=True)
class TimeInterval:
    start: datetime.datetime
    end: datetime.datetime

    def contains(self, instant: Optional[datetime.datetime]) -> bool:
        if instant is None:
            return False
        return self.start <= instant <= self.end


def check_interval(time_tag: str, interval: TimeInterval) -> bool:
    return interval.contains(dt2time(time_tag))


def make_interval(from_date: str, from_time: str,
                  to_date: str, to_time: str) -> Optional[TimeInterval]:
    """由配置的日期/时间字符串构造区间；任一端无效或 start > end 时返回 None。"""
    start = dt2time(f"{from_date} {from_time}")
    end = dt2time(f"{to_date} {to_time}")
    if start is None or end is None or start > end:
        return None
    return TimeInterval(start, end)


__all__ = ["dt2time", "TimeInterval", "check_interval", "make_interval"]
