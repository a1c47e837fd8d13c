"""需要输出的 MID 列表（wanted list）。

配置字符串形式：
- ALL            : 不过滤，接受所有 MID
- RINEX          : 生成 RINEX 所需的默认 MID 列表
- RINEX,<list>   : 默认列表 + 自定义列表
- <list>         : 仅自定义列表

<list> 以 , ; . : 分隔的十进制整数。按 C atoi 规则解析，无法解析的 token 得到 0，
而 0 是列表结束标记，所以该 token 及其后的全部 token 被丢弃（例如 "6,x,7" -> {6}）。
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

RINEX_MIDS = (2, 6, 7, 56, 8, 11, 12, 15, 28, 50, 64, 75)
MAX_WANTED = 100
_SEPARATORS = re.compile(r"[,;.:]")
_ATOI = re.compile(r"\s*([+-]?\d+)")
_MAX_DIGITS = 18


def atoi(token: str) -> int:
    m = _ATOI.match(token)
    if not m:
        return 0
    digits = m.group(1).lstrip("+-")
    if len(digits) > _MAX_DIGITS:
        raise ValueError(f"MID token too long: {token[:20]}...")
    return int(m.group(1))


class WantedMids:
    """MID 允许列表。空列表表示 ALL（不过滤）。"""

    def __init__(self, mids: Iterable[int] = (), max_size: int = MAX_WANTED):
        self.max_size = max_size
        self.mids: List[int] = []
        for mid in mids:
            self.add(mid)

    @property
    def accept_all(self) -> bool:
        return not self.mids

    def add(self, mid: int) -> bool:
        if not 1 <= mid <= 255:
            logger.warning(f"MID {mid} out of range 1..255, ignored")
            return False
        if len(self.mids) >= self.max_size:
            logger.warning(f"Wanted list full ({self.max_size}), MID {mid} dropped")
            return False
        self.mids.append(mid)
        return True

    def wants(self, mid: int) -> bool:
        if self.accept_all:
            return True
        return mid in self.mids

    __contains__ = wants

    def describe(self) -> str:
        if self.accept_all:
            return "ALL"
        return " ".join(str(m) for m in self.mids)

    def __repr__(self) -> str:
        return f"WantedMids({self.describe()})"


def add_wanted(wanted: WantedMids, mid_list: str) -> None:
    """把分隔的 MID 列表追加到 wanted。"""
    tokens = [t for t in _SEPARATORS.split(mid_list) if t != ""]
    for i, tok in enumerate(tokens):
        value = atoi(tok)
        if value == 0:
            # 0 即结束标记：其后内容全部丢弃
            logger.warning(
                f"MID token {tok!r} parses to 0 and ends the wanted list; "
                f"dropped: {','.join(tokens[i:])}"
            )
            break
        wanted.add(value)


def build_wanted(spec: Optional[str]) -> WantedMids:
    """解析配置字符串，返回 WantedMids。"""
    s = (spec or "").strip()
    # 空字符串：保持 RINEX 默认列表
    if s == "" or s == "RINEX":
        return WantedMids(RINEX_MIDS)
    if s == "ALL":
        return WantedMids()
    if s.startswith("RINEX,"):
        wanted = WantedMids(RINEX_MIDS)
        add_wanted(wanted, s[len("RINEX,"):])
        return wanted
    wanted = WantedMids()
    add_wanted(wanted, s)
    if wanted.accept_all:
        logger.warning(f"Wanted list {s!r} has no valid MID, all messages will be accepted")
    return wanted


__all__ = ["WantedMids", "build_wanted", "add_wanted", "atoi", "RINEX_MIDS", "MAX_WANTED"]
