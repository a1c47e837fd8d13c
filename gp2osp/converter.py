"""GP2 -> OSP 转换流水线。

逐行处理：时间区间过滤 -> 帧提取 -> 长度/校验和校验 -> MID 过滤 -> 写出。
任何一行的错误只会跳过该行（记录日志）；写输出失败则立即终止。
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Iterable, Iterator, List, TextIO, Tuple

from .logging_config import FINE, FINEST, SEVERE
from .osp_frame import TIME_TAG_LEN, FrameError, OSPFrame, RejectReason, parse_gp2_line
from .timetag import TimeInterval, check_interval
from .wanted import WantedMids

logger = logging.getLogger(__name__)


@dataclass
class ExtractResult:
    """转换结果。write_failed=True 表示因写输出失败提前终止。"""
    messages: int = 0
    write_failed: bool = False
    mid_stats: Dict[int, int] = field(default_factory=dict)
    rejected: Dict[RejectReason, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.write_failed

    def snapshot_mids(self) -> List[Tuple[int, int]]:
        return sorted(self.mid_stats.items(), key=lambda x: x[0])

    def count_reject(self, reason: RejectReason):
        self.rejected[reason] = self.rejected.get(reason, 0) + 1


def read_lines(source: TextIO) -> Iterator[str]:
    """逐行读取输入，去掉行尾换行。"""
    for line in source:
        yield line.rstrip("\r\n")


def write_record(out: BinaryIO, frame: OSPFrame) -> bool:
    """写出 长度(2) + payload；写入字节数不足或 OSError 返回 False。"""
    record = frame.to_record()
    try:
        n = out.write(record)
    except OSError as e:
        logger.log(SEVERE, f"Cannot write to binary output file: {e}")
        return False
    if n is not None and n != len(record):
        logger.log(SEVERE, f"Cannot write to binary output file: {n} of {len(record)} bytes written")
        return False
    return True


def extract_msgs(lines: Iterable[str], interval: TimeInterval,
                 wanted: WantedMids, out: BinaryIO) -> ExtractResult:
    """从 GP2 行中提取 OSP 消息并写入 out。"""
    result = ExtractResult()
    for line in lines:
        time_tag = line[:TIME_TAG_LEN]
        if not check_interval(line, interval):
            result.count_reject(RejectReason.OUT_OF_INTERVAL)
            logger.log(FINEST, f"{time_tag} Time tag outside interval")
            continue
        try:
            frame = parse_gp2_line(line)
        except FrameError as e:
            result.count_reject(e.reason)
            logger.warning(f"{time_tag} {e.detail}")
            continue
        if not wanted.wants(frame.mid):
            result.count_reject(RejectReason.UNWANTED_MID)
            logger.log(FINEST, f"{time_tag} skipped MID {frame.mid}")
            continue
        if not write_record(out, frame):
            result.write_failed = True
            return result
        result.messages += 1
        result.mid_stats[frame.mid] = result.mid_stats.get(frame.mid, 0) + 1
        logger.log(FINE, f"{time_tag} written MID {frame.mid}")
    return result


__all__ = ["ExtractResult", "read_lines", "write_record", "extract_msgs"]
