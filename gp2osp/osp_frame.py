"""GP2 行内 OSP 帧提取与校验。

GP2 行格式（示例）：
    29/10/2014 20:31:08.942 (0) A0 A2 00 12 33 06 ... 64 E1 01 97 B0 B3

- 前 23 个字符为时间标签
- A0 A2 为帧头，B0 B3 为帧尾（均以十六进制文本表示）
- 帧头与帧尾之间：payload 长度(2字节, 大端) + payload + 校验和(2字节, 大端)

校验和：payload 逐字节累加，每次累加后与 0x7FFF 取与（15 bit）。
参考：SiRFstarIV One Socket Protocol ICD
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List

TIME_TAG_LEN = 23
HEADER = "A0 A2"
TAIL = "B0 B3"
MSG_SIZE = 2050  # 2048 (最大 payload) + 2 (长度)
CHECKSUM_MASK = 0x7FFF

_HEX_BYTE = re.compile(r"[0-9A-Fa-f]{1,2}")


class RejectReason(Enum):
    """行被跳过的原因。"""
    OUT_OF_INTERVAL = "time tag outside interval"
    NO_MARKERS = "no message header or tail"
    NO_DATA = "no message data"
    LENGTH_MISMATCH = "payload length mismatch"
    BAD_CHECKSUM = "wrong checksum"
    UNWANTED_MID = "MID not wanted"


class FrameError(ValueError):
    def __init__(self, reason: RejectReason, detail: str = ""):
        super().__init__(detail or reason.value)
        self.reason = reason
        self.detail = detail or reason.value


@dataclass(frozen=True)
class OSPFrame:
    length: int
    payload: bytes
    checksum: int

    @property
    def mid(self) -> int:
        return self.payload[0]

    def to_record(self) -> bytes:
        """输出记录：长度(2字节) + payload，去掉头尾与校验和。"""
        return self.length.to_bytes(2, "big") + self.payload


def osp_checksum(payload: bytes) -> int:
    c = 0
    for b in payload:
        c += b
        c &= CHECKSUM_MASK
    return c


def decode_hex_bytes(text: str, limit: int = MSG_SIZE) -> bytearray:
    """把空白分隔的十六进制字节文本解码为字节。

    遇到无法解析的 token 或达到 limit 时提前停止（截断）。
    """
    buf = bytearray()
    for tok in text.split():
        if len(buf) >= limit:
            break
        if not _HEX_BYTE.fullmatch(tok):
            break
        buf.append(int(tok, 16))
    return buf


def extract_frame_bytes(line: str) -> bytearray:
    """在时间标签之后查找帧头/帧尾，返回两者之间解码出的字节。"""
    body = line[TIME_TAG_LEN:]
    head = body.find(HEADER)
    tail = body.find(TAIL, head + len(HEADER)) if head >= 0 else -1
    if head < 0 or tail < 0:
        raise FrameError(RejectReason.NO_MARKERS, "No message header or tailer")
    data = decode_hex_bytes(body[head + len(HEADER):tail])
    n = len(data)
    if n <= 4 or n >= MSG_SIZE:
        raise FrameError(RejectReason.NO_DATA, "No message data")
    return data


def validate_frame(data: bytes) -> OSPFrame:
    """校验长度字段与校验和，返回 OSPFrame。"""
    n = len(data)
    if n < 4:
        raise FrameError(RejectReason.NO_DATA, "No message data")
    length = (data[0] << 8) | data[1]
    if n != length + 4:
        raise FrameError(
            RejectReason.LENGTH_MISMATCH,
            f"PayloadLen={length}<>{n - 4}=BytesRead",
        )
    payload = bytes(data[2:2 + length])
    computed = osp_checksum(payload)
    received = (data[length + 2] << 8) | data[length + 3]
    if computed != received:
        raise FrameError(
            RejectReason.BAD_CHECKSUM,
            f"Wrong checksum (computed {computed:04X}, received {received:04X})",
        )
    return OSPFrame(length=length, payload=payload, checksum=received)


def parse_gp2_line(line: str) -> OSPFrame:
    """提取 + 校验，失败抛出 FrameError。"""
    return validate_frame(extract_frame_bytes(line))


def build_gp2_line(time_tag: str, payload: bytes, prefix: str = "(0)") -> str:
    """按 GP2 格式生成一行，用于构造测试数据。"""
    length = len(payload)
    cs = osp_checksum(payload)
    data = length.to_bytes(2, "big") + payload + cs.to_bytes(2, "big")
    hex_bytes: List[str] = [f"{b:02X}" for b in data]
    return f"{time_tag} {prefix} {HEADER} {' '.join(hex_bytes)} {TAIL}"


__all__ = [
    "RejectReason", "FrameError", "OSPFrame", "osp_checksum",
    "decode_hex_bytes", "extract_frame_bytes", "validate_frame",
    "parse_gp2_line", "build_gp2_line",
    "MSG_SIZE", "TIME_TAG_LEN",
]
