"""OSP 二进制流读取（流式）。

OSP 文件格式（GP2toOSP 输出）：
- 2 字节 payload 长度 (len, 大端)
- 接着 len 字节的 payload，payload[0] 为 MID
- 记录之间无分隔，无头尾、无校验和

以流式状态机方式处理分包：不完整的尾部记录留在缓冲区，等下次 feed。
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class OSPMessage:
    mid: int
    payload: bytes


class OSPReader:
    def __init__(self):
        self.buf = bytearray()
        self.stats: Dict[int, int] = {}

    def feed(self, data: bytes) -> List[OSPMessage]:
        """喂入数据，返回本次解析出的完整消息列表。"""
        self.buf.extend(data)
        found: List[OSPMessage] = []
        while len(self.buf) >= 2:
            length = (self.buf[0] << 8) | self.buf[1]
            total = 2 + length
            if len(self.buf) < total:
                break
            payload = bytes(self.buf[2:total])
            del self.buf[:total]
            # 长度为 0 的记录没有 MID，丢弃
            if not payload:
                continue
            msg = OSPMessage(payload[0], payload)
            self.stats[msg.mid] = self.stats.get(msg.mid, 0) + 1
            found.append(msg)
        return found

    @property
    def pending(self) -> int:
        return len(self.buf)

    def snapshot_stats(self) -> List[Tuple[int, int]]:
        return sorted(self.stats.items(), key=lambda x: x[0])

    def reset_stats(self):
        self.stats.clear()


def read_osp_file(path: str, chunk_size: int = 4096) -> List[OSPMessage]:
    reader = OSPReader()
    messages: List[OSPMessage] = []
    with open(path, 'rb') as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            messages.extend(reader.feed(chunk))
    return messages


__all__ = ["OSPMessage", "OSPReader", "read_osp_file"]
