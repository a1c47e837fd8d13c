import pytest

from gp2osp.osp_frame import (
    MSG_SIZE, FrameError, RejectReason, build_gp2_line, decode_hex_bytes,
    extract_frame_bytes, osp_checksum, parse_gp2_line, validate_frame,
)

TAG = "29/10/2014 20:31:08.942"


def _raw(payload: bytes, checksum=None) -> bytes:
    cs = osp_checksum(payload) if checksum is None else checksum
    return len(payload).to_bytes(2, "big") + payload + cs.to_bytes(2, "big")


def test_parse_example_line(example_line):
    frame = parse_gp2_line(example_line)
    assert frame.length == 0x12
    assert frame.mid == 0x33
    assert frame.checksum == 0x0197
    assert len(frame.payload) == 18
    assert frame.to_record() == bytes([0x00, 0x12]) + frame.payload


def test_checksum_folds_to_15_bits():
    assert osp_checksum(b"") == 0
    assert osp_checksum(bytes([0x33, 0x06, 0x19, 0x64, 0xE1])) == 0x0197
    # 200 * 0xFF = 51000，超过 15 bit
    assert osp_checksum(bytes([0xFF] * 200)) == 51000 & 0x7FFF
    assert osp_checksum(bytes([0xFF] * 200)) < 0x8000


def test_valid_frame_accepted_and_single_byte_corruption_rejected():
    payload = bytes([0x02, 0x10, 0xFF, 0x80, 0x00, 0x7F, 0x41])
    data = bytearray(_raw(payload))
    frame = validate_frame(data)
    assert frame.payload == payload
    for i in range(len(payload)):
        bad = bytearray(data)
        bad[2 + i] = (bad[2 + i] + 1) & 0xFF
        with pytest.raises(FrameError) as ei:
            validate_frame(bad)
        assert ei.value.reason is RejectReason.BAD_CHECKSUM


def test_no_header():
    with pytest.raises(FrameError) as ei:
        parse_gp2_line(f"{TAG} (0) 00 12 33 06 B0 B3")
    assert ei.value.reason is RejectReason.NO_MARKERS


def test_no_tail():
    with pytest.raises(FrameError) as ei:
        parse_gp2_line(f"{TAG} (0) A0 A2 00 01 02 00 02")
    assert ei.value.reason is RejectReason.NO_MARKERS


def test_declared_length_larger_than_payload():
    # 长度字段为 5，但实际只有 3 字节 payload
    with pytest.raises(FrameError) as ei:
        parse_gp2_line(f"{TAG} (0) A0 A2 00 05 02 01 02 00 05 B0 B3")
    assert ei.value.reason is RejectReason.LENGTH_MISMATCH
    assert "PayloadLen=5<>3=BytesRead" in ei.value.detail


def test_checksum_off_by_one():
    payload = bytes([0x02, 0x01, 0x02])
    line = build_gp2_line(TAG, payload)
    parse_gp2_line(line)
    bad = line.replace("00 05 B0 B3", "00 06 B0 B3")
    assert bad != line
    with pytest.raises(FrameError) as ei:
        parse_gp2_line(bad)
    assert ei.value.reason is RejectReason.BAD_CHECKSUM


def test_too_few_bytes():
    with pytest.raises(FrameError) as ei:
        parse_gp2_line(f"{TAG} (0) A0 A2 00 01 02 00 B0 B3")
    assert ei.value.reason is RejectReason.NO_DATA


def test_bad_hex_token_truncates_decoding():
    # ZZ 之后的字节不再解码，剩下的 5 字节正好是合法帧
    data = extract_frame_bytes(f"{TAG} (0) A0 A2 00 01 02 00 02 ZZ 11 22 B0 B3")
    assert bytes(data) == bytes([0x00, 0x01, 0x02, 0x00, 0x02])
    assert validate_frame(data).mid == 2


def test_decode_stops_at_capacity():
    assert len(decode_hex_bytes("01 " * (MSG_SIZE + 10))) == MSG_SIZE
    with pytest.raises(FrameError) as ei:
        extract_frame_bytes(f"{TAG} (0) A0 A2 " + "01 " * (MSG_SIZE + 10) + "B0 B3")
    assert ei.value.reason is RejectReason.NO_DATA


def test_largest_payload_accepted():
    # 缓冲区 2050 字节：长度(2) + payload + 校验和(2) 最多 2049 字节
    payload = bytes([0x40]) + bytes(range(256)) * 7 + bytes(2045 - 1 - 256 * 7)
    assert len(payload) == 2045
    frame = parse_gp2_line(build_gp2_line(TAG, payload))
    assert frame.length == 2045
    with pytest.raises(FrameError) as ei:
        parse_gp2_line(build_gp2_line(TAG, payload + b"\x00"))
    assert ei.value.reason is RejectReason.NO_DATA
