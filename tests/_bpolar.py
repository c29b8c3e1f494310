"""Test-only writer for .bpolar files (producer convention)."""

from __future__ import annotations

import struct
from typing import Optional, Sequence


def encode_7bit(n: int) -> bytes:
    out = bytearray()
    while True:
        b = n & 0x7F
        n >>= 7
        if n:
            out.append(b | 0x80)
        else:
            out.append(b)
            return bytes(out)


def encode_string(s: str) -> bytes:
    data = s.encode("utf-8")
    return encode_7bit(len(data)) + data


def encode_header(
    num_speeds: int,
    num_headings: int,
    header1: str = "MAXROLL",
    header2: str = "v1",
    status: str = "OK",
) -> bytes:
    return encode_string(header1) + encode_string(header2) + struct.pack("<ii", num_speeds, num_headings) + encode_string(status)


def encode_triplet(speed: float, heading: float, roll: float) -> bytes:
    return struct.pack("<3d", speed, heading, roll)


def encode_polar(
    speeds: Sequence[float],
    headings: Sequence[float],
    roll: Sequence[Sequence[float]],
    header1: str = "MAXROLL",
    header2: str = "v1",
    status: str = "OK",
    trailing: Optional[bytes] = None,
) -> bytes:
    """``roll[i][j]`` is for ``speeds[i]``, ``headings[j]``; cells are written heading-major."""
    parts = [encode_header(len(speeds), len(headings), header1, header2, status)]
    for j, h in enumerate(headings):
        for i, s in enumerate(speeds):
            parts.append(encode_triplet(s, h, roll[i][j]))
    if trailing:
        parts.append(trailing)
    return b"".join(parts)
