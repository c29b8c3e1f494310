"""
Binary polar data (.bpolar) decoder.

Layout, all little-endian:

- header1: 7-bit-encoded length prefix + UTF-8 bytes
- header2: same encoding
- int32 speed count (N)
- int32 heading count (M)
- status: same string encoding
- M x N triplets of float64 (speed, heading, roll), heading-major

The roll values are stored transposed as ``roll[speed][heading]``. Every
triplet overwrites ``speeds[i]`` and ``headings[j]`` with its embedded
values, so the last triplet read for an index decides the axis value.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

from rollpolar.config import MAX_HEADINGS, MAX_SPEEDS
from rollpolar.models.grid import PolarGrid, roll_statistics

logger = logging.getLogger(__name__)

_TRIPLET = struct.Struct("<3d")
_INT32 = struct.Struct("<i")
_MAX_VARINT_BYTES = 5


@dataclass(frozen=True)
class DecodeNote:
    message: str
    offset: Optional[int] = None


@dataclass(eq=False)
class DecodeError(Exception):
    message: str
    offset: Optional[int] = None

    def __str__(self) -> str:
        if self.offset is None:
            return self.message
        return f"Offset {self.offset}: {self.message}"


@dataclass(eq=False)
class InvalidDimensionsError(DecodeError):
    num_speeds: int = 0
    num_headings: int = 0


@dataclass(frozen=True)
class DecodedPolar:
    header1: str
    header2: str
    status: str
    grid: PolarGrid
    truncated: bool
    cells_read: int
    notes: List[DecodeNote] = field(default_factory=list)

    @property
    def cells_expected(self) -> int:
        return self.grid.num_speeds * self.grid.num_headings


def read_7bit_int(buf: bytes, offset: int) -> Tuple[int, int]:
    """Read a 7-bit-chunked unsigned int. Returns (value, next_offset)."""
    value = 0
    shift = 0
    pos = offset
    for _ in range(_MAX_VARINT_BYTES):
        if pos >= len(buf):
            raise DecodeError("Buffer ended inside a 7-bit encoded length", offset=pos)
        b = buf[pos]
        pos += 1
        value |= (b & 0x7F) << shift
        if (b & 0x80) == 0:
            return value, pos
        shift += 7
    raise DecodeError("7-bit encoded length is longer than 5 bytes", offset=offset)


def read_prefixed_string(buf: bytes, offset: int) -> Tuple[str, int]:
    length, pos = read_7bit_int(buf, offset)
    end = pos + length
    if end > len(buf):
        raise DecodeError(f"String of {length} bytes runs past end of buffer", offset=pos)
    return buf[pos:end].decode("utf-8", errors="replace"), end


def _read_int32(buf: bytes, offset: int, name: str) -> Tuple[int, int]:
    if offset + _INT32.size > len(buf):
        raise DecodeError(f"Buffer ended before {name}", offset=offset)
    (value,) = _INT32.unpack_from(buf, offset)
    return int(value), offset + _INT32.size


def _check_dimensions(num_speeds: int, num_headings: int, offset: int) -> None:
    if num_speeds <= 0 or num_speeds > MAX_SPEEDS or num_headings <= 0 or num_headings > MAX_HEADINGS:
        raise InvalidDimensionsError(
            f"Invalid dimensions: numSpeeds={num_speeds}, numHeadings={num_headings} "
            f"(expected 1..{MAX_SPEEDS} and 1..{MAX_HEADINGS})",
            offset=offset,
            num_speeds=num_speeds,
            num_headings=num_headings,
        )


def decode_polar_bytes(buffer: bytes) -> DecodedPolar:
    buf = bytes(buffer)
    notes: List[DecodeNote] = []

    header1, offset = read_prefixed_string(buf, 0)
    header2, offset = read_prefixed_string(buf, offset)
    dims_offset = offset
    num_speeds, offset = _read_int32(buf, offset, "speed count")
    num_headings, offset = _read_int32(buf, offset, "heading count")
    _check_dimensions(num_speeds, num_headings, dims_offset)
    status, offset = read_prefixed_string(buf, offset)

    logger.debug("Header1=%r Header2=%r Status=%r", header1, header2, status)
    logger.debug("Dimensions: numSpeeds=%d numHeadings=%d, data at offset %d", num_speeds, num_headings, offset)

    speeds = [0.0] * num_speeds
    headings = [0.0] * num_headings
    roll = np.zeros((num_speeds, num_headings), dtype=np.float64)

    cells_expected = num_speeds * num_headings
    cells_read = 0
    truncated = False
    for j in range(num_headings):
        for i in range(num_speeds):
            if offset + _TRIPLET.size > len(buf):
                truncated = True
                break
            speed_val, heading_val, roll_val = _TRIPLET.unpack_from(buf, offset)
            offset += _TRIPLET.size
            speeds[i] = speed_val
            headings[j] = heading_val
            roll[i, j] = roll_val
            cells_read += 1
        if truncated:
            break

    if truncated:
        msg = (
            f"Data block truncated after {cells_read} of {cells_expected} cells "
            f"(heading={cells_read // num_speeds}, speed={cells_read % num_speeds}); "
            "remaining cells are zero"
        )
        notes.append(DecodeNote(msg, offset=offset))
        logger.warning(msg)
    elif offset < len(buf):
        notes.append(DecodeNote(f"{len(buf) - offset} trailing bytes ignored", offset=offset))

    grid = PolarGrid.from_lists(speeds, headings, roll)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Roll statistics: %s", roll_statistics(grid).to_dict())

    return DecodedPolar(
        header1=header1,
        header2=header2,
        status=status,
        grid=grid,
        truncated=truncated,
        cells_read=cells_read,
        notes=notes,
    )


def load_polar_file(path: str | Path) -> DecodedPolar:
    p = Path(path).expanduser()
    data = p.read_bytes()
    logger.debug("Read %d bytes from %s", len(data), p)
    return decode_polar_bytes(data)
