# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Binary reader for EXIF segments

This module provides bounds-checked access to the primitive values stored
in an APP1 segment. The byte order is switchable at any time, which is how
the TIFF header decides the order of every read that follows it.

Copyright 2025 DNAi inc.
"""

import struct
from typing import Union

from app1exif.exceptions import MetadataReadError, MetadataWriteError


# struct format characters keyed by byte width
WRITE_FORMATS = {
    1: 'B',
    2: 'H',
    4: 'I',
}


class BinaryReader:
    """
    Typed reads and writes over a mutable byte buffer.

    A ``bytearray`` is used as-is, so writes are visible to the caller.
    Any other bytes-like object is copied first.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        """
        Initialize the reader.

        Args:
            data: Segment bytes
        """
        if isinstance(data, bytearray):
            self.data = data
        else:
            self.data = bytearray(data)
        self.endian = '>'  # JPEG markers are big-endian

    @property
    def little_endian(self) -> bool:
        return self.endian == '<'

    @little_endian.setter
    def little_endian(self, value: bool) -> None:
        self.endian = '<' if value else '>'

    def __len__(self) -> int:
        return len(self.data)

    def check_range(self, offset: int, size: int) -> None:
        if offset < 0 or size < 0 or offset + size > len(self.data):
            raise MetadataReadError(
                f"Read of {size} bytes at offset {offset} is outside the segment "
                f"({len(self.data)} bytes)"
            )

    def _unpack(self, fmt: str, offset: int, size: int) -> int:
        self.check_range(offset, size)
        return struct.unpack_from(f'{self.endian}{fmt}', self.data, offset)[0]

    def read_byte(self, offset: int) -> int:
        """Read an unsigned 8-bit value."""
        return self._unpack('B', offset, 1)

    def read_short(self, offset: int) -> int:
        """Read an unsigned 16-bit value."""
        return self._unpack('H', offset, 2)

    def read_long(self, offset: int) -> int:
        """Read an unsigned 32-bit value."""
        return self._unpack('I', offset, 4)

    def read_slong(self, offset: int) -> int:
        """Read a signed 32-bit value."""
        return self._unpack('i', offset, 4)

    def read_string(self, offset: int, length: int) -> str:
        """
        Read ``length`` bytes as latin-1 text, one character per byte.

        Used for signatures; tag text goes through the parser's own decoding.
        """
        return self.read_range(offset, length).decode('latin-1')

    def read_range(self, offset: int, length: int) -> bytes:
        """Return a copy of the raw bytes ``[offset, offset + length)``."""
        self.check_range(offset, length)
        return bytes(self.data[offset:offset + length])

    def write(self, offset: int, value: int, width: int) -> None:
        """
        Overwrite ``width`` bytes at ``offset`` with an unsigned integer.

        Raises:
            MetadataWriteError: If the range is outside the segment, the width
                is unsupported or the value does not fit
        """
        fmt = WRITE_FORMATS.get(width)
        if fmt is None:
            raise MetadataWriteError(f"Unsupported write width: {width}")
        if offset < 0 or offset + width > len(self.data):
            raise MetadataWriteError(
                f"Write of {width} bytes at offset {offset} is outside the segment"
            )
        try:
            packed = struct.pack(f'{self.endian}{fmt}', value)
        except struct.error as e:
            raise MetadataWriteError(f"Cannot write {value!r} as {width} bytes: {str(e)}")
        self.data[offset:offset + width] = packed

    def clear(self) -> None:
        """Drop the reference to the buffer."""
        self.data = bytearray()
