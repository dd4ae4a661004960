# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
JPEG segment scanner

Locates the EXIF APP1 segment of a JPEG stream so it can be handed to
ExifParser, and written back after an in-place update.

Copyright 2025 DNAi inc.
"""

import struct
from typing import Optional, Tuple, Union

from app1exif.exceptions import MetadataReadError

EXIF_HEADER = b'Exif\x00\x00'


def locate_exif_segment(jpeg_data: Union[bytes, bytearray]) -> Optional[Tuple[int, int]]:
    """
    Find the first APP1 segment that carries EXIF data.

    Args:
        jpeg_data: Complete JPEG file data

    Returns:
        ``(start, end)`` of the segment, marker included, or None

    Raises:
        MetadataReadError: If the data does not start with a JPEG SOI marker
    """
    if jpeg_data[:2] != b'\xff\xd8':
        raise MetadataReadError("Not a JPEG file: missing SOI marker")

    offset = 2  # Skip JPEG SOI marker
    while offset + 4 <= len(jpeg_data):
        # Check for segment marker
        if jpeg_data[offset] != 0xFF:
            break

        marker = jpeg_data[offset + 1]

        if marker == 0xFF:  # Fill byte
            offset += 1
            continue
        if marker in (0xD9, 0xDA):  # EOI, SOS: no metadata past this point
            break
        if marker == 0x01 or 0xD0 <= marker <= 0xD7:  # Standalone markers
            offset += 2
            continue

        length = struct.unpack('>H', jpeg_data[offset + 2:offset + 4])[0]

        # APP1 marker (0xE1) contains EXIF data
        if marker == 0xE1 and jpeg_data[offset + 4:offset + 10] == EXIF_HEADER:
            end = offset + 2 + length
            if end > len(jpeg_data):
                raise MetadataReadError("EXIF segment is truncated")
            return offset, end

        offset += 2 + length

    return None


def find_exif_segment(jpeg_data: Union[bytes, bytearray]) -> Optional[bytearray]:
    """
    Return a copy of the EXIF APP1 segment of a JPEG file, or None.
    """
    segment_range = locate_exif_segment(jpeg_data)
    if segment_range is None:
        return None
    start, end = segment_range
    return bytearray(jpeg_data[start:end])
