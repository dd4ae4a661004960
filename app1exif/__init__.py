# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
app1exif - EXIF APP1 segment decoder

Decodes the primary, EXIF and GPS tags and the IFD1 thumbnail of the
EXIF APP1 segment of a JPEG file, and overwrites a small set of scalar
tags in place.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from app1exif.exif_parser import ExifParser, ExifTagType, IFDOffsets, ParserState
from app1exif.exceptions import (
    App1ExifError,
    MetadataReadError,
    MetadataWriteError,
    InvalidTagError,
    ParserStateError,
)
from app1exif.jpeg_segments import find_exif_segment, locate_exif_segment

__all__ = [
    "ExifParser",
    "ExifTagType",
    "IFDOffsets",
    "ParserState",
    "App1ExifError",
    "MetadataReadError",
    "MetadataWriteError",
    "InvalidTagError",
    "ParserStateError",
    "find_exif_segment",
    "locate_exif_segment",
]
