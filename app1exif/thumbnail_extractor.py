# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Thumbnail extractor for EXIF segments

This module extracts the JPEG thumbnail referenced by IFD1 of an
APP1 segment.

Copyright 2025 DNAi inc.
"""

import logging
from typing import Optional

from app1exif.exceptions import MetadataReadError

logger = logging.getLogger(__name__)


class ThumbnailExtractor:
    """
    Extracts the IFD1 thumbnail of a resolved ExifParser.

    The thumbnail is the byte range
    ``[tiff header + JPEGInterchangeFormat, + JPEGInterchangeFormatLength)``.
    Both tags are required; a missing tag, a missing IFD1, a zero length or a
    range outside the segment all mean "no thumbnail".
    """

    def __init__(self, parser):
        """
        Initialize thumbnail extractor.

        Args:
            parser: Resolved ExifParser of the segment
        """
        self.parser = parser

    def extract_thumbnail(self) -> Optional[bytes]:
        """
        Extract thumbnail from the segment.

        Returns:
            Thumbnail image data (JPEG bytes) or None if not found
        """
        ifd1_tags = self.parser.decode_group('thumb')
        if not ifd1_tags:
            return None

        offset = ifd1_tags.get('JPEGInterchangeFormat')
        length = ifd1_tags.get('JPEGInterchangeFormatLength')
        if not isinstance(offset, int) or not isinstance(length, int):
            logger.debug("IFD1 lacks a usable thumbnail offset/length: %r/%r", offset, length)
            return None
        if length <= 0:
            logger.debug("IFD1 declares an empty thumbnail")
            return None

        start =self.parser.offsets.tiff_header + offset
        try:
            return self.parser.reader.read_range(start, length)
        except MetadataReadError as e:
            logger.debug("Thumbnail range is invalid: %s", e)
            return None
