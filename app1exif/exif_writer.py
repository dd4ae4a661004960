# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF tag writer

This module overwrites scalar tag values of an APP1 segment in place.
Only values stored inline in their IFD entry can be changed; nothing is
relocated and the segment never changes size.

Copyright 2025 DNAi inc.
"""

import logging
from types import MappingProxyType

from app1exif.binary_reader import BinaryReader
from app1exif.exceptions import MetadataReadError, MetadataWriteError
from app1exif.exif_parser import ExifTagType, IFDOffsets, IFD_ENTRY_SIZE
from app1exif.exif_tags import find_tag_id

logger = logging.getLogger(__name__)

# Tags that may be overwritten, per group
WRITABLE_TAGS = MappingProxyType({
    'exif': frozenset({'PixelXDimension', 'PixelYDimension'}),
})

# Byte width written for each inline, single-value entry type
INLINE_WRITE_WIDTHS = {
    ExifTagType.SHORT: 2,
    ExifTagType.LONG: 4,
}


class ExifTagWriter:
    """
    Writes whitelisted scalar tags into an existing segment.

    Every failure is reported as False rather than raised: a tag that is
    absent or not writable is an expected outcome for the caller.
    """

    def __init__(self, reader: BinaryReader, offsets: IFDOffsets):
        """
        Initialize EXIF tag writer.

        Args:
            reader: Reader over the segment, with the byte order already set
            offsets: Directory offsets of the segment
        """
        self.reader = reader
        self.offsets = offsets

    def set_tag(self, group: str, tag_name: str, value: int) -> bool:
        """
        Overwrite the value of ``tag_name`` in ``group``.

        Args:
            group: Tag group, e.g. 'exif'
            tag_name: Tag name, e.g. 'PixelXDimension'
            value: New unsigned integer value

        Returns:
            True if the value was written, False otherwise
        """
        group = group.lower()
        if tag_name not in WRITABLE_TAGS.get(group, ()):
            logger.debug("Tag %s:%s is not writable", group, tag_name)
            return False

        if not isinstance(value, int) or isinstance(value, bool):
            logger.debug("Refusing non-integer value %r for %s", value, tag_name)
            return False

        tag_id = find_tag_id(group, tag_name)
        ifd_offset = self.offsets.for_group(group)
        if tag_id is None or ifd_offset is None:
            return False

        try:
            entry_offset = self._find_entry(ifd_offset, tag_id)
            if entry_offset is None:
                logger.debug("Tag %s not present in %s IFD", tag_name, group)
                return False

            tag_type = self.reader.read_short(entry_offset + 2)
            count = self.reader.read_long(entry_offset + 4)
        except MetadataReadError as e:
            logger.debug("Could not scan %s IFD: %s", group, e)
            return False

        width = INLINE_WRITE_WIDTHS.get(tag_type)
        if width is None or count != 1:
            logger.debug("Tag %s is stored as type %d x %d, not an inline scalar",
                         tag_name, tag_type, count)
            return False

        try:
            self.reader.write(entry_offset + 8, value, width)
        except MetadataWriteError as e:
            logger.warning("Failed to write %s: %s", tag_name, e)
            return False

        return True

    def _find_entry(self, ifd_offset: int, tag_id: int):
        """Return the offset of the IFD entry for ``tag_id``, or None."""
        num_entries = self.reader.read_short(ifd_offset)
        for i in range(num_entries):
            entry_offset = ifd_offset + 2 + IFD_ENTRY_SIZE * i
            if self.reader.read_short(entry_offset) == tag_id:
                return entry_offset
        return None
