# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF APP1 segment parser

This module decodes the EXIF metadata held in a JPEG APP1 segment.
The TIFF header inside the segment fixes the byte order, IFD0 is decoded
eagerly and the EXIF, GPS and thumbnail directories are decoded on demand.

Copyright 2025 DNAi inc.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import Dict, Any, Optional, List, Mapping, Union

import chardet

from app1exif.binary_reader import BinaryReader
from app1exif.exceptions import InvalidTagError, MetadataReadError, ParserStateError
from app1exif.exif_tags import (
    TIFF_TAGS,
    TAG_GROUPS,
    TAG_DESCRIPTIONS,
)
from app1exif.jpeg_segments import find_exif_segment
from app1exif.thumbnail_extractor import ThumbnailExtractor

logger = logging.getLogger(__name__)

# APP1 marker + segment length + "Exif\0\0"
TIFF_HEADER_OFFSET = 10

APP1_MARKER = 0xFFE1
EXIF_SIGNATURE = "EXIF\0"
TIFF_MAGIC = 0x002A
LITTLE_ENDIAN_MARKER = 0x4949  # "II"

IFD_ENTRY_SIZE = 12

# IFD0 entries consumed into IFDOffsets rather than exposed as tags
SUB_IFD_POINTERS = ('ExifIFDPointer', 'GPSInfoIFDPointer')


class ExifTagType(IntEnum):
    """EXIF tag data types"""
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    UNDEFINED = 7
    SLONG = 9
    SRATIONAL = 10


# EXIF tag sizes in bytes
TAG_SIZES = {
    ExifTagType.BYTE: 1,
    ExifTagType.ASCII: 1,
    ExifTagType.SHORT: 2,
    ExifTagType.LONG: 4,
    ExifTagType.RATIONAL: 8,
    ExifTagType.UNDEFINED: 1,
    ExifTagType.SLONG: 4,
    ExifTagType.SRATIONAL: 8,
}

# Largest count whose values still fit in the 4-byte value field
INLINE_LIMITS = {
    ExifTagType.BYTE: 4,
    ExifTagType.ASCII: 4,
    ExifTagType.UNDEFINED: 4,
    ExifTagType.SHORT: 2,
    ExifTagType.LONG: 1,
    ExifTagType.SLONG: 1,
    ExifTagType.RATIONAL: 0,
    ExifTagType.SRATIONAL: 0,
}


class ParserState(Enum):
    RESOLVED = 'resolved'
    RELEASED = 'released'


@dataclass
class IFDOffsets:
    """
    Absolute offsets (within the segment) of the directories found while
    resolving the TIFF header. Sub-directories that are not present stay None.
    """
    tiff_header: int
    ifd0: int
    exif_ifd: Optional[int] = None
    gps_ifd: Optional[int] = None
    ifd1: Optional[int] = None

    def for_group(self, group: str) -> Optional[int]:
        """Return the directory offset that holds the tags of ``group``."""
        return {
            'tiff': self.ifd0,
            'exif': self.exif_ifd,
            'gps': self.gps_ifd,
            'thumb': self.ifd1,
        }.get(group.lower())


def decode_text(raw: bytes) -> str:
    """
    Decode an ASCII-typed tag payload.

    The payload is cut at the first NUL. Valid UTF-8 is decoded as such,
    other payloads use the encoding chardet detects, and plain ASCII with
    replacement characters is the last resort.
    """
    null_pos = raw.find(b'\x00')
    if null_pos >= 0:
        raw = raw[:null_pos]

    try:
        return raw.decode('utf-8', errors='strict')
    except UnicodeDecodeError:
        pass

    detected = chardet.detect(raw)
    encoding = detected.get('encoding')
    confidence = detected.get('confidence') or 0.0
    if encoding and confidence > 0.5:
        try:
            return raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            pass

    return raw.decode('ascii', errors='replace')


class ExifParser:
    """
    Parser for the EXIF metadata of one JPEG APP1 segment.

    Construction validates the segment signature and the TIFF header and
    decodes IFD0; a parser that fails either step is never returned.
    Afterwards each accessor decodes its own directory independently, so a
    broken GPS directory does not hide the EXIF tags and vice versa.

    A ``bytearray`` segment is modified in place by :meth:`set_tag`;
    ``bytes`` are copied first and the patched copy is exposed as
    :attr:`segment`.
    """

    def __init__(self, segment: Union[bytes, bytearray, memoryview]):
        """
        Initialize the parser.

        Args:
            segment: APP1 segment bytes, starting at the 0xFFE1 marker

        Raises:
            MetadataReadError: If the segment is not a valid EXIF segment
        """
        self.reader = BinaryReader(segment)

        # Check if that's APP1 and that it has EXIF
        if (self.reader.read_short(0) != APP1_MARKER or
                self.reader.read_string(4, 5).upper() != EXIF_SIGNATURE):
            raise MetadataReadError("Segment is not an EXIF APP1 segment")

        # Readers per type; ASCII payloads go through decode_text instead
        self._value_readers = {
            ExifTagType.BYTE: self.reader.read_byte,
            ExifTagType.UNDEFINED: self.reader.read_byte,
            ExifTagType.SHORT: self.reader.read_short,
            ExifTagType.LONG: self.reader.read_long,
            ExifTagType.SLONG: self.reader.read_slong,
            ExifTagType.RATIONAL: self._read_rational,
            ExifTagType.SRATIONAL: self._read_srational,
        }

        self._primary: Dict[str, Any] = {}
        self._offsets: Optional[IFDOffsets] = self._resolve_offsets()
        self._state = ParserState.RESOLVED

    @classmethod
    def from_jpeg(cls, jpeg_data: Union[bytes, bytearray]) -> 'ExifParser':
        """
        Build a parser from a complete JPEG file.

        Raises:
            MetadataReadError: If the data is not a JPEG or holds no EXIF segment
        """
        segment = find_exif_segment(jpeg_data)
        if segment is None:
            raise MetadataReadError("No EXIF APP1 segment found")
        return cls(segment)

    def __enter__(self) -> 'ExifParser':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.clear()

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def offsets(self) -> IFDOffsets:
        self._ensure_resolved()
        return replace(self._offsets)

    @property
    def segment(self) -> bytearray:
        """The segment buffer, including any value written by set_tag."""
        self._ensure_resolved()
        return self.reader.data

    def _ensure_resolved(self) -> None:
        if self._state is not ParserState.RESOLVED:
            raise ParserStateError("Parser has been released")

    # ------------------------------------------------------------------
    # Header / offset resolution
    # ------------------------------------------------------------------

    def _resolve_offsets(self) -> IFDOffsets:
        """
        Parse the TIFF header, decode IFD0 and record the offsets of the
        EXIF, GPS and thumbnail directories.
        """
        base = TIFF_HEADER_OFFSET

        # Set read order of multi-byte data
        self.reader.little_endian = self.reader.read_short(base) == LITTLE_ENDIAN_MARKER

        # Check if always present bytes are indeed present
        if self.reader.read_short(base + 2) != TIFF_MAGIC:
            raise MetadataReadError("Invalid TIFF magic number")

        offsets = IFDOffsets(tiff_header=base, ifd0=base + self.reader.read_long(base + 4))

        tiff = self._extract_tags(offsets.ifd0, TIFF_TAGS)
        if 'ExifIFDPointer' in tiff:
            offsets.exif_ifd = self._sub_ifd_offset('ExifIFDPointer', tiff.pop('ExifIFDPointer'))
        if 'GPSInfoIFDPointer' in tiff:
            offsets.gps_ifd = self._sub_ifd_offset('GPSInfoIFDPointer', tiff.pop('GPSInfoIFDPointer'))
        self._primary = tiff

        # Next-IFD pointer after the IFD0 entries points to the thumbnail IFD
        entry_count = self.reader.read_short(offsets.ifd0)
        ifd1_pointer = self.reader.read_long(offsets.ifd0 + 2 + IFD_ENTRY_SIZE * entry_count)
        if ifd1_pointer:
            offsets.ifd1 = self._sub_ifd_offset('IFD1', ifd1_pointer)

        logger.debug("Resolved EXIF offsets: %s", offsets)
        return offsets

    def _sub_ifd_offset(self, name: str, pointer: Any) -> Optional[int]:
        """Turn a pointer relative to the TIFF header into an absolute offset."""
        if not isinstance(pointer, int):
            logger.debug("Ignoring %s: unexpected value %r", name, pointer)
            return None
        offset = TIFF_HEADER_OFFSET + pointer
        if offset + 2 > len(self.reader):
            logger.debug("Ignoring %s: offset %d is outside the segment", name, offset)
            return None
        return offset

    # ------------------------------------------------------------------
    # IFD decoding
    # ------------------------------------------------------------------

    def _read_rational(self, offset: int) -> Optional[float]:
        denominator = self.reader.read_long(offset + 4)
        if denominator == 0:
            return None
        return self.reader.read_long(offset) / denominator

    def _read_srational(self, offset: int) -> Optional[float]:
        denominator = self.reader.read_slong(offset + 4)
        if denominator == 0:
            return None
        return self.reader.read_slong(offset) / denominator

    def _read_values(self, tag_type: ExifTagType, offset: int, count: int) -> List[Any]:
        size = TAG_SIZES[tag_type]
        # Fail before looping over a corrupt count
        self.reader.check_range(offset, size * count)
        read = self._value_readers[tag_type]
        return [read(offset + size * i) for i in range(count)]

    def extract_tags(self, ifd_offset: int, catalog: Mapping[int, str]) -> Dict[str, Any]:
        """
        Decode the entries of one IFD that appear in ``catalog``.

        Args:
            ifd_offset: Absolute offset of the IFD within the segment
            catalog: Mapping of tag ID to tag name

        Returns:
            Dictionary of tag name to decoded value

        Raises:
            MetadataReadError: On an unknown type code or a read outside the segment
        """
        self._ensure_resolved()
        return self._extract_tags(ifd_offset, catalog)

    def _extract_tags(self, ifd_offset: int, catalog: Mapping[int, str]) -> Dict[str, Any]:
        reader = self.reader
        tags: Dict[str, Any] = {}

        num_entries = reader.read_short(ifd_offset)

        for i in range(num_entries):
            entry_offset = ifd_offset + 2 + IFD_ENTRY_SIZE * i

            tag_name = catalog.get(reader.read_short(entry_offset))
            if tag_name is None:
                continue  # Not a tag we decode

            type_code = reader.read_short(entry_offset + 2)
            try:
                tag_type = ExifTagType(type_code)
            except ValueError:
                raise MetadataReadError(f"Unknown type {type_code} for tag {tag_name}")

            count = reader.read_long(entry_offset + 4)

            value_offset = entry_offset + 8
            if count > INLINE_LIMITS[tag_type]:
                value_offset = TIFF_HEADER_OFFSET + reader.read_long(value_offset)

            if tag_type == ExifTagType.ASCII:
                value = decode_text(reader.read_range(value_offset, count))
            else:
                values = self._read_values(tag_type, value_offset, count)
                value = values[0] if count == 1 else values

            labels = TAG_DESCRIPTIONS.get(tag_name)
            if labels is not None and not isinstance(value, list):
                value = labels.get(value)

            tags[tag_name] = value

        return tags

    def decode_group(self, group: str) -> Optional[Dict[str, Any]]:
        """
        Decode the directory of ``group`` ('tiff', 'exif', 'gps' or 'thumb')
        with that group's catalog. Values are not reformatted; the sub-IFD
        pointers of IFD0 are dropped as in primary().

        Returns:
            Dictionary of tags, or None if the directory is absent or broken
        """
        self._ensure_resolved()
        catalog = TAG_GROUPS.get(group.lower())
        if catalog is None:
            raise InvalidTagError(f"Unknown tag group: {group}")
        ifd_offset = self._offsets.for_group(group)
        if ifd_offset is None:
            logger.debug("No %s IFD in segment", group)
            return None
        try:
            tags = self._extract_tags(ifd_offset, catalog)
        except MetadataReadError as e:
            logger.debug("Could not decode %s IFD at offset %d: %s", group, ifd_offset, e)
            return None
        for pointer in SUB_IFD_POINTERS:
            tags.pop(pointer, None)
        return tags

    # ------------------------------------------------------------------
    # Public accessors
    # ------------------------------------------------------------------

    def primary(self) -> Dict[str, Any]:
        """
        Return the IFD0 tags.

        The sub-IFD pointers are consumed while resolving offsets and never
        appear in the result.
        """
        self._ensure_resolved()
        return dict(self._primary)

    def exif(self) -> Optional[Dict[str, Any]]:
        """
        Return the EXIF sub-IFD tags, or None if the directory is absent or
        cannot be decoded.
        """
        exif = self.decode_group('exif')
        if exif is None:
            return None

        # ExifVersion is stored as raw character codes, e.g. [0x30, 0x32, 0x33, 0x30]
        version = exif.get('ExifVersion')
        if isinstance(version, list) and all(
                isinstance(code, int) and 0 <= code < 256 for code in version):
            exif['ExifVersion'] = ''.join(chr(code) for code in version)

        return exif

    def gps(self) -> Optional[Dict[str, Any]]:
        """
        Return the GPS sub-IFD tags, or None if the directory is absent or
        cannot be decoded.
        """
        gps = self.decode_group('gps')
        if gps is None:
            return None

        version = gps.get('GPSVersionID')
        if isinstance(version, list):
            gps['GPSVersionID'] = '.'.join(str(part) for part in version)

        return gps

    def thumbnail(self) -> Optional[bytes]:
        """Return the JPEG thumbnail stored through IFD1, or None."""
        self._ensure_resolved()
        return ThumbnailExtractor(self).extract_thumbnail()

    def set_tag(self, group: str, tag_name: str, value: int) -> bool:
        """
        Overwrite the inline value of a writable tag in place.

        Args:
            group: Tag group ('exif')
            tag_name: Tag name, e.g. 'PixelXDimension'
            value: New unsigned integer value

        Returns:
            True if the value was written, False otherwise
        """
        from app1exif.exif_writer import ExifTagWriter

        self._ensure_resolved()
        return ExifTagWriter(self.reader, self._offsets).set_tag(group, tag_name, value)

    def set_exif(self, tag_name: str, value: int) -> bool:
        """Shorthand for ``set_tag('exif', tag_name, value)``."""
        return self.set_tag('exif', tag_name, value)

    def clear(self) -> None:
        """
        Release the parser. Any later accessor call raises ParserStateError.
        """
        if self._state is ParserState.RELEASED:
            return
        self.reader.clear()
        self._primary = {}
        self._offsets = None
        self._value_readers = {}
        self._state = ParserState.RELEASED
