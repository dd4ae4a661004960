"""Shared fixtures and builders for synthetic EXIF APP1 segments."""

import struct

import pytest

BYTE, ASCII, SHORT, LONG, RATIONAL, UNDEFINED, SLONG, SRATIONAL = 1, 2, 3, 4, 5, 7, 9, 10

_INT_FORMATS = {SHORT: 'H', LONG: 'I', SLONG: 'i'}


def _encode(endian, tag_type, values):
    """Return (count, payload) for an entry."""
    if tag_type in (BYTE, ASCII, UNDEFINED):
        data = bytes(values)
        return len(data), data
    if tag_type in (RATIONAL, SRATIONAL):
        fmt = 'II' if tag_type == RATIONAL else 'ii'
        data = b''.join(struct.pack(endian + fmt, num, den) for num, den in values)
        return len(values), data
    if tag_type in _INT_FORMATS:
        data = struct.pack(f'{endian}{len(values)}{_INT_FORMATS[tag_type]}', *values)
        return len(values), data
    # Unknown type code: one inline 4-byte value
    return 1, bytes(4)


def _stored_out_of_line(tag_type, data):
    return tag_type in (RATIONAL, SRATIONAL) or len(data) > 4


def build_segment(ifd0=(), exif=None, gps=None, ifd1=None, thumbnail=None,
                  endian='<', magic=42, marker=b'\xff\xe1', signature=b'Exif\x00\x00'):
    """
    Build an APP1 segment.

    Entries are ``(tag, type, values)`` tuples. ``values`` is bytes for BYTE,
    ASCII and UNDEFINED, a list of ints for SHORT/LONG/SLONG and a list of
    ``(numerator, denominator)`` pairs for rationals. Sub-IFD pointers and the
    thumbnail tags are filled in automatically.
    """
    ifd0 = list(ifd0)
    if exif is not None:
        ifd0.append((0x8769, LONG, None))
    if gps is not None:
        ifd0.append((0x8825, LONG, None))
    if thumbnail is not None:
        ifd1 = list(ifd1 or []) + [(0x0201, LONG, None), (0x0202, LONG, None)]

    directories = [('ifd0', ifd0)]
    for name, entries in (('exif', exif), ('gps', gps), ('ifd1', ifd1)):
        if entries is not None:
            directories.append((name, list(entries)))

    # Directory positions, relative to the TIFF header
    ifd_pos = {}
    pos = 8
    for name, entries in directories:
        ifd_pos[name] = pos
        pos += 2 + 12 * len(entries) + 4
    data_start = pos

    data_size = 0
    for _, entries in directories:
        for tag, tag_type, values in entries:
            if values is None:
                continue
            _, data = _encode(endian, tag_type, values)
            if _stored_out_of_line(tag_type, data):
                data_size += len(data)

    thumbnail = thumbnail or b''
    specials = {
        0x8769: ifd_pos.get('exif', 0),
        0x8825: ifd_pos.get('gps', 0),
        0x0201: data_start + data_size,
        0x0202: len(thumbnail),
    }

    body = bytearray()
    data_area = bytearray()
    for name, entries in directories:
        body += struct.pack(endian + 'H', len(entries))
        for tag, tag_type, values in entries:
            if values is None:
                values = [specials[tag]]
            count, data = _encode(endian, tag_type, values)
            if _stored_out_of_line(tag_type, data):
                field = struct.pack(endian + 'I', data_start + len(data_area))
                data_area += data
            else:
                field = data.ljust(4, b'\x00')
            body += struct.pack(endian + 'HHI', tag, tag_type, count) + field
        next_ifd = ifd_pos['ifd1'] if name == 'ifd0' and 'ifd1' in ifd_pos else 0
        body += struct.pack(endian + 'I', next_ifd)

    order = b'II' if endian == '<' else b'MM'
    tiff = order + struct.pack(endian + 'HI', magic, 8) + bytes(body) + bytes(data_area) + thumbnail
    return bytearray(marker + struct.pack('>H', len(tiff) + 8) + signature + tiff)


def build_jpeg(segment):
    """Wrap an APP1 segment into a minimal JPEG stream."""
    app0 = b'\xff\xe0' + struct.pack('>H', 16) + b'JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
    sos = b'\xff\xda' + struct.pack('>H', 8) + b'\x01\x01\x00\x00\x3f\x00'
    return b'\xff\xd8' + app0 + bytes(segment) + sos + b'\x12\x34' + b'\xff\xd9'


THUMBNAIL = b'\xff\xd8\xff\xdb' + bytes(range(32)) + b'\xff\xd9'


@pytest.fixture
def camera_segment():
    """A little-endian segment with IFD0, EXIF, GPS and a thumbnail IFD."""
    return build_segment(
        ifd0=[
            (0x010F, ASCII, b'Canon\x00'),
            (0x0110, ASCII, b'EOS 5D Mark IV\x00'),
            (0x0112, SHORT, [6]),
            (0x011A, RATIONAL, [(72, 1)]),  # XResolution, not in catalog
        ],
        exif=[
            (0x9000, UNDEFINED, b'0230'),
            (0x829A, RATIONAL, [(1, 200)]),
            (0x829D, RATIONAL, [(5, 2)]),
            (0x8827, SHORT, [400]),
            (0x9003, ASCII, b'2024:05:01 12:30:45\x00'),
            (0x9201, SRATIONAL, [(-1, 2)]),
            (0x9207, SHORT, [5]),
            (0x9209, SHORT, [0x19]),
            (0xA001, SHORT, [1]),
            (0xA002, LONG, [4000]),
            (0xA003, LONG, [3000]),
            (0xA403, SHORT, [1]),
        ],
        gps=[
            (0x0000, BYTE, b'\x02\x03\x00\x00'),
            (0x0001, ASCII, b'N\x00'),
            (0x0002, RATIONAL, [(51, 1), (30, 1), (1234, 100)]),
            (0x0003, ASCII, b'W\x00'),
            (0x0004, RATIONAL, [(0, 1), (7, 1), (3960, 100)]),
        ],
        ifd1=[(0x0103, SHORT, [6])],
        thumbnail=THUMBNAIL,
    )
