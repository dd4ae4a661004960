# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF tag catalogs

Tag ID to name tables for the four directories read from an APP1 segment,
and the value to label tables for enumerated tags. Only the curated subset
below is decoded; entries with other IDs are skipped.

Copyright 2025 DNAi inc.
"""

from types import MappingProxyType

# ============================================================
# IFD0 (primary image) tags
# ============================================================
TIFF_TAGS = MappingProxyType({
    # Orientation of the stored image in terms of rows and columns:
    # 1 = top-left, 2 = top-right, 3 = bottom-right, 4 = bottom-left,
    # 5 = left-top, 6 = right-top, 7 = right-bottom, 8 = left-bottom
    0x0112: "Orientation",
    0x010E: "ImageDescription",
    0x010F: "Make",
    0x0110: "Model",
    0x0131: "Software",
    0x8769: "ExifIFDPointer",
    0x8825: "GPSInfoIFDPointer",
})

# ============================================================
# EXIF sub-IFD tags
# ============================================================
EXIF_TAGS = MappingProxyType({
    0x9000: "ExifVersion",
    0xA001: "ColorSpace",
    0xA002: "PixelXDimension",
    0xA003: "PixelYDimension",
    0x9003: "DateTimeOriginal",
    0x829A: "ExposureTime",
    0x829D: "FNumber",
    0x8827: "ISOSpeedRatings",
    0x9201: "ShutterSpeedValue",
    0x9202: "ApertureValue",
    0x9207: "MeteringMode",
    0x9208: "LightSource",
    0x9209: "Flash",
    0x920A: "FocalLength",
    0xA402: "ExposureMode",
    0xA403: "WhiteBalance",
    0xA406: "SceneCaptureType",
    0xA404: "DigitalZoomRatio",
    0xA408: "Contrast",
    0xA409: "Saturation",
    0xA40A: "Sharpness",
})

# ============================================================
# GPS sub-IFD tags
# ============================================================
GPS_TAGS = MappingProxyType({
    0x0000: "GPSVersionID",
    0x0001: "GPSLatitudeRef",
    0x0002: "GPSLatitude",
    0x0003: "GPSLongitudeRef",
    0x0004: "GPSLongitude",
})

# ============================================================
# IFD1 (thumbnail) tags
# ============================================================
THUMBNAIL_TAGS = MappingProxyType({
    0x0201: "JPEGInterchangeFormat",
    0x0202: "JPEGInterchangeFormatLength",
})

# Catalog per group name
TAG_GROUPS = MappingProxyType({
    'tiff': TIFF_TAGS,
    'exif': EXIF_TAGS,
    'gps': GPS_TAGS,
    'thumb': THUMBNAIL_TAGS,
})

# Human-readable labels for enumerated tags
TAG_DESCRIPTIONS = MappingProxyType({
    'ColorSpace': MappingProxyType({
        1: 'sRGB',
        0: 'Uncalibrated',
    }),

    'MeteringMode': MappingProxyType({
        0: 'Unknown',
        1: 'Average',
        2: 'CenterWeightedAverage',
        3: 'Spot',
        4: 'MultiSpot',
        5: 'Pattern',
        6: 'Partial',
        255: 'Other',
    }),

    'LightSource': MappingProxyType({
        1: 'Daylight',
        2: 'Fliorescent',
        3: 'Tungsten',
        4: 'Flash',
        9: 'Fine weather',
        10: 'Cloudy weather',
        11: 'Shade',
        12: 'Daylight fluorescent (D 5700 - 7100K)',
        13: 'Day white fluorescent (N 4600 -5400K)',
        14: 'Cool white fluorescent (W 3900 - 4500K)',
        15: 'White fluorescent (WW 3200 - 3700K)',
        17: 'Standard light A',
        18: 'Standard light B',
        19: 'Standard light C',
        20: 'D55',
        21: 'D65',
        22: 'D75',
        23: 'D50',
        24: 'ISO studio tungsten',
        255: 'Other',
    }),

    'Flash': MappingProxyType({
        0x0000: 'Flash did not fire.',
        0x0001: 'Flash fired.',
        0x0005: 'Strobe return light not detected.',
        0x0007: 'Strobe return light detected.',
        0x0009: 'Flash fired, compulsory flash mode',
        0x000D: 'Flash fired, compulsory flash mode, return light not detected',
        0x000F: 'Flash fired, compulsory flash mode, return light detected',
        0x0010: 'Flash did not fire, compulsory flash mode',
        0x0018: 'Flash did not fire, auto mode',
        0x0019: 'Flash fired, auto mode',
        0x001D: 'Flash fired, auto mode, return light not detected',
        0x001F: 'Flash fired, auto mode, return light detected',
        0x0020: 'No flash function',
        0x0041: 'Flash fired, red-eye reduction mode',
        0x0045: 'Flash fired, red-eye reduction mode, return light not detected',
        0x0047: 'Flash fired, red-eye reduction mode, return light detected',
        0x0049: 'Flash fired, compulsory flash mode, red-eye reduction mode',
        0x004D: 'Flash fired, compulsory flash mode, red-eye reduction mode, return light not detected',
        0x004F: 'Flash fired, compulsory flash mode, red-eye reduction mode, return light detected',
        0x0059: 'Flash fired, auto mode, red-eye reduction mode',
        0x005D: 'Flash fired, auto mode, return light not detected, red-eye reduction mode',
        0x005F: 'Flash fired, auto mode, return light detected, red-eye reduction mode',
    }),

    'ExposureMode': MappingProxyType({
        0: 'Auto exposure',
        1: 'Manual exposure',
        2: 'Auto bracket',
    }),

    'WhiteBalance': MappingProxyType({
        0: 'Auto white balance',
        1: 'Manual white balance',
    }),

    'SceneCaptureType': MappingProxyType({
        0: 'Standard',
        1: 'Landscape',
        2: 'Portrait',
        3: 'Night scene',
    }),

    'Contrast': MappingProxyType({
        0: 'Normal',
        1: 'Soft',
        2: 'Hard',
    }),

    'Saturation': MappingProxyType({
        0: 'Normal',
        1: 'Low saturation',
        2: 'High saturation',
    }),

    'Sharpness': MappingProxyType({
        0: 'Normal',
        1: 'Soft',
        2: 'Hard',
    }),

    # GPS
    'GPSLatitudeRef': MappingProxyType({
        'N': 'North latitude',
        'S': 'South latitude',
    }),

    'GPSLongitudeRef': MappingProxyType({
        'E': 'East longitude',
        'W': 'West longitude',
    }),
})


def find_tag_id(group: str, tag_name: str):
    """
    Return the numeric ID of ``tag_name`` within ``group``, or None.
    """
    catalog = TAG_GROUPS.get(group.lower())
    if catalog is None:
        return None
    for tag_id, name in catalog.items():
        if name == tag_name:
            return tag_id
    return None
