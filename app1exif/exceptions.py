# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for app1exif

This module defines the exceptions raised while decoding or patching
an EXIF APP1 segment.

Copyright 2025 DNAi inc.
"""


class App1ExifError(Exception):
    """
    Base exception for all app1exif errors.
    
    All app1exif exceptions inherit from this class, allowing
    catch-all error handling for any segment-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.
        
        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class MetadataReadError(App1ExifError):
    """
    Raised when the segment does not hold valid EXIF metadata.
    
    This exception is raised when:
    - The APP1 marker or the Exif signature is missing
    - The TIFF magic number is not 42
    - An IFD entry declares an unknown type code
    - A read falls outside the segment
    """
    pass


class MetadataWriteError(App1ExifError):
    """
    Raised when a value cannot be written into the segment.
    
    This exception is raised when:
    - The write range falls outside the segment
    - The value does not fit into the requested byte width
    """
    pass


class InvalidTagError(App1ExifError):
    """
    Raised when a tag name or group is not known to the catalogs.
    """
    pass


class ParserStateError(App1ExifError):
    """
    Raised when a released parser is used again.
    """
    pass
