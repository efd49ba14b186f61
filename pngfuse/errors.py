#!/usr/bin/env python3
"""Exception types raised by pngfuse.

Every error derives from PNGFuseError, itself a ValueError, so callers can
catch the whole family at once. The CLI is the only place that does.
"""


class PNGFuseError(ValueError):
    """Base class for pngfuse-specific errors."""


# Container structure
class FormatError(PNGFuseError):
    """Raised when the image is not a structurally usable PNG stream."""


# Chunk codec
class CorruptChunkError(PNGFuseError):
    pass


class CompressionError(PNGFuseError):
    pass


class DecompressionError(PNGFuseError):
    pass


# Embedded file records
class CorruptRecordError(PNGFuseError):
    pass


# Caller input
class ValidationError(PNGFuseError):
    """Raised when caller-supplied names or options cannot be honoured."""
