#!/usr/bin/env python3
"""Shared constants for the pngfuse package.

This module collects the wire-format constants, compression tuning and
naming conventions used throughout pngfuse. Centralizing them keeps the
codec, the container and the CLI in agreement about the on-disk format.

Constants:
    __version__: Package version string
    PNG_SIGNATURE: The fixed 8-byte PNG magic prefix
    IDAT_TYPE, IEND_TYPE, ZTXT_TYPE: Standard PNG chunk type codes
    FUSE_CHUNK_TYPE, FUSE_KEYWORD: The private embedded-file chunk identity
    FUSED_SUFFIX, UNFUSED_SUFFIX: Output naming suffixes
"""

from __future__ import annotations

import os

# ============================================================================
# VERSION AND METADATA
# ============================================================================

__version__ = "1.0.0"

# ============================================================================
# PNG WIRE FORMAT
# ============================================================================

PNG_SIGNATURE: bytes = b"\x89PNG\r\n\x1a\n"

# length(4) + type(4) before the payload, crc(4) after it
CHUNK_HEADER_SIZE: int = 8
CHUNK_CRC_SIZE: int = 4
CHUNK_OVERHEAD: int = CHUNK_HEADER_SIZE + CHUNK_CRC_SIZE

# PNG limits chunk lengths to 2^31 - 1
MAX_CHUNK_LENGTH: int = 0x7FFFFFFF

IDAT_TYPE: bytes = b"IDAT"
IEND_TYPE: bytes = b"IEND"
ZTXT_TYPE: bytes = b"zTXt"

# ============================================================================
# COMPRESSED KEY/VALUE RECORDS
# ============================================================================

MAX_KEYWORD_LENGTH: int = 79
KEYWORD_ENCODING: str = "latin-1"

# The only compression method defined for zTXt-style chunks (deflate/zlib)
COMPRESSION_METHOD_DEFLATE: int = 0

# Tuned for ratio over speed: dynamic Huffman blocks, 32 KiB window,
# lazy matching with the full 3..258 match range.
COMPRESSION_LEVEL: int = 9
COMPRESSION_WBITS: int = 15
COMPRESSION_MEM_LEVEL: int = 9

# ============================================================================
# EMBEDDED FILE CHUNKS
# ============================================================================

# Lowercase first letter: ancillary. Lowercase second letter: private.
FUSE_CHUNK_TYPE: bytes = b"fuSe"
FUSE_KEYWORD: str = "PNGFuse"

FILENAME_ENCODING: str = "utf-8"

# ============================================================================
# OUTPUT NAMING
# ============================================================================

PNG_EXTENSION: str = ".png"
FUSED_SUFFIX: str = ".fused"
UNFUSED_SUFFIX: str = ".unfused"

# ============================================================================
# CONCURRENCY
# ============================================================================

DEFAULT_JOBS: int = os.cpu_count() or 1
