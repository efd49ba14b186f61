#!/usr/bin/env python3
"""Chunk-level codec for compressed key/value PNG metadata.

This module knows how a single PNG chunk looks on the wire and how a
zTXt-style compressed key/value record is laid out inside its payload:

    chunk      := length(u32) type(4) payload(length) crc32(u32 over type+payload)
    kv-payload := key NUL method(u8 = 0) zlib(value)

It exposes three layers:
    compress / decompress: zlib streams tuned for compression ratio
    build_chunk / read_chunk: raw chunk framing (length, type code, CRC)
    ChunkHandler / TextChunk: record <-> chunk conversion plus a cheap
        filter predicate used while scanning an image

CRCs are written on encode but never checked on decode.
"""

from __future__ import annotations

import struct
import zlib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Optional, Union

from pngfuse.errors import (
    CompressionError,
    CorruptChunkError,
    DecompressionError,
    FormatError,
    ValidationError,
)
from pngfuse.types import (
    CHUNK_HEADER_SIZE,
    CHUNK_OVERHEAD,
    COMPRESSION_LEVEL,
    COMPRESSION_MEM_LEVEL,
    COMPRESSION_METHOD_DEFLATE,
    COMPRESSION_WBITS,
    KEYWORD_ENCODING,
    MAX_CHUNK_LENGTH,
    MAX_KEYWORD_LENGTH,
    ZTXT_TYPE,
)

_CHUNK_HEADER_STRUCT = struct.Struct(">I4s")
_CRC_STRUCT = struct.Struct(">I")

BytesLike = Union[bytes, bytearray, memoryview]


# ============================================================================
# COMPRESSION
# ============================================================================


def compress(data: BytesLike) -> bytes:
    """Compress ``data`` into a zlib stream tuned for the best ratio.

    Raises:
        CompressionError: If zlib rejects the input.
    """
    try:
        compressor = zlib.compressobj(
            COMPRESSION_LEVEL,
            zlib.DEFLATED,
            COMPRESSION_WBITS,
            COMPRESSION_MEM_LEVEL,
            zlib.Z_DEFAULT_STRATEGY,
        )
        return compressor.compress(data) + compressor.flush()
    except zlib.error as e:
        raise CompressionError(f"Failed to compress chunk value: {e}") from e


def decompress(data: BytesLike) -> bytes:
    """Inflate a complete zlib stream.

    Raises:
        DecompressionError: If the stream is malformed or truncated.
    """
    try:
        return zlib.decompress(data)
    except zlib.error as e:
        raise DecompressionError(f"Failed to decompress chunk value: {e}") from e


# ============================================================================
# RAW CHUNK FRAMING
# ============================================================================


@dataclass(frozen=True)
class Chunk:
    """A view of one chunk inside a larger byte buffer.

    The payload is not copied until ``payload`` is accessed, so scanning an
    image full of large IDAT chunks only touches their headers.

    Attributes:
        buffer: The buffer the chunk lives in.
        offset: Byte offset of the chunk's length field within ``buffer``.
        length: Payload length read from the header.
        type_code: The 4-byte chunk type, e.g. ``b"IDAT"``.
    """

    buffer: BytesLike = field(repr=False, compare=False)
    offset: int
    length: int
    type_code: bytes

    @property
    def payload_start(self) -> int:
        return self.offset + CHUNK_HEADER_SIZE

    @property
    def end(self) -> int:
        """Offset of the first byte after this chunk's CRC."""
        return self.offset + CHUNK_OVERHEAD + self.length

    @property
    def payload(self) -> bytes:
        start = self.payload_start
        return bytes(self.buffer[start : start + self.length])

    @property
    def raw(self) -> bytes:
        return bytes(self.buffer[self.offset : self.end])

    def payload_startswith(self, prefix: bytes) -> bool:
        """Compare only the leading payload bytes against ``prefix``."""
        if len(prefix) > self.length:
            return False
        start = self.payload_start
        return self.buffer[start : start + len(prefix)] == prefix


def build_chunk(type_code: bytes, payload: BytesLike) -> bytes:
    """Wrap ``payload`` in a chunk header and trailing CRC32.

    Args:
        type_code: Exactly four ASCII letters.
        payload: Chunk data.

    Returns:
        The complete wire form of the chunk.

    Raises:
        ValueError: If ``type_code`` is not four ASCII letters.
        CompressionError: If the payload is too large for a PNG chunk.
    """
    type_code = bytes(type_code)
    # bytes.isalpha() only accepts ASCII letters
    if len(type_code) != 4 or not type_code.isalpha():
        raise ValueError(f"Chunk type must be 4 ASCII letters, got {type_code!r}")
    if len(payload) > MAX_CHUNK_LENGTH:
        raise CompressionError(
            f"Chunk payload of {len(payload)} bytes exceeds the PNG limit of {MAX_CHUNK_LENGTH} bytes"
        )
    crc = zlib.crc32(payload, zlib.crc32(type_code)) & 0xFFFFFFFF
    return _CHUNK_HEADER_STRUCT.pack(len(payload), type_code) + bytes(payload) + _CRC_STRUCT.pack(crc)


def read_chunk(buffer: BytesLike, offset: int = 0) -> Chunk:
    """Read the chunk header at ``offset`` and return a view over the chunk.

    Raises:
        FormatError: If the header is truncated or the chunk (including its
            CRC) runs past the end of ``buffer``.
    """
    total = len(buffer)
    if offset + CHUNK_HEADER_SIZE > total:
        raise FormatError(f"Truncated chunk header at offset {offset}")
    length, type_code = _CHUNK_HEADER_STRUCT.unpack_from(buffer, offset)
    if offset + CHUNK_OVERHEAD + length > total:
        raise FormatError(
            f"Chunk {type_code!r} at offset {offset} claims {length} bytes and extends past the end of the data"
        )
    return Chunk(buffer, offset, length, bytes(type_code))


def _as_chunk(chunk: Union[Chunk, BytesLike]) -> Chunk:
    if isinstance(chunk, Chunk):
        return chunk
    return read_chunk(chunk)


# ============================================================================
# CHUNK HANDLERS
# ============================================================================


class ChunkHandler(ABC):
    """Converts between domain records and chunks of one kind.

    Implementations provide the three capabilities the container relies on:
    ``encode`` for insertion, ``decode`` for enumeration and ``is_valid`` as
    the filter for both enumeration and deletion.
    """

    type_code: bytes

    @abstractmethod
    def encode(self, record: Any) -> bytes:
        """Return the complete wire chunk for ``record``."""

    @abstractmethod
    def decode(self, chunk: Union[Chunk, BytesLike]) -> Any:
        """Return the record stored in ``chunk`` (a view or raw chunk bytes)."""

    @abstractmethod
    def is_valid(self, chunk: Chunk) -> bool:
        """Return True if ``chunk`` belongs to this handler.

        Must not decompress anything; it runs once per chunk in the image.
        """


class TextRecord(NamedTuple):
    """A compressed key/value record: Latin-1 keyword and raw value bytes."""

    key: str
    value: bytes


class TextChunk(ChunkHandler):
    """Generic compressed key/value chunk (zTXt layout).

    Args:
        type_code: Chunk type written on encode and matched by ``is_valid``.
        key_prefix: Optional leading payload bytes a chunk must carry to be
            considered valid. Checked without decompressing.
    """

    def __init__(self, type_code: bytes = ZTXT_TYPE, key_prefix: Optional[bytes] = None):
        self.type_code = type_code
        self.key_prefix = key_prefix

    def encode(self, record: TextRecord) -> bytes:
        key, value = record
        payload = _encode_key(key) + bytes([0, COMPRESSION_METHOD_DEFLATE]) + compress(value)
        return build_chunk(self.type_code, payload)

    def decode(self, chunk: Union[Chunk, BytesLike]) -> TextRecord:
        chunk = _as_chunk(chunk)
        payload = chunk.payload
        # The separator must leave room for the compression method byte
        end_of_key = payload.find(b"\x00", 0, max(len(payload) - 1, 0))
        if end_of_key == -1:
            raise CorruptChunkError(
                f"Chunk {chunk.type_code!r} at offset {chunk.offset} has no keyword separator"
            )
        method = payload[end_of_key + 1]
        if method != COMPRESSION_METHOD_DEFLATE:
            raise CorruptChunkError(
                f"Chunk {chunk.type_code!r} at offset {chunk.offset} uses unsupported compression method {method}"
            )
        key = payload[:end_of_key].decode(KEYWORD_ENCODING)
        return TextRecord(key, decompress(payload[end_of_key + 2 :]))

    def is_valid(self, chunk: Chunk) -> bool:
        if chunk.type_code != self.type_code:
            return False
        return self.key_prefix is None or chunk.payload_startswith(self.key_prefix)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type_code={self.type_code!r}, key_prefix={self.key_prefix!r})"


def _encode_key(key: str) -> bytes:
    try:
        encoded = key.encode(KEYWORD_ENCODING)
    except UnicodeEncodeError as e:
        raise ValidationError(f"Keyword {key!r} is not representable in {KEYWORD_ENCODING}") from e
    if b"\x00" in encoded:
        raise ValidationError(f"Keyword {key!r} contains a NUL byte")
    if len(encoded) > MAX_KEYWORD_LENGTH:
        raise ValidationError(
            f"Keyword is {len(encoded)} bytes long; the limit is {MAX_KEYWORD_LENGTH}"
        )
    return encoded
