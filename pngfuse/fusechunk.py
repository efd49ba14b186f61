#!/usr/bin/env python3
"""The private ``fuSe`` chunk that carries one embedded file.

A fuSe chunk is laid out exactly like a zTXt chunk with two differences:
the keyword is always ``PNGFuse`` and the compressed value is a merged
SubFile (UTF-8 name, NUL, raw contents) instead of Latin-1 text.
"""

from __future__ import annotations

from typing import Union

from pngfuse.codec import BytesLike, Chunk, ChunkHandler, TextChunk, TextRecord
from pngfuse.errors import CorruptChunkError
from pngfuse.subfile import SubFile
from pngfuse.types import FUSE_CHUNK_TYPE, FUSE_KEYWORD, KEYWORD_ENCODING


class FuseChunk(ChunkHandler):
    """Encodes SubFiles as fuSe chunks by delegating to a TextChunk codec."""

    type_code = FUSE_CHUNK_TYPE
    keyword = FUSE_KEYWORD

    def __init__(self) -> None:
        self._text = TextChunk(FUSE_CHUNK_TYPE, key_prefix=FUSE_KEYWORD.encode(KEYWORD_ENCODING))

    def encode(self, subfile: SubFile) -> bytes:
        return self._text.encode(TextRecord(FUSE_KEYWORD, subfile.merged()))

    def decode(self, chunk: Union[Chunk, BytesLike]) -> SubFile:
        key, value = self._text.decode(chunk)
        if key != FUSE_KEYWORD:
            # is_valid() only matches the keyword as a prefix
            raise CorruptChunkError(f"Expected keyword {FUSE_KEYWORD!r} in fuSe chunk, found {key!r}")
        return SubFile.from_merged(value)

    def is_valid(self, chunk: Chunk) -> bool:
        return self._text.is_valid(chunk)
