#!/usr/bin/env python3
"""Package initialization and public API for pngfuse.

pngfuse stores whole files inside a PNG as private, zlib-compressed ``fuSe``
chunks placed after the image data, and can list, extract or remove them
again without touching the pixel data.

Public API:
    # High-level operations
    fuse(files, overwrite, output, jobs, verify) -> Path
    sunder(source, directory) -> List[Path]
    list_subfiles(source) -> List[SubFile]
    clean(source, overwrite, output, verify) -> Tuple[int, Path]

    # Building blocks
    PNGImage: In-memory PNG container (insert / records / delete / save)
    TextChunk: Generic compressed key/value (zTXt-style) chunk codec
    FuseChunk: The embedded-file chunk codec
    SubFile: An embedded file record (name + contents)

Usage as a library:
    ```python
    from pngfuse import FuseChunk, PNGImage, SubFile

    image = PNGImage.from_file("host.png")
    image.insert(FuseChunk(), [SubFile("hello.txt", b"world")])
    image.save("host.fused.png")

    for subfile in PNGImage.from_file("host.fused.png").records(FuseChunk()):
        print(subfile.name, subfile.contents)
    ```

Usage as CLI:
    ```bash
    pngfuse host.png hello.txt      # writes host.fused.png
    pngfuse -l host.fused.png
    python -m pngfuse host.fused.png
    ```
"""

from __future__ import annotations

from pngfuse.types import (
    __version__,
    FUSE_CHUNK_TYPE,
    FUSE_KEYWORD,
    PNG_SIGNATURE,
)

from pngfuse.errors import (
    PNGFuseError,
    FormatError,
    CorruptChunkError,
    CorruptRecordError,
    CompressionError,
    DecompressionError,
    ValidationError,
)

from pngfuse.codec import (
    Chunk,
    ChunkHandler,
    TextChunk,
    TextRecord,
    build_chunk,
    read_chunk,
    compress,
    decompress,
)

from pngfuse.subfile import SubFile
from pngfuse.fusechunk import FuseChunk
from pngfuse.image import PNGImage, ChunkSequence, iter_chunks

from pngfuse.core import (
    fuse,
    sunder,
    list_subfiles,
    clean,
)

from pngfuse.cli import main

__all__ = [
    # Version and constants
    "__version__",
    "FUSE_CHUNK_TYPE",
    "FUSE_KEYWORD",
    "PNG_SIGNATURE",
    # Errors
    "PNGFuseError",
    "FormatError",
    "CorruptChunkError",
    "CorruptRecordError",
    "CompressionError",
    "DecompressionError",
    "ValidationError",
    # Chunk codec
    "Chunk",
    "ChunkHandler",
    "TextChunk",
    "TextRecord",
    "build_chunk",
    "read_chunk",
    "compress",
    "decompress",
    # Records and container
    "SubFile",
    "FuseChunk",
    "PNGImage",
    "ChunkSequence",
    "iter_chunks",
    # High-level operations
    "fuse",
    "sunder",
    "list_subfiles",
    "clean",
    # CLI
    "main",
]
