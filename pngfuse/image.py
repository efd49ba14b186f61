#!/usr/bin/env python3
"""In-memory PNG container that inserts, enumerates and deletes chunks.

The container holds the whole PNG stream in one ``bytearray`` and never
reformats it: chunks that are not touched keep their exact bytes, CRCs
included. New chunks are inserted right after the contiguous run of IDAT
chunks, because ancillary data placed before the pixel data slows down
viewers that stream the image. Enumeration and deletion, on the other hand,
cover the whole stream from the first chunk after the signature to the end
of the buffer.

Chunk selection is delegated to a ChunkHandler (see pngfuse.codec), whose
``is_valid`` predicate inspects only chunk headers and payload prefixes.

Usage:
    ```python
    from pngfuse.fusechunk import FuseChunk
    from pngfuse.image import PNGImage
    from pngfuse.subfile import SubFile

    image = PNGImage.from_file("host.png")
    image.insert(FuseChunk(), [SubFile("notes.txt", b"hello")])
    for subfile in image.records(FuseChunk()):
        print(subfile.name, len(subfile))
    image.save("host.fused.png")
    ```
"""

from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

from PIL import Image

from pngfuse.codec import BytesLike, Chunk, ChunkHandler, read_chunk
from pngfuse.errors import FormatError, PNGFuseError
from pngfuse.types import DEFAULT_JOBS, IDAT_TYPE, PNG_SIGNATURE

logger = logging.getLogger(__name__)


def iter_chunks(buffer: BytesLike, name: str = "<memory>") -> Iterator[Chunk]:
    """Yield every chunk from just after the signature to the end of ``buffer``.

    Raises:
        FormatError: When a chunk header is truncated or a chunk extends past
            the end of the buffer. Chunks before the bad one have already
            been yielded by then.
    """
    offset = len(PNG_SIGNATURE)
    total = len(buffer)
    while offset < total:
        try:
            chunk = read_chunk(buffer, offset)
        except FormatError as e:
            raise FormatError(f"{e} in {name}") from e
        yield chunk
        offset = chunk.end


class ChunkSequence:
    """Lazy, restartable sequence of records decoded from matching chunks.

    Each iteration rescans the container's current buffer, so the sequence
    reflects inserts and deletes made since it was created. Do not mutate the
    container while an iteration is in progress.
    """

    def __init__(self, image: "PNGImage", handler: ChunkHandler):
        self._image = image
        self._handler = handler

    def __iter__(self) -> Iterator[Any]:
        for chunk in self._image.chunks():
            if self._handler.is_valid(chunk):
                try:
                    record = self._handler.decode(chunk)
                except PNGFuseError as e:
                    raise type(e)(f"{e} (chunk at offset {chunk.offset} in {self._image.name})") from e
                yield record

    def __repr__(self) -> str:
        return f"ChunkSequence({self._image.name!r}, {self._handler!r})"


class PNGImage:
    """A mutable PNG stream.

    Args:
        data: The complete PNG file contents.
        name: Used in error messages, usually the source path.

    Raises:
        FormatError: If the signature is wrong, a chunk header is malformed
            before the end of the IDAT run, or there is no IDAT chunk at all.
    """

    def __init__(self, data: BytesLike, name: str = "<memory>"):
        self.name = name
        self.data = bytearray(data)
        if len(self.data) < len(PNG_SIGNATURE) or self.data[: len(PNG_SIGNATURE)] != PNG_SIGNATURE:
            raise FormatError(f"{name} is not a valid PNG file.")
        self.insertion_offset = self._find_idat_end()
        logger.debug("%s: %d bytes, insertion offset %d", name, len(self.data), self.insertion_offset)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "PNGImage":
        """Load an image from disk."""
        with open(path, "rb") as f:
            data = f.read()
        return cls(data, name=str(path))

    def _find_idat_end(self) -> int:
        """Return the offset just past the first contiguous run of IDAT chunks."""
        in_run = False
        for chunk in iter_chunks(self.data, self.name):
            if chunk.type_code == IDAT_TYPE:
                in_run = True
            elif in_run:
                return chunk.offset
        if in_run:
            # IDAT run is the last thing in the stream (no IEND)
            return len(self.data)
        raise FormatError(f"{self.name} contains no IDAT chunk.")

    def chunks(self) -> Iterator[Chunk]:
        """Iterate over views of every chunk in the stream."""
        return iter_chunks(self.data, self.name)

    def insert(
        self,
        handler: ChunkHandler,
        records: Sequence[Any],
        jobs: Optional[int] = None,
    ) -> int:
        """Encode ``records`` and insert them after the IDAT run, in order.

        Records are encoded in parallel; the buffer is only touched once all
        encodes have finished, with a single splice at the insertion offset.

        Args:
            handler: Converts each record into a wire chunk.
            records: Records to insert. Their order is kept in the stream.
            jobs: Maximum number of encoder threads (default: CPU count).

        Returns:
            The number of chunks inserted.
        """
        records = list(records)
        if not records:
            return 0
        workers = max(1, min(jobs or DEFAULT_JOBS, len(records)))
        if workers == 1:
            encoded = [handler.encode(record) for record in records]
        else:
            with ThreadPoolExecutor(max_workers=workers) as ex:
                encoded = list(ex.map(handler.encode, records))

        blob = b"".join(encoded)
        offset = self.insertion_offset
        self.data[offset:offset] = blob
        logger.debug(
            "%s: inserted %d chunk(s), %d bytes at offset %d using %d worker(s)",
            self.name, len(encoded), len(blob), offset, workers,
        )
        return len(encoded)

    def records(self, handler: ChunkHandler) -> ChunkSequence:
        """Return the decoded records of every chunk ``handler`` accepts."""
        return ChunkSequence(self, handler)

    def delete(self, handler: ChunkHandler) -> int:
        """Remove every chunk ``handler`` accepts.

        Matching chunks are grouped into contiguous byte ranges during one
        forward scan, then the ranges are erased back-to-front so earlier
        offsets stay valid.

        Returns:
            The number of chunks removed (not ranges).
        """
        ranges: List[Tuple[int, int]] = []
        range_start: Optional[int] = None
        count = 0
        for chunk in self.chunks():
            if handler.is_valid(chunk):
                count += 1
                if range_start is None:
                    range_start = chunk.offset
            elif range_start is not None:
                ranges.append((range_start, chunk.offset))
                range_start = None
        if range_start is not None:
            ranges.append((range_start, len(self.data)))

        shift = 0
        for start, end in reversed(ranges):
            del self.data[start:end]
            if end <= self.insertion_offset:
                shift += end - start
            elif start < self.insertion_offset:
                shift += self.insertion_offset - start
        self.insertion_offset -= shift

        logger.debug("%s: deleted %d chunk(s) in %d range(s)", self.name, count, len(ranges))
        return count

    def verify(self) -> None:
        """Check that Pillow can still decode the image.

        Raises:
            FormatError: If Pillow fails to open or load the pixel data.
        """
        try:
            with Image.open(io.BytesIO(self.data)) as im:
                im.load()
        except (OSError, SyntaxError, ValueError) as e:
            raise FormatError(f"{self.name} does not decode as a PNG image: {e}") from e

    def save(self, path: Union[str, Path]) -> None:
        """Write the buffer to ``path`` verbatim."""
        with open(path, "wb") as f:
            f.write(self.data)
        logger.debug("%s: saved %d bytes to %s", self.name, len(self.data), path)

    def __bytes__(self) -> bytes:
        return bytes(self.data)

    def __len__(self) -> int:
        return len(self.data)
