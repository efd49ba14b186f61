#!/usr/bin/env python3
"""High-level fuse, sunder, list and clean operations.

Each function performs one complete operation on one image: it loads the
file, mutates or reads the in-memory copy, and only writes output once
everything else has succeeded.

Functions:
    fuse: Embed files into the first PNG of a list of paths
    sunder: Extract every embedded file from an image
    list_subfiles: Decode the embedded files of an image without writing them
    clean: Remove every embedded file from an image
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from pngfuse.errors import ValidationError
from pngfuse.fusechunk import FuseChunk
from pngfuse.image import PNGImage
from pngfuse.subfile import SubFile
from pngfuse.utils import (
    PathLike,
    find_target,
    fused_output_path,
    resolve_output,
    unfused_output_path,
)

logger = logging.getLogger(__name__)


def fuse(
    files: Sequence[PathLike],
    overwrite: bool = False,
    output: Optional[PathLike] = None,
    jobs: Optional[int] = None,
    verify: bool = False,
) -> Path:
    """Embed files into a host PNG.

    The host is the first path in ``files`` with a ``.png`` extension; every
    other path is embedded, in the order given.

    Args:
        files: Host image and files to embed, in any order.
        overwrite: Save over the host instead of next to it.
        output: Custom output path. Cannot be combined with ``overwrite``.
        jobs: Maximum number of compression threads.
        verify: Decode the result with Pillow before saving.

    Returns:
        The path the fused image was written to.

    Raises:
        ValidationError: If there is no host PNG, nothing to embed, or both
            ``overwrite`` and ``output`` are set.
        FormatError: If the host is not a usable PNG.
        OSError: If a file cannot be read or the output cannot be written.
    """
    files = list(files)
    target = Path(files.pop(find_target(files)))
    if not files:
        raise ValidationError(f"No files to fuse into {target}.")
    out_path = resolve_output(target, overwrite, output, fused_output_path)

    logger.debug("Target file: %s", target)
    logger.debug("Files to fuse: %s", ", ".join(str(f) for f in files))

    image = PNGImage.from_file(target)
    subfiles = [SubFile.from_file(f) for f in files]
    image.insert(FuseChunk(), subfiles, jobs=jobs)
    if verify:
        image.verify()
    image.save(out_path)
    return out_path


def list_subfiles(source: PathLike) -> List[SubFile]:
    """Decode every embedded file in ``source``."""
    return list(PNGImage.from_file(source).records(FuseChunk()))


def sunder(source: PathLike, directory: PathLike = ".") -> List[Path]:
    """Extract every embedded file in ``source`` into ``directory``.

    All records are decoded before the first file is written, so a corrupt
    chunk anywhere in the image leaves ``directory`` untouched.

    Returns:
        The written paths, in stream order.
    """
    subfiles = list_subfiles(source)
    for subfile in subfiles:
        subfile.safe_name()
    return [subfile.save(directory) for subfile in subfiles]


def clean(
    source: PathLike,
    overwrite: bool = False,
    output: Optional[PathLike] = None,
    verify: bool = False,
) -> Tuple[int, Path]:
    """Remove every embedded file from ``source``.

    Returns:
        The number of embedded files removed and the path written.
    """
    out_path = resolve_output(source, overwrite, output, unfused_output_path)
    image = PNGImage.from_file(source)
    removed = image.delete(FuseChunk())
    if verify:
        image.verify()
    image.save(out_path)
    return removed, out_path
