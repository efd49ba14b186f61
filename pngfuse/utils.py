#!/usr/bin/env python3
"""Path helpers for the pngfuse package.

This module contains the small, side-effect free helpers that pick the host
image out of a list of paths and derive output filenames:

    find_target: First path with a .png extension (case-insensitive)
    fused_output_path: ``image.png`` -> ``image.fused.png``
    unfused_output_path: ``image.fused.png`` -> ``image.png``,
        ``image.png`` -> ``image.unfused.png``
    resolve_output: Apply the overwrite / custom output rules
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from pngfuse.errors import ValidationError
from pngfuse.types import FUSED_SUFFIX, PNG_EXTENSION, UNFUSED_SUFFIX

PathLike = Union[str, Path]


def find_target(paths: Sequence[PathLike]) -> int:
    """Return the index of the first path that looks like a PNG.

    Raises:
        ValidationError: If no path has a ``.png`` extension.

    Examples:
        >>> find_target(["notes.txt", "photo.PNG", "other.png"])
        1
    """
    for index, path in enumerate(paths):
        if Path(path).suffix.lower() == PNG_EXTENSION:
            return index
    raise ValidationError("Could not find a target PNG to fuse into.")


def fused_output_path(target: PathLike) -> Path:
    """Derive a non-conflicting output name for a fuse operation."""
    target = Path(target)
    return target.with_name(target.stem + FUSED_SUFFIX + target.suffix)


def unfused_output_path(source: PathLike) -> Path:
    """Derive an output name for a clean operation.

    A ``.fused`` marker left by a previous fuse is stripped; otherwise an
    ``.unfused`` marker is added before the extension.
    """
    source = Path(source)
    stem, suffix = source.stem, source.suffix
    if stem.lower().endswith(FUSED_SUFFIX):
        return source.with_name(stem[: -len(FUSED_SUFFIX)] + suffix)
    return source.with_name(stem + UNFUSED_SUFFIX + suffix)


def resolve_output(
    source: PathLike,
    overwrite: bool,
    output: Optional[PathLike],
    naming: Callable[[PathLike], Path],
) -> Path:
    """Pick the destination path for a fuse or clean operation.

    Args:
        source: The image being modified.
        overwrite: Write back to ``source``.
        output: Explicit destination; wins over any naming rule.
        naming: Rule used when neither ``overwrite`` nor ``output`` is given.

    Raises:
        ValidationError: If both ``overwrite`` and ``output`` are given.
    """
    if overwrite and output is not None:
        raise ValidationError("Cannot specify both overwrite mode and a custom output path.")
    if output is not None:
        return Path(output)
    if overwrite:
        return Path(source)
    return naming(source)
