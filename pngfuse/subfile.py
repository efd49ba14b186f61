#!/usr/bin/env python3
"""Embedded file records.

A SubFile is a file name plus raw contents. Its merged form, stored as the
value of a fuSe chunk, is ``utf8(name) NUL contents``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from pngfuse.errors import CorruptRecordError, ValidationError
from pngfuse.types import FILENAME_ENCODING


@dataclass
class SubFile:
    name: str
    contents: bytes

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SubFile":
        """Load a file from disk, keeping only its final path component as the name."""
        path = Path(path)
        with open(path, "rb") as f:
            return cls(path.name, f.read())

    @classmethod
    def from_merged(cls, data: bytes) -> "SubFile":
        """Split a merged record back into name and contents."""
        end_of_name = data.find(b"\x00")
        if end_of_name == -1:
            raise CorruptRecordError("Embedded file record has no filename separator")
        try:
            name = data[:end_of_name].decode(FILENAME_ENCODING)
        except UnicodeDecodeError as e:
            raise CorruptRecordError(f"Embedded filename is not valid UTF-8: {e}") from e
        return cls(name, bytes(data[end_of_name + 1 :]))

    def merged(self) -> bytes:
        """Serialize as ``utf8(name) NUL contents``.

        Raises:
            ValidationError: If the name holds a NUL character, which would
                make the record split at the wrong place, or cannot be encoded.
        """
        if "\x00" in self.name:
            raise ValidationError(f"Filename {self.name!r} contains a NUL character")
        try:
            encoded = self.name.encode(FILENAME_ENCODING)
        except UnicodeEncodeError as e:
            raise ValidationError(f"Filename {self.name!r} cannot be encoded as UTF-8") from e
        return encoded + b"\x00" + bytes(self.contents)

    def safe_name(self) -> str:
        """Return the name if it is safe to create inside an output directory.

        Names come from untrusted images, so anything that is not a plain
        single path component on either POSIX or Windows is refused. A colon
        would give a drive-relative path on Windows.
        """
        name = self.name
        if name in ("", ".", "..") or any(c in name for c in "/\\:\x00"):
            raise ValidationError(f"Refusing to extract embedded file with unsafe name {name!r}")
        return name

    def save(self, directory: Union[str, Path] = ".") -> Path:
        """Write the contents to ``directory/name`` and return the written path."""
        out_path = Path(directory) / self.safe_name()
        with open(out_path, "wb") as f:
            f.write(self.contents)
        return out_path

    def __len__(self) -> int:
        return len(self.contents)
