"""Thin file-system helpers used by the image readers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO

PathLike = "str | os.PathLike[str]"


def file_size(path: str | os.PathLike[str]) -> int:
    """Return the size of the file at ``path`` in bytes."""
    with open(path, "rb") as handle:
        return handle.seek(0, os.SEEK_END)


def volume_sector_size(path: str | os.PathLike[str]) -> int:
    """Return the preferred I/O block size of the volume holding ``path``."""
    return os.stat(path).st_blksize


def create_file(path: str | os.PathLike[str], estimated_size: int = 0) -> BinaryIO:
    """Create a new file, pre-sized to ``estimated_size`` bytes.

    The file must not exist yet. It is returned open for reading and
    writing, positioned at the start. If it cannot be pre-sized, it is
    removed again and the error is raised.
    """
    handle = open(path, "x+b")
    if estimated_size > 0:
        try:
            handle.seek(estimated_size - 1, os.SEEK_END)
            if handle.write(b"\0") != 1:
                raise OSError(f"unable to extend {os.fspath(path)!r}")
            handle.flush()
            handle.seek(0, os.SEEK_SET)
        except BaseException:
            handle.close()
            os.unlink(path)
            raise
    return handle


def locate_linked_file(
    source: str | os.PathLike[str], reference_path: str | os.PathLike[str]
) -> str:
    """Find a file named by an image description.

    ``source`` is used as given if it exists; otherwise it is looked up
    in the directory of ``reference_path``, first by its relative path and
    then by its bare name. Raises FileNotFoundError if neither exists.
    """
    source_path = Path(source)
    if source_path.is_file():
        return str(source_path)

    folder = Path(reference_path).parent
    candidates = []
    if not source_path.is_absolute():
        candidates.append(folder / source_path)
    # names written on another system may use backslashes
    name = os.fspath(source).replace("\\", "/").rsplit("/", 1)[-1]
    if name:
        candidates.append(folder / name)

    for candidate in candidates:
        if candidate.is_file():
            return str(candidate)
    raise FileNotFoundError(f"linked file not found: {os.fspath(source)!r}")