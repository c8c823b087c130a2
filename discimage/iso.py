"""Prober for plain ISO 9660 and ZSO image files."""

from __future__ import annotations

import os

from .errors import NotCompatibleError
from .image import SECTOR_SIZE, ImageBase
from .osal import volume_sector_size

_ZSO_MAGIC = b"ZISO"
_ISO_MAGIC = b"\x01CD001"
_ISO_MAGIC_OFFSET = 0x8000


def probe_iso(path: str | os.PathLike[str]) -> ImageBase:
    """Open ``path`` as a plain ISO or ZSO image.

    Raises NotCompatibleError if the file carries neither signature.
    """
    with open(path, "rb") as handle:
        header = handle.read(len(_ISO_MAGIC))
        if not header.startswith(_ZSO_MAGIC):
            handle.seek(_ISO_MAGIC_OFFSET)
            if handle.read(len(_ISO_MAGIC)) != _ISO_MAGIC:
                raise NotCompatibleError(f"{os.fspath(path)!r} is not an ISO image")
        size_in_sectors = handle.seek(0, os.SEEK_END) // SECTOR_SIZE

    sector_size = volume_sector_size(path)
    image = ImageBase(SECTOR_SIZE, 0)
    image.add_part(path, size_in_sectors, 0, sector_size)
    image.source_type = "Plain ISO/ZSO file"
    return image