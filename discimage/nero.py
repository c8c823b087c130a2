"""Prober for Nero disc images and Nero track files."""

from __future__ import annotations

import os
from enum import Enum
from typing import BinaryIO

from .errors import BadCompatibilityError, ImageError, NotCompatibleError
from .image import ImageBase
from .osal import volume_sector_size

_IMAGE_FOOTER_SIZE = 156
_TRACK_FOOTER_SIZE = 72
_LEAD_IN_SECTORS = 150


class NeroMode(Enum):
    """Data layout of a Nero image: raw sector size, data offset, label."""

    MODE1_PLAIN = (2048, 0, "Nero Image, Mode 1, plain")
    MODE1_RAW = (2352, 16, "Nero Image, Mode 1, RAW")
    MODE2_PLAIN = (2048, 0, "Nero Image, Mode 2, plain")
    MODE2_RAW = (2352, 24, "Nero Image, Mode 2, RAW")

    def __init__(self, raw_sector_size: int, skip_offset: int, description: str) -> None:
        self.raw_sector_size = raw_sector_size
        self.skip_offset = skip_offset
        self.description = description


_IMAGE_MODES = {
    0x00: NeroMode.MODE1_PLAIN,
    0x05: NeroMode.MODE1_RAW,
    0x02: NeroMode.MODE2_PLAIN,
    0x06: NeroMode.MODE2_RAW,
}


def _read_tail(handle: BinaryIO, file_size: int, length: int) -> bytes:
    if file_size < length:
        raise NotCompatibleError("file too short for a Nero footer")
    handle.seek(file_size - length)
    tail = handle.read(length)
    if len(tail) != length:
        raise NotCompatibleError("unable to read the Nero footer")
    return tail


def _probe_image(handle: BinaryIO, file_size: int) -> tuple[NeroMode, int, int]:
    tail = _read_tail(handle, file_size, _IMAGE_FOOTER_SIZE)
    if tail[0x00:0x04] != b"CUEX" or tail[0x90:0x94] != b"NER5":
        raise NotCompatibleError("not a Nero image")
    mode = _IMAGE_MODES.get(tail[0x54])
    if mode is None:
        raise BadCompatibilityError(f"unsupported Nero data type 0x{tail[0x54]:02x}")
    return mode, _LEAD_IN_SECTORS * mode.raw_sector_size, _IMAGE_FOOTER_SIZE


def _probe_track(handle: BinaryIO, file_size: int) -> tuple[NeroMode, int, int]:
    tail = _read_tail(handle, file_size, _TRACK_FOOTER_SIZE)
    if tail[0x00:0x04] != b"ETN2" or tail[0x3C:0x40] != b"NER5":
        raise NotCompatibleError("not a Nero track")
    return NeroMode.MODE1_PLAIN, 0, _TRACK_FOOTER_SIZE


def probe_nero(path: str | os.PathLike[str]) -> ImageBase:
    """Open ``path`` as a Nero image or a Nero track file.

    Raises NotCompatibleError if the file is neither.
    """
    device_sector_size = volume_sector_size(path)
    with open(path, "rb") as handle:
        file_size = handle.seek(0, os.SEEK_END)
        try:
            mode, header_size, footer_size = _probe_image(handle, file_size)
        except (ImageError, OSError):
            mode, header_size, footer_size = _probe_track(handle, file_size)

    length_s = max(0, (file_size - header_size - footer_size) // mode.raw_sector_size)
    image = ImageBase(mode.raw_sector_size, mode.skip_offset)
    image.add_part(path, length_s, header_size, device_sector_size)
    image.source_type = mode.description
    return image