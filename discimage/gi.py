"""Prober for Global Image files, single or multi-part, mode 1 or mode 2."""

from __future__ import annotations

import os
from enum import Enum

from .errors import BadCompatibilityError, BrokenLinkError, NotCompatibleError
from .image import ImageBase
from .osal import locate_linked_file, volume_sector_size

_HEADER_SIZE = 1476
_SINGLE_FILE_SKIP = 152
_NAME_FIELD_SIZE = 0x104

_MAGIC = b"\xda\xda\xfe\xfe"
_MARKER_11 = b"\x11\x11\x11\x11"
_SINGLE_FILE_MARKER = b"\x22\x22\x22\x22"
_MULTI_FILE_MARKER = b"\x88\x88\x88\x88"

_FILE_SIZES_OFFSET = (0x9C, 0xA0, 0xA4, 0xA8)
_FILE_NAMES_OFFSET = (0x00B0, 0x01B4, 0x02B8, 0x03BD)


class GiMode(Enum):
    """Data layout of a Global Image: raw sector size, data offset, label."""

    MODE1_PLAIN = (2048, 0, "Global Image, Mode1")
    MODE2_PLAIN = (2336, 8, "Global Image, Mode2")

    def __init__(self, raw_sector_size: int, skip_offset: int, description: str) -> None:
        self.raw_sector_size = raw_sector_size
        self.skip_offset = skip_offset
        self.description = description


_MODES = {0x01: GiMode.MODE1_PLAIN, 0x02: GiMode.MODE2_PLAIN}


def _u32(header: bytes, offset: int) -> int:
    return int.from_bytes(header[offset:offset + 4], "little")


def _part_name(header: bytes, offset: int) -> str:
    raw = header[offset:offset + _NAME_FIELD_SIZE - 1]
    return raw.split(b"\0", 1)[0].decode("latin-1")


def probe_gi(path: str | os.PathLike[str]) -> ImageBase:
    """Open ``path`` as a Global Image.

    Raises NotCompatibleError if the file is not a Global Image and
    BadCompatibilityError if it is one of an unsupported kind.
    """
    device_sector_size = volume_sector_size(path)
    with open(path, "rb") as handle:
        header = handle.read(_HEADER_SIZE).ljust(_HEADER_SIZE, b"\0")

    if header[0x00:0x04] != _MAGIC or header[0x14:0x18] != _MARKER_11:
        raise NotCompatibleError(f"{os.fspath(path)!r} is not a Global Image")

    marker = header[0x62:0x66]
    if marker == _SINGLE_FILE_MARKER:
        single_file = True
    elif marker == _MULTI_FILE_MARKER:
        single_file = False
    else:
        raise BadCompatibilityError("unknown Global Image part layout")

    mode = _MODES.get(header[0x7E])
    if mode is None:
        raise BadCompatibilityError(f"unsupported Global Image mode 0x{header[0x7E]:02x}")

    num_sectors = _u32(header, 0x34)
    if num_sectors != _u32(header, 0x38) or num_sectors != _u32(header, 0x7A):
        raise BadCompatibilityError("inconsistent sector counts in Global Image header")

    image = ImageBase(mode.raw_sector_size, mode.skip_offset)
    if single_file:
        image.add_part(path, num_sectors, _SINGLE_FILE_SKIP, device_sector_size)
    else:
        num_files = header[0x98]
        if num_files > len(_FILE_SIZES_OFFSET):
            raise BadCompatibilityError(f"too many Global Image parts: {num_files}")
        for size_offset, name_offset in zip(_FILE_SIZES_OFFSET[:num_files],
                                            _FILE_NAMES_OFFSET[:num_files]):
            length_s = _u32(header, size_offset)
            name = _part_name(header, name_offset)
            try:
                source = locate_linked_file(name, path)
            except FileNotFoundError as exc:
                raise BrokenLinkError(f"image part {name!r} not found") from exc
            image.add_part(source, length_s, 0, volume_sector_size(source))

    image.source_type = mode.description
    return image