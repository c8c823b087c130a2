"""Reading the ISO 9660 details that identify a PlayStation 2 CD or DVD."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .errors import BadIsoFsError, ImageError, NotPs2DiscError

CDVD_SECTOR_SIZE = 2048
"""Size of an ISO 9660 logical sector."""

_PVD_SECTOR = 16
_MAX_CONFIG_SIZE = 131072
_SYSTEM_CNF = "SYSTEM.CNF;1"
_BOOT_DEVICES = (b"cdrom0:\\", b"cdrom1:\\")  # cdrom1 is used by some game mods


class MediaType(Enum):
    """Kind of disc an image was taken from."""

    UNKNOWN = "unknown"
    CD = "cd"
    DVD = "dvd"


@dataclass
class Ps2DiscInfo:
    """What identifies a PlayStation 2 disc image."""

    media_type: MediaType
    volume_id: str
    startup_elf: str
    layer_pvd: int = 0


class _SectorReader(Protocol):
    def read(self, start_sector: int, num_sectors: int) -> bytes: ...


@dataclass(frozen=True)
class _VolumeDescriptor:
    sector: int
    path_table_addr: int
    system_id: str
    volume_id: str


def _u32(buffer: bytes, offset: int) -> int:
    return int.from_bytes(buffer[offset:offset + 4], "little")


def _text(field: bytes) -> str:
    return field.split(b"\0", 1)[0].decode("latin-1").rstrip()


def _read_sector(image: _SectorReader, sector: int) -> bytes:
    return bytes(image.read(sector, 1))


def _read_bytes(image: _SectorReader, sector: int, length: int) -> bytes:
    wanted = max(1, -(-length // CDVD_SECTOR_SIZE))
    data = bytearray()
    while wanted > 0:
        chunk = image.read(sector, wanted)
        if not chunk:
            break
        data += chunk
        got = len(chunk) // CDVD_SECTOR_SIZE
        if got == 0:
            break
        sector += got
        wanted -= got
    return bytes(data[:length])


def _detect_media_type(image: _SectorReader) -> MediaType:
    data = _read_sector(image, _PVD_SECTOR)
    if len(data) != CDVD_SECTOR_SIZE:
        return MediaType.UNKNOWN
    marker = data[1024:1032]
    if marker == b"CD-XA001":
        return MediaType.CD
    if marker == bytes(8):
        return MediaType.DVD
    return MediaType.UNKNOWN


def _find_volume_descriptor(image: _SectorReader, layer: int) -> _VolumeDescriptor:
    sector = _PVD_SECTOR
    data = _read_sector(image, sector)
    if data[1:6] != b"CD001":
        raise BadIsoFsError("no ISO 9660 volume descriptor")
    if layer == 1:
        if len(data) < 84:
            raise BadIsoFsError("truncated volume descriptor")
        sector = _u32(data, 80)
        data = _read_sector(image, sector)
        if len(data) != CDVD_SECTOR_SIZE or data[1:6] != b"CD001":
            raise BadIsoFsError("no volume descriptor for the second layer")
    if len(data) < 144 or data[0] != 0x01:
        raise BadIsoFsError("primary volume descriptor not found")
    return _VolumeDescriptor(
        sector=sector,
        path_table_addr=_u32(data, 140) * CDVD_SECTOR_SIZE,
        system_id=_text(data[8:40]),
        volume_id=_text(data[40:72]),
    )


def _root_dir_addr(image: _SectorReader, path_table_addr: int) -> int:
    buffer = _read_sector(image, path_table_addr // CDVD_SECTOR_SIZE)
    pos = 0
    while pos < len(buffer):
        id_len = buffer[pos]
        pos += 1
        if id_len == 0 or pos > CDVD_SECTOR_SIZE - 1 or pos + 7 >= len(buffer):
            break
        extent = _u32(buffer, pos + 1)
        pos += 7
        if buffer[pos] == 0:
            return extent * CDVD_SECTOR_SIZE
        pos += id_len + id_len % 2
    raise BadIsoFsError("root directory not found")


def _find_file(image: _SectorReader, dir_addr: int, name: str) -> tuple[int, int]:
    buffer = _read_sector(image, dir_addr // CDVD_SECTOR_SIZE)
    target = name.encode("latin-1")
    pos = 0
    while pos < len(buffer):
        record_len = buffer[pos]
        if record_len == 0 or pos + 1 > CDVD_SECTOR_SIZE - 1 or pos + 33 > len(buffer):
            break
        name_len = buffer[pos + 32]
        if name_len == len(target) and buffer[pos + 33:pos + 33 + name_len] == target:
            return _u32(buffer, pos + 2) * CDVD_SECTOR_SIZE, _u32(buffer, pos + 10)
        pos += record_len
    raise FileNotFoundError(f"{name!r} not found on the disc")


def parse_config_cnf(contents: bytes) -> str:
    """Return the startup file named by the BOOT2 line of a SYSTEM.CNF.

    Raises NotPs2DiscError if there is no such line (a PlayStation 1
    disc, perhaps) or the contents are too large.
    """
    if len(contents) > _MAX_CONFIG_SIZE:
        raise NotPs2DiscError("SYSTEM.CNF is too large")
    for line in re.split(rb"[\r\n\0]", contents):
        if not line.startswith(b"BOOT2"):
            continue
        rest = line[5:].lstrip(b" \t=")
        if rest[:8] in _BOOT_DEVICES:
            return rest[8:].split(b";", 1)[0].decode("latin-1")
    raise NotPs2DiscError("no BOOT2 entry in SYSTEM.CNF")


def get_ps2_disc_info(image: _SectorReader) -> Ps2DiscInfo:
    """Identify the PlayStation 2 disc held by ``image``."""
    media_type = _detect_media_type(image)
    pvd = _find_volume_descriptor(image, 0)
    if pvd.system_id != "PLAYSTATION":
        raise NotPs2DiscError(f"system id is {pvd.system_id!r}")

    root_addr = _root_dir_addr(image, pvd.path_table_addr)
    cnf_addr, cnf_length = _find_file(image, root_addr, _SYSTEM_CNF)
    if cnf_length > _MAX_CONFIG_SIZE:
        raise NotPs2DiscError("SYSTEM.CNF is too large")
    contents = _read_bytes(image, cnf_addr // CDVD_SECTOR_SIZE, cnf_length)
    startup_elf = parse_config_cnf(contents)

    try:
        layer_pvd = _find_volume_descriptor(image, 1).sector
    except (ImageError, OSError):
        layer_pvd = 0

    return Ps2DiscInfo(
        media_type=media_type,
        volume_id=pvd.volume_id,
        startup_elf=startup_elf,
        layer_pvd=layer_pvd,
    )