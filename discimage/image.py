"""Sector-addressed reader over one or more raw disc image files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import BinaryIO

SECTOR_SIZE = 2048
"""Size of the user-data sectors that an image is read in."""

MAX_READ_SECTORS = 2048
"""Largest number of sectors returned by a single read of a gap."""


@dataclass
class ImagePart:
    """One input file mapped onto a run of image sectors."""

    offset_s: int
    length_s: int
    skip: int
    input_path: str
    device_sector_size: int

    @property
    def end_s(self) -> int:
        return self.offset_s + self.length_s

    def contains(self, sector: int) -> bool:
        return self.offset_s <= sector < self.end_s


class ImageBase:
    """A disc image made of file parts and zero-filled gaps.

    Each raw sector in the inputs is ``raw_sector_size`` bytes long, and
    the 2048 bytes of user data start ``raw_skip_offset`` bytes into it.
    """

    def __init__(self, raw_sector_size: int, raw_skip_offset: int) -> None:
        if raw_sector_size < raw_skip_offset + SECTOR_SIZE:
            raise ValueError("raw sector too small to hold a data sector")
        self.raw_sector_size = raw_sector_size
        self.raw_skip_offset = raw_skip_offset
        self.parts: list[ImagePart] = []
        self.source_type = ""
        self._offset_s = 0
        self._current: ImagePart | None = None
        self._file: BinaryIO | None = None

    def add_part(
        self,
        input_path: str | os.PathLike[str],
        length_s: int,
        skip: int = 0,
        device_sector_size: int = 512,
    ) -> None:
        """Append ``length_s`` sectors read from ``input_path``.

        ``skip`` bytes at the start of the input are ignored.
        """
        self.parts.append(
            ImagePart(
                offset_s=self._offset_s,
                length_s=length_s,
                skip=skip,
                input_path=os.fspath(input_path),
                device_sector_size=device_sector_size,
            )
        )
        self._offset_s += length_s

    def add_gap(self, length_s: int) -> None:
        """Insert ``length_s`` zero-filled sectors before the next part."""
        self._offset_s += length_s

    def stat(self) -> tuple[int, int]:
        """Return ``(sector_size, number_of_sectors)``."""
        total = self.parts[-1].end_s if self.parts else 0
        return SECTOR_SIZE, total

    def read(self, start_sector: int, num_sectors: int) -> bytes:
        """Read up to ``num_sectors`` data sectors from ``start_sector``.

        The result may be shorter than asked for: a read never crosses the
        end of a part or a gap, and is empty behind the end of the image.
        """
        current = self._current
        if current is None or not current.contains(start_sector):
            for part in self.parts:
                if part.contains(start_sector):
                    self._switch_to(part)
                    break
                if start_sector < part.offset_s:
                    count = min(num_sectors, part.offset_s - start_sector,
                                MAX_READ_SECTORS)
                    return bytes(count * SECTOR_SIZE)
            else:
                return b""
        return self._read_current(start_sector, num_sectors)

    def _switch_to(self, part: ImagePart) -> None:
        current = self._current
        if (current is not None
                and current.input_path.lower() == part.input_path.lower()):
            self._current = part
            return
        handle = open(part.input_path, "rb")
        self._close_current()
        self._file = handle
        self._current = part

    def _read_current(self, start_sector: int, num_sectors: int) -> bytes:
        part = self._current
        assert part is not None and self._file is not None
        raw = self.raw_sector_size
        skip = self.raw_skip_offset

        self._file.seek(part.skip + (start_sector - part.offset_s) * raw)
        raw_data = self._file.read(max(num_sectors, 0) * raw)

        read_sectors = -(-len(raw_data) // raw)
        uncomplete = (raw - len(raw_data) % raw) % raw
        num_sect = min(read_sectors, part.end_s - start_sector)

        if raw == SECTOR_SIZE and skip == 0:
            out = bytearray(raw_data[:num_sect * SECTOR_SIZE])
            out.extend(bytes(num_sect * SECTOR_SIZE - len(out)))
        else:
            out = bytearray()
            for sector in range(num_sect):
                start = sector * raw + skip
                out += raw_data[start:start + SECTOR_SIZE].ljust(SECTOR_SIZE, b"\0")

        if uncomplete and num_sect == read_sectors and out:
            if uncomplete > skip:
                # last sector is incomplete: zero its tail
                to_zero = min(uncomplete + skip, len(out))
                out[len(out) - to_zero:] = bytes(to_zero)
            else:
                # only the header of the last sector was read
                del out[-SECTOR_SIZE:]
        return bytes(out)

    def _close_current(self) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self._current = None

    def close(self) -> None:
        """Release the currently open input file."""
        self._close_current()

    def __enter__(self) -> ImageBase:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()