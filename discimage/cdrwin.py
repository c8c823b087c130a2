"""Prober for single-track CDRWIN cue sheets."""

from __future__ import annotations

import os
import re
from enum import Enum

from .errors import (
    BadCompatibilityError,
    BrokenLinkError,
    MultiTrackError,
    NotCompatibleError,
)
from .image import ImageBase
from .osal import file_size, locate_linked_file, volume_sector_size

_MAX_CUE_SIZE = 1024
_MAX_PATH = 260
_BLANKS = " \t"


class CueMode(Enum):
    """Data layout of a BIN file: raw sector size, data offset, label."""

    MODE1_PLAIN = (2048, 0, "ISO Image, Mode 1, plain")
    MODE1_RAW = (2352, 16, "BIN Image, Mode 1, RAW")
    MODE2_PLAIN = (2336, 8, "BIN Image, Mode 2, plain")
    MODE2_RAW = (2352, 24, "BIN Image, Mode 2, RAW")

    def __init__(self, raw_sector_size: int, skip_offset: int, description: str) -> None:
        self.raw_sector_size = raw_sector_size
        self.skip_offset = skip_offset
        self.description = description


_MODES = {
    ("1", 2048): CueMode.MODE1_PLAIN,
    ("1", 2352): CueMode.MODE1_RAW,
    ("2", 2336): CueMode.MODE2_PLAIN,
    ("2", 2352): CueMode.MODE2_RAW,
}


def _split_word(text: str) -> tuple[str, str]:
    """Split off the first blank-delimited word; the rest keeps no leading blanks."""
    text = text.lstrip(_BLANKS)
    end = 0
    while end < len(text) and text[end] not in _BLANKS:
        end += 1
    return text[:end], text[end:].lstrip(_BLANKS)


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def _parse_file_line(cue_path: str | os.PathLike[str], line: str) -> str:
    keyword, rest = _split_word(line)
    if keyword.lower() != "file":
        raise NotCompatibleError("cue sheet does not start with FILE")

    if rest.startswith('"'):
        closing = rest.find('"', 1)
        if closing < 0:
            raise NotCompatibleError("unterminated file name in cue sheet")
        source = rest[1:closing]
        rest = rest[closing + 1:]
    else:
        source, rest = _split_word(rest)
    if len(source) > _MAX_PATH - 1:
        raise NotCompatibleError("file name in cue sheet is too long")

    if rest.lstrip(_BLANKS).lower() != "binary":
        raise NotCompatibleError("cue sheet data file is not BINARY")

    try:
        return locate_linked_file(source, cue_path)
    except FileNotFoundError as exc:
        raise BrokenLinkError(f"data file {source!r} not found") from exc


def _parse_track_line(line: str) -> CueMode:
    keyword, rest = _split_word(line)
    if keyword.lower() != "track":
        raise NotCompatibleError("second cue sheet line is not TRACK")
    track_no, text_mode = _split_word(rest)
    if _atoi(track_no) != 1:
        raise BadCompatibilityError("only track 1 is supported")
    if text_mode[:4].lower() != "mode":
        raise BadCompatibilityError(f"unsupported track type {text_mode!r}")
    family = "1" if text_mode[4:5] == "1" else "2"
    mode = _MODES.get((family, _atoi(text_mode[6:])))
    if mode is None:
        raise BadCompatibilityError(f"unsupported track mode {text_mode!r}")
    return mode


def _is_index_line(line: str) -> bool:
    keyword, _ = _split_word(line)
    return keyword.lower() == "index"


def parse_cue(path: str | os.PathLike[str]) -> tuple[str, CueMode]:
    """Parse a single-track cue sheet.

    Returns the path of the data file and the layout of its sectors.
    """
    if file_size(path) >= _MAX_CUE_SIZE:
        raise NotCompatibleError("file too large for a cue sheet")
    with open(path, "rb") as handle:
        text = handle.read().decode("latin-1").split("\0", 1)[0]
    lines = [line for line in re.split(r"[\r\n]+", text) if line]

    if not lines:
        raise NotCompatibleError("empty cue sheet")
    source = _parse_file_line(path, lines[0])

    if len(lines) < 2:
        raise BadCompatibilityError("cue sheet has no TRACK line")
    mode = _parse_track_line(lines[1])

    if len(lines) < 3:
        raise BadCompatibilityError("cue sheet has no INDEX line")
    if not _is_index_line(lines[2]):
        raise NotCompatibleError("third cue sheet line is not INDEX")

    if len(lines) >= 5 and not _is_index_line(lines[4]):
        raise MultiTrackError("cue sheet holds more than one track")
    return source, mode


def probe_cdrwin(path: str | os.PathLike[str]) -> ImageBase:
    """Open the data file described by the cue sheet at ``path``."""
    source, mode = parse_cue(path)
    size = file_size(source)
    device_sector_size = volume_sector_size(source)
    image = ImageBase(mode.raw_sector_size, mode.skip_offset)
    image.add_part(source, size // mode.raw_sector_size, 0, device_sector_size)
    image.source_type = mode.description
    return image