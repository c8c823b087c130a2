"""Prober for IML file lists describing a disc as a set of files."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import Enum, auto

from .errors import BadCompatibilityError, BrokenLinkError, NotCompatibleError
from .image import SECTOR_SIZE, ImageBase
from .osal import file_size, locate_linked_file, volume_sector_size

_MAX_IML_SIZE = 1024 * 1024
_BLANKS = " \t"

_UNSIGNED = re.compile(r"\s*([+-]?\d+)")
_SIGNED = re.compile(r"\s*[+-]?\d+")
_FLOAT = re.compile(
    r"\s*[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)"
)


@dataclass(frozen=True)
class ImlFile:
    """One file entry of the ``[loc]`` section."""

    start_s: int
    end_s: int
    path: str
    offset: int = 0


class _Section(Enum):
    UNKNOWN = auto()
    SYS = auto()
    CUE = auto()
    LOC = auto()


_SECTION_TAGS = {
    "[sys]": _Section.SYS,
    "[/sys]": _Section.UNKNOWN,
    "[cue]": _Section.CUE,
    "[/cue]": _Section.UNKNOWN,
    "[loc]": _Section.LOC,
    "[/loc]": _Section.UNKNOWN,
}


def _take_unsigned(text: str, bits: int) -> tuple[int, str]:
    match = _UNSIGNED.match(text)
    if match is None:
        return 0, text
    return int(match.group(1)) % (1 << bits), text[match.end():]


def _skip_token(pattern: re.Pattern[str], text: str) -> str:
    match = pattern.match(text)
    return text if match is None else text[match.end():]


def _expect_blank(text: str) -> str:
    if not text or text[0] not in _BLANKS:
        raise BadCompatibilityError("malformed IML location line")
    return text.lstrip(_BLANKS)


def parse_loc_line(line: str) -> ImlFile:
    """Parse a ``[loc]`` line such as ``322 322 0.0 0 "SYSTEM.CNF"``.

    An optional byte offset may follow the file name.
    """
    start_s, rest = _take_unsigned(line, 32)
    rest = _expect_blank(rest)
    end_s, rest = _take_unsigned(rest, 32)
    rest = _expect_blank(rest)
    rest = _expect_blank(_skip_token(_FLOAT, rest))
    rest = _expect_blank(_skip_token(_SIGNED, rest))

    if rest.startswith('"'):
        closing = rest.find('"', 1)
        if closing < 0:
            raise NotCompatibleError("unterminated file name in IML line")
        path = rest[1:closing]
        rest = rest[closing + 1:]
        has_more = bool(rest)
        rest = rest[1:] if has_more else rest
    else:
        end = 0
        while end < len(rest) and rest[end] not in _BLANKS:
            end += 1
        path = rest[:end]
        has_more = end < len(rest)
        rest = rest[end + 1:]

    offset = _take_unsigned(rest.lstrip(_BLANKS), 64)[0] if has_more else 0
    return ImlFile(start_s=start_s, end_s=end_s, path=path, offset=offset)


def parse_iml(path: str | os.PathLike[str]) -> list[ImlFile]:
    """Return the file entries listed in the IML file at ``path``."""
    if file_size(path) > _MAX_IML_SIZE:
        raise NotCompatibleError("file too large for an IML list")
    with open(path, "rb") as handle:
        text = handle.read().decode("latin-1").split("\0", 1)[0]

    files: list[ImlFile] = []
    section = _Section.UNKNOWN
    for line in re.split(r"[\r\n]+", text):
        if not line:
            continue
        tag = _SECTION_TAGS.get(line.lower())
        if tag is not None:
            section = tag
        elif section is _Section.LOC and line[0].isdigit():
            files.append(parse_loc_line(line))

    if not files:
        raise NotCompatibleError(f"{os.fspath(path)!r} lists no files")
    return files


def probe_iml(path: str | os.PathLike[str]) -> ImageBase:
    """Open the disc described by the IML file at ``path``.

    Holes between listed files are read back as zero-filled sectors.
    """
    files = parse_iml(path)
    image = ImageBase(SECTOR_SIZE, 0)
    previous: ImlFile | None = None
    for entry in files:
        if entry.end_s < entry.start_s:
            raise BadCompatibilityError(f"file {entry.path!r} ends before it starts")
        if previous is not None:
            gap_s = entry.start_s - (previous.end_s + 1)
            if gap_s < 0:
                raise BadCompatibilityError(f"file {entry.path!r} overlaps the previous one")
            if gap_s:
                image.add_gap(gap_s)
        try:
            source = locate_linked_file(entry.path, path)
        except FileNotFoundError as exc:
            raise BrokenLinkError(f"listed file {entry.path!r} not found") from exc
        image.add_part(source, entry.end_s - entry.start_s + 1, entry.offset,
                       volume_sector_size(source))
        previous = entry

    image.source_type = "IML file"
    return image