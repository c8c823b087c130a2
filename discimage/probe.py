"""Choosing the right reader for a disc image path."""

from __future__ import annotations

import os
from typing import Callable

from .cdrwin import probe_cdrwin
from .errors import NotCompatibleError
from .gi import probe_gi
from .image import ImageBase
from .iml import probe_iml
from .iso import probe_iso
from .nero import probe_nero

_Prober = Callable[["str | os.PathLike[str]"], ImageBase]

# ordered by accuracy: the most specific signatures are tried first
_PROBERS: tuple[_Prober, ...] = (
    probe_nero,
    probe_cdrwin,
    probe_gi,
    probe_iml,
    probe_iso,
)


def probe(path: str | os.PathLike[str]) -> ImageBase:
    """Open ``path`` with the first image reader that recognises it.

    A reader that finds the input not to be of its format hands over to
    the next one; any other error stops the search and is raised. Raises
    NotCompatibleError if no reader accepts the input.
    """
    last_error: NotCompatibleError | None = None
    for prober in _PROBERS:
        try:
            return prober(path)
        except NotCompatibleError as exc:
            last_error = exc
    raise NotCompatibleError(
        f"{os.fspath(path)!r} is not a supported disc image"
    ) from last_error