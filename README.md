# discimage

Read CD and DVD disc images through one sector-based interface, and find out
which PlayStation 2 disc an image holds.

## Supported inputs

`discimage.probe.probe(path)` tries these readers in order and returns the
first that accepts the file:

- Nero images and Nero track files (`discimage.nero.probe_nero`)
- CDRWIN cue sheets with a single track and a single binary file
  (`discimage.cdrwin.probe_cdrwin`; `parse_cue` parses the sheet alone)
- Global Image files, one or several parts, mode 1 or mode 2
  (`discimage.gi.probe_gi`)
- IML file lists (`discimage.iml.probe_iml`; `parse_iml` and `parse_loc_line`
  parse the list alone)
- Plain ISO and ZSO files (`discimage.iso.probe_iso`)

A reader that finds the file is not of its format raises `NotCompatibleError`,
and `probe` moves on to the next one. Any other error stops the search: a file
that matches a format but cannot be used raises one of the other exceptions in
`discimage.errors`, such as `BadCompatibilityError`, `BrokenLinkError` (a file
named by a cue sheet, Global Image or IML list is missing) or
`MultiTrackError`. If no reader accepts the file, `probe` raises
`NotCompatibleError`.

Files named inside a cue sheet, Global Image or IML list are looked for as
given, then in the folder of the describing file
(`discimage.osal.locate_linked_file`).

## Installation

```
pip install .
```

The package has no dependencies outside the standard library.

## Reading an image

```python
from discimage.probe import probe

with probe("game.cue") as image:
    print(image.source_type)          # e.g. "BIN Image, Mode 2, RAW"
    sector_size, num_sectors = image.stat()
    data = image.read(16, 1)          # the sector holding the volume descriptor
```

Every reader returns a `discimage.image.ImageBase`, which serves 2048-byte data
sectors whatever the raw layout of the files underneath (2048, 2336 or 2352
bytes per raw sector, with the data at an offset inside it).

`read(start_sector, num_sectors)` returns the data it could read. A read does
not cross the end of a part or a gap, so the result may be shorter than asked
for. Gaps between parts read as zeroes, and an empty result means the read
started past the end of the image. An `ImageBase` can also be built by hand
with `add_part` and `add_gap`; `close()` releases the open input file.

## PlayStation 2 disc information

```python
from discimage.isofs import get_ps2_disc_info
from discimage.probe import probe

with probe("game.iso") as image:
    info = get_ps2_disc_info(image)
    print(info.media_type, info.volume_id, info.startup_elf, info.layer_pvd)
```

`media_type` is a `MediaType` (`CD`, `DVD` or `UNKNOWN`); `layer_pvd` is the
sector of the second layer's volume descriptor on a dual-layer DVD, or 0.

`get_ps2_disc_info` raises `NotPs2DiscError` when the system identifier is not
`PLAYSTATION` or `SYSTEM.CNF` has no PS2 `BOOT2` line, `BadIsoFsError` when the
ISO 9660 structures cannot be found, and `FileNotFoundError` when the root
directory holds no `SYSTEM.CNF`. `parse_config_cnf(contents)` returns the
startup file named by the contents of a `SYSTEM.CNF`.

## Progress reporting

`discimage.progress.Progress` tracks a long transfer: percentage done, average
and current speed, elapsed, estimated and remaining time, with text forms of
the times. Call `prepare(total)`, then `update(curr)` as data moves;
`chunk_complete()` makes later updates count from the current position. The
callback is called with the progress object whenever one of the major values
changes, and `update` returns True when the callback returns a true value, as
a request to stop. `fmt_time(seconds)` formats a duration such as
`"3 min, 5 sec"`.

## Other helpers

- `discimage.netio.recv_exact` and `send_exact` move an exact number of bytes
  over a socket, looping over short reads and writes.
- `discimage.osal` holds small file helpers: `file_size`,
  `volume_sector_size`, `create_file` (creates a new, pre-sized file) and
  `locate_linked_file`.

## What it does not do

This is a library only: it has no command-line tool. It reads image files
only; it does not read physical optical drives, hard disks or partitions, and
it does not write or convert images.

## Running the tests

```
pip install ".[test]"
pytest
```