import pytest

from discimage.image import SECTOR_SIZE, ImageBase


def _write(path, data):
    path.write_bytes(data)
    return str(path)


def _pattern(sectors):
    return b"".join(bytes([n + 1]) * SECTOR_SIZE for n in range(sectors))


def test_empty_image_has_no_sectors():
    image = ImageBase(SECTOR_SIZE, 0)
    assert image.stat() == (SECTOR_SIZE, 0)
    assert image.read(0, 1) == b""


def test_plain_part_reads_sectors(tmp_path):
    data = _pattern(4)
    path = _write(tmp_path / "plain.iso", data)
    with ImageBase(SECTOR_SIZE, 0) as image:
        image.add_part(path, 4, 0, 512)
        assert image.stat() == (SECTOR_SIZE, 4)
        assert image.read(1, 2) == data[SECTOR_SIZE:3 * SECTOR_SIZE]


def test_header_skip(tmp_path):
    data = _pattern(2)
    header = b"\xff" * 152
    path = _write(tmp_path / "skip.img", header + data)
    with ImageBase(SECTOR_SIZE, 0) as image:
        image.add_part(path, 2, len(header), 512)
        assert image.read(0, 2) == data


def test_raw_sectors_yield_user_data(tmp_path):
    raw_size, skip = 2352, 16
    payloads = [bytes([n + 7]) * SECTOR_SIZE for n in range(3)]
    raw = b"".join(
        b"H" * skip + payload + b"E" * (raw_size - skip - SECTOR_SIZE)
        for payload in payloads
    )
    path = _write(tmp_path / "raw.bin", raw)
    with ImageBase(raw_size, skip) as image:
        image.add_part(path, 3, 0, 512)
        assert image.read(0, 3) == b"".join(payloads)
        assert image.read(2, 1) == payloads[2]


def test_gap_reads_as_zeroes(tmp_path):
    data = _pattern(4)
    path = _write(tmp_path / "after_gap.iso", data)
    with ImageBase(SECTOR_SIZE, 0) as image:
        image.add_gap(2)
        image.add_part(path, 4, 0, 512)
        assert image.stat() == (SECTOR_SIZE, 6)
        assert image.parts[0].offset_s == 2
        assert image.read(0, 5) == bytes(2 * SECTOR_SIZE)
        assert image.read(2, 1) == data[:SECTOR_SIZE]


def test_read_behind_end_is_empty(tmp_path):
    path = _write(tmp_path / "small.iso", _pattern(2))
    with ImageBase(SECTOR_SIZE, 0) as image:
        image.add_part(path, 2, 0, 512)
        assert image.read(2, 1) == b""
        assert image.read(50, 3) == b""


def test_read_stops_at_part_end(tmp_path):
    first = _pattern(3)
    second = bytes([0xAA]) * (2 * SECTOR_SIZE)
    path_a = _write(tmp_path / "a.iso", first)
    path_b = _write(tmp_path / "b.iso", second)
    with ImageBase(SECTOR_SIZE, 0) as image:
        image.add_part(path_a, 2, 0, 512)
        image.add_part(path_b, 2, 0, 512)
        chunk = image.read(1, 4)
        assert chunk == first[SECTOR_SIZE:2 * SECTOR_SIZE]
        assert image.read(2, 2) == second
        assert image.read(0, 1) == first[:SECTOR_SIZE]


def test_incomplete_last_sector_is_zero_padded(tmp_path):
    data = _pattern(2)[:SECTOR_SIZE + 100]
    path = _write(tmp_path / "short.iso", data)
    with ImageBase(SECTOR_SIZE, 0) as image:
        image.add_part(path, 2, 0, 512)
        chunk = image.read(1, 1)
        assert len(chunk) == SECTOR_SIZE
        assert chunk == data[SECTOR_SIZE:].ljust(SECTOR_SIZE, b"\0")


def test_read_works_again_after_close(tmp_path):
    data = _pattern(2)
    path = _write(tmp_path / "reopen.iso", data)
    image = ImageBase(SECTOR_SIZE, 0)
    image.add_part(path, 2, 0, 512)
    first = image.read(0, 2)
    image.close()
    assert image.read(0, 2) == first == data
    image.close()


def test_missing_input_raises(tmp_path):
    with ImageBase(SECTOR_SIZE, 0) as image:
        image.add_part(tmp_path / "missing.iso", 2, 0, 512)
        with pytest.raises(FileNotFoundError):
            image.read(0, 1)


def test_raw_sector_too_small_rejected():
    with pytest.raises(ValueError):
        ImageBase(2352, 400)