import pytest

from discimage.errors import NotCompatibleError
from discimage.nero import NeroMode, probe_nero


def _payloads(count):
    return [bytes([index + 1]) * 2048 for index in range(count)]


def _sectors(payloads, raw, skip):
    return b"".join(
        b"\xaa" * skip + payload + b"\xbb" * (raw - skip - 2048) for payload in payloads
    )


def _image_footer(type_code, ner5=True):
    footer = bytearray(156)
    footer[0:4] = b"CUEX"
    footer[0x54] = type_code
    if ner5:
        footer[0x90:0x94] = b"NER5"
    return bytes(footer)


def _track_footer():
    footer = bytearray(72)
    footer[0:4] = b"ETN2"
    footer[0x3C:0x40] = b"NER5"
    return bytes(footer)


def _write_image(tmp_path, type_code, raw, skip, payloads, ner5=True):
    path = tmp_path / "disc.nrg"
    path.write_bytes(
        bytes(150 * raw) + _sectors(payloads, raw, skip) + _image_footer(type_code, ner5)
    )
    return path


def test_mode1_plain_image_reads_data(tmp_path):
    payloads = _payloads(3)
    path = _write_image(tmp_path, 0x00, 2048, 0, payloads)
    with probe_nero(path) as image:
        assert image.source_type == "Nero Image, Mode 1, plain"
        assert image.stat() == (2048, 3)
        assert image.read(0, 3) == b"".join(payloads)


def test_mode1_raw_image_strips_headers(tmp_path):
    payloads = _payloads(4)
    path = _write_image(tmp_path, 0x05, 2352, 16, payloads)
    with probe_nero(path) as image:
        assert image.source_type == "Nero Image, Mode 1, RAW"
        assert image.stat()[1] == 4
        assert image.read(2, 1) == payloads[2]


def test_mode2_raw_image(tmp_path):
    payloads = _payloads(2)
    path = _write_image(tmp_path, 0x06, 2352, 24, payloads)
    with probe_nero(path) as image:
        assert image.source_type == "Nero Image, Mode 2, RAW"
        assert image.read(0, 2) == b"".join(payloads)


def test_mode2_plain_image(tmp_path):
    payloads = _payloads(2)
    path = _write_image(tmp_path, 0x02, 2048, 0, payloads)
    with probe_nero(path) as image:
        assert image.source_type == "Nero Image, Mode 2, plain"
        assert image.read(1, 1) == payloads[1]


def test_read_behind_end_is_empty(tmp_path):
    path = _write_image(tmp_path, 0x00, 2048, 0, _payloads(2))
    with probe_nero(path) as image:
        assert image.read(2, 1) == b""


def test_track_file(tmp_path):
    payloads = _payloads(3)
    path = tmp_path / "track.nrg"
    path.write_bytes(b"".join(payloads) + _track_footer())
    with probe_nero(path) as image:
        assert image.source_type == NeroMode.MODE1_PLAIN.description
        assert image.stat() == (2048, 3)
        assert image.read(0, 3) == b"".join(payloads)


def test_unknown_type_is_not_compatible(tmp_path):
    path = _write_image(tmp_path, 0x07, 2048, 0, _payloads(1))
    with pytest.raises(NotCompatibleError):
        probe_nero(path)


def test_missing_ner5_is_not_compatible(tmp_path):
    path = _write_image(tmp_path, 0x00, 2048, 0, _payloads(1), ner5=False)
    with pytest.raises(NotCompatibleError):
        probe_nero(path)


def test_short_file_is_not_compatible(tmp_path):
    path = tmp_path / "tiny.bin"
    path.write_bytes(b"CUEX")
    with pytest.raises(NotCompatibleError):
        probe_nero(path)


def test_plain_data_is_not_compatible(tmp_path):
    path = tmp_path / "plain.iso"
    path.write_bytes(bytes(4096))
    with pytest.raises(NotCompatibleError):
        probe_nero(path)


@pytest.mark.parametrize(
    "mode, type_code",
    [
        (NeroMode.MODE1_PLAIN, 0x00),
        (NeroMode.MODE1_RAW, 0x05),
        (NeroMode.MODE2_PLAIN, 0x02),
        (NeroMode.MODE2_RAW, 0x06),
    ],
)
def test_mode_layouts_match_probed_images(tmp_path, mode, type_code):
    payloads = _payloads(3)
    path = _write_image(
        tmp_path, type_code, mode.raw_sector_size, mode.skip_offset, payloads
    )
    with probe_nero(path) as image:
        assert image.source_type == mode.description
        assert image.stat() == (2048, 3)
        assert image.read(0, 3) == b"".join(payloads)