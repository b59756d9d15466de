import pytest
from hypothesis import given, strategies as st
from PIL import Image as PILImage

from pixelhide.image import EncodingLevel, Image, ImageError

WIDTH = HEIGHT = 8
SIZE = WIDTH * HEIGHT * 4

pixels_strategy = st.binary(min_size=SIZE, max_size=SIZE)
data_strategy = st.binary(max_size=16)
offset_strategy = st.integers(min_value=0, max_value=128)
level_strategy = st.sampled_from(list(EncodingLevel))


@given(pixels=pixels_strategy, data=data_strategy, offset=offset_strategy, level=level_strategy)
def test_encode_decode_round_trip(pixels, data, offset, level):
    image = Image(WIDTH, HEIGHT, pixels)
    image.encode(data, level, offset)
    assert image.decode(len(data), level, offset) == data


@given(pixels=pixels_strategy, data=data_strategy, offset=offset_strategy, level=level_strategy)
def test_encode_touches_only_low_bits_inside_span(pixels, data, offset, level):
    image = Image(WIDTH, HEIGHT, pixels)
    image.encode(data, level, offset)
    after = image.pixels
    end = offset + Image.encoded_size(len(data), level)
    high = 0xFF ^ ((1 << level.bits) - 1)
    for index, (old, new) in enumerate(zip(pixels, after)):
        if offset <= index < end:
            assert old & high == new & high
        else:
            assert old == new


@pytest.mark.parametrize("level", list(EncodingLevel))
def test_encoded_size_scales_with_bits(level):
    assert Image.encoded_size(1, level) * level.bits == 8
    assert Image.encoded_size(5, level) == 5 * Image.encoded_size(1, level)


def test_low_level_bit_layout():
    image = Image(WIDTH, HEIGHT)
    image.encode(b"\x01", EncodingLevel.LOW)
    assert image.pixels[:8] == b"\x01" + bytes(7)


def test_medium_level_bit_layout():
    image = Image(WIDTH, HEIGHT)
    image.encode(b"\xe4", EncodingLevel.MED)
    assert image.pixels[:4] == b"\x00\x01\x02\x03"


def test_high_level_nibble_layout():
    image = Image(WIDTH, HEIGHT)
    image.encode(b"\xab", EncodingLevel.HIGH)
    assert image.pixels[:2] == b"\x0b\x0a"


def test_decode_of_blank_image_is_zero():
    image = Image(WIDTH, HEIGHT)
    assert image.decode(4, EncodingLevel.LOW, 3) == bytes(4)


def test_encode_out_of_range_raises():
    image = Image(WIDTH, HEIGHT)
    with pytest.raises(ValueError):
        image.encode(bytes(SIZE), EncodingLevel.LOW)


def test_decode_out_of_range_raises():
    image = Image(WIDTH, HEIGHT)
    with pytest.raises(ValueError):
        image.decode(1, EncodingLevel.HIGH, SIZE - 1)


def test_negative_offset_raises():
    image = Image(WIDTH, HEIGHT)
    with pytest.raises(ValueError):
        image.encode(b"x", EncodingLevel.LOW, -1)


def test_wrong_pixel_length_raises():
    with pytest.raises(ValueError):
        Image(WIDTH, HEIGHT, bytes(SIZE - 1))


def test_save_and_open_round_trip(tmp_path):
    pixels = bytes(i % 256 for i in range(SIZE))
    image = Image(WIDTH, HEIGHT, pixels)
    path = tmp_path / "picture.png"
    image.save(path)
    loaded = Image.open(path)
    assert (loaded.width, loaded.height) == (WIDTH, HEIGHT)
    assert loaded.pixels == pixels


def test_from_bytes_reads_saved_png(tmp_path):
    pixels = bytes((i * 3) % 256 for i in range(SIZE))
    path = tmp_path / "picture.png"
    Image(WIDTH, HEIGHT, pixels).save(path)
    loaded = Image.from_bytes(path.read_bytes())
    assert loaded.pixels == pixels


def test_rgb_source_is_converted(tmp_path):
    path = tmp_path / "rgb.png"
    PILImage.new("RGB", (2, 1), (10, 20, 30)).save(path)
    loaded = Image.open(path)
    assert loaded.width == 2
    assert loaded.pixels[:3] == bytes([10, 20, 30])
    assert loaded.pixels[4:7] == bytes([10, 20, 30])


def test_from_bytes_rejects_garbage():
    with pytest.raises(ImageError):
        Image.from_bytes(b"not an image at all")


def test_open_missing_file_raises(tmp_path):
    with pytest.raises(ImageError):
        Image.open(tmp_path / "missing.png")