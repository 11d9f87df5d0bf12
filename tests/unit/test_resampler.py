from io import BytesIO
from unittest import mock

import pytest
from PIL import Image

from adaptive_images.domain.errors import DecodeFailure, EncodeFailure
from adaptive_images.domain.services.resampler import Resampler, output_format


def _open(data: bytes) -> Image.Image:
    img = Image.open(BytesIO(data))
    img.load()
    return img


@pytest.mark.parametrize(
    "w,h,tw,expected",
    [
        (1000, 500, 768, 384),
        (1000, 501, 768, 385),  # 384.768 rounds up
        (999, 333, 480, 160),
        (3, 1000, 2, 667),
    ],
)
def test_plan_preserves_aspect_ratio_rounding_up(w, h, tw, expected):
    plan = Resampler.plan(w, h, tw)
    assert plan.target_width == tw
    assert plan.target_height == expected


@pytest.mark.parametrize("w,tw", [(768, 768), (500, 768)])
def test_plan_skips_when_source_not_wider(w, tw):
    assert Resampler.plan(w, 100, tw) is None


@pytest.mark.parametrize(
    "name,fmt", [("a.png", "PNG"), ("a.PNG", "PNG"), ("a.gif", "GIF"), ("a.jpg", "JPEG"), ("a.jpeg", "JPEG"), ("a.bmp", "JPEG")]
)
def test_output_format_from_extension(name, fmt):
    assert output_format(name) == fmt


def test_resize_jpeg(make_image):
    src = make_image("photos/a.jpg", 1000, 500)
    img = _open(Resampler().resize(src, 768))
    assert img.format == "JPEG"
    assert img.size == (768, 384)


def test_resize_png_stays_png(make_image):
    src = make_image("a.png", 1000, 500)
    img = _open(Resampler().resize(src, 480))
    assert img.format == "PNG"
    assert img.size == (480, 240)


def test_resize_gif_stays_gif(make_image):
    src = make_image("a.gif", 1000, 500)
    img = _open(Resampler().resize(src, 480))
    assert img.format == "GIF"
    assert img.size == (480, 240)


def test_resize_narrow_source_returns_none(make_image):
    src = make_image("small.jpg", 400, 300)
    assert Resampler().resize(src, 480) is None


def test_resize_uses_bicubic(make_image):
    src = make_image("a.png", 1000, 500)
    original = Image.Image.resize
    with mock.patch.object(Image.Image, "resize", autospec=True, side_effect=original) as spy:
        Resampler().resize(src, 768)
    assert spy.call_args[0][1] == (768, 384)
    assert spy.call_args[0][2] == Image.Resampling.BICUBIC


def test_jpeg_quality_honoured(make_image):
    src = make_image("noise.jpg", 1000, 500, fmt="PNG", noise=True)
    low = Resampler(jpg_quality=10).resize(src, 768)
    high = Resampler(jpg_quality=95).resize(src, 768)
    assert _open(low).format == "JPEG"
    assert len(high) > len(low)


def test_corrupt_source_raises_decode_failure(site_root):
    src = site_root / "broken.jpg"
    src.write_bytes(b"definitely not an image")
    with pytest.raises(DecodeFailure):
        Resampler().resize(src, 480)


def test_encoder_error_raises_encode_failure(make_image):
    src = make_image("a.png", 1000, 500)
    with mock.patch.object(Image.Image, "save", side_effect=KeyError("PNG")):
        with pytest.raises(EncodeFailure):
            Resampler().resize(src, 480)
