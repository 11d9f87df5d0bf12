from io import BytesIO

from PIL import Image

from adaptive_images.infrastructure.rendering.error_image import ERROR_IMAGE_SIZE, render_error_image


def test_error_image_is_jpeg_of_fixed_size():
    img = Image.open(BytesIO(render_error_image("Image not found")))
    assert img.format == "JPEG"
    assert img.size == ERROR_IMAGE_SIZE


def test_error_image_draws_text():
    img = Image.open(BytesIO(render_error_image("Image not found"))).convert("L")
    # white canvas with grey text somewhere in the top-left region
    assert img.crop((0, 0, 300, 40)).getextrema()[0] < 200
    assert img.getpixel((799, 199)) > 240


def test_long_and_empty_messages_render():
    assert render_error_image("x" * 500)
    assert render_error_image("")
