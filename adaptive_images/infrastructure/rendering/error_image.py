from __future__ import annotations

import textwrap
from io import BytesIO

import numpy as np
from PIL import Image, ImageDraw, ImageFont

ERROR_IMAGE_SIZE = (800, 200)  # width, height
BACKGROUND = (255, 255, 255)
TEXT_COLOR = (102, 102, 102)
FONT_SIZE = 20


def render_error_image(message: str) -> bytes:
    """Render ``message`` as a JPEG so an <img> tag shows what went wrong."""
    width, height = ERROR_IMAGE_SIZE
    canvas = np.full((height, width, 3), BACKGROUND, dtype=np.uint8)
    img = Image.fromarray(canvas)
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default(size=FONT_SIZE)
    # ~0.6em per glyph keeps lines inside the canvas
    lines = textwrap.wrap(message or "Unknown error", width=int(width / (FONT_SIZE * 0.6)))
    draw.multiline_text((0, 0), "\n".join(lines), fill=TEXT_COLOR, font=font)
    buf = BytesIO()
    img.save(buf, format="JPEG")
    return buf.getvalue()
