from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from adaptive_images.domain.entities.resize_plan import ResizePlan
from adaptive_images.domain.errors import DecodeFailure, EncodeFailure

logger = logging.getLogger(__name__)

# Output format follows the source extension; anything unlisted becomes JPEG.
FORMAT_BY_EXTENSION = {".png": "PNG", ".gif": "GIF"}
DEFAULT_FORMAT = "JPEG"


def output_format(path: Path | str) -> str:
    return FORMAT_BY_EXTENSION.get(Path(path).suffix.lower(), DEFAULT_FORMAT)


class Resampler:
    """Aspect-ratio preserving downscaler backed by Pillow.

    Pixels are resampled with the bicubic filter. The encoded output keeps the
    type implied by the source extension (PNG, GIF, otherwise JPEG at
    ``jpg_quality``).
    """

    def __init__(self, jpg_quality: int = 80) -> None:
        self.jpg_quality = int(jpg_quality)

    @staticmethod
    def plan(width: int, height: int, target_width: int) -> ResizePlan | None:
        """Return the resize plan, or None when the source is already narrow enough."""
        if width <= target_width:
            return None
        return ResizePlan(source_width=width, source_height=height, target_width=target_width)

    def resize(self, source_path: Path | str, target_width: int) -> bytes | None:
        """Downscale ``source_path`` to ``target_width`` pixels wide.

        Returns the encoded bytes, or None if the source must be served unchanged
        (it is not wider than the target).

        Raises:
            DecodeFailure: the source cannot be opened or decoded.
            EncodeFailure: the target format cannot be written.
        """
        source_path = Path(source_path)
        fmt = output_format(source_path)
        try:
            with Image.open(source_path) as img:
                plan = self.plan(img.width, img.height, target_width)
                if plan is None:
                    return None
                img.load()
                scaled = self._prepare(img).resize(plan.size, Image.Resampling.BICUBIC)
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            raise DecodeFailure(f"Cannot decode {source_path.name}: {exc}") from exc

        logger.debug(
            "Resampled %s from %dx%d to %dx%d",
            source_path.name,
            plan.source_width,
            plan.source_height,
            *plan.size,
        )
        return self._encode(scaled, fmt)

    # Palette and bilevel images only support nearest-neighbour resampling in
    # Pillow, so widen them to a full colour mode first.
    @staticmethod
    def _prepare(img: Image.Image) -> Image.Image:
        if img.mode == "P":
            return img.convert("RGBA" if "transparency" in img.info else "RGB")
        if img.mode == "1":
            return img.convert("L")
        if img.mode not in ("L", "LA", "RGB", "RGBA"):
            return img.convert("RGB")
        return img

    def _encode(self, img: Image.Image, fmt: str) -> bytes:
        buf = BytesIO()
        try:
            if fmt == "JPEG":
                if img.mode not in ("L", "RGB"):
                    img = img.convert("RGB")
                img.save(buf, format=fmt, quality=self.jpg_quality)
            else:
                img.save(buf, format=fmt)
        except (KeyError, OSError, ValueError) as exc:
            raise EncodeFailure(f"No {fmt} encoder for mode {img.mode}: {exc}") from exc
        return buf.getvalue()
