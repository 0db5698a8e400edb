# src/imaging/preprocessor.py — v1
"""Upload normalization: decode, downscale if needed, wrap as a data URL.

Small images are sent untouched to avoid re-encoding loss. Anything larger
than max_dimension on either side, or heavier than passthrough_max_bytes, is
resampled so its longer side is at most max_dimension and re-encoded as JPEG.
Bytes Pillow cannot decode are passed through unchanged so an exotic format
never blocks the request.
"""

from __future__ import annotations

import base64
import logging
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from imganalyzer.core.errors import ImageProcessingError
from imganalyzer.core.models import ImageAsset, NormalizedImage

logger = logging.getLogger(__name__)

DEFAULT_MAX_DIMENSION = 1024
DEFAULT_PASSTHROUGH_MAX_BYTES = 1024 * 1024
DEFAULT_JPEG_QUALITY = 85

PASSTHROUGH_MIME = "image/png"
RESIZED_MIME = "image/jpeg"


def to_data_url(data: bytes, mime_type: str) -> str:
    """Wrap raw bytes as `data:<mime>;base64,<payload>`."""
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def decode_image(raw: bytes) -> ImageAsset | None:
    """Decode upload bytes. Returns None when they are not an image Pillow reads."""
    try:
        with Image.open(BytesIO(raw)) as img:
            img.load()
            width, height = img.size
            mime = Image.MIME.get(img.format or "", "application/octet-stream")
    except Image.DecompressionBombError as exc:
        raise ImageProcessingError(f"Image too large to decode safely: {exc}") from exc
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        logger.warning("Upload is not a decodable image (%s), passing through", exc)
        return None
    return ImageAsset(data=raw, width=width, height=height, declared_mime=mime)


def target_size(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Scale (width, height) so the longer side equals max_dimension.

    Images already within the bound keep their size; they are never upscaled.
    """
    longest = max(width, height)
    if longest <= max_dimension:
        return width, height
    if width >= height:
        return max_dimension, max(1, round(height * max_dimension / width))
    return max(1, round(width * max_dimension / height)), max_dimension


def needs_resize(
    asset: ImageAsset,
    max_dimension: int = DEFAULT_MAX_DIMENSION,
    passthrough_max_bytes: int = DEFAULT_PASSTHROUGH_MAX_BYTES,
) -> bool:
    within_bounds = asset.width <= max_dimension and asset.height <= max_dimension
    return not (within_bounds and len(asset.data) < passthrough_max_bytes)


def resize_asset(
    asset: ImageAsset,
    max_dimension: int = DEFAULT_MAX_DIMENSION,
    jpeg_quality: int = DEFAULT_JPEG_QUALITY,
) -> ImageAsset:
    """Resample with bilinear interpolation and re-encode as JPEG.

    Returns a new asset; the input is left as-is.

    Raises:
        ImageProcessingError: If Pillow fails anywhere in resize or encode.
    """
    new_size = target_size(asset.width, asset.height, max_dimension)
    try:
        with Image.open(BytesIO(asset.data)) as img:
            if img.size != new_size:
                logger.debug("Resizing from %s to %dx%d", img.size, *new_size)
                img = img.resize(new_size, Image.Resampling.BILINEAR)
            if img.mode != "RGB":
                img = img.convert("RGB")
            buf = BytesIO()
            img.save(buf, "JPEG", quality=jpeg_quality)
    except Exception as exc:
        raise ImageProcessingError(f"Image resize failed: {exc}") from exc

    return ImageAsset(
        data=buf.getvalue(),
        width=new_size[0],
        height=new_size[1],
        declared_mime=RESIZED_MIME,
    )


def normalize(
    raw: bytes,
    max_dimension: int = DEFAULT_MAX_DIMENSION,
    passthrough_max_bytes: int = DEFAULT_PASSTHROUGH_MAX_BYTES,
    jpeg_quality: int = DEFAULT_JPEG_QUALITY,
) -> NormalizedImage:
    """Turn upload bytes into a data URL suitable for an image_url content part.

    Args:
        raw: Uploaded bytes, image or not.
        max_dimension: Longest allowed side in pixels.
        passthrough_max_bytes: Uploads at or above this size are re-encoded.
        jpeg_quality: Quality for re-encoded output.

    Returns:
        NormalizedImage with the data URL and the MIME tag used.

    Raises:
        ImageProcessingError: If a decodable image could not be resized.
    """
    asset = decode_image(raw)
    if asset is None:
        return NormalizedImage(
            data_url=to_data_url(raw, PASSTHROUGH_MIME), mime_type=PASSTHROUGH_MIME
        )

    if not needs_resize(asset, max_dimension, passthrough_max_bytes):
        logger.debug(
            "Passing through %dx%d image (%d bytes)", asset.width, asset.height, len(raw)
        )
        return NormalizedImage(
            data_url=to_data_url(raw, PASSTHROUGH_MIME),
            mime_type=PASSTHROUGH_MIME,
            width=asset.width,
            height=asset.height,
        )

    resized = resize_asset(asset, max_dimension, jpeg_quality)
    logger.info(
        "Normalized image %dx%d (%d bytes) -> %dx%d (%d bytes)",
        asset.width, asset.height, len(raw),
        resized.width, resized.height, len(resized.data),
    )
    return NormalizedImage(
        data_url=to_data_url(resized.data, RESIZED_MIME),
        mime_type=RESIZED_MIME,
        width=resized.width,
        height=resized.height,
        resized=True,
    )
