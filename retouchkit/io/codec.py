"""
PNG transport codec for RetouchKit.

Rasters and masks cross the package boundary as MIME-tagged base64 data URLs
("data:image/png;base64,..."). Output is always PNG so intermediate results
stay lossless; input may be any format Pillow can decode.
"""

import base64
import binascii
import io
import logging
import re
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ..exceptions import DecodeError
from ..processing.models import RasterImage

logger = logging.getLogger(__name__)

PNG_MIME_TYPE = "image/png"

_DATA_URL_PATTERN = re.compile(
    r'^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(?:;[^;,]*)*?);base64,(?P<data>.*)$',
    re.DOTALL,
)


def encode_png(raster: RasterImage) -> bytes:
    """Encode a raster as PNG bytes."""
    pil_image = Image.fromarray(raster.pixels)
    buffer = io.BytesIO()
    pil_image.save(buffer, format='PNG')
    return buffer.getvalue()


def encode_data_url(raster: RasterImage) -> str:
    """Encode a raster as a ``data:image/png;base64,`` URL."""
    payload = base64.b64encode(encode_png(raster)).decode('ascii')
    return f"data:{PNG_MIME_TYPE};base64,{payload}"


def decode_image(data: bytes) -> RasterImage:
    """
    Decode encoded image bytes into an RGBA raster.

    EXIF orientation is applied so the raster matches what a browser shows.

    Raises:
        DecodeError: If the bytes are not a decodable image
    """
    if not data:
        raise DecodeError("Empty image payload")
    try:
        with Image.open(io.BytesIO(data)) as pil_image:
            pil_image = ImageOps.exif_transpose(pil_image)
            rgba = pil_image.convert('RGBA')
            pixels = np.array(rgba, dtype=np.uint8)
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        logger.warning(f"Failed to decode image payload: {e}")
        raise DecodeError(f"Payload is not a decodable image: {e}") from e

    return RasterImage(pixels)


def split_data_url(payload: str) -> Tuple[str, bytes]:
    """
    Split a base64 data URL into its MIME type and raw bytes.

    Bare base64 (no ``data:`` prefix) is accepted and reported as PNG.

    Raises:
        DecodeError: On a malformed URL, a non-image MIME type or bad base64
    """
    payload = payload.strip()
    mime_type = PNG_MIME_TYPE
    encoded = payload

    if payload.startswith('data:'):
        match = _DATA_URL_PATTERN.match(payload)
        if match is None:
            raise DecodeError("Malformed data URL: expected ';base64,' payload")
        mime_type = match.group('mime') or 'text/plain'
        encoded = match.group('data')
        if not mime_type.startswith('image/'):
            raise DecodeError(f"Data URL does not carry an image: {mime_type}")

    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 payload: {e}") from e

    return mime_type, raw


def decode_data_url(payload: str) -> RasterImage:
    """Decode a base64 image data URL into a raster."""
    _, raw = split_data_url(payload)
    return decode_image(raw)


def load_raster(path: Union[str, Path]) -> RasterImage:
    """
    Read an image file into a raster.

    Raises:
        DecodeError: If the file cannot be read or decoded
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeError(f"Cannot read image file {path}: {e}") from e
    raster = decode_image(data)
    logger.debug(f"Loaded {raster.width}x{raster.height} raster from {path}")
    return raster


def save_raster(raster: RasterImage, path: Union[str, Path]) -> Path:
    """Write a raster to ``path`` as PNG."""
    path = Path(path)
    path.write_bytes(encode_png(raster))
    logger.debug(f"Saved {raster.width}x{raster.height} raster to {path}")
    return path
