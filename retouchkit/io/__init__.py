"""
Image transport for RetouchKit
"""

from .codec import (
    PNG_MIME_TYPE,
    encode_png,
    encode_data_url,
    decode_image,
    decode_data_url,
    split_data_url,
    load_raster,
    save_raster,
)

__all__ = [
    'PNG_MIME_TYPE',
    'encode_png',
    'encode_data_url',
    'decode_image',
    'decode_data_url',
    'split_data_url',
    'load_raster',
    'save_raster',
]
