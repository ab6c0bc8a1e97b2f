"""
Tone processing modules for RetouchKit

Includes brightness, contrast and gamma correction.
"""

from .tone_mapper import ToneMapper, build_tone_lut

__all__ = [
    "ToneMapper",
    "build_tone_lut",
]
