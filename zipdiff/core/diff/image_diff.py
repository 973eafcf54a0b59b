"""
Image entry detection.

Image entries are recognised by name alone so that changed images are
reported without decompressing their payload.
"""

from __future__ import annotations

from typing import Iterable


IMAGE_EXTENSIONS = ('png', 'jpg', 'jpeg', 'gif', 'bmp', 'webp', 'tiff', 'svg')


def is_image_entry(name: str, extensions: Iterable[str] = IMAGE_EXTENSIONS) -> bool:
    """
    Check if an entry name ends with one of the image extensions.

    The match is a case-sensitive suffix test on the bare extension, so
    ``photo.PNG`` is not an image while ``logo.svg`` is.
    """
    return any(name.endswith(ext) for ext in extensions)
