"""
Diff module for archive entry content.

Provides:
- Text diffing (line-by-line, changed lines only)
- Binary detection (null-byte scan)
- Image detection (file extension)
"""

from zipdiff.core.diff.text_diff import (
    TextDiffEngine,
    LineOp,
    split_lines,
)
from zipdiff.core.diff.binary_diff import (
    is_binary_content,
    any_binary,
)
from zipdiff.core.diff.image_diff import (
    IMAGE_EXTENSIONS,
    is_image_entry,
)

__all__ = [
    # Text diff
    'TextDiffEngine',
    'LineOp',
    'split_lines',
    # Binary detection
    'is_binary_content',
    'any_binary',
    # Image detection
    'IMAGE_EXTENSIONS',
    'is_image_entry',
]
