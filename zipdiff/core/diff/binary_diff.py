"""
Binary content detection.
"""

from __future__ import annotations


NULL_BYTE = b'\x00'


def is_binary_content(content: bytes) -> bool:
    """Check if content is binary: a single null byte is enough."""
    return NULL_BYTE in content


def any_binary(*contents: bytes) -> bool:
    """Check if any of the given buffers is binary."""
    return any(is_binary_content(content) for content in contents)
