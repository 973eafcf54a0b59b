"""
Hashing service for archive and entry fingerprints.

All digests are fast, non-cryptographic xxHash values. They are used for
equality testing only, never for integrity or security.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import BinaryIO, Callable, Optional

import xxhash


DEFAULT_CHUNK_SIZE = 8192


class HashAlgorithm(Enum):
    """Supported hash algorithms."""
    XXH64 = auto()
    XXH3_64 = auto()
    XXH3_128 = auto()

    @property
    def name(self) -> str:
        return self._name_.lower()

    @classmethod
    def from_string(cls, value: str) -> 'HashAlgorithm':
        """Look up an algorithm by case-insensitive name."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown hash algorithm: {value}") from None


@dataclass(frozen=True)
class HashResult:
    """Result of a hash operation."""
    algorithm: HashAlgorithm
    hash_hex: str
    hash_bytes: bytes
    size: int

    def matches(self, other: 'HashResult') -> bool:
        """Check if this hash matches another."""
        return (self.algorithm == other.algorithm and
                self.hash_hex == other.hash_hex)


@dataclass
class HashProgress:
    """Progress information for hashing operation."""
    bytes_processed: int
    total_bytes: int
    percent: float
    file_path: Optional[Path] = None


def create_hasher(algorithm: HashAlgorithm):
    """Create an xxhash state object for the given algorithm."""
    if algorithm == HashAlgorithm.XXH64:
        return xxhash.xxh64()
    elif algorithm == HashAlgorithm.XXH3_64:
        return xxhash.xxh3_64()
    elif algorithm == HashAlgorithm.XXH3_128:
        return xxhash.xxh3_128()
    else:
        raise ValueError(f"Unknown algorithm: {algorithm}")


class HashingService:
    """Service for computing archive and entry digests."""

    def __init__(
        self,
        default_algorithm: HashAlgorithm = HashAlgorithm.XXH64,
        chunk_size: int = DEFAULT_CHUNK_SIZE
    ):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.default_algorithm = default_algorithm
        self.chunk_size = chunk_size

    def hash_file(
        self,
        path: Path | str,
        algorithm: Optional[HashAlgorithm] = None,
        progress_callback: Optional[Callable[[HashProgress], None]] = None
    ) -> HashResult:
        """
        Compute the digest of a file's raw bytes.

        The file is read in ``chunk_size`` pieces until end of stream, so
        arbitrarily large containers never have to fit in memory.

        Args:
            path: Path to the file
            algorithm: Hash algorithm to use
            progress_callback: Called with progress updates

        Returns:
            HashResult with the computed hash

        Raises:
            OSError: If the file cannot be opened or read
        """
        path = Path(path)
        total_bytes = path.stat().st_size

        def report(processed: int) -> None:
            if progress_callback:
                progress_callback(HashProgress(
                    bytes_processed=processed,
                    total_bytes=total_bytes,
                    percent=(processed / total_bytes * 100) if total_bytes > 0 else 100,
                    file_path=path
                ))

        with open(path, 'rb') as f:
            return self.hash_stream(f, algorithm, report)

    def hash_stream(
        self,
        stream: BinaryIO,
        algorithm: Optional[HashAlgorithm] = None,
        progress: Optional[Callable[[int], None]] = None
    ) -> HashResult:
        """Hash a binary stream chunk by chunk from its current position."""
        hasher = IncrementalHasher(algorithm or self.default_algorithm)

        while chunk := stream.read(self.chunk_size):
            hasher.update(chunk)
            if progress:
                progress(hasher.size)

        return hasher.finalize()

    def hash_bytes(
        self,
        data: bytes,
        algorithm: Optional[HashAlgorithm] = None
    ) -> HashResult:
        """Compute hash of bytes."""
        algorithm = algorithm or self.default_algorithm
        hasher = create_hasher(algorithm)
        hasher.update(data)

        return HashResult(
            algorithm=algorithm,
            hash_hex=hasher.hexdigest(),
            hash_bytes=hasher.digest(),
            size=len(data)
        )


class IncrementalHasher:
    """Feeds chunks into one xxHash state and tracks the byte count."""

    def __init__(
        self,
        algorithm: HashAlgorithm = HashAlgorithm.XXH64
    ):
        self.algorithm = algorithm
        self._hasher = create_hasher(algorithm)
        self._size = 0

    @property
    def size(self) -> int:
        return self._size

    def update(self, data: bytes) -> None:
        """Add data to the hash."""
        self._hasher.update(data)
        self._size += len(data)

    def finalize(self) -> HashResult:
        """Finalize and return the hash result."""
        return HashResult(
            algorithm=self.algorithm,
            hash_hex=self._hasher.hexdigest(),
            hash_bytes=self._hasher.digest(),
            size=self._size
        )
