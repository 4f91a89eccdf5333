"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Fingerprint engine: streams a file through an incremental hasher and returns
its fixed-size digest.

- Bytes are fed in file order, one fixed-size chunk at a time
- Chunk size affects throughput only, never the digest
- Every call gets its own hasher instance, so one engine can be shared by threads
- Open/read failures raise HashError; no partial digest is ever returned
"""

import hashlib
import logging

import blake3
import xxhash

from dupehash.core.interfaces import Fingerprinter
from dupehash.core.models import HashAlgorithm, HashError, HashErrorKind

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class _XXH64LittleEndian:
    """xxh64 whose digest() is the 64-bit value in little-endian byte order."""

    def __init__(self, seed: int = 0):
        self._hasher = xxhash.xxh64(seed=seed)

    def update(self, data: bytes) -> None:
        self._hasher.update(data)

    def digest(self) -> bytes:
        return self._hasher.intdigest().to_bytes(8, "little")


def new_hasher(algorithm: HashAlgorithm, seed: int = 0):
    """
    Returns a fresh incremental hasher exposing update()/digest().
    The seed only applies to xxHash64, whose digest is little-endian.
    """
    if algorithm is HashAlgorithm.BLAKE3:
        return blake3.blake3()
    if algorithm is HashAlgorithm.XXHASH64:
        return _XXH64LittleEndian(seed)
    if algorithm is HashAlgorithm.SHA256:
        return hashlib.sha256()
    raise ValueError(f"Unsupported hash algorithm: {algorithm!r}")


def fingerprint(path: str, algorithm: HashAlgorithm, chunk_size: int = CHUNK_SIZE, seed: int = 0) -> bytes:
    """
    Computes the content digest of a file.

    Args:
        path: File to read
        algorithm: Hash algorithm to use
        chunk_size: Bytes per read call
        seed: xxHash64 seed (ignored by the cryptographic algorithms)

    Returns:
        bytes: digest of algorithm.digest_size bytes

    Raises:
        HashError: If the file cannot be opened or a read fails mid-stream
    """
    if chunk_size <= 0:
        raise ValueError("Chunk size must be positive")

    hasher = new_hasher(algorithm, seed)
    try:
        with open(path, 'rb') as f:
            while True:
                chunk = f.read(chunk_size)
                if not chunk:
                    break
                hasher.update(chunk)
    except OSError as e:
        raise HashError(path, str(e), HashErrorKind.IO) from e
    return hasher.digest()


class HasherImpl(Fingerprinter):
    """
    Binds an algorithm, chunk size and seed so the dispatcher can call
    compute_digest(path) without knowing the configuration.
    """

    def __init__(self, algorithm: HashAlgorithm = HashAlgorithm.BLAKE3,
                 chunk_size: int = CHUNK_SIZE, seed: int = 0):
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self.algorithm = algorithm
        self.chunk_size = chunk_size
        self.seed = seed

    def compute_digest(self, path: str) -> bytes:
        return fingerprint(path, self.algorithm, chunk_size=self.chunk_size, seed=self.seed)

    def __repr__(self):
        return f"<HasherImpl algorithm={self.algorithm.value}, chunk_size={self.chunk_size}>"
