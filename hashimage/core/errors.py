from __future__ import annotations

"""Internal failure taxonomy.

None of these ever reach a foreign caller: the boundary in
``hashimage.abi`` turns them into a ``0`` sentinel.
"""


class HashImageError(Exception):
    """Base class for every failure raised inside the library."""


class UnsupportedFormatError(HashImageError):
    """Channel specification (or buffer) cannot be turned into an image."""


class InvalidHandleError(HashImageError):
    """Handle is the sentinel, stale, or was already consumed."""


class HashComputationError(HashImageError):
    """The hashing primitive could not produce a fingerprint."""


class InvalidBufferError(HashImageError):
    """Caller memory is null, unreadable/unwritable, or shorter than required."""
