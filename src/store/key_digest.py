"""Key fingerprint derivation.

Fingerprints address mappings on disk; they are never used for
authentication, only for deterministic placement.
"""

from __future__ import annotations

import hashlib

from core.constants import HASH_ALGORITHM


def fingerprint(encoded_key: bytes) -> str:
    """Return the hex digest used to address an encoded key.

    Args:
        encoded_key: Key bytes produced by the codec.

    Returns:
        Lowercase hexadecimal digest string.
    """
    return hashlib.new(HASH_ALGORITHM, encoded_key).hexdigest()
