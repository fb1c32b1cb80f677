"""SHA-256 checksums for source documents"""

import hashlib


def checksum(content: str) -> str:
    """Return the hex-encoded SHA-256 digest of content encoded as UTF-8."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
