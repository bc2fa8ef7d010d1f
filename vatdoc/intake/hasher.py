import hashlib
import hmac


class IntegrityHasher:
    """Content-addressed SHA-256 digest used for dedup and tamper checks."""

    def digest(self, content: bytes) -> str:
        return hashlib.sha256(content).hexdigest()

    def verify(self, content: bytes, expected_digest: str) -> bool:
        """Return True when ``content`` still hashes to ``expected_digest``."""
        return hmac.compare_digest(self.digest(content), expected_digest.lower())
