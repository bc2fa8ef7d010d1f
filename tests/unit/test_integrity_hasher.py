import hashlib

from vatdoc.intake.hasher import IntegrityHasher


class TestIntegrityHasher:
    def test_digest_is_sha256_hex(self) -> None:
        assert IntegrityHasher().digest(b"abc") == hashlib.sha256(b"abc").hexdigest()

    def test_digest_is_deterministic(self) -> None:
        hasher = IntegrityHasher()
        assert hasher.digest(b"invoice") == hasher.digest(b"invoice")
        assert len(hasher.digest(b"invoice")) == 64

    def test_single_bit_flip_changes_digest(self) -> None:
        hasher = IntegrityHasher()
        original = bytearray(b"%PDF-1.7 invoice body")
        flipped = bytearray(original)
        flipped[5] ^= 0x01
        assert hasher.digest(bytes(original)) != hasher.digest(bytes(flipped))

    def test_verify_accepts_matching_digest(self) -> None:
        hasher = IntegrityHasher()
        digest = hasher.digest(b"content")
        assert hasher.verify(b"content", digest)
        assert hasher.verify(b"content", digest.upper())

    def test_verify_rejects_altered_content(self) -> None:
        hasher = IntegrityHasher()
        digest = hasher.digest(b"content")
        assert not hasher.verify(b"content!", digest)
