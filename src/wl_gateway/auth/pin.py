"""PIN hashing utilities using bcrypt.

PINs are six digits, so the hash is the only thing standing between a DB
leak and every account; they are never stored or compared in plaintext.
Uses the ``bcrypt`` library directly (>=4.0), not passlib.
"""

import bcrypt

PIN_LENGTH = 6


def hash_pin(plain: str) -> str:
    """Hash a plain PIN with bcrypt. Returns a utf-8 hash string."""
    hashed_bytes: bytes = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt())
    return hashed_bytes.decode("utf-8")


def verify_pin(plain: str, hashed: str) -> bool:
    """Verify a plain PIN against a bcrypt hash."""
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
