# utils/passwords.py
"""Employee credential hashing.

Stored format is ``<salt>:<derived key hex>``. The salt is 16 random bytes
rendered as hex and fed to scrypt as text; the derived key is 64 bytes.
Hashes already in the database use this exact layout, so the parameters
below must not change.
"""
import hashlib
import hmac
import secrets

SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
KEY_LEN = 64


def _derive(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=KEY_LEN,
    )


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    return f"{salt}:{_derive(password, salt).hex()}"


def verify_password(password: str, stored_hash: str | None) -> bool:
    if not stored_hash:
        return False
    salt, _, key = stored_hash.partition(":")
    if not salt or not key:
        return False
    try:
        stored_key = bytes.fromhex(key)
    except ValueError:
        return False
    derived = _derive(password, salt)
    if len(stored_key) != len(derived):
        return False
    return hmac.compare_digest(stored_key, derived)
