# app/core/security.py

import os
import re
import secrets

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

# ---------- PASSWORD HASHING ----------

SCRYPT_N = 2 ** 14
SCRYPT_R = 8
SCRYPT_P = 1
SALT_BYTES = 16
KEY_BYTES = 32


def _scrypt(salt: bytes, n: int = SCRYPT_N, r: int = SCRYPT_R, p: int = SCRYPT_P) -> Scrypt:
    return Scrypt(salt=salt, length=KEY_BYTES, n=n, r=r, p=p)


def hash_password(password: str) -> str:
    """
    scrypt → "scrypt$n$r$p$<salt hex>$<key hex>"
    """
    salt = os.urandom(SALT_BYTES)
    key = _scrypt(salt).derive(password.encode("utf-8"))
    return f"scrypt${SCRYPT_N}${SCRYPT_R}${SCRYPT_P}${salt.hex()}${key.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """
    Check a password against a stored hash. Malformed hashes never match.
    """
    try:
        scheme, n, r, p, salt_hex, key_hex = encoded.split("$")
        if scheme != "scrypt":
            return False
        kdf = _scrypt(bytes.fromhex(salt_hex), int(n), int(r), int(p))
        kdf.verify(password.encode("utf-8"), bytes.fromhex(key_hex))
        return True
    except (ValueError, InvalidKey):
        return False


# ---------- PASSWORD POLICY ----------

_SYMBOL = re.compile(r"[^A-Za-z0-9]")


def is_strong_password(password: str) -> bool:
    """At least 8 chars with a lowercase, an uppercase, a digit and a symbol."""
    return (
        len(password) >= 8
        and any(c.islower() for c in password)
        and any(c.isupper() for c in password)
        and any(c.isdigit() for c in password)
        and _SYMBOL.search(password) is not None
    )


# ---------- SESSION TOKENS ----------

def new_session_id() -> str:
    return secrets.token_urlsafe(32)
