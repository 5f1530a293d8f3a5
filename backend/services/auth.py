# services/auth.py
import hashlib
import hmac
import secrets


def hash_key(key: str) -> str:
    """Stores only ever see this digest, never the plaintext key."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def key_matches(key: str, stored_hash: str) -> bool:
    return hmac.compare_digest(hash_key(key), stored_hash)


def new_user_id() -> str:
    return "u_" + secrets.token_hex(4)


def new_api_key() -> str:
    return secrets.token_hex(16)
