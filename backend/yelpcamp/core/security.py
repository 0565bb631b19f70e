import secrets
from datetime import datetime, timedelta

from passlib.hash import bcrypt

RESET_TOKEN_BYTES = 20

def hash_password(password: str) -> str:
    return bcrypt.hash(password)

def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.verify(password, password_hash)
    except ValueError:
        # malformed hash in the row
        return False

def new_reset_token() -> str:
    """40 hex chars from 20 random bytes."""
    return secrets.token_bytes(RESET_TOKEN_BYTES).hex()

def reset_expiry(ttl_seconds: int, now: datetime | None = None) -> datetime:
    return (now or datetime.utcnow()) + timedelta(seconds=ttl_seconds)
