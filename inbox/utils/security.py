"""Password hashing."""

from passlib.context import CryptContext

# pbkdf2_sha256 is salted per hash and needs no native extension.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """Hash a plain text password."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Check a plain text password against a stored hash."""
    try:
        return pwd_context.verify(plain_password, password_hash)
    except (ValueError, TypeError):
        # Malformed or unknown hash format in storage
        return False
