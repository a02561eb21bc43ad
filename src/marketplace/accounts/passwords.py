"""Password hashing.

Hashes are produced before a registration command is built, so plain text
never reaches a command or the event store.
"""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    # Accounts created through an external provider have no local password
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)
