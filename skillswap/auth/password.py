"""Password hashing (bcrypt) and the password policy applied at registration."""
import bcrypt

from skillswap.config import settings

MIN_PASSWORD_LENGTH = 8


def hash_password(plain: str) -> str:
    """Hash a plain password for storing in DB. Bcrypt limit is 72 bytes."""
    pw_bytes = plain.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("ascii")


def verify_password(plain: str, hashed: str) -> bool:
    pw_bytes = plain.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("ascii"))
    except ValueError:
        # malformed stored hash
        return False


def password_policy_errors(plain: str) -> list[str]:
    """Return every rule the password breaks; empty list means acceptable."""
    errors = []
    if len(plain) < MIN_PASSWORD_LENGTH:
        errors.append(f"Passwords must be at least {MIN_PASSWORD_LENGTH} characters.")
    if not any(c.isdigit() for c in plain):
        errors.append("Passwords must have at least one digit ('0'-'9').")
    if not any(c.islower() for c in plain):
        errors.append("Passwords must have at least one lowercase ('a'-'z').")
    if not any(c.isupper() for c in plain):
        errors.append("Passwords must have at least one uppercase ('A'-'Z').")
    if all(c.isalnum() for c in plain):
        errors.append("Passwords must have at least one non alphanumeric character.")
    return errors
