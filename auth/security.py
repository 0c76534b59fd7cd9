from passlib.context import CryptContext

# New hashes use pbkdf2_sha256. Bare SHA-256 hex digests from older seeds
# still verify and are flagged for re-hashing.
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "hex_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        # Stored value is not a hash any configured scheme recognises
        return False


def needs_rehash(hashed: str) -> bool:
    return pwd_context.needs_update(hashed)
