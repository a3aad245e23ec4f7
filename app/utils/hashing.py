from passlib.context import CryptContext
from fastapi import HTTPException

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt 只看前 72 bytes
BCRYPT_MAX_BYTES = 72
MIN_PASSWORD_LENGTH = 6

def _check_password(password: str):
    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail=f"Password too short (min {MIN_PASSWORD_LENGTH} characters)")
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise HTTPException(status_code=400, detail="Password too long (bcrypt max 72 bytes)")

def hash_password(password: str):
    _check_password(password)
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str):
    if len(plain_password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        return False
    return pwd_context.verify(plain_password, hashed_password)
