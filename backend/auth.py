"""
Authentication module for the App Store site API
Handles password hashing, JWT tokens, and authentication dependencies
"""
from fastapi import HTTPException, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from typing import Optional
from datetime import timedelta
import bcrypt

from config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from database import users_collection
from utils import error_payload, utcnow

security = HTTPBearer()

# bcrypt only looks at the first 72 bytes and newer releases reject longer input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = utcnow() + expires_delta
    else:
        expire = utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> Optional[str]:
    """Return the uid (`sub`) of a valid token, or None."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    return payload.get("sub")


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=error_payload("NOT_AUTHENTICATED", "Could not validate credentials"),
        headers={"WWW-Authenticate": "Bearer"},
    )
    uid = decode_access_token(credentials.credentials)
    if uid is None:
        raise credentials_exception

    user = await users_collection.find_one({"_id": uid})
    if user is None:
        raise credentials_exception
    return user


async def require_admin(user: dict = Depends(get_current_user)):
    """Require the stored role of the authenticated user to be admin"""
    if user.get("role") != "admin":
        raise HTTPException(
            status_code=403,
            detail=error_payload("ADMIN_REQUIRED", "Admin access required")
        )
    return user
