# shared/auth.py
import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from shared.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from shared.exceptions import ForbiddenError
from shared.permissions import AccessLevel, Module, has_module_access

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password):
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

def decode_token(token: str):
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)

def _unauthorized(detail: str):
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def get_current_user(token: str = Depends(oauth2_scheme)):
    if not token:
        raise _unauthorized("Access token required")

    payload = decode_token(token)
    if not payload:
        raise _unauthorized("Invalid or expired token")

    user_id = payload.get("id")
    username: str = payload.get("username")
    role: str = payload.get("role")

    if user_id is None or not username or not role:
        raise _unauthorized("Token is missing required fields")

    return {
        "id": user_id,
        "username": username,
        "email": payload.get("email") or "",
        "role": role,
    }

def require_module_access(module: Module, level: AccessLevel = AccessLevel.READ):
    """
    Dependency factory: authenticate the caller, then consult the permission
    table before the route handler runs.
    """
    def checker(current_user: dict = Depends(get_current_user)):
        if not has_module_access(current_user["role"], module, level):
            logger.info(
                f"Denied {level.value} access to {module.value} for "
                f"user {current_user['username']} ({current_user['role']})"
            )
            raise ForbiddenError(f"Access denied. Required: {level.value} access to {module.value} module")
        return current_user

    return checker
