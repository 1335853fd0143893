# services/user_management/api/auth_router.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.user_management.controllers.auth_service import authenticate_user, issue_token
from services.user_management.schemas.users import LoginRequest, LoginResponse, PermissionsResponse, UserOut
from shared.auth import get_current_user
from shared.db import get_db
from shared.permissions import get_accessible_modules, get_permission_matrix

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await authenticate_user(db, payload.username, payload.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return LoginResponse(message="Login successful", token=issue_token(user), user=UserOut.model_validate(user))


@router.get("/permissions", response_model=PermissionsResponse)
async def my_permissions(current_user: dict = Depends(get_current_user)):
    return {
        "user": current_user,
        "permissions": get_permission_matrix(current_user["role"]),
        "modules": get_accessible_modules(current_user["role"]),
    }
