from pydantic import BaseModel, ConfigDict
from typing import Dict, List, Optional
from datetime import datetime

from shared.permissions import Module, Role


class UserOut(BaseModel):
    id: int
    username: str
    name: str
    email: Optional[str] = None
    role: Role

    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserOut


class TokenUser(BaseModel):
    id: int
    username: str
    email: str
    role: str


class PermissionsResponse(BaseModel):
    user: TokenUser
    permissions: Dict[str, Dict[str, bool]]
    modules: List[Module]
