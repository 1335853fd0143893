# services/user_management/controllers/auth_service.py
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.user_management.models.users import User
from shared.auth import create_access_token, get_password_hash, verify_password
from shared.permissions import Role

logger = logging.getLogger(__name__)


async def authenticate_user(db: AsyncSession, username: str, password: str):
    """Return the active user matching the credentials, or None."""
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalars().first()

    if not user or not user.is_active or not verify_password(password, user.hashed_password):
        logger.info(f"Failed login attempt for {username!r}")
        return None
    return user


def issue_token(user: User) -> str:
    return create_access_token({
        "sub": user.username,
        "id": user.id,
        "username": user.username,
        "email": user.email or "",
        "role": user.role.value,
    })


async def create_user(db: AsyncSession, username: str, password: str, name: str, role: Role, email: str = None) -> User:
    user = User(
        username=username,
        hashed_password=get_password_hash(password),
        name=name,
        role=role,
        email=email,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info(f"Created {role.value} user {username!r}")
    return user
