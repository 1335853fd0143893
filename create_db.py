# create_db.py
import asyncio

from shared.config import ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_USERNAME
from shared.db import engine, Base, AsyncSessionLocal
from shared.permissions import Role
from sqlalchemy.future import select

# Import all models here so they are registered with SQLAlchemy's metadata
import services.user_management.models
import services.student_management.models
import services.admissions.models
from services.user_management.models.users import User
from services.user_management.controllers.auth_service import create_user


async def init_models():
    async with engine.begin() as conn:
        print("🔧 Creating tables...")
        await conn.run_sync(Base.metadata.create_all)
        print("✅ Tables created.")


async def seed_admin():
    if not ADMIN_USERNAME or not ADMIN_PASSWORD:
        print("ℹ️  ADMIN_USERNAME / ADMIN_PASSWORD not set, skipping admin user.")
        return

    async with AsyncSessionLocal() as db:
        result = await db.execute(select(User).where(User.username == ADMIN_USERNAME))
        if result.scalars().first():
            print(f"ℹ️  User {ADMIN_USERNAME!r} already exists.")
            return
        await create_user(db, ADMIN_USERNAME, ADMIN_PASSWORD, "Administrator", Role.SUPER_ADMIN, ADMIN_EMAIL)
        print(f"✅ Created super_admin {ADMIN_USERNAME!r}.")


async def main():
    await init_models()
    await seed_admin()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
