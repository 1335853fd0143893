# reset_db.py
import asyncio

from shared.db import engine, Base
import services.user_management.models
import services.student_management.models
import services.admissions.models


async def reset_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(reset_db())
