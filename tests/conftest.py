from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from main import app
from shared import config
from shared.auth import create_access_token
from shared.db import Base, get_db
from shared.permissions import Role
from services.admissions.schemas.admissions import AdmissionCreate

import services.user_management.models  # noqa: F401
import services.student_management.models  # noqa: F401
import services.admissions.models  # noqa: F401


@pytest.fixture(autouse=True)
def fixed_academic_year(monkeypatch):
    monkeypatch.setattr(config, "ACADEMIC_YEAR", "2026")


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def make(role: Role, user_id: int = 1, username: str = None):
        token = create_access_token({
            "id": user_id,
            "username": username or role.value,
            "email": f"{role.value}@school.test",
            "role": role.value,
        })
        return {"Authorization": f"Bearer {token}"}

    return make


@pytest.fixture
def admin_headers(auth_headers):
    return auth_headers(Role.ADMIN)


@pytest.fixture
def application_payload():
    """Request body for a new application, camelCase as the web client sends it."""
    def make(**overrides):
        body = {
            "studentName": "Asha Rao",
            "dateOfBirth": "2014-05-02",
            "class": "3",
            "parentName": "Ravi Rao",
            "email": "ravi@example.com",
            "phone": "9990001111",
            "address": "12 MG Road",
        }
        body.update(overrides)
        return body

    return make


@pytest.fixture
def admission_create():
    def make(**overrides):
        fields = {
            "student_name": "Asha Rao",
            "date_of_birth": date(2014, 5, 2),
            "class_name": "3",
            "parent_name": "Ravi Rao",
            "email": "ravi@example.com",
            "phone": "9990001111",
            "address": "12 MG Road",
        }
        fields.update(overrides)
        return AdmissionCreate(**fields)

    return make
