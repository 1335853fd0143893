# services/user_management/models/users.py
from sqlalchemy import Column, Integer, String, Enum, DateTime, Boolean, Index
from sqlalchemy.sql import func
from shared.db import Base
from shared.permissions import Role


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(Role, values_callable=lambda roles: [role.value for role in roles]), nullable=False)
    name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('idx_user_role', 'role'),  # role-wise listing
    )
