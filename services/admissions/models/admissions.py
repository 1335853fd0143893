# services/admissions/models/admissions.py
from sqlalchemy import (
    Column, Integer, String, Date, DateTime, Text, JSON, Enum, ForeignKey, Index, UniqueConstraint
)
from sqlalchemy.sql import func
from shared.db import Base
from services.student_management.models.students import Student  # noqa: F401  registers students table for the FK
import enum


class AdmissionStatus(str, enum.Enum):
    PENDING = "pending"
    DOCUMENT_REVIEW = "document_review"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    APPROVED = "approved"
    REJECTED = "rejected"


TERMINAL_STATUSES = (AdmissionStatus.APPROVED, AdmissionStatus.REJECTED)


class AdmissionPriority(str, enum.Enum):
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class DocumentStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


def _enum_values(members):
    return [member.value for member in members]


class AdmissionApplication(Base):
    __tablename__ = "admission_applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_number = Column(String(32), unique=True, nullable=False)

    # Student
    student_name = Column(String(150), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String(20), nullable=True)
    class_name = Column(String(50), nullable=False)
    section = Column(String(10), nullable=True)

    # Guardian
    parent_name = Column(String(150), nullable=False)
    parent_occupation = Column(String(150), nullable=True)
    phone = Column(String(30), nullable=False)
    email = Column(String(150), nullable=True)
    address = Column(Text, nullable=True)

    # Prior schooling
    previous_school = Column(String(200), nullable=True)
    previous_class = Column(String(50), nullable=True)

    status = Column(
        Enum(AdmissionStatus, values_callable=_enum_values, native_enum=False, length=32),
        nullable=False,
        default=AdmissionStatus.PENDING,
    )
    priority = Column(
        Enum(AdmissionPriority, values_callable=_enum_values, native_enum=False, length=16),
        nullable=False,
        default=AdmissionPriority.NORMAL,
    )
    documents = Column(JSON, nullable=False, default=list)  # ordered list of DocumentInfo dicts
    remarks = Column(Text, nullable=True)
    interview_date = Column(DateTime(timezone=True), nullable=True)

    application_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    approved_date = Column(DateTime(timezone=True), nullable=True)
    rejected_date = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Set exactly once, on approval
    student_id = Column(Integer, ForeignKey("students.id"), unique=True, nullable=True)

    __table_args__ = (
        Index('idx_admission_status', 'status'),
        Index('idx_admission_class', 'class_name'),
    )


class RollNumberSequence(Base):
    """Last roll number sequence handed out per class code and academic year."""

    __tablename__ = "roll_number_sequences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    class_code = Column(String(16), nullable=False)
    academic_year = Column(String(9), nullable=False)
    last_value = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("class_code", "academic_year", name="uq_roll_sequence_class_year"),
    )
