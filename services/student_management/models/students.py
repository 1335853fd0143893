# services/student_management/models/students.py
from sqlalchemy import Column, Integer, String, Date, DateTime, Boolean, Index
from sqlalchemy.sql import func
from shared.db import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    roll_number = Column(String(32), unique=True, nullable=False)
    admission_number = Column(String(32), unique=True, nullable=False)  # originating application number
    name = Column(String(150), nullable=False)
    class_name = Column(String(50), nullable=False)   # E.g., "3", "Grade 6", "Nursery"
    section = Column(String(10), nullable=False)      # E.g., "A", "B"
    division = Column(String(64), nullable=False)     # "{class}-{section}"
    academic_year = Column(String(9), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String(20), nullable=False)
    parent_name = Column(String(150), nullable=False)
    parent_phone = Column(String(30), nullable=False)
    parent_email = Column(String(150), nullable=True)
    address = Column(String, nullable=True)
    previous_school = Column(String(200), nullable=True)
    admission_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index('idx_student_class_year', 'class_name', 'academic_year'),  # enrollment counts per class
        Index('idx_student_class_section', 'class_name', 'section'),
    )
