# services/student_management/controllers/student_service.py
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from shared.exceptions import NotFoundError
from services.student_management.models.students import Student


async def list_students(
    db: AsyncSession,
    class_name: Optional[str] = None,
    section: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Student]:
    stmt = select(Student).where(Student.is_active == True)

    if class_name:
        stmt = stmt.where(Student.class_name == class_name)
    if section:
        stmt = stmt.where(Student.section == section)
    if search and search.strip():
        term = search.strip()
        stmt = stmt.where(
            or_(
                Student.name.icontains(term, autoescape=True),
                Student.roll_number.icontains(term, autoescape=True),
                Student.admission_number.icontains(term, autoescape=True),
            )
        )

    result = await db.execute(stmt.order_by(Student.class_name, Student.section, Student.roll_number))
    return result.scalars().all()


async def get_student(db: AsyncSession, student_id: int) -> Student:
    student = await db.get(Student, student_id)
    if not student:
        raise NotFoundError("Student not found")
    return student
