# services/student_management/api/student_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from services.student_management.controllers.student_service import get_student, list_students
from services.student_management.schemas.students import StudentOut
from shared.auth import require_module_access
from shared.db import get_db
from shared.permissions import AccessLevel, Module

# Students are read-only here; they are created by approving an admission.
router = APIRouter(prefix="/api/students", tags=["Students"])


@router.get("", response_model=List[StudentOut])
async def get_students(
    class_name: Optional[str] = Query(None, alias="class"),
    section: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(require_module_access(Module.STUDENTS, AccessLevel.READ)),
):
    return await list_students(db, class_name=class_name, section=section, search=search)


@router.get("/{student_id}", response_model=StudentOut)
async def get_student_by_id(
    student_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(require_module_access(Module.STUDENTS, AccessLevel.READ)),
):
    return await get_student(db, student_id)
