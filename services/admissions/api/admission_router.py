# services/admissions/api/admission_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.admissions.models.admissions import AdmissionStatus
from services.admissions.schemas.admissions import (
    AdmissionApproveResponse,
    AdmissionCreate,
    AdmissionOut,
    AdmissionReject,
    AdmissionStatusUpdate,
    DocumentStatusUpdate,
)
from services.admissions.controllers.admission_service import (
    approve_admission,
    create_admission,
    get_admission,
    list_admissions,
    reject_admission,
    update_admission_status,
    update_document_status,
)
from services.student_management.schemas.students import StudentOut
from shared.auth import require_module_access
from shared.db import get_db
from shared.permissions import AccessLevel, Module

router = APIRouter(prefix="/api/admissions", tags=["Admissions"])

read_access = require_module_access(Module.ADMISSIONS, AccessLevel.READ)
write_access = require_module_access(Module.ADMISSIONS, AccessLevel.WRITE)


# --- SUBMIT APPLICATION (public) ---
@router.post("", response_model=AdmissionOut, status_code=status.HTTP_201_CREATED)
async def submit_application(payload: AdmissionCreate, db: AsyncSession = Depends(get_db)):
    return await create_admission(db, payload)


# --- LIST APPLICATIONS ---
@router.get("", response_model=List[AdmissionOut])
async def get_applications(
    search: Optional[str] = Query(None, description="Matches student name, application number or parent name"),
    status_filter: Optional[AdmissionStatus] = Query(None, alias="status"),
    class_name: Optional[str] = Query(None, alias="class"),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(read_access),
):
    return await list_admissions(db, search=search, status=status_filter, class_name=class_name)


# --- GET ONE APPLICATION ---
@router.get("/{admission_id}", response_model=AdmissionOut)
async def get_application(
    admission_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(read_access),
):
    return await get_admission(db, admission_id)


# --- APPROVE AND ENROLL ---
@router.post("/{admission_id}/approve", response_model=AdmissionApproveResponse)
async def approve_application(
    admission_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(write_access),
):
    student, application = await approve_admission(db, admission_id)
    return AdmissionApproveResponse(
        message="Application approved and student created",
        student=StudentOut.model_validate(student),
        admission=AdmissionOut.model_validate(application),
        roll_number=student.roll_number,
        admission_number=student.admission_number,
    )


# --- REJECT ---
@router.post("/{admission_id}/reject", response_model=AdmissionOut)
async def reject_application(
    admission_id: int,
    payload: Optional[AdmissionReject] = None,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(write_access),
):
    return await reject_admission(db, admission_id, payload.remarks if payload else None)


# --- MOVE BETWEEN REVIEW STATES ---
@router.patch("/{admission_id}/status", response_model=AdmissionOut)
async def change_application_status(
    admission_id: int,
    payload: AdmissionStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(write_access),
):
    return await update_admission_status(db, admission_id, payload)


# --- VERIFY / REJECT A SUPPORTING DOCUMENT ---
@router.patch("/{admission_id}/documents/{document_id}", response_model=AdmissionOut)
async def change_document_status(
    admission_id: int,
    document_id: str,
    payload: DocumentStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(write_access),
):
    return await update_document_status(db, admission_id, document_id, payload.status)
